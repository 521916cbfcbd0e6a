"""Fuentes de credenciales para el proveedor de IA.

Fuente remota:
- GET al endpoint de distribución de claves (mockapi).
- El cuerpo es una lista; el token vive en `body[0].apiKey`.
- Sin caché: cada evaluación vuelve a pedir la clave.

Fuente estática:
- Usa `CALC_IA_AI_API_KEY` y evita exponer la clave en un endpoint público.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.models import Credential
from core.errors import CredentialError, TransportError
from core.interfaces.credentials import CredentialSource

logger = logging.getLogger(__name__)

_KEY_NOT_FOUND = "No se encontró la clave 'apiKey' en la respuesta del servicio de claves."


def _extract_api_key(payload: Any) -> str | None:
    if not isinstance(payload, list) or not payload:
        return None
    first = payload[0]
    if not isinstance(first, dict):
        return None
    api_key = first.get("apiKey")
    if not isinstance(api_key, str) or not api_key:
        return None
    return api_key


class CredentialFetcher(CredentialSource):
    """Obtiene la clave del endpoint remoto en cada invocación."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    async def fetch(self) -> Credential:
        url = self._settings.credential_url

        try:
            async with build_async_client(self._settings, transport=self._transport) as client:
                response = await client.get(url)
        except httpx.HTTPError as exc:
            # TransportError, TooManyRedirects, URL inválida...: todo es fallo de red.
            logger.warning("Fallo de red contra el endpoint de claves %s: %s", url, exc)
            raise TransportError("el servicio de claves", exc) from exc

        if not response.is_success:
            logger.warning("Endpoint de claves devolvió HTTP %s: %s", response.status_code, response.text)
            raise CredentialError(f"Error al obtener la clave de API: {response.reason_phrase}")

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("Respuesta no JSON del endpoint de claves: %r", response.text)
            raise CredentialError(_KEY_NOT_FOUND) from exc

        api_key = _extract_api_key(payload)
        if api_key is None:
            logger.warning("Respuesta sin 'apiKey' utilizable: %r", payload)
            raise CredentialError(_KEY_NOT_FOUND)

        logger.debug("Clave de API obtenida desde %s", url)
        return Credential(token=api_key)


class StaticCredentialSource(CredentialSource):
    """Devuelve la clave configurada localmente."""

    def __init__(self, api_key: str) -> None:
        if not api_key.strip():
            raise CredentialError(_KEY_NOT_FOUND)
        self._api_key = api_key.strip()

    async def fetch(self) -> Credential:
        return Credential(token=self._api_key)


def build_credential_source(
    settings: AppSettings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> CredentialSource:
    """Elige la fuente: clave fija si está configurada, si no el endpoint remoto."""

    api_key = (settings.ai_api_key or "").strip()
    if api_key:
        return StaticCredentialSource(api_key)
    return CredentialFetcher(settings, transport=transport)
