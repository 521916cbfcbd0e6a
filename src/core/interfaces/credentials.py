"""Contrato de las fuentes de credenciales."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import Credential


@runtime_checkable
class CredentialSource(Protocol):
    async def fetch(self) -> Credential:
        """Obtiene una credencial nueva (sin caché entre invocaciones)."""

        ...
