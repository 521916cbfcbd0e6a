"""Adaptador del endpoint de chat-completion (OpenAI SDK).

Responsabilidad:
- Construir la petición fija: modelo, `temperature=0` y dos mensajes
  (instrucción de sistema + operación del usuario).
- Extraer el texto bruto del asistente desde `choices[0].message.content`.

No interpreta el texto: eso es trabajo de `core.services.normalizer`.
"""

from __future__ import annotations

import logging

import httpx
from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from core.config import AppSettings
from core.domain.models import Credential
from core.errors import (
    EvaluationEmptyError,
    EvaluationEnvelopeError,
    EvaluationHTTPError,
    TransportError,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """
Eres una calculadora matemática.
Debes evaluar la operación del usuario de manera precisa.

Reglas IMPORTANTES:
- Responde ÚNICAMENTE un JSON válido.
- El JSON debe tener exactamente estos campos:
  {
    "resultado": number,
    "latex": string
  }
- "resultado" es el valor numérico final de la operación.
- "latex" es una expresión en LaTeX que muestre la operación y el resultado.
- NO uses bloques de código, NO uses ```, NO pongas la palabra json.
- Responde solo el JSON, sin texto adicional.
""".strip()

USER_PREFIX = "Operación: "

TEMPERATURE = 0

_BAD_ENVELOPE = "La respuesta del proveedor no tiene el formato de chat-completion."


def build_messages(expression: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": f"{USER_PREFIX}{expression}"},
    ]


class EvaluationClient:
    """Envía la operación al modelo y devuelve su respuesta sin procesar."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    def _build_client(self, credential: Credential) -> AsyncOpenAI:
        http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(self._settings.http_timeout_seconds),
            headers={"User-Agent": self._settings.user_agent},
            transport=self._transport,
        )
        return AsyncOpenAI(
            api_key=credential.token,
            base_url=self._settings.ai_base_url,
            timeout=self._settings.http_timeout_seconds,
            max_retries=0,
            http_client=http_client,
        )

    async def evaluate(self, expression: str, credential: Credential) -> str:
        """Devuelve el `content` del primer choice.

        Raises:
            EvaluationHTTPError: status no-2xx (lleva status y cuerpo crudo).
            EvaluationEnvelopeError: la respuesta no sigue el sobre estándar.
            EvaluationEmptyError: el contenido está vacío o ausente.
            TransportError: fallo de red.
        """

        model = self._settings.ai_model
        async with self._build_client(credential) as client:
            try:
                response = await client.chat.completions.create(
                    model=model,
                    messages=build_messages(expression),  # type: ignore[arg-type]
                    temperature=TEMPERATURE,
                )
            except APIStatusError as exc:
                body = exc.response.text
                logger.warning("Error HTTP: %s %s", exc.status_code, body)
                raise EvaluationHTTPError(exc.status_code, body) from exc
            except APIConnectionError as exc:
                logger.warning("Fallo de red contra %s: %s", self._settings.ai_base_url, exc)
                raise TransportError("el proveedor de IA", exc) from exc
            except ValueError as exc:
                # Respuesta 200 cuyo cuerpo no es JSON.
                logger.warning("Cuerpo de respuesta ilegible: %s", exc)
                raise EvaluationEnvelopeError(_BAD_ENVELOPE) from exc

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as exc:
            logger.warning("Respuesta sin choices[0].message: %r", response)
            raise EvaluationEnvelopeError(_BAD_ENVELOPE) from exc

        logger.debug("Respuesta completa del proveedor: %r", response)
        if content is not None and not isinstance(content, str):
            logger.warning("content no es texto: %r", content)
            raise EvaluationEnvelopeError(_BAD_ENVELOPE)
        if not content:
            raise EvaluationEmptyError()

        logger.debug("Texto bruto de la IA: %s", content)
        return content
