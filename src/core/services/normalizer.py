"""Normalización de la salida del modelo.

Responsabilidad:
- Quitar el bloque de código (```json ... ```) que algunos modelos añaden
  aunque se les pida lo contrario.
- Parsear el JSON resultante y validar los campos `resultado` y `latex`.

Funciones puras: no hay I/O ni estado.
"""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError as PydanticValidationError

from core.domain.models import EvaluationResult
from core.errors import ParseError, SchemaError

logger = logging.getLogger(__name__)

_FENCE = "```"


def _truncate_str(value: str, max_chars: int) -> str:
    s = value.strip()
    if len(s) <= max_chars:
        return s
    return s[: max_chars - 1].rstrip() + "…"


def _reject_constant(name: str) -> None:
    raise ValueError(f"{name} no es JSON válido")


def strip_fence(text: str) -> str:
    """Elimina un único bloque ``` envolvente (con o sin etiqueta de lenguaje).

    No busca fences anidados ni en mitad del texto.
    """

    cleaned = text.strip()
    if not cleaned.startswith(_FENCE):
        return cleaned

    first_newline = cleaned.find("\n")
    if first_newline != -1:
        cleaned = cleaned[first_newline + 1 :]
    if cleaned.endswith(_FENCE):
        cleaned = cleaned[: -len(_FENCE)]
    return cleaned.strip()


def normalize(raw_text: str) -> EvaluationResult:
    """Convierte el texto bruto de la IA en un `EvaluationResult`.

    Raises:
        ParseError: el texto (sin fence) no es JSON.
        SchemaError: falta `resultado` o `latex` no es string.
    """

    text = strip_fence(raw_text)

    try:
        # NaN/Infinity no son JSON estándar.
        data = json.loads(text, parse_constant=_reject_constant)
    except ValueError as exc:
        logger.warning("No se pudo parsear la respuesta como JSON (%s): %r", exc, text)
        raise ParseError(raw_text=raw_text, excerpt=_truncate_str(text, 80)) from exc

    if not isinstance(data, dict):
        logger.warning("La respuesta JSON no es un objeto: %r", data)
        raise SchemaError()

    try:
        return EvaluationResult.model_validate(data)
    except PydanticValidationError as exc:
        logger.warning("JSON con esquema inesperado: %r (%s)", data, exc)
        raise SchemaError() from exc
