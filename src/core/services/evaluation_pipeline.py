"""Orquestación de una evaluación.

Secuencia por acción del usuario:
1. Validar la entrada (corta antes de cualquier red).
2. Obtener credencial.
3. Consultar el modelo.
4. Normalizar la respuesta.
5. Mostrar éxito.

Cualquier `CalculatorError` de los pasos 2-4 se captura aquí, una sola vez, y
se convierte en `view.show_error(...)`. La vista queda lista para otro intento.
"""

from __future__ import annotations

import logging
from typing import Protocol

from core.domain.models import Credential, EvaluationResult, LoadingPhase, OperationRequest
from core.errors import CalculatorError, ValidationError
from core.interfaces.credentials import CredentialSource
from core.interfaces.view import CalculatorView
from core.services.normalizer import normalize

logger = logging.getLogger(__name__)


class Evaluator(Protocol):
    async def evaluate(self, expression: str, credential: Credential) -> str: ...


def parse_operation(raw_input: str | None) -> OperationRequest:
    """Recorta la entrada; vacía o solo espacios => `ValidationError`."""

    expression = (raw_input or "").strip()
    if not expression:
        raise ValidationError()
    return OperationRequest(expression=expression)


class EvaluationPipeline:
    """Encadena credencial -> evaluación -> normalización -> vista.

    No guarda estado entre ejecuciones: dos `run()` simultáneos son pipelines
    independientes que escriben sobre la misma vista (gana la última escritura).
    """

    def __init__(
        self,
        *,
        view: CalculatorView,
        credentials: CredentialSource,
        evaluator: Evaluator,
    ) -> None:
        self._view = view
        self._credentials = credentials
        self._evaluator = evaluator

    async def run(self, raw_input: str | None) -> EvaluationResult | None:
        """Ejecuta una evaluación completa. Devuelve `None` si falló."""

        try:
            request = parse_operation(raw_input)
        except ValidationError:
            self._view.show_validation_error()
            return None

        try:
            self._view.show_loading(LoadingPhase.CREDENTIAL)
            credential = await self._credentials.fetch()

            self._view.show_loading(LoadingPhase.EVALUATION)
            raw_text = await self._evaluator.evaluate(request.expression, credential)

            result = normalize(raw_text)
        except CalculatorError as exc:
            logger.error("Evaluación de %r fallida: %s", request.expression, exc, exc_info=exc)
            self._view.show_error(str(exc))
            return None

        self._view.show_success(result)
        return result

    def clear(self) -> None:
        self._view.reset()
