"""Contratos de la superficie visible.

El orquestador depende de `CalculatorView`, nunca de widgets concretos; así
la consola Rich y los dobles de test son intercambiables.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import EvaluationResult, LoadingPhase


@runtime_checkable
class CalculatorView(Protocol):
    """Transiciones de estado de la calculadora.

    Reglas de diseño:
    - Cada operación reemplaza por completo la línea de estado y ambos paneles
      (salvo `show_validation_error`, que solo toca el estado).
    - Son idempotentes: repetir una llamada deja la misma vista.
    """

    def show_validation_error(self) -> None: ...

    def show_loading(self, phase: LoadingPhase) -> None: ...

    def show_success(self, result: EvaluationResult) -> None: ...

    def show_error(self, message: str) -> None: ...

    def reset(self) -> None: ...


@runtime_checkable
class MathTypesetter(Protocol):
    """Colaborador opcional que tipografía el LaTeX ya volcado en la vista."""

    async def typeset(self) -> None: ...
