"""Implementación Rich de `CalculatorView`.

Mantiene el contenido de las tres superficies (línea de estado, panel de
resultado, panel LaTeX) y lo imprime en consola tras cada transición.
"""

from __future__ import annotations

import asyncio

from rich.console import Console

from cli.ui_components import build_calculator_panel, build_status_line
from core.domain.models import (
    EvaluationResult,
    LoadingPhase,
    Tone,
    UIState,
    ViewSnapshot,
)
from core.interfaces.view import CalculatorView, MathTypesetter


MSG_EMPTY_INPUT = "Escribe una operación primero."
MSG_SUCCESS = "Operación evaluada correctamente ✅"
MSG_LOADING: dict[LoadingPhase, str] = {
    LoadingPhase.CREDENTIAL: "Obteniendo clave de API...",
    LoadingPhase.EVALUATION: "Consultando el modelo de IA...",
}

PLACEHOLDER_IDLE = "Sin resultado aún…"
PLACEHOLDER_LOADING = "Calculando…"
PLACEHOLDER_ERROR = "Sin resultado por error…"


class ConsoleView(CalculatorView):
    def __init__(
        self,
        console: Console | None = None,
        *,
        typesetter: MathTypesetter | None = None,
    ) -> None:
        self._console = console or Console()
        self._typesetter = typesetter
        self._pending: set[asyncio.Task[None]] = set()

        self.input_text = ""
        self._state = UIState.IDLE
        self._status_text = ""
        self._status_tone = Tone.NEUTRAL
        self._value_panel = PLACEHOLDER_IDLE
        self._latex_panel = PLACEHOLDER_IDLE

    def attach_typesetter(self, typesetter: MathTypesetter | None) -> None:
        self._typesetter = typesetter

    @property
    def snapshot(self) -> ViewSnapshot:
        return ViewSnapshot(
            state=self._state,
            input_text=self.input_text,
            status_text=self._status_text,
            status_tone=self._status_tone,
            value_panel=self._value_panel,
            latex_panel=self._latex_panel,
        )

    def _set(
        self,
        state: UIState,
        status_text: str,
        tone: Tone,
        *,
        value_panel: str | None = None,
        latex_panel: str | None = None,
    ) -> None:
        self._state = state
        self._status_text = status_text
        self._status_tone = tone
        if value_panel is not None:
            self._value_panel = value_panel
        if latex_panel is not None:
            self._latex_panel = latex_panel

    def show_validation_error(self) -> None:
        self._set(UIState.VALIDATING, MSG_EMPTY_INPUT, Tone.ERROR)
        self._console.print(build_status_line(self.snapshot))

    def show_loading(self, phase: LoadingPhase) -> None:
        self._set(
            UIState.LOADING,
            MSG_LOADING[phase],
            Tone.NEUTRAL,
            value_panel=PLACEHOLDER_LOADING,
            latex_panel=PLACEHOLDER_LOADING,
        )
        self._console.print(build_status_line(self.snapshot))

    def show_success(self, result: EvaluationResult) -> None:
        self._set(
            UIState.SUCCESS,
            MSG_SUCCESS,
            Tone.SUCCESS,
            value_panel=result.display_value(),
            latex_panel=f"$${result.latex}$$",
        )
        self._console.print(build_calculator_panel(self.snapshot))

        if self._typesetter is not None:
            # Fire-and-forget: el orden respecto a la impresión no está garantizado.
            task = asyncio.get_running_loop().create_task(self._typesetter.typeset())
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

    def show_error(self, message: str) -> None:
        self._set(
            UIState.ERROR,
            f"Error: {message}",
            Tone.ERROR,
            value_panel=PLACEHOLDER_ERROR,
            latex_panel=PLACEHOLDER_ERROR,
        )
        self._console.print(build_calculator_panel(self.snapshot))

    def reset(self) -> None:
        self.input_text = ""
        self._set(
            UIState.IDLE,
            "",
            Tone.NEUTRAL,
            value_panel=PLACEHOLDER_IDLE,
            latex_panel=PLACEHOLDER_IDLE,
        )
        self._console.print(build_calculator_panel(self.snapshot))

    async def drain(self) -> None:
        """Espera a que terminen los tipografiados pendientes (sin revisar su resultado)."""

        if self._pending:
            await asyncio.wait(set(self._pending))
