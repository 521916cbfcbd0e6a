"""Componentes de UI para CLI (Rich).

Separados de los comandos para reutilizar el banner y la tarjeta de
resultado en `evaluar` e `interactivo`.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import Tone, UIState, ViewSnapshot

TONE_STYLES: dict[Tone, str] = {
    Tone.NEUTRAL: "dim",
    Tone.SUCCESS: "bold green",
    Tone.ERROR: "bold red",
}

_BORDER_STYLES: dict[UIState, str] = {
    UIState.SUCCESS: "green",
    UIState.ERROR: "red",
    UIState.VALIDATING: "red",
}


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida del modo interactivo."""

    title = Text("Calculadora IA", style="bold cyan")
    subtitle = Text("Escribe una operación • :limpiar • :salir", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_status_line(snapshot: ViewSnapshot) -> Text:
    return Text(snapshot.status_text, style=TONE_STYLES[snapshot.status_tone])


def build_calculator_panel(snapshot: ViewSnapshot) -> Panel:
    """Tarjeta con estado, resultado numérico y LaTeX.

    Todo el contenido se pasa como `Text` para que corchetes del LaTeX no
    se interpreten como markup de Rich.
    """

    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="cyan", no_wrap=True)
    grid.add_column()
    if snapshot.input_text:
        grid.add_row("Operación", Text(snapshot.input_text, style="white"))
    grid.add_row("Estado", build_status_line(snapshot))
    grid.add_row("Resultado", Text(snapshot.value_panel, style="bold"))
    grid.add_row("LaTeX", Text(snapshot.latex_panel, style="magenta"))

    return Panel(
        grid,
        title=Text("Calculadora IA", style="bold yellow"),
        border_style=_BORDER_STYLES.get(snapshot.state, "yellow"),
    )
