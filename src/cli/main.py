"""CLI principal (Typer).

Comandos:
- `evaluar`: una evaluación y salida (código 1 si falla).
- `interactivo`: bucle de operaciones con `:limpiar` y `:salir`.
- `doctor`: diagnóstico y configuración.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from adapters.credential_fetcher import build_credential_source
from adapters.evaluation_client import EvaluationClient
from adapters.mathjax_preview import MathJaxPreview
from cli import doctor
from cli.console_view import ConsoleView
from cli.ui_components import print_banner
from core.config import AppSettings
from core.domain.models import EvaluationResult
from core.logging_setup import configure_logging
from core.services.evaluation_pipeline import EvaluationPipeline

app = typer.Typer(
    no_args_is_help=True,
    help="Calculadora que evalúa operaciones con un modelo de IA y muestra el resultado en LaTeX.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()

CLEAR_COMMANDS = {":limpiar", ":clear"}
EXIT_COMMANDS = {":salir", ":exit", ":q"}


def build_session(
    settings: AppSettings,
    *,
    console: Console,
    preview: Path | None = None,
) -> tuple[ConsoleView, EvaluationPipeline]:
    """Arma vista + pipeline; el preview MathJax solo se activa si hay ruta."""

    view = ConsoleView(console)
    preview_path = preview or settings.preview_path
    if preview_path is not None:
        view.attach_typesetter(
            MathJaxPreview(
                output_path=preview_path,
                source=lambda: view.snapshot,
                open_browser=settings.preview_open_browser,
            )
        )

    pipeline = EvaluationPipeline(
        view=view,
        credentials=build_credential_source(settings),
        evaluator=EvaluationClient(settings),
    )
    return view, pipeline


async def _evaluate_once(
    view: ConsoleView,
    pipeline: EvaluationPipeline,
    expression: str,
) -> EvaluationResult | None:
    view.input_text = expression
    result = await pipeline.run(expression)
    await view.drain()
    return result


async def _interactive_loop(view: ConsoleView, pipeline: EvaluationPipeline) -> None:
    while True:
        try:
            line = await asyncio.to_thread(_console.input, "[bold cyan]operación>[/bold cyan] ")
        except EOFError:
            break

        command = line.strip().lower()
        if command in EXIT_COMMANDS:
            break
        if command in CLEAR_COMMANDS:
            pipeline.clear()
            continue

        view.input_text = line
        await pipeline.run(line)

    await view.drain()


@app.command()
def evaluar(
    expresion: str = typer.Argument(..., help="Operación a evaluar, p.ej. '3*7'."),
    preview: Optional[Path] = typer.Option(
        None,
        "--preview",
        help="Escribe un HTML con el LaTeX tipografiado por MathJax.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log de diagnóstico (DEBUG)."),
) -> None:
    """Evalúa una operación y muestra resultado + LaTeX."""

    settings = AppSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)

    view, pipeline = build_session(settings, console=_console, preview=preview)
    result = asyncio.run(_evaluate_once(view, pipeline, expresion))
    if result is None:
        raise typer.Exit(code=1)


@app.command()
def interactivo(
    preview: Optional[Path] = typer.Option(
        None,
        "--preview",
        help="Escribe un HTML con el LaTeX tipografiado por MathJax.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log de diagnóstico (DEBUG)."),
) -> None:
    """Bucle interactivo: cada línea es una operación."""

    settings = AppSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)

    view, pipeline = build_session(settings, console=_console, preview=preview)
    print_banner(_console)
    try:
        asyncio.run(_interactive_loop(view, pipeline))
    except KeyboardInterrupt:
        _console.print()


def run() -> None:
    app()


if __name__ == "__main__":
    run()
