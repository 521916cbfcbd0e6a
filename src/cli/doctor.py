"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from core.config import AppSettings, get_user_env_file, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    # Solo alcanzabilidad: cualquier status HTTP cuenta como "responde".
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc)


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="Calculadora IA Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    if settings.ai_api_key:
        table.add_row("Credential", "OK", "Static key (CALC_IA_AI_API_KEY)")
    else:
        table.add_row("Credential", "OK", f"Remote key endpoint: {settings.credential_url}")
        ok_key, detail_key = asyncio.run(_check_http(settings.credential_url, settings))
        table.add_row("Key endpoint", "OK" if ok_key else "FAIL", detail_key)

    table.add_row("AI base_url", "OK", settings.ai_base_url)
    table.add_row("AI model", "OK", settings.ai_model)
    ok_ai, detail_ai = asyncio.run(_check_http(settings.ai_base_url, settings))
    table.add_row("AI endpoint", "OK" if ok_ai else "FAIL", detail_ai)

    timeout = "none" if settings.http_timeout_seconds is None else f"{settings.http_timeout_seconds}s"
    table.add_row("HTTP timeout", "OK", timeout)
    if settings.preview_path is not None:
        table.add_row("MathJax preview", "OK", str(settings.preview_path))
    else:
        table.add_row("MathJax preview", "OPTIONAL", "Disabled (use --preview PATH)")

    _console.print(table)
    _console.print(f"\n[dim]User config:[/dim] {get_user_env_file()}")

    if not settings.ai_api_key:
        _console.print(
            "\n[yellow]Note:[/yellow] the key endpoint is public; anyone can read it. "
            "Set CALC_IA_AI_API_KEY (doctor setup) to skip it."
        )


@app.command(name="setup")
def setup() -> None:
    """Interactive setup (stores config in the user config .env)."""

    settings = AppSettings()

    base_url = typer.prompt("AI base URL", default=settings.ai_base_url, show_default=True).strip()
    model = typer.prompt("AI model", default=settings.ai_model, show_default=True).strip()
    credential_url = typer.prompt(
        "Key endpoint URL",
        default=settings.credential_url,
        show_default=True,
    ).strip()
    api_key = typer.prompt(
        "Static AI API key (empty = use key endpoint)",
        default="",
        show_default=False,
        hide_input=True,
    ).strip()

    if not base_url or not model:
        raise typer.BadParameter("base_url and model are required")

    env_path = write_user_env_vars(
        {
            "CALC_IA_AI_BASE_URL": base_url,
            "CALC_IA_AI_MODEL": model,
            "CALC_IA_CREDENTIAL_URL": credential_url or None,
            "CALC_IA_AI_API_KEY": api_key or None,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
