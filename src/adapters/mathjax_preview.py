"""Tipografiado del LaTeX en una página HTML (MathJax).

Está en adapters porque HTML/navegador son detalles de infraestructura
(Jinja2 + MathJax por CDN). El Core solo conoce `MathTypesetter`.
"""

from __future__ import annotations

import asyncio
import logging
import webbrowser
from datetime import datetime
from pathlib import Path
from typing import Callable

from jinja2 import Environment, FileSystemLoader, select_autoescape

from core.domain.models import Tone, ViewSnapshot
from core.interfaces.view import MathTypesetter

logger = logging.getLogger(__name__)

_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

_TONE_CLASSES = {
    Tone.NEUTRAL: "text-muted",
    Tone.SUCCESS: "text-success",
    Tone.ERROR: "text-danger",
}


def _get_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
    )


def render_preview_html(snapshot: ViewSnapshot) -> str:
    """Renderiza un HTML autocontenido con el estado actual de la calculadora."""

    template = _get_env().get_template("preview.html")
    return template.render(
        input_text=snapshot.input_text,
        status_text=snapshot.status_text,
        tone_class=_TONE_CLASSES[snapshot.status_tone],
        value_panel=snapshot.value_panel,
        latex_panel=snapshot.latex_panel,
        generated_at=datetime.now().astimezone().isoformat(timespec="seconds"),
    )


class MathJaxPreview(MathTypesetter):
    """Vuelca la vista a `output_path` para que MathJax la tipografíe.

    `source` devuelve la instantánea vigente de la vista en el momento de
    tipografiar, no en el de programar la tarea.
    """

    def __init__(
        self,
        *,
        output_path: Path,
        source: Callable[[], ViewSnapshot],
        open_browser: bool = False,
    ) -> None:
        self._output_path = output_path
        self._source = source
        self._open_browser = open_browser
        self._opened = False

    @property
    def output_path(self) -> Path:
        return self._output_path

    def _write(self, html: str) -> None:
        self._output_path.parent.mkdir(parents=True, exist_ok=True)
        self._output_path.write_text(html, encoding="utf-8")

    async def typeset(self) -> None:
        html = render_preview_html(self._source())
        await asyncio.to_thread(self._write, html)
        logger.debug("Preview MathJax escrito en %s", self._output_path)

        # Una sola pestaña por sesión; después basta con recargar.
        if self._open_browser and not self._opened:
            webbrowser.open(self._output_path.resolve().as_uri())
            self._opened = True
