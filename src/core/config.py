"""Configuración del Core.

Responsabilidad:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP/IA) lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "calculadora-ia"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "calculadora-ia"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "calculadora-ia"
    return Path.home() / ".config" / "calculadora-ia"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], *, env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario.

    Los valores `None` se ignoran; las claves existentes que no aparecen en
    `values` se conservan.
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# calculadora-ia user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación."""

    model_config = SettingsConfigDict(
        env_prefix="CALC_IA_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    credential_url: str = Field(
        default="https://690a3d811a446bb9cc21e93b.mockapi.io/apiKeyOpenAI",
        min_length=8,
        description="Endpoint de distribución de claves (devuelve [{'apiKey': ...}]).",
    )
    ai_base_url: str = Field(
        default="https://api.openai.com/v1",
        min_length=8,
        description="Base URL compatible OpenAI; se le añade /chat/completions.",
    )
    ai_model: str = Field(
        default="gpt-4o-mini",
        min_length=1,
        description="Modelo usado para evaluar la operación.",
    )
    ai_api_key: str | None = Field(
        default=None,
        description="Clave fija; si existe, no se consulta el endpoint de claves.",
    )

    http_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Timeout por request (segundos). None = sin timeout.",
    )
    user_agent: str = Field(
        default="calculadora-ia/0.1",
        min_length=1,
        description="User-Agent para las peticiones HTTP.",
    )

    log_level: str = Field(
        default="WARNING",
        description="Nivel del logger raíz (DEBUG, INFO, WARNING, ...).",
    )

    preview_path: Path | None = Field(
        default=None,
        description="Archivo HTML donde MathJax renderiza el LaTeX (opcional).",
    )
    preview_open_browser: bool = Field(
        default=False,
        description="Abrir el preview HTML en el navegador tras cada resultado.",
    )
