"""Modelos del dominio (Pydantic v2).

Nota:
- Estos modelos describen *qué* viaja por el pipeline, no *cómo* se obtiene.
- Ninguna entidad sobrevive a una interacción del usuario.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, StrictStr
from pydantic.config import ConfigDict


class OperationRequest(BaseModel):
    """Operación introducida por el usuario, ya recortada."""

    expression: str = Field(
        ...,
        min_length=1,
        description="Texto literal de la operación (p.ej. '3*7').",
    )


class Credential(BaseModel):
    """Token bearer obtenido en esta ejecución (nunca se cachea)."""

    token: str = Field(
        ...,
        min_length=1,
        description="Clave para el header Authorization.",
    )

    def __repr__(self) -> str:
        return "Credential(token='***')"


class EvaluationResult(BaseModel):
    """Resultado interpretado de la respuesta del modelo.

    `resultado` solo exige presencia: cualquier valor JSON (incluido `null`)
    es aceptado. `latex` debe ser un string de verdad, sin coerción.
    """

    model_config = ConfigDict(extra="ignore")

    resultado: Any = Field(
        ...,
        description="Valor final de la operación.",
    )
    latex: StrictStr = Field(
        ...,
        description="Expresión LaTeX con la operación y su resultado.",
    )

    def display_value(self) -> str:
        """Texto plano del resultado, como lo mostraría `textContent` en un navegador."""

        return _js_text(self.resultado)


def _js_number(value: float) -> str:
    """`Number.prototype.toString()`: decimal en [1e-6, 1e21), exponencial fuera."""

    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    # repr da los dígitos mínimos que identifican el float, igual que JS.
    _, digit_tuple, exponent = Decimal(repr(abs(value))).as_tuple()
    digits = "".join(str(d) for d in digit_tuple).rstrip("0")
    exponent += len(digit_tuple) - len(digits)
    k = len(digits)
    n = exponent + k

    if k <= n <= 21:
        text = digits + "0" * (n - k)
    elif 0 < n <= 21:
        text = f"{digits[:n]}.{digits[n:]}"
    elif -6 < n <= 0:
        text = "0." + "0" * -n + digits
    else:
        e = n - 1
        mantissa = digits if k == 1 else f"{digits[0]}.{digits[1:]}"
        text = f"{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"
    return sign + text


def _js_text(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        # JSON.parse convierte todo número a double.
        return str(value) if abs(value) < 10**21 else _js_number(float(value))
    if isinstance(value, float):
        return _js_number(value)
    if isinstance(value, list):
        return ",".join("" if v is None else _js_text(v) for v in value)
    if isinstance(value, dict):
        return "[object Object]"
    return str(value)


class UIState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class LoadingPhase(str, Enum):
    CREDENTIAL = "credential"
    EVALUATION = "evaluation"


class Tone(str, Enum):
    """Tono visual de una superficie; exactamente uno activo a la vez."""

    NEUTRAL = "neutral"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class ViewSnapshot:
    """Contenido visible de la calculadora en un instante."""

    state: UIState
    input_text: str
    status_text: str
    status_tone: Tone
    value_panel: str
    latex_panel: str
