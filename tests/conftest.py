"""Pytest configuration: put `src/` on sys.path and share test doubles.

Los paquetes viven en `src/` (layout tipo "src"); sin instalación editable
`import core` no funcionaría desde la raíz del repo.
"""

from __future__ import annotations

import json
import os
import sys
from typing import Any, Callable

import pytest

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
SRC = os.path.join(PROJECT_ROOT, "src")

if SRC not in sys.path:
    sys.path.insert(0, SRC)

import httpx  # noqa: E402

from core.config import AppSettings  # noqa: E402
from core.domain.models import Credential, EvaluationResult, LoadingPhase  # noqa: E402

KEY_URL = "https://keys.test/apiKeyOpenAI"
AI_BASE_URL = "https://llm.test/v1"
COMPLETIONS_URL = f"{AI_BASE_URL}/chat/completions"


def completion_payload(content: str | None) -> dict[str, Any]:
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 0,
        "model": "gpt-4o-mini",
        "choices": [
            {
                "index": 0,
                "finish_reason": "stop",
                "message": {"role": "assistant", "content": content},
            }
        ],
    }


class RecordingView:
    """Doble de `CalculatorView` que registra cada transición."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []

    def show_validation_error(self) -> None:
        self.calls.append(("validation_error", None))

    def show_loading(self, phase: LoadingPhase) -> None:
        self.calls.append(("loading", phase))

    def show_success(self, result: EvaluationResult) -> None:
        self.calls.append(("success", result))

    def show_error(self, message: str) -> None:
        self.calls.append(("error", message))

    def reset(self) -> None:
        self.calls.append(("reset", None))

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


class FakeCredentials:
    def __init__(self, token: str = "sk-test", error: Exception | None = None) -> None:
        self.token = token
        self.error = error
        self.calls = 0

    async def fetch(self) -> Credential:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return Credential(token=self.token)


class FakeEvaluator:
    def __init__(self, reply: str = "", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, Credential]] = []

    async def evaluate(self, expression: str, credential: Credential) -> str:
        self.calls.append((expression, credential))
        if self.error is not None:
            raise self.error
        return self.reply


class RecordingHandler:
    """Handler para `httpx.MockTransport` que guarda las peticiones recibidas."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]) -> None:
        self._respond = respond
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._respond(request)

    def json_bodies(self) -> list[Any]:
        return [json.loads(r.content) for r in self.requests if r.content]


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        _env_file=None,
        credential_url=KEY_URL,
        ai_base_url=AI_BASE_URL,
        ai_model="gpt-4o-mini",
        ai_api_key=None,
        preview_path=None,
    )
