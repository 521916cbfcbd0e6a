import asyncio
import io

import pytest
from rich.console import Console

from cli.console_view import (
    MSG_EMPTY_INPUT,
    MSG_LOADING,
    MSG_SUCCESS,
    PLACEHOLDER_ERROR,
    PLACEHOLDER_IDLE,
    PLACEHOLDER_LOADING,
    ConsoleView,
)
from core.domain.models import EvaluationResult, LoadingPhase, Tone, UIState

RESULT = EvaluationResult(resultado=21, latex=r"3\times7=21")


class CountingTypesetter:
    def __init__(self, error: Exception | None = None) -> None:
        self.calls = 0
        self.error = error

    async def typeset(self) -> None:
        await asyncio.sleep(0)
        self.calls += 1
        if self.error is not None:
            raise self.error


def _view(**kwargs) -> tuple[ConsoleView, io.StringIO]:
    out = io.StringIO()
    return ConsoleView(Console(file=out, width=100), **kwargs), out


def test_initial_state_is_idle():
    view, _ = _view()

    snapshot = view.snapshot
    assert snapshot.state is UIState.IDLE
    assert snapshot.status_text == ""
    assert snapshot.value_panel == PLACEHOLDER_IDLE


def test_validation_error_leaves_panels_untouched():
    view, out = _view()
    view.show_error("boom")

    view.show_validation_error()

    snapshot = view.snapshot
    assert snapshot.status_text == MSG_EMPTY_INPUT
    assert snapshot.status_tone is Tone.ERROR
    assert snapshot.value_panel == PLACEHOLDER_ERROR
    assert MSG_EMPTY_INPUT in out.getvalue()


@pytest.mark.parametrize("phase", list(LoadingPhase))
def test_loading_sets_placeholders(phase):
    view, _ = _view()

    view.show_loading(phase)

    snapshot = view.snapshot
    assert snapshot.state is UIState.LOADING
    assert snapshot.status_text == MSG_LOADING[phase]
    assert snapshot.status_tone is Tone.NEUTRAL
    assert snapshot.value_panel == PLACEHOLDER_LOADING
    assert snapshot.latex_panel == PLACEHOLDER_LOADING


@pytest.mark.asyncio
async def test_success_wraps_latex_in_block_delimiters():
    view, out = _view()

    view.show_success(RESULT)

    snapshot = view.snapshot
    assert snapshot.status_text == MSG_SUCCESS
    assert snapshot.status_tone is Tone.SUCCESS
    assert snapshot.value_panel == "21"
    assert snapshot.latex_panel == r"$$3\times7=21$$"
    assert r"$$3\times7=21$$" in out.getvalue()


def test_error_prefixes_message():
    view, _ = _view()

    view.show_error("sin red")

    snapshot = view.snapshot
    assert snapshot.status_text == "Error: sin red"
    assert snapshot.status_tone is Tone.ERROR
    assert snapshot.latex_panel == PLACEHOLDER_ERROR


def test_transitions_are_idempotent():
    view, _ = _view()

    view.show_error("x")
    first = view.snapshot
    view.show_error("x")

    assert view.snapshot == first


@pytest.mark.asyncio
@pytest.mark.parametrize("prior", ["idle", "validation", "loading", "success", "error"])
async def test_reset_always_returns_to_idle(prior):
    view, _ = _view()
    view.input_text = "3*7"
    if prior == "validation":
        view.show_validation_error()
    elif prior == "loading":
        view.show_loading(LoadingPhase.EVALUATION)
    elif prior == "success":
        view.show_success(RESULT)
    elif prior == "error":
        view.show_error("x")

    view.reset()

    snapshot = view.snapshot
    assert snapshot.state is UIState.IDLE
    assert snapshot.input_text == ""
    assert snapshot.status_text == ""
    assert snapshot.status_tone is Tone.NEUTRAL
    assert snapshot.value_panel == PLACEHOLDER_IDLE
    assert snapshot.latex_panel == PLACEHOLDER_IDLE


@pytest.mark.asyncio
async def test_typesetter_runs_once_per_success_without_blocking():
    typesetter = CountingTypesetter()
    view, _ = _view(typesetter=typesetter)

    view.show_success(RESULT)
    # Programado, todavía no ejecutado.
    assert typesetter.calls == 0

    await view.drain()
    assert typesetter.calls == 1

    view.show_error("x")
    await view.drain()
    assert typesetter.calls == 1


@pytest.mark.asyncio
async def test_typesetter_failure_does_not_change_view():
    view, _ = _view(typesetter=CountingTypesetter(error=RuntimeError("mathjax")))

    view.show_success(RESULT)
    await view.drain()

    assert view.snapshot.state is UIState.SUCCESS


def test_latex_with_brackets_is_not_markup():
    view, out = _view()
    view.show_error("[bold]literal[/bold]")

    assert "[bold]literal[/bold]" in out.getvalue()
