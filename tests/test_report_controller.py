"""Tests pour le contrôleur du cycle de vie des rapports.

Couvre les transitions idle/loading/success/error, le refus des soumissions concurrentes, la relance
depuis l'état d'erreur et l'abandon des résultats périmés.
"""

from __future__ import annotations

import asyncio

import pytest

from lifetime_analyzer.domain.entities import SessionState, SessionStatus, UserInput
from lifetime_analyzer.domain.errors import (
    MALFORMED_DATE_MESSAGE,
    MISSING_FIELD_MESSAGE,
    UNAUTHORIZED_MESSAGE,
    UNKNOWN_ERROR_MESSAGE,
    FailureKind,
    GenerationError,
)
from lifetime_analyzer.infra.llm.base import LLM
from lifetime_analyzer.services.report_controller import ReportController
from tests.fakes import FakeLLM

EXPECTED_CALLS_2 = 2
EXPECTED_TOKEN_AFTER_RESET = 3


def _controller(llm: LLM, clock, states: list[SessionState] | None = None) -> ReportController:
    listener = states.append if states is not None else None
    return ReportController(llm, clock=clock, on_change=listener)


@pytest.mark.parametrize("field", ["name", "day", "month", "year", "country"])
def test_missing_field_errors_without_external_call(field, fake_llm, fixed_clock, asha) -> None:
    """Teste qu'un champ vide mène à `error` sans appel au service."""
    controller = _controller(fake_llm, fixed_clock)
    task = controller.submit(asha.model_copy(update={field: "  "}))
    assert task is None
    assert controller.state == SessionState.failed(MISSING_FIELD_MESSAGE)
    assert fake_llm.calls == 0


@pytest.mark.parametrize(
    ("day", "month", "year"),
    [("31", "02", "1990"), ("12", "13", "1990"), ("xx", "05", "1990"), ("20", "10", "2025")],
)
def test_invalid_or_future_date_errors_without_external_call(
    day, month, year, fake_llm, fixed_clock, asha
) -> None:
    controller = _controller(fake_llm, fixed_clock)
    assert controller.submit(asha.model_copy(update={"day": day, "month": month, "year": year})) is None
    assert controller.state.status is SessionStatus.ERROR
    assert controller.state.error
    assert fake_llm.calls == 0


def test_initial_state_is_idle(fake_llm, fixed_clock) -> None:
    controller = _controller(fake_llm, fixed_clock)
    assert controller.state == SessionState.idle()
    assert controller.token == 0
    assert controller.in_flight is None


@pytest.mark.asyncio
async def test_successful_submission_transitions(fake_llm, fixed_clock, asha) -> None:
    """Teste la séquence Idle → Loading → Success("REPORT")."""
    states: list[SessionState] = []
    controller = _controller(fake_llm, fixed_clock, states)

    task = controller.submit(asha)
    assert task is not None
    assert controller.state == SessionState.loading()
    await task

    assert controller.state == SessionState.success("REPORT")
    assert [s.status for s in states] == [SessionStatus.LOADING, SessionStatus.SUCCESS]
    assert fake_llm.calls == 1
    assert "2025-10-19" in fake_llm.prompts[0]
    assert controller.last_request is not None
    assert controller.last_request.birth_year == 1990
    assert controller.last_request.current_date == "2025-10-19"


@pytest.mark.asyncio
async def test_unauthorized_failure_has_credential_message(fixed_clock, asha) -> None:
    llm = FakeLLM(outcomes=[GenerationError(FailureKind.UNAUTHORIZED, "Incorrect API key")])
    controller = _controller(llm, fixed_clock)
    await controller.submit(asha)
    assert controller.state.status is SessionStatus.ERROR
    assert controller.state.error == UNAUTHORIZED_MESSAGE
    assert controller.state.error != UNKNOWN_ERROR_MESSAGE


@pytest.mark.asyncio
async def test_service_error_keeps_detail(fixed_clock, asha) -> None:
    llm = FakeLLM(outcomes=[GenerationError(FailureKind.SERVICE_ERROR, "quota exceeded")])
    controller = _controller(llm, fixed_clock)
    await controller.submit(asha)
    assert controller.state.error == "API Error: quota exceeded"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "failure",
    [GenerationError(FailureKind.UNREACHABLE, "connect timeout"), RuntimeError("secret internals")],
)
async def test_unknown_failures_use_generic_message(failure, fixed_clock, asha) -> None:
    controller = _controller(FakeLLM(outcomes=[failure]), fixed_clock)
    await controller.submit(asha)
    assert controller.state.error == UNKNOWN_ERROR_MESSAGE
    assert "secret" not in controller.state.error
    assert "timeout" not in controller.state.error


@pytest.mark.asyncio
async def test_blank_report_is_a_service_error(fixed_clock, asha) -> None:
    controller = _controller(FakeLLM(text="   "), fixed_clock)
    await controller.submit(asha)
    assert controller.state.status is SessionStatus.ERROR
    assert controller.state.error.startswith("API Error")


@pytest.mark.asyncio
async def test_submit_while_loading_is_ignored(fixed_clock, asha) -> None:
    """Teste qu'une seconde soumission pendant `loading` n'émet aucun appel."""
    gate = asyncio.Event()
    llm = FakeLLM(gate=gate)
    controller = _controller(llm, fixed_clock)

    first = controller.submit(asha)
    await asyncio.sleep(0)
    second = controller.submit(asha.model_copy(update={"name": "Other"}))

    assert second is None
    assert controller.state == SessionState.loading()
    assert controller.in_flight is first
    assert llm.calls == 1

    gate.set()
    await first
    assert controller.state == SessionState.success("REPORT")
    assert llm.calls == 1
    assert controller.last_input == asha


@pytest.mark.asyncio
async def test_retry_reissues_identical_prompt(fixed_clock, asha) -> None:
    llm = FakeLLM(outcomes=[GenerationError(FailureKind.SERVICE_ERROR, "boom"), "REPORT"])
    controller = _controller(llm, fixed_clock)

    await controller.submit(asha)
    assert controller.state.error == "API Error: boom"

    task = controller.retry()
    assert task is not None
    assert controller.state == SessionState.loading()
    await task

    assert controller.state == SessionState.success("REPORT")
    assert llm.calls == EXPECTED_CALLS_2
    assert llm.prompts[0] == llm.prompts[1]


@pytest.mark.asyncio
async def test_retry_outside_error_is_ignored(fake_llm, fixed_clock, asha) -> None:
    controller = _controller(fake_llm, fixed_clock)
    assert controller.retry() is None
    assert controller.state == SessionState.idle()

    await controller.submit(asha)
    assert controller.retry() is None
    assert controller.state == SessionState.success("REPORT")
    assert fake_llm.calls == 1


def test_retry_after_validation_error_revalidates(fake_llm, fixed_clock, asha) -> None:
    controller = _controller(fake_llm, fixed_clock)
    controller.submit(asha.model_copy(update={"country": ""}))
    assert controller.retry() is None
    assert controller.state == SessionState.failed(MISSING_FIELD_MESSAGE)
    assert fake_llm.calls == 0


@pytest.mark.asyncio
async def test_new_submission_clears_previous_report(fixed_clock, asha) -> None:
    gate = asyncio.Event()
    gate.set()
    llm = FakeLLM(outcomes=["FIRST", "SECOND"], gate=gate)
    controller = _controller(llm, fixed_clock)
    await controller.submit(asha)
    assert controller.state.report == "FIRST"

    gate.clear()
    task = controller.submit(asha)
    assert controller.state.report is None
    assert controller.state.error is None
    gate.set()
    await task
    assert controller.state.report == "SECOND"


class _ManualLLM(LLM):
    """LLM dont chaque appel attend un feu vert explicite."""

    model = "manual"

    def __init__(self) -> None:
        self.releases: list[asyncio.Event] = []

    async def generate(self, prompt: str) -> str:
        release = asyncio.Event()
        self.releases.append(release)
        number = len(self.releases)
        await release.wait()
        return f"REPORT-{number}"


@pytest.mark.asyncio
async def test_stale_result_is_discarded_after_reset(fixed_clock, asha) -> None:
    """Teste qu'un résultat arrivé après une nouvelle soumission n'écrase pas l'état."""
    llm = _ManualLLM()
    controller = _controller(llm, fixed_clock)

    old = controller.submit(asha)
    await asyncio.sleep(0)
    controller.reset()
    assert controller.state == SessionState.idle()

    new = controller.submit(asha)
    await asyncio.sleep(0)
    assert controller.token == EXPECTED_TOKEN_AFTER_RESET

    llm.releases[1].set()
    await new
    assert controller.state == SessionState.success("REPORT-2")

    llm.releases[0].set()
    await old
    assert controller.state == SessionState.success("REPORT-2")


@pytest.mark.asyncio
async def test_wait_returns_final_state(fake_llm, fixed_clock, asha) -> None:
    controller = _controller(fake_llm, fixed_clock)
    controller.submit(asha)
    state = await controller.wait()
    assert state == SessionState.success("REPORT")
    assert await controller.wait() == state


@pytest.mark.parametrize(("field", "value"), [("day", "²"), ("day", "١٢"), ("year", "١٩٩٠")])
def test_non_ascii_digits_are_a_malformed_date(field, value, fake_llm, fixed_clock, asha) -> None:
    """Teste que des chiffres non ASCII mènent à `error` au lieu d'interrompre la soumission."""
    controller = _controller(fake_llm, fixed_clock)
    assert controller.submit(asha.model_copy(update={field: value})) is None
    assert controller.state == SessionState.failed(MALFORMED_DATE_MESSAGE)
    assert fake_llm.calls == 0


@pytest.mark.asyncio
async def test_three_digit_year_with_low_minimum(fake_llm, fixed_clock, asha) -> None:
    controller = ReportController(fake_llm, clock=fixed_clock, min_year=500)
    await controller.submit(asha.model_copy(update={"year": "999"}))
    assert controller.state == SessionState.success("REPORT")
    assert controller.last_request.birth_year == 999  # noqa: PLR2004
    assert "0999-05-12" in fake_llm.prompts[0]


@pytest.mark.asyncio
async def test_rejected_resubmission_clears_previous_request(fake_llm, fixed_clock, asha) -> None:
    controller = _controller(fake_llm, fixed_clock)
    await controller.submit(asha)
    assert controller.last_request is not None

    controller.submit(asha.model_copy(update={"month": "13"}))
    assert controller.state.status is SessionStatus.ERROR
    assert controller.last_request is None
