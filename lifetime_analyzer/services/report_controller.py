# ============================================================
# Module : lifetime_analyzer/services/report_controller.py
# Objet  : Cycle de vie d'une demande de rapport (idle/loading/success/error).
# Contexte : Boucle asyncio mono-thread; seule la génération est suspendue.
#            Un jeton par soumission écarte les résultats périmés.
# ============================================================

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from datetime import date, datetime, timezone

import structlog

from lifetime_analyzer.app.metrics import REPORT_GENERATIONS, REPORT_LATENCY, VALIDATION_REJECTS
from lifetime_analyzer.domain.entities import (
    GenerationRequest,
    SessionState,
    SessionStatus,
    UserInput,
)
from lifetime_analyzer.domain.errors import (
    FailureKind,
    GenerationError,
    ValidationFailure,
    user_message,
)
from lifetime_analyzer.domain.prompt import synthesize_prompt
from lifetime_analyzer.domain.temporal import as_calendar_date, build_request, derive_facts
from lifetime_analyzer.domain.validation import DEFAULT_MIN_YEAR, validate
from lifetime_analyzer.infra.llm.base import LLM

StateListener = Callable[[SessionState], None]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ReportController:
    """Contrôleur du cycle de vie d'un rapport, unique propriétaire de l'état de session.

    Transitions:
    - `submit`: ignoré pendant `loading`; sinon validation locale (erreur immédiate, aucun appel
      externe) puis passage en `loading` et planification d'une génération sur la boucle courante.
    - fin de génération: `success(texte)` ou `error(message)` si le jeton est toujours courant.
    - `retry`: resoumet la dernière saisie, uniquement depuis `error`.
    - `reset`: retour à `idle`; un résultat encore en vol sera ignoré.
    """

    def __init__(
        self,
        llm: LLM,
        clock: Callable[[], date | datetime] = utc_now,
        on_change: StateListener | None = None,
        min_year: int = DEFAULT_MIN_YEAR,
    ) -> None:
        self.llm = llm
        self._clock = clock
        self._on_change = on_change
        self._min_year = min_year
        self._state = SessionState.idle()
        self._token = 0
        self._task: asyncio.Task[None] | None = None
        self.last_input: UserInput | None = None
        self.last_request: GenerationRequest | None = None
        self._log = structlog.get_logger(__name__).bind(component="report_controller")

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def token(self) -> int:
        """Jeton de la soumission la plus récente."""
        return self._token

    @property
    def in_flight(self) -> asyncio.Task[None] | None:
        if self._task is not None and not self._task.done():
            return self._task
        return None

    def submit(self, user_input: UserInput) -> asyncio.Task[None] | None:
        """Soumet une saisie; retourne la tâche de génération planifiée, ou None.

        Doit être appelé depuis la boucle d'événements dès que la saisie est valide.
        """
        if self._state.status is SessionStatus.LOADING:
            self._log.info("report_submit_ignored", reason="already_loading", token=self._token)
            return None

        self.last_input = user_input
        now = self._clock()
        try:
            validate(user_input, as_calendar_date(now), self._min_year)
        except ValidationFailure as exc:
            VALIDATION_REJECTS.labels(reason=exc.reason).inc()
            self._log.info("report_input_rejected", reason=exc.reason)
            self.last_request = None
            self._set_state(SessionState.failed(exc.user_message))
            return None

        loop = asyncio.get_running_loop()
        self.last_request = build_request(user_input, now)
        prompt = synthesize_prompt(user_input, derive_facts(user_input, now))
        self._token += 1
        self._set_state(SessionState.loading())
        self._log.info(
            "report_generation_started",
            token=self._token,
            model=getattr(self.llm, "model", "unknown"),
            prompt_chars=len(prompt),
        )
        self._task = loop.create_task(self._generate(self._token, prompt))
        return self._task

    def retry(self) -> asyncio.Task[None] | None:
        """Resoumet la dernière saisie connue; sans effet hors de l'état `error`."""
        if self._state.status is not SessionStatus.ERROR or self.last_input is None:
            self._log.info("report_retry_ignored", status=self._state.status.value)
            return None
        return self.submit(self.last_input)

    def reset(self) -> None:
        """Revient à `idle`; le résultat d'une génération en cours sera écarté."""
        self._token += 1
        self._task = None
        self._set_state(SessionState.idle())

    async def wait(self) -> SessionState:
        """Attend la génération en cours (s'il y en a une) et retourne l'état courant."""
        task = self.in_flight
        if task is not None:
            await task
        return self._state

    async def _generate(self, token: int, prompt: str) -> None:
        start = time.perf_counter()
        try:
            text = await self.llm.generate(prompt)
            if not text or not text.strip():
                raise GenerationError(
                    FailureKind.SERVICE_ERROR, "The model returned an empty response."
                )
        except GenerationError as exc:
            outcome = exc.kind.value
            next_state = SessionState.failed(exc.user_message)
            self._log.warning(
                "report_generation_failed", token=token, kind=exc.kind.value, detail=exc.detail
            )
        except Exception:
            outcome = FailureKind.UNKNOWN.value
            next_state = SessionState.failed(user_message(FailureKind.UNKNOWN))
            self._log.exception("report_generation_failed", token=token, kind=outcome)
        else:
            outcome = "success"
            next_state = SessionState.success(text)
        REPORT_LATENCY.observe(time.perf_counter() - start)

        if token != self._token:
            self._log.info("report_result_discarded", token=token, current=self._token)
            return
        REPORT_GENERATIONS.labels(outcome=outcome).inc()
        self._set_state(next_state)

    def _set_state(self, state: SessionState) -> None:
        previous = self._state.status
        self._state = state
        self._log.debug("session_transition", frm=previous.value, to=state.status.value)
        if self._on_change is not None:
            self._on_change(state)
