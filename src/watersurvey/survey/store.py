"""
Form state store: single owner of one respondent's survey session.

All reads go through ``view()``; all writes go through the mutation API
below. Each mutation builds a new frozen SurveyResponse / WizardState from
the current one, swaps it in and notifies subscribers with a freshly
derived view. A mutation either applies completely or raises
InvalidFieldError with the state untouched.

Wizard transitions:

    Editing(n)  --advance, step valid, n < 4-->  Editing(n + 1)
    Editing(4)  --advance, step valid------->  Submitting
    Submitting  --collector ok-------------->  Submitted (terminal)
    Submitting  --collector failed---------->  Editing(4) with save_error
    Editing(n)  --back, n > 0--------------->  Editing(n - 1)
    Submitted   --reset--------------------->  Editing(0) with defaults
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from watersurvey.collector.interface import SubmissionError, SurveyCollector
from watersurvey.shared.exceptions import InvalidFieldError
from watersurvey.shared.logging import correlation_id_var, get_logger, log_with_context
from watersurvey.survey.metrics import overall_score
from watersurvey.survey.models import (
    FIRST_STEP,
    SurveyResponse,
    Topic,
    WizardState,
    resolve_field_name,
)
from watersurvey.survey.validation import validate_step
from watersurvey.survey.view import SurveyView, build_view

logger = get_logger(__name__)

Listener = Callable[[SurveyView], None]


class FormStateStore:
    """Owns the SurveyResponse and WizardState of a single session."""

    def __init__(
        self,
        collector: SurveyCollector,
        session_id: str | None = None,
    ) -> None:
        self._collector = collector
        self._session_id = session_id or str(uuid4())
        self._response = SurveyResponse()
        self._wizard = WizardState()
        self._listeners: list[Listener] = []
        self.last_submission_error: SubmissionError | None = None

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def response(self) -> SurveyResponse:
        return self._response

    @property
    def wizard(self) -> WizardState:
        return self._wizard

    def view(self) -> SurveyView:
        return build_view(self._response, self._wizard, session_id=self._session_id)

    # --------------------------------------------------------
    # Subscription
    # --------------------------------------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with the new view after every change."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(
        self,
        response: SurveyResponse | None = None,
        wizard: WizardState | None = None,
    ) -> SurveyView:
        if response is not None:
            self._response = response
        if wizard is not None:
            self._wizard = wizard
        view = self.view()
        for listener in list(self._listeners):
            listener(view)
        return view

    @contextmanager
    def _correlated(self) -> Iterator[None]:
        token = correlation_id_var.set(self._session_id)
        try:
            yield
        finally:
            correlation_id_var.reset(token)

    # --------------------------------------------------------
    # Field mutations
    # --------------------------------------------------------
    def update_field(self, field: str, value: Any) -> SurveyView:
        """Replace one top-level answer (snake_case or camelCase name)."""
        name = resolve_field_name(field)
        if name is None:
            raise InvalidFieldError(
                f"Unknown survey field: {field}",
                details={"field": field},
            )
        try:
            updated = self._response.with_field(name, value)
        except PydanticValidationError as e:
            raise InvalidFieldError(
                f"Invalid value for {field}",
                details={"field": field, "errors": [err["msg"] for err in e.errors()]},
            ) from e
        return self._commit(response=updated)

    def update_topic(self, topic: Topic | str, value: Any) -> SurveyView:
        """Replace the rating of one service topic."""
        try:
            key = Topic(topic)
        except ValueError as e:
            raise InvalidFieldError(
                f"Unknown topic: {topic}",
                details={"field": "topics", "topic": str(topic)},
            ) from e
        try:
            updated = self._response.with_topic(key, value)
        except PydanticValidationError as e:
            raise InvalidFieldError(
                f"Invalid rating for {key.value}",
                details={"field": "topics", "topic": key.value, "errors": [err["msg"] for err in e.errors()]},
            ) from e
        return self._commit(response=updated)

    # --------------------------------------------------------
    # Navigation
    # --------------------------------------------------------
    async def advance(self) -> bool:
        """Move forward one step, or submit from the Review step.

        Returns True when a transition fired. A blocked step, a finished
        survey and a submission already in flight all leave the state as is.
        """
        with self._correlated():
            wizard = self._wizard
            if wizard.submitted or wizard.is_saving:
                return False

            result = validate_step(self._response, wizard.step)
            if not result.is_valid:
                log_with_context(
                    logger,
                    logging.DEBUG,
                    "Advance blocked by validation",
                    step=wizard.step,
                    fields=[err["field"] for err in result.errors],
                )
                return False

            if not wizard.is_last_step:
                self._commit(wizard=wizard.model_copy(update={"step": wizard.step + 1}))
                return True

            return await self._submit()

    def back(self) -> bool:
        wizard = self._wizard
        if wizard.submitted or wizard.is_saving or wizard.step == FIRST_STEP:
            return False
        self._commit(wizard=wizard.model_copy(update={"step": wizard.step - 1}))
        return True

    def reset(self) -> bool:
        """Start a fresh response after a successful submission."""
        if not self._wizard.submitted:
            return False
        self.last_submission_error = None
        self._commit(response=SurveyResponse(), wizard=WizardState())
        return True

    # --------------------------------------------------------
    # Submission
    # --------------------------------------------------------
    async def _submit(self) -> bool:
        response = self._response
        score = overall_score(response.topics)

        self.last_submission_error = None
        self._commit(wizard=self._wizard.model_copy(update={"is_saving": True, "save_error": ""}))

        saved = False
        save_error = ""
        try:
            await self._collector.submit(response, score)
            saved = True
        except SubmissionError as exc:
            self.last_submission_error = exc
            save_error = exc.user_message
            logger.warning(
                "Survey submission failed",
                extra={"error_type": type(exc).__name__, "detail": exc.message},
            )
        finally:
            self._commit(
                wizard=self._wizard.model_copy(
                    update={"is_saving": False, "submitted": saved, "save_error": save_error}
                )
            )

        if saved:
            logger.info("Survey submitted", extra={"overall_score": score})
        return saved
