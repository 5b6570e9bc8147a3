"""
Collector interface definition.

A collector persists one finished survey response (one spreadsheet row in
the reference deployment). Exactly one exchange happens per submit call;
retries are left to the respondent.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import anyio

from watersurvey.survey.models import SurveyResponse

GENERIC_SAVE_ERROR = "We couldn't save your response. Please try again."
MISSING_COLLECTOR_ERROR = "Missing Google Sheets script URL."
DEFAULT_COLLECTOR_ERROR = "Save failed"


@dataclass(frozen=True)
class CollectorReceipt:
    """Successful submission. ``body`` is None when the reply was not JSON."""

    status_code: int
    body: Any = None
    payload: dict[str, Any] = field(default_factory=dict)


class SubmissionError(Exception):
    """Base exception for submission failures.

    ``message`` is the diagnostic detail; ``user_message`` is what the
    respondent gets to see.
    """

    user_message: str = GENERIC_SAVE_ERROR

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class ConfigurationError(SubmissionError):
    """No usable collector URL; nothing was sent."""

    user_message = MISSING_COLLECTOR_ERROR


class NetworkError(SubmissionError):
    """Transport failure or non-success HTTP status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.status_code = status_code


class ApplicationError(SubmissionError):
    """The collector answered but flagged the save as failed."""

    def __init__(
        self,
        collector_message: str | None = None,
        response_body: Any = None,
    ) -> None:
        super().__init__(collector_message or DEFAULT_COLLECTOR_ERROR)
        self.collector_message = collector_message
        self.response_body = response_body


class SurveyCollector(ABC):
    """Abstract interface for collectors.

    ``submit_sync`` is the source of truth; ``submit`` runs it in a worker
    thread so the event loop stays free while the request is in flight.
    """

    async def submit(
        self,
        response: SurveyResponse,
        overall_score: float,
    ) -> CollectorReceipt:
        return await anyio.to_thread.run_sync(self.submit_sync, response, overall_score)

    @abstractmethod
    def submit_sync(
        self,
        response: SurveyResponse,
        overall_score: float,
    ) -> CollectorReceipt:
        """Send one response. Raises SubmissionError on any failure."""
        ...

    def close(self) -> None:
        """Release transport resources, if any."""
