"""
In-memory collector for tests and local runs.

Records every payload it receives and can be told to fail with any
SubmissionError, or to hold each submission until released.
"""

import threading
from typing import Any

from watersurvey.collector.interface import (
    CollectorReceipt,
    SubmissionError,
    SurveyCollector,
)
from watersurvey.collector.payload import build_payload
from watersurvey.shared.logging import get_logger
from watersurvey.survey.models import SurveyResponse

logger = get_logger(__name__)


class InMemoryCollector(SurveyCollector):
    """Collector keeping submitted payloads in a list."""

    def __init__(self) -> None:
        self._payloads: list[dict[str, Any]] = []
        self._error: SubmissionError | None = None
        self._gate: threading.Event | None = None
        self._lock = threading.Lock()

    @property
    def payloads(self) -> list[dict[str, Any]]:
        with self._lock:
            return list(self._payloads)

    @property
    def call_count(self) -> int:
        with self._lock:
            return len(self._payloads)

    def reset(self) -> None:
        with self._lock:
            self._payloads.clear()
        self._error = None
        self.release()

    def configure_failure(self, error: SubmissionError | None) -> None:
        """Fail every following submission with ``error`` (None restores success)."""
        self._error = error

    def hold(self) -> None:
        """Block submissions until release() is called."""
        self._gate = threading.Event()

    def release(self) -> None:
        gate, self._gate = self._gate, None
        if gate is not None:
            gate.set()

    def submit_sync(
        self,
        response: SurveyResponse,
        overall_score: float,
    ) -> CollectorReceipt:
        payload = build_payload(response, overall_score)
        with self._lock:
            self._payloads.append(payload)

        gate = self._gate
        if gate is not None:
            gate.wait(timeout=5)

        if self._error is not None:
            logger.info("Mock collector failing submission", extra={"error": type(self._error).__name__})
            raise self._error

        logger.info("Mock collector stored submission", extra={"count": self.call_count})
        return CollectorReceipt(status_code=200, body=None, payload=payload)
