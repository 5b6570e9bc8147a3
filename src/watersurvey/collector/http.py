"""
HTTP collector adapter.

Posts the response as JSON to a spreadsheet script endpoint. The endpoint
may answer with a JSON status object, with something that is not JSON at
all, or with nothing: only an explicit ``{"status": "error"}`` counts as
an application failure.
"""

from __future__ import annotations

from typing import Any

import httpx

from watersurvey.collector.interface import (
    ApplicationError,
    CollectorReceipt,
    ConfigurationError,
    NetworkError,
    SurveyCollector,
)
from watersurvey.collector.payload import build_payload
from watersurvey.config import Settings, get_settings
from watersurvey.shared.logging import get_logger
from watersurvey.survey.models import SurveyResponse

logger = get_logger(__name__)

ERROR_STATUS = "error"


def parse_collector_body(response: httpx.Response) -> Any:
    """Parsed JSON body, or None when the body is empty or not JSON."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


class HttpCollector(SurveyCollector):
    """Spreadsheet-script collector over httpx.

    The client follows redirects: script endpoints hand the POST result
    back through a redirect to a content URL.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._http_client = http_client
        self._owns_client = http_client is None

    def _get_client(self) -> httpx.Client:
        if self._http_client is None:
            self._http_client = httpx.Client(
                timeout=httpx.Timeout(self._settings.collector_timeout_seconds),
                follow_redirects=True,
            )
        return self._http_client

    def close(self) -> None:
        if self._owns_client and self._http_client is not None:
            self._http_client.close()
            self._http_client = None

    def submit_sync(
        self,
        response: SurveyResponse,
        overall_score: float,
    ) -> CollectorReceipt:
        if not self._settings.collector_configured:
            raise ConfigurationError("Collector URL is missing or still a placeholder")

        url = self._settings.collector_url
        payload = build_payload(response, overall_score)

        logger.info(
            "Submitting survey response",
            extra={
                "zone": payload["zone"],
                "overall_score": payload["overallScore"],
                "submitted_at": payload["submittedAt"],
            },
        )

        try:
            http_response = self._get_client().post(
                url,
                json=payload,
                headers={"Content-Type": "application/json"},
            )
        except httpx.InvalidURL as e:
            # Not an HTTPError subclass
            logger.error("Collector URL could not be parsed", extra={"error": str(e)})
            raise ConfigurationError(f"Invalid collector URL: {e!s}", cause=e) from e
        except httpx.HTTPError as e:
            logger.exception("HTTP error during survey submission")
            raise NetworkError(f"HTTP error: {e!s}", cause=e) from e

        if not http_response.is_success:
            logger.error(
                "Collector rejected submission",
                extra={"status_code": http_response.status_code},
            )
            raise NetworkError(
                f"Collector returned HTTP {http_response.status_code}",
                status_code=http_response.status_code,
            )

        body = parse_collector_body(http_response)
        if isinstance(body, dict) and body.get("status") == ERROR_STATUS:
            logger.error(
                "Collector reported a failed save",
                extra={"collector_message": body.get("message")},
            )
            raise ApplicationError(body.get("message") or None, response_body=body)

        logger.info(
            "Survey response saved",
            extra={"status_code": http_response.status_code, "structured": body is not None},
        )
        return CollectorReceipt(
            status_code=http_response.status_code,
            body=body,
            payload=payload,
        )
