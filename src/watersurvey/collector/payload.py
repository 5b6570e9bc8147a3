"""
Outbound payload for the collector.

One flat JSON object per response: the answers under their camelCase
names, the one-decimal overall score as text and the send timestamp.
"""

from datetime import datetime, timezone
from typing import Any

from watersurvey.survey.metrics import format_score
from watersurvey.survey.models import SurveyResponse

PAYLOAD_KEYS = (
    "name",
    "email",
    "phone",
    "accountNumber",
    "zone",
    "purpose",
    "experience",
    "nps",
    "topics",
    "feedback",
    "followUp",
    "overallScore",
    "submittedAt",
)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a ``Z`` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_payload(
    response: SurveyResponse,
    overall_score: float,
    submitted_at: datetime | None = None,
) -> dict[str, Any]:
    payload = response.model_dump(mode="json", by_alias=True)
    payload["overallScore"] = format_score(overall_score)
    payload["submittedAt"] = format_timestamp(submitted_at or datetime.now(timezone.utc))
    return payload
