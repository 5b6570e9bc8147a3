"""
Domain models for the satisfaction survey.

SurveyResponse holds the respondent's answers, WizardState the position in
the five-step wizard. Both are frozen: every change builds a new instance,
so a rejected update can never leave a half-applied state behind.

Python attributes are snake_case; the JSON names (used on the wire and by
the rendering API) are the camelCase aliases.
"""
from __future__ import annotations

from enum import Enum, IntEnum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# ============================================================
# Enums and option labels
# ============================================================

class ServiceZone(str, Enum):
    NORTH = "North Zone"
    EAST = "East Zone"
    SOUTH = "South Zone"
    WEST = "West Zone"
    CENTRAL = "Central Zone"


class ContactPurpose(str, Enum):
    RESIDENTIAL = "Residential service"
    COMMERCIAL = "Commercial service"
    MOVE_IN_OUT = "Move-in or move-out"
    REPORT_ISSUE = "Reporting an issue"


class Experience(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    OK = "ok"
    POOR = "poor"


class Topic(str, Enum):
    """Service dimensions rated 1-5 on the Ratings step."""
    PRESSURE = "pressure"
    QUALITY = "quality"
    BILLING = "billing"
    SUPPORT = "support"


class WizardStep(IntEnum):
    ACCOUNT = 0
    SERVICE = 1
    RATINGS = 2
    COMMENTS = 3
    REVIEW = 4


class WizardPhase(str, Enum):
    """Coarse state of a survey session."""
    EDITING = "editing"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"


EXPERIENCE_LABELS: dict[Experience, str] = {
    Experience.EXCELLENT: "Excellent",
    Experience.GOOD: "Good",
    Experience.OK: "Okay",
    Experience.POOR: "Needs work",
}

TOPIC_LABELS: dict[Topic, str] = {
    Topic.PRESSURE: "Water pressure",
    Topic.QUALITY: "Water quality",
    Topic.BILLING: "Billing clarity",
    Topic.SUPPORT: "Customer support",
}

STEP_LABELS: dict[WizardStep, str] = {
    WizardStep.ACCOUNT: "Account",
    WizardStep.SERVICE: "Service",
    WizardStep.RATINGS: "Ratings",
    WizardStep.COMMENTS: "Comments",
    WizardStep.REVIEW: "Review",
}

TOTAL_STEPS = len(WizardStep)
FIRST_STEP = int(min(WizardStep))
LAST_STEP = int(max(WizardStep))

NPS_MIN, NPS_MAX = 1, 10
RATING_MIN, RATING_MAX = 1, 5
DEFAULT_NPS = 8
DEFAULT_RATING = 4

Rating = Annotated[int, Field(ge=RATING_MIN, le=RATING_MAX, strict=True)]


def _default_topics() -> dict[Topic, int]:
    return {topic: DEFAULT_RATING for topic in Topic}


# ============================================================
# Survey answers
# ============================================================

class SurveyResponse(BaseModel):
    """The answers of one respondent."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    name: str = ""
    email: str = ""
    phone: str = ""
    account_number: str = ""
    zone: ServiceZone = ServiceZone.CENTRAL
    purpose: ContactPurpose = ContactPurpose.RESIDENTIAL
    experience: Experience = Experience.GOOD
    nps: int = Field(default=DEFAULT_NPS, ge=NPS_MIN, le=NPS_MAX, strict=True)
    topics: dict[Topic, Rating] = Field(default_factory=_default_topics)
    feedback: str = ""
    follow_up: bool = Field(default=True, strict=True)

    @field_validator("topics")
    @classmethod
    def require_every_topic(cls, v: dict[Topic, int]) -> dict[Topic, int]:
        missing = [topic.value for topic in Topic if topic not in v]
        if missing:
            raise ValueError(f"missing topic ratings: {', '.join(missing)}")
        return v

    def with_field(self, field: str, value: object) -> "SurveyResponse":
        """Return a copy with one top-level field replaced, fully re-validated."""
        data = self.model_dump()
        data[field] = value
        return type(self).model_validate(data)

    def with_topic(self, topic: Topic, value: int) -> "SurveyResponse":
        topics = dict(self.topics)
        topics[topic] = value
        return self.with_field("topics", topics)


def resolve_field_name(field: str) -> str | None:
    """Map a snake_case attribute or camelCase alias to the attribute name."""
    for name, info in SurveyResponse.model_fields.items():
        if field == name or field == info.alias:
            return name
    return None


# ============================================================
# Wizard position
# ============================================================

class WizardState(BaseModel):
    """Where the respondent is in the wizard, plus submission status."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    step: int = Field(default=FIRST_STEP, ge=FIRST_STEP, le=LAST_STEP)
    submitted: bool = False
    is_saving: bool = False
    save_error: str = ""

    @property
    def phase(self) -> WizardPhase:
        if self.submitted:
            return WizardPhase.SUBMITTED
        if self.is_saving:
            return WizardPhase.SUBMITTING
        return WizardPhase.EDITING

    @property
    def step_label(self) -> str:
        return STEP_LABELS[WizardStep(self.step)]

    @property
    def is_last_step(self) -> bool:
        return self.step == LAST_STEP
