"""
Render snapshot of one survey session.

Everything a rendering surface needs in one object: the raw state plus
the derived score, progress and validity flags, recomputed on each build.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from watersurvey.survey.metrics import format_score, overall_score, progress_percent
from watersurvey.survey.models import TOTAL_STEPS, SurveyResponse, WizardState
from watersurvey.survey.validation import can_advance, field_hints, is_account_valid, is_phone_valid


class SurveyView(BaseModel):
    """Derived, read-only view of a session."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    session_id: str | None = None
    response: SurveyResponse
    wizard: WizardState
    step_label: str
    total_steps: int = TOTAL_STEPS
    overall_score: str
    progress_percent: float
    can_advance: bool
    phone_valid: bool
    account_valid: bool
    field_hints: dict[str, str] = Field(default_factory=dict)


def build_view(
    response: SurveyResponse,
    wizard: WizardState,
    session_id: str | None = None,
) -> SurveyView:
    return SurveyView(
        session_id=session_id,
        response=response,
        wizard=wizard,
        step_label=wizard.step_label,
        overall_score=format_score(overall_score(response.topics)),
        progress_percent=progress_percent(wizard.step),
        can_advance=can_advance(response, wizard.step),
        phone_valid=is_phone_valid(response.phone),
        account_valid=is_account_valid(response.account_number),
        field_hints=field_hints(response),
    )
