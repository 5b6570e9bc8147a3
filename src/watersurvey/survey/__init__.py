"""
Survey wizard core: answers, step validation, derived metrics and the
state store driving the five-step flow.

The store lives in ``watersurvey.survey.store``; it depends on the
collector package and is not re-exported here.
"""

from watersurvey.survey.metrics import format_score, overall_score, progress_percent
from watersurvey.survey.models import (
    ContactPurpose,
    Experience,
    ServiceZone,
    SurveyResponse,
    Topic,
    WizardPhase,
    WizardState,
    WizardStep,
)
from watersurvey.survey.validation import (
    ValidationResult,
    can_advance,
    field_hints,
    is_account_valid,
    is_phone_valid,
    validate_step,
)
from watersurvey.survey.view import SurveyView, build_view

__all__ = [
    "ContactPurpose",
    "Experience",
    "ServiceZone",
    "SurveyResponse",
    "SurveyView",
    "Topic",
    "ValidationResult",
    "WizardPhase",
    "WizardState",
    "WizardStep",
    "build_view",
    "can_advance",
    "field_hints",
    "format_score",
    "is_account_valid",
    "is_phone_valid",
    "overall_score",
    "progress_percent",
    "validate_step",
]
