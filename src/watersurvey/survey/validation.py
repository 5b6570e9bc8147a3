from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List

from watersurvey.survey.models import SurveyResponse, WizardStep

PHONE_PATTERN = re.compile(r"^\+?[0-9\s()-]{7,}$")
ACCOUNT_PATTERN = re.compile(r"^[A-Za-z0-9-]{5,}$")

MIN_FEEDBACK_LENGTH = 5

PHONE_HINT = "Enter at least 7 digits."
ACCOUNT_HINT = "Use at least 5 letters or numbers."


@dataclass
class ValidationResult:
    """
    Outcome of validating one wizard step.

    - default is_valid=True
    - add_error() flips is_valid=False and appends {"field": ..., "message": ...}
    - errors property returns a COPY
    """

    is_valid: bool = True
    _errors: List[Dict[str, str]] = field(default_factory=list, repr=False)

    def add_error(self, field: str, message: str) -> None:
        self.is_valid = False
        self._errors.append({"field": field, "message": message})

    @property
    def errors(self) -> List[Dict[str, str]]:
        return list(self._errors)


def _is_blank(value: str) -> bool:
    return value.strip() == ""


def is_phone_valid(value: str) -> bool:
    """Phone is optional; when given it needs 7+ digits/spaces/()- with an optional leading +."""
    value = value.strip()
    return not value or PHONE_PATTERN.fullmatch(value) is not None


def is_account_valid(value: str) -> bool:
    value = value.strip()
    return not value or ACCOUNT_PATTERN.fullmatch(value) is not None


def _validate_account_step(response: SurveyResponse, result: ValidationResult) -> None:
    if _is_blank(response.name):
        result.add_error("name", "Name is required")
    if _is_blank(response.email):
        result.add_error("email", "Email is required")
    if not is_phone_valid(response.phone):
        result.add_error("phone", PHONE_HINT)
    if not is_account_valid(response.account_number):
        result.add_error("accountNumber", ACCOUNT_HINT)


def _validate_comments_step(response: SurveyResponse, result: ValidationResult) -> None:
    if len(response.feedback.strip()) < MIN_FEEDBACK_LENGTH:
        result.add_error(
            "feedback",
            f"Feedback must be at least {MIN_FEEDBACK_LENGTH} characters",
        )


def validate_step(response: SurveyResponse, step: int) -> ValidationResult:
    """Validate the answers that gate leaving ``step``.

    Service, Ratings and Review always pass: every control there has a
    default that already satisfies the model constraints.
    """
    result = ValidationResult()

    try:
        current = WizardStep(step)
    except ValueError:
        result.add_error("step", f"Unknown step {step}")
        return result

    if current is WizardStep.ACCOUNT:
        _validate_account_step(response, result)
    elif current is WizardStep.COMMENTS:
        _validate_comments_step(response, result)

    return result


def can_advance(response: SurveyResponse, step: int) -> bool:
    return validate_step(response, step).is_valid


def field_hints(response: SurveyResponse) -> dict[str, str]:
    """Inline format hints for optional fields currently holding bad values."""
    hints: dict[str, str] = {}
    if not is_phone_valid(response.phone):
        hints["phone"] = PHONE_HINT
    if not is_account_valid(response.account_number):
        hints["accountNumber"] = ACCOUNT_HINT
    return hints
