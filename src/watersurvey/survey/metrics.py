"""
Derived metrics recomputed from the survey state on every render.

Nothing here is stored: the overall score and progress are always derived
from the current SurveyResponse / WizardState.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal

from watersurvey.survey.models import TOTAL_STEPS

_ONE_DECIMAL = Decimal("0.1")


def overall_score(topics: Mapping[object, int]) -> float:
    """Mean of the topic ratings, rounded half-up to one decimal.

    Half-up matches the one-decimal text shown to respondents (4.25 -> 4.3),
    which plain ``round`` would turn into 4.2.
    """
    values = list(topics.values())
    if not values:
        raise ValueError("at least one topic rating is required")
    mean = Decimal(sum(values)) / Decimal(len(values))
    return float(mean.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def format_score(score: float) -> str:
    return f"{score:.1f}"


def progress_percent(step: int, total_steps: int = TOTAL_STEPS) -> float:
    """Share of the wizard reached, counting the current step as reached."""
    return (step + 1) / total_steps * 100
