"""
Request/response schemas for the survey API.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FieldUpdateRequest(_CamelModel):
    """Replace one top-level answer."""

    field: str = Field(..., min_length=1, description="Field name, camelCase or snake_case")
    value: Any = Field(..., description="New value for the field")


class TopicUpdateRequest(_CamelModel):
    value: StrictInt = Field(..., description="Rating from 1 to 5")


class OptionItem(_CamelModel):
    id: str
    label: str


class StepItem(_CamelModel):
    index: int
    label: str


class SurveyOptionsResponse(_CamelModel):
    """Choices the rendering surface offers for each answer."""

    zones: list[str]
    purposes: list[str]
    experiences: list[OptionItem]
    topics: list[OptionItem]
    steps: list[StepItem]
    nps_range: tuple[int, int]
    rating_range: tuple[int, int]
