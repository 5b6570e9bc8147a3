"""
API router for survey sessions.

The rendering surface drives one session per respondent through these
endpoints; every call answers with the session's current view.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status

from watersurvey.api.schemas import (
    FieldUpdateRequest,
    OptionItem,
    StepItem,
    SurveyOptionsResponse,
    TopicUpdateRequest,
)
from watersurvey.api.sessions import SessionRegistry
from watersurvey.shared.logging import get_logger
from watersurvey.survey.models import (
    EXPERIENCE_LABELS,
    NPS_MAX,
    NPS_MIN,
    RATING_MAX,
    RATING_MIN,
    STEP_LABELS,
    TOPIC_LABELS,
    ContactPurpose,
    ServiceZone,
)
from watersurvey.survey.store import FormStateStore
from watersurvey.survey.view import SurveyView

logger = get_logger(__name__)

router = APIRouter(prefix="/api/surveys", tags=["surveys"])


def get_session_registry(request: Request) -> SessionRegistry:
    """Dependency for the application's session registry."""
    return request.app.state.sessions


def get_store(
    session_id: str,
    registry: Annotated[SessionRegistry, Depends(get_session_registry)],
) -> FormStateStore:
    return registry.get(session_id)


@router.get(
    "/options",
    response_model=SurveyOptionsResponse,
    summary="List answer choices",
)
async def get_options() -> SurveyOptionsResponse:
    return SurveyOptionsResponse(
        zones=[zone.value for zone in ServiceZone],
        purposes=[purpose.value for purpose in ContactPurpose],
        experiences=[OptionItem(id=e.value, label=label) for e, label in EXPERIENCE_LABELS.items()],
        topics=[OptionItem(id=t.value, label=label) for t, label in TOPIC_LABELS.items()],
        steps=[StepItem(index=int(s), label=label) for s, label in STEP_LABELS.items()],
        nps_range=(NPS_MIN, NPS_MAX),
        rating_range=(RATING_MIN, RATING_MAX),
    )


@router.post(
    "",
    response_model=SurveyView,
    status_code=status.HTTP_201_CREATED,
    summary="Start a survey session",
)
async def create_session(
    registry: Annotated[SessionRegistry, Depends(get_session_registry)],
) -> SurveyView:
    return registry.create().view()


@router.get("/{session_id}", response_model=SurveyView)
async def get_session(
    store: Annotated[FormStateStore, Depends(get_store)],
) -> SurveyView:
    return store.view()


@router.patch(
    "/{session_id}/fields",
    response_model=SurveyView,
    summary="Replace one answer",
)
async def update_field(
    body: FieldUpdateRequest,
    store: Annotated[FormStateStore, Depends(get_store)],
) -> SurveyView:
    return store.update_field(body.field, body.value)


@router.put(
    "/{session_id}/topics/{topic}",
    response_model=SurveyView,
    summary="Rate one service topic",
)
async def update_topic(
    topic: str,
    body: TopicUpdateRequest,
    store: Annotated[FormStateStore, Depends(get_store)],
) -> SurveyView:
    return store.update_topic(topic, body.value)


@router.post(
    "/{session_id}/advance",
    response_model=SurveyView,
    summary="Continue, or submit from the Review step",
    description="A blocked step or an in-flight submission leaves the view unchanged.",
)
async def advance(
    store: Annotated[FormStateStore, Depends(get_store)],
) -> SurveyView:
    await store.advance()
    return store.view()


@router.post("/{session_id}/back", response_model=SurveyView)
async def back(
    store: Annotated[FormStateStore, Depends(get_store)],
) -> SurveyView:
    store.back()
    return store.view()


@router.post(
    "/{session_id}/reset",
    response_model=SurveyView,
    summary="Start another response after submitting",
)
async def reset(
    store: Annotated[FormStateStore, Depends(get_store)],
) -> SurveyView:
    store.reset()
    return store.view()


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def discard_session(
    session_id: str,
    registry: Annotated[SessionRegistry, Depends(get_session_registry)],
) -> Response:
    registry.discard(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
