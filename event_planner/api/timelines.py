from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request

from event_planner.api.schemas import (
    CostBreakdownItemResponse,
    CostBreakdownRequest,
    ErrorEnvelope,
    EventTypesResponse,
    QuestionResponse,
    TimelineCreateRequest,
    TimelineResponse,
    TimelineSummaryRequest,
    TimelineSummaryResponse,
)
from event_planner.services.timeline_service import TimelineService

router = APIRouter(tags=["timelines"])

_ERROR_RESPONSES = {400: {"model": ErrorEnvelope}, 500: {"model": ErrorEnvelope}}


def get_timeline_service(request: Request) -> TimelineService:
    return request.app.state.timeline_service


@router.get("/event-types", response_model=EventTypesResponse)
def list_event_types(
    service: TimelineService = Depends(get_timeline_service),
) -> EventTypesResponse:
    return EventTypesResponse(event_types=service.event_types())


@router.get("/questions", response_model=list[QuestionResponse])
def list_questions(
    event_type: str = Query("", description="Event type label, free text"),
    service: TimelineService = Depends(get_timeline_service),
) -> list[QuestionResponse]:
    return [QuestionResponse(**question) for question in service.questions(event_type)]


@router.post("/timelines", response_model=TimelineResponse, responses=_ERROR_RESPONSES)
def create_timeline(
    payload: TimelineCreateRequest,
    service: TimelineService = Depends(get_timeline_service),
) -> TimelineResponse:
    result = service.create_timeline(
        event_type=payload.event_type,
        event_date=payload.event_date,
        guest_count=payload.guest_count,
        budget=payload.budget,
        answers=payload.answers,
    )
    return TimelineResponse.model_validate(result)


@router.post(
    "/timelines/summary",
    response_model=TimelineSummaryResponse,
    responses=_ERROR_RESPONSES,
)
def summarize_timeline(
    payload: TimelineSummaryRequest,
    service: TimelineService = Depends(get_timeline_service),
) -> TimelineSummaryResponse:
    summary = service.summarize(
        [task.model_dump() for task in payload.tasks], payload.budget
    )
    return TimelineSummaryResponse.model_validate(summary)


@router.post(
    "/cost-breakdown",
    response_model=list[CostBreakdownItemResponse],
    responses=_ERROR_RESPONSES,
)
def create_cost_breakdown(
    payload: CostBreakdownRequest,
    service: TimelineService = Depends(get_timeline_service),
) -> list[CostBreakdownItemResponse]:
    items = service.cost_breakdown(
        event_type=payload.event_type,
        guest_count=payload.guest_count,
        budget=payload.budget,
    )
    return [CostBreakdownItemResponse.model_validate(item) for item in items]
