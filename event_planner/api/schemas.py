from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class TimelineCreateRequest(BaseModel):
    event_type: str
    event_date: str
    guest_count: int
    budget: float
    answers: dict[str, bool | str | list[str]] = Field(default_factory=dict)


class CostBreakdownRequest(BaseModel):
    event_type: str
    guest_count: int
    budget: float


class EventTaskResponse(BaseModel):
    id: str
    task: str
    deadline: str
    estimated_cost: int
    recommended_cost: int | None
    completed: bool
    suggested_vendor_category: str | None
    description: str | None


class CostBreakdownItemResponse(BaseModel):
    category: str
    percentage: int
    estimated_cost: int
    recommended_cost: int
    description: str


class TimelineSummaryResponse(BaseModel):
    total_tasks: int
    completed_tasks: int
    progress: float
    total_estimated_cost: int
    total_recommended_cost: int
    total_actual_cost: float
    remaining_budget: float
    over_budget: bool


class TimelineResponse(BaseModel):
    tasks: list[EventTaskResponse]
    cost_breakdown: list[CostBreakdownItemResponse]
    summary: TimelineSummaryResponse


class TaskProgressItem(BaseModel):
    id: str | None = None
    completed: bool = False
    estimated_cost: float = 0
    recommended_cost: float | None = None
    actual_cost: float | None = None


class TimelineSummaryRequest(BaseModel):
    tasks: list[TaskProgressItem]
    budget: float


class QuestionResponse(BaseModel):
    id: str
    question: str
    options: list[str]
    multi_select: bool = False


class EventTypesResponse(BaseModel):
    event_types: list[str]


class ErrorEnvelope(BaseModel):
    error: dict[str, Any]
