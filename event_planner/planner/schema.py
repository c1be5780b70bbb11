from __future__ import annotations

from enum import Enum
from typing import TypedDict


class VendorCategory(str, Enum):
    venues = "Venues"
    catering = "Catering & Sweets"
    entertainment = "Entertainment"
    lighting_sound = "Lighting & Sound"
    photography = "Photography & Videography"
    decoration = "Decoration"
    beauty = "Beauty & Grooming"
    transportation = "Transportation"
    invitations = "Invitations & Printables"
    rentals = "Rentals & Furniture"
    security = "Security and Crowd Control"


MISCELLANEOUS_CATEGORY = "Miscellaneous"


class EventTask(TypedDict):
    id: str
    task: str
    deadline: str
    estimated_cost: int
    recommended_cost: int | None
    completed: bool
    suggested_vendor_category: str | None
    description: str | None


class CostBreakdownItem(TypedDict):
    category: str
    percentage: int
    estimated_cost: int
    recommended_cost: int
    description: str


class Timeline(TypedDict):
    tasks: list[EventTask]
    cost_breakdown: list[CostBreakdownItem]


class Question(TypedDict, total=False):
    id: str
    question: str
    options: list[str]
    multi_select: bool


class TimelineSummary(TypedDict):
    total_tasks: int
    completed_tasks: int
    progress: float
    total_estimated_cost: int
    total_recommended_cost: int
    total_actual_cost: float
    remaining_budget: float
    over_budget: bool

