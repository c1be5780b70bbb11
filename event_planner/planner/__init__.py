from event_planner.planner.breakdown import generate_cost_breakdown
from event_planner.planner.catalog import RuleCatalog, default_catalog, load_catalog
from event_planner.planner.engine import (
    generate_timeline,
    get_questions_for_event_type,
    list_event_types,
)
from event_planner.planner.errors import (
    CatalogError,
    TimelineError,
    TimelineValidationError,
)
from event_planner.planner.summary import summarize_timeline

__all__ = [
    "generate_timeline",
    "generate_cost_breakdown",
    "get_questions_for_event_type",
    "list_event_types",
    "summarize_timeline",
    "RuleCatalog",
    "default_catalog",
    "load_catalog",
    "TimelineError",
    "TimelineValidationError",
    "CatalogError",
]
