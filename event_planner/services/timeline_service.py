from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from event_planner.planner.breakdown import generate_cost_breakdown
from event_planner.planner.engine import (
    generate_timeline,
    get_questions_for_event_type,
    list_event_types,
)
from event_planner.planner.errors import CatalogError, TimelineValidationError
from event_planner.planner.matching import classify_event_type
from event_planner.planner.schema import CostBreakdownItem, Question, TimelineSummary
from event_planner.planner.summary import summarize_timeline
from event_planner.services.catalog_repository import CatalogRepository
from event_planner.services.errors import ApiError

logger = logging.getLogger(__name__)


class TimelineService:
    def __init__(self, catalog_repository: CatalogRepository | None = None) -> None:
        self.catalog_repository = catalog_repository or CatalogRepository()

    def create_timeline(
        self,
        *,
        event_type: str,
        event_date: str,
        guest_count: int,
        budget: float,
        answers: Mapping[str, Any],
    ) -> dict[str, Any]:
        catalog = self.catalog_repository.load()
        try:
            timeline = generate_timeline(
                event_type,
                event_date,
                guest_count,
                budget,
                answers,
                catalog=catalog,
            )
            summary = summarize_timeline(timeline["tasks"], budget)
        except (TimelineValidationError, CatalogError) as exc:
            raise self._translate(exc, event_type=event_type) from exc

        logger.info(
            "timeline_generated",
            extra={
                "event_family": classify_event_type(catalog, event_type),
                "task_count": len(timeline["tasks"]),
                "guest_count": guest_count,
            },
        )
        return {**timeline, "summary": summary}

    def cost_breakdown(
        self, *, event_type: str, guest_count: int, budget: float
    ) -> list[CostBreakdownItem]:
        catalog = self.catalog_repository.load()
        try:
            return generate_cost_breakdown(
                budget, guest_count, event_type, catalog=catalog
            )
        except (TimelineValidationError, CatalogError) as exc:
            raise self._translate(exc, event_type=event_type) from exc

    def questions(self, event_type: str) -> list[Question]:
        return get_questions_for_event_type(
            event_type, catalog=self.catalog_repository.load()
        )

    def event_types(self) -> list[str]:
        return list_event_types(catalog=self.catalog_repository.load())

    def summarize(
        self, tasks: Iterable[Mapping[str, Any]], budget: float
    ) -> TimelineSummary:
        try:
            return summarize_timeline(tasks, budget)
        except TimelineValidationError as exc:
            raise self._translate(exc, event_type=None) from exc

    @staticmethod
    def _translate(exc: Exception, *, event_type: str | None) -> ApiError:
        if isinstance(exc, CatalogError):
            logger.error("catalog_rule_failed", extra={"event_type": event_type})
            return ApiError(status_code=500, code="CATALOG_INVALID", message=str(exc))

        logger.warning(
            "timeline_rejected",
            extra={"event_type": event_type, "reason": str(exc)},
        )
        return ApiError(
            status_code=400,
            code="TIMELINE_INPUT_INVALID",
            message=str(exc),
        )
