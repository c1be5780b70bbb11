from __future__ import annotations

from typing import Any

from event_planner.planner.catalog import RuleCatalog, default_catalog
from event_planner.planner.matching import classify_event_type
from event_planner.planner.pricing import estimate_category_cost
from event_planner.planner.schema import MISCELLANEOUS_CATEGORY, CostBreakdownItem
from event_planner.planner.validation import (
    validate_budget,
    validate_event_type,
    validate_guest_count,
)


def generate_cost_breakdown(
    budget: Any,
    guest_count: Any,
    event_type: Any,
    *,
    catalog: RuleCatalog | None = None,
) -> list[CostBreakdownItem]:
    """Split the budget into category allocations whose percentages total 100."""
    budget = validate_budget(budget)
    guest_count = validate_guest_count(guest_count)
    event_type = validate_event_type(event_type)
    catalog = catalog or default_catalog()

    family = classify_event_type(catalog, event_type)
    return build_cost_breakdown(catalog, budget, guest_count, family)


def build_cost_breakdown(
    catalog: RuleCatalog,
    budget: float,
    guest_count: int,
    family: str | None,
) -> list[CostBreakdownItem]:
    pricing = catalog.pricing
    allocations = [
        (item.category, item.percentage_for(family), item.description)
        for item in pricing.breakdown
    ]
    total = sum(percentage for _, percentage, _ in allocations)
    if total < 100:
        allocations.append(
            (MISCELLANEOUS_CATEGORY, 100 - total, pricing.miscellaneous_description)
        )

    items: list[CostBreakdownItem] = []
    for category, percentage, description in allocations:
        estimate = estimate_category_cost(
            pricing,
            category,
            budget * percentage / 100,
            guest_count=guest_count,
            family=family,
        )
        items.append(
            {
                "category": category,
                "percentage": percentage,
                "estimated_cost": estimate.estimated,
                "recommended_cost": estimate.recommended,
                "description": description,
            }
        )
    return items
