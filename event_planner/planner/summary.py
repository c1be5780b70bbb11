from __future__ import annotations

from typing import Any, Iterable, Mapping

from event_planner.planner.errors import TimelineValidationError
from event_planner.planner.pricing import round_currency
from event_planner.planner.schema import TimelineSummary
from event_planner.planner.validation import validate_budget


def summarize_timeline(
    tasks: Iterable[Mapping[str, Any]], budget: Any
) -> TimelineSummary:
    """Progress and spend totals for a (possibly user-edited) task list.

    ``actual_cost`` is not produced by the generator; callers add it when a
    vendor has been paid.
    """
    budget = validate_budget(budget)

    total_tasks = 0
    completed_tasks = 0
    estimated = 0.0
    recommended = 0.0
    actual = 0.0
    for idx, task in enumerate(tasks):
        if not isinstance(task, Mapping):
            raise TimelineValidationError(f"tasks[{idx}] must be an object")
        total_tasks += 1
        if task.get("completed") is True:
            completed_tasks += 1

        task_estimate = _read_cost(task, "estimated_cost", idx)
        estimated += task_estimate
        if task.get("recommended_cost") is None:
            recommended += task_estimate
        else:
            recommended += _read_cost(task, "recommended_cost", idx)
        actual += _read_cost(task, "actual_cost", idx)

    progress = round(completed_tasks / total_tasks * 100, 1) if total_tasks else 0.0
    total_estimated = round_currency(estimated)
    return {
        "total_tasks": total_tasks,
        "completed_tasks": completed_tasks,
        "progress": progress,
        "total_estimated_cost": total_estimated,
        "total_recommended_cost": round_currency(recommended),
        "total_actual_cost": actual,
        "remaining_budget": budget - actual,
        "over_budget": total_estimated > budget,
    }


def _read_cost(task: Mapping[str, Any], key: str, idx: int) -> float:
    value = task.get(key)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise TimelineValidationError(f"tasks[{idx}].{key} must be a non-negative number")
    return float(value)
