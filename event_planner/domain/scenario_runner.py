from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from event_planner.planner.catalog import RuleCatalog
from event_planner.planner.engine import generate_timeline
from event_planner.planner.schema import CostBreakdownItem, EventTask

_REQUIRED_INPUT_KEYS = ("event_type", "event_date", "guest_count", "budget")


@dataclass(frozen=True)
class ScenarioResult:
    tasks_by_title: dict[str, EventTask]
    ordered_titles: list[str]
    breakdown_by_category: dict[str, CostBreakdownItem]


def load_testcase(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        payload = yaml.safe_load(f)

    if not isinstance(payload, dict):
        raise ValueError(f"testcase at {path} must be a YAML mapping")

    inputs = payload.get("input")
    if not isinstance(inputs, dict):
        raise ValueError(f"testcase at {path} needs an 'input' mapping")
    missing = [key for key in _REQUIRED_INPUT_KEYS if key not in inputs]
    if missing:
        raise ValueError(f"testcase at {path} is missing inputs {missing}")
    return payload


def run_scenario(
    testcase: dict[str, Any], catalog: RuleCatalog | None = None
) -> ScenarioResult:
    inputs = testcase["input"]
    timeline = generate_timeline(
        inputs["event_type"],
        str(inputs["event_date"]),
        inputs["guest_count"],
        inputs["budget"],
        inputs.get("answers") or {},
        catalog=catalog,
    )

    return ScenarioResult(
        tasks_by_title={task["task"]: task for task in timeline["tasks"]},
        ordered_titles=[task["task"] for task in timeline["tasks"]],
        breakdown_by_category={
            item["category"]: item for item in timeline["cost_breakdown"]
        },
    )


def check_expectations(result: ScenarioResult, expect: dict[str, Any]) -> list[str]:
    """Compare a scenario result with its ``expect`` block; returns mismatches."""
    problems: list[str] = []

    for title in expect.get("tasks_present", []):
        if title not in result.tasks_by_title:
            problems.append(f"missing task {title!r}")

    for title in expect.get("tasks_absent", []):
        if title in result.tasks_by_title:
            problems.append(f"unexpected task {title!r}")

    task_count = expect.get("task_count")
    if task_count is not None and task_count != len(result.ordered_titles):
        problems.append(f"task_count {len(result.ordered_titles)} != {task_count}")

    for title, due in expect.get("deadlines", {}).items():
        task = result.tasks_by_title.get(title)
        got = task["deadline"] if task else None
        if got != str(due):
            problems.append(f"deadline of {title!r} is {got}, expected {due}")

    for title, costs in expect.get("task_costs", {}).items():
        task = result.tasks_by_title.get(title)
        for key, value in costs.items():
            got = task.get(key) if task else None
            if got != value:
                problems.append(f"{key} of {title!r} is {got}, expected {value}")

    for category, fields in expect.get("breakdown", {}).items():
        item = result.breakdown_by_category.get(category)
        if item is None:
            problems.append(f"missing breakdown category {category!r}")
            continue
        for key, value in fields.items():
            if item.get(key) != value:
                problems.append(
                    f"breakdown {category!r}.{key} is {item.get(key)}, expected {value}"
                )

    for category in expect.get("breakdown_absent", []):
        if category in result.breakdown_by_category:
            problems.append(f"unexpected breakdown category {category!r}")

    return problems
