from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Mapping

from event_planner.planner.answers import normalize_answers
from event_planner.planner.breakdown import build_cost_breakdown
from event_planner.planner.catalog import (
    CostRule,
    RuleCatalog,
    TaskTemplate,
    default_catalog,
)
from event_planner.planner.deadlines import CalendarOffset, compute_deadline, parse_iso_date
from event_planner.planner.errors import TimelineError
from event_planner.planner.matching import classify_event_type, match_question_set
from event_planner.planner.pricing import estimate_task_cost
from event_planner.planner.rules import is_rule_satisfied
from event_planner.planner.schema import EventTask, Question, Timeline
from event_planner.planner.validation import (
    validate_budget,
    validate_event_type,
    validate_guest_count,
)

IdFactory = Callable[[], str]

_MAX_ID_ATTEMPTS = 100


@dataclass(frozen=True)
class _ResolvedTemplate:
    task: str
    offset: CalendarOffset
    cost: CostRule
    category: str | None
    description: str | None


def generate_timeline(
    event_type: Any,
    event_date: Any,
    guest_count: Any,
    budget: Any,
    answers: Mapping[str, Any] | None = None,
    *,
    catalog: RuleCatalog | None = None,
    id_factory: IdFactory | None = None,
) -> Timeline:
    event_type = validate_event_type(event_type)
    guest_count = validate_guest_count(guest_count)
    budget = validate_budget(budget)
    parsed_date = parse_iso_date(event_date)
    selected = normalize_answers(answers)
    catalog = catalog or default_catalog()
    id_factory = id_factory or _new_task_id

    family = classify_event_type(catalog, event_type)
    facts = build_facts(catalog, selected, family=family, guest_count=guest_count)

    templates = [
        template
        for template in (*catalog.base_tasks, *catalog.tasks_for_family(family))
        if is_rule_satisfied(template.when, facts)
    ]

    dated: list[tuple[date, EventTask]] = []
    for template in templates:
        resolved = resolve_template(template, facts)
        deadline = compute_deadline(parsed_date, resolved.offset)
        estimate = estimate_task_cost(
            catalog.pricing,
            resolved.cost,
            budget=budget,
            guest_count=guest_count,
            family=family,
        )
        dated.append(
            (
                deadline,
                {
                    "id": "",
                    "task": resolved.task,
                    "deadline": deadline.isoformat(),
                    "estimated_cost": estimate.estimated,
                    "recommended_cost": estimate.recommended,
                    "completed": False,
                    "suggested_vendor_category": resolved.category,
                    "description": resolved.description,
                },
            )
        )

    # sorted() is stable: equal deadlines keep base-before-family order.
    tasks = [task for _, task in sorted(dated, key=lambda pair: pair[0])]
    seen: set[str] = set()
    for task in tasks:
        task_id = id_factory()
        attempts = 1
        while task_id in seen:
            if attempts >= _MAX_ID_ATTEMPTS:
                raise TimelineError(
                    f"id_factory returned a duplicate id {attempts} times in a row"
                )
            task_id = id_factory()
            attempts += 1
        seen.add(task_id)
        task["id"] = task_id

    return {
        "tasks": tasks,
        "cost_breakdown": build_cost_breakdown(catalog, budget, guest_count, family),
    }


def get_questions_for_event_type(
    event_type: str, *, catalog: RuleCatalog | None = None
) -> list[Question]:
    catalog = catalog or default_catalog()
    if not isinstance(event_type, str):
        event_type = ""
    return [question.to_dict() for question in match_question_set(catalog, event_type)]


def build_facts(
    catalog: RuleCatalog,
    selected: frozenset[str],
    *,
    family: str | None,
    guest_count: int,
) -> dict[str, Any]:
    facts: dict[str, Any] = {option: True for option in selected}
    facts.update(
        {
            "event_family": family,
            "is_large_event": catalog.pricing.is_large_event(guest_count),
            "guest_count": guest_count,
        }
    )
    return facts


def resolve_template(template: TaskTemplate, facts: Mapping[str, Any]) -> _ResolvedTemplate:
    offset = template.offset
    cost = template.cost
    description = template.description
    for variant in template.variants:
        if not is_rule_satisfied(variant.when, facts):
            continue
        offset = variant.offset or offset
        cost = variant.cost or cost
        description = variant.description or description

    return _ResolvedTemplate(
        task=template.task,
        offset=offset,
        cost=cost,
        category=template.category,
        description=description,
    )


def _new_task_id() -> str:
    return f"task-{uuid.uuid4().hex}"


def list_event_types(*, catalog: RuleCatalog | None = None) -> list[str]:
    return list((catalog or default_catalog()).event_types)
