"""Event-type dispatch.

Both lookups are ordered ``(predicate, result)`` rule lists evaluated
first-match, so the priority between exact labels, substring families and the
default stays visible in one place.
"""

from __future__ import annotations

from typing import Callable, Iterable, TypeVar

from event_planner.planner.catalog import QuestionTemplate, RuleCatalog

T = TypeVar("T")

Predicate = Callable[[str], bool]


def first_match(rules: Iterable[tuple[Predicate, T]], value: str, default: T) -> T:
    for predicate, result in rules:
        if predicate(value):
            return result
    return default


def family_rules(catalog: RuleCatalog) -> list[tuple[Predicate, str]]:
    rules: list[tuple[Predicate, str]] = []
    for family in catalog.families:
        for label in family.exact:
            rules.append((_equals(label), family.name))
    for family in catalog.families:
        for keyword in family.keywords:
            rules.append((_contains(keyword), family.name))
    return rules


def question_rules(
    catalog: RuleCatalog,
) -> list[tuple[Predicate, tuple[QuestionTemplate, ...]]]:
    rules: list[tuple[Predicate, tuple[QuestionTemplate, ...]]] = [
        (_equals(label), questions) for label, questions in catalog.question_sets
    ]
    rules.extend(
        (_overlaps(label), questions) for label, questions in catalog.question_sets
    )
    return rules


def classify_event_type(catalog: RuleCatalog, event_type: str) -> str | None:
    """Return the family whose specialized tasks apply, or None for generic events."""
    return first_match(family_rules(catalog), event_type.strip(), None)


def match_question_set(
    catalog: RuleCatalog, event_type: str
) -> tuple[QuestionTemplate, ...]:
    event_type = event_type.strip()
    if not event_type:
        return catalog.default_questions
    return first_match(question_rules(catalog), event_type, catalog.default_questions)


def _equals(label: str) -> Predicate:
    return lambda value: value == label


def _contains(keyword: str) -> Predicate:
    keyword = keyword.lower()
    return lambda value: keyword in value.lower()


def _overlaps(label: str) -> Predicate:
    key = label.lower()

    def predicate(value: str) -> bool:
        lowered = value.lower()
        return key in lowered or lowered in key

    return predicate
