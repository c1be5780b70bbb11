from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

from event_planner.planner.deadlines import CalendarOffset
from event_planner.planner.errors import CatalogError
from event_planner.planner.rules import validate_rule
from event_planner.planner.schema import MISCELLANEOUS_CATEGORY, Question, VendorCategory

DEFAULT_CATALOG_ROOT = Path(__file__).resolve().parents[1] / "catalog"

CATALOG_FILES = (
    "event_types.yaml",
    "families.yaml",
    "questions.yaml",
    "tasks.yaml",
    "pricing.yaml",
)

_DURATION_UNITS = ("months", "weeks", "days")
_VENDOR_CATEGORIES = frozenset(category.value for category in VendorCategory)


class CostKind(str, Enum):
    fixed = "fixed"
    per_guest = "per_guest"
    budget_fraction = "budget_fraction"


@dataclass(frozen=True)
class CostRule:
    kind: CostKind
    amount: float

    def base_amount(self, *, budget: float, guest_count: int) -> float:
        if self.kind is CostKind.budget_fraction:
            return budget * self.amount
        if self.kind is CostKind.per_guest:
            return guest_count * self.amount
        return self.amount


@dataclass(frozen=True)
class TemplateVariant:
    when: Mapping[str, Any]
    offset: CalendarOffset | None = None
    cost: CostRule | None = None
    description: str | None = None


@dataclass(frozen=True)
class TaskTemplate:
    task: str
    offset: CalendarOffset
    cost: CostRule
    category: str | None = None
    description: str | None = None
    when: Mapping[str, Any] | None = None
    variants: tuple[TemplateVariant, ...] = ()


@dataclass(frozen=True)
class EventFamily:
    name: str
    keywords: tuple[str, ...]
    exact: tuple[str, ...] = ()


@dataclass(frozen=True)
class QuestionTemplate:
    id: str
    question: str
    options: tuple[str, ...]
    multi_select: bool = False

    def to_dict(self) -> Question:
        payload: Question = {
            "id": self.id,
            "question": self.question,
            "options": list(self.options),
        }
        if self.multi_select:
            payload["multi_select"] = True
        return payload


@dataclass(frozen=True)
class GuestBand:
    multiplier: float
    max_guests: int | None = None


@dataclass(frozen=True)
class CategoryAdjustment:
    factor: float = 1.0
    large_event_factor: float = 1.0
    cap: float | None = None


@dataclass(frozen=True)
class BreakdownCategory:
    category: str
    percentage: int
    description: str
    overrides: Mapping[str, int]

    def percentage_for(self, family: str | None) -> int:
        if family is not None and family in self.overrides:
            return self.overrides[family]
        return self.percentage


@dataclass(frozen=True)
class PricingRules:
    large_event_threshold: int
    guest_bands: tuple[GuestBand, ...]
    quality_multipliers: Mapping[str, float]
    default_quality_multiplier: float
    category_adjustments: Mapping[str, CategoryAdjustment]
    breakdown: tuple[BreakdownCategory, ...]
    miscellaneous_description: str

    def is_large_event(self, guest_count: int) -> bool:
        return guest_count > self.large_event_threshold


@dataclass(frozen=True)
class RuleCatalog:
    event_types: tuple[str, ...]
    families: tuple[EventFamily, ...]
    question_sets: tuple[tuple[str, tuple[QuestionTemplate, ...]], ...]
    default_questions: tuple[QuestionTemplate, ...]
    base_tasks: tuple[TaskTemplate, ...]
    family_tasks: Mapping[str, tuple[TaskTemplate, ...]]
    pricing: PricingRules

    def tasks_for_family(self, family: str | None) -> tuple[TaskTemplate, ...]:
        if family is None:
            return ()
        return self.family_tasks.get(family, ())


@lru_cache(maxsize=1)
def default_catalog() -> RuleCatalog:
    """The packaged catalog, loaded once per process."""
    return load_catalog(DEFAULT_CATALOG_ROOT)


def load_catalog(root: Path | None = None) -> RuleCatalog:
    if root is None:
        root = DEFAULT_CATALOG_ROOT

    payload: dict[str, Any] = {}
    for name in CATALOG_FILES:
        path = root / name
        if not path.exists():
            raise CatalogError(f"catalog file '{name}' not found in {root}")
        with path.open("r", encoding="utf-8") as handle:
            try:
                document = yaml.safe_load(handle)
            except yaml.YAMLError as exc:
                raise CatalogError(f"invalid YAML in {path}: {exc}") from exc
        document = _as_dict(document, name)
        duplicated = sorted(set(document) & set(payload))
        if duplicated:
            raise CatalogError(f"{name} redefines catalog keys {duplicated}")
        payload.update(document)

    return parse_catalog(payload)


def parse_catalog(payload: Mapping[str, Any]) -> RuleCatalog:
    """Build a catalog from already-decoded data, rejecting inconsistent tables."""
    event_types = tuple(_read_str_list(payload.get("event_types"), "event_types"))

    families = tuple(
        _parse_family(raw, f"families[{idx}]")
        for idx, raw in enumerate(_as_list(payload.get("families"), "families"))
    )
    family_names = [family.name for family in families]
    if len(set(family_names)) != len(family_names):
        raise CatalogError("duplicate family names in families")

    raw_sets = _as_dict(payload.get("question_sets"), "question_sets")
    question_sets = tuple(
        (label, _parse_question_set(raw, f"question_sets.{label}"))
        for label, raw in raw_sets.items()
    )
    default_questions = _parse_question_set(
        payload.get("default_questions"), "default_questions"
    )
    question_labels = {label for label, _ in question_sets}
    for family in families:
        for label in family.exact:
            if label not in question_labels:
                raise CatalogError(
                    f"exact label '{label}' of family '{family.name}' has no question set"
                )

    base_tasks = tuple(
        _parse_task(raw, f"base[{idx}]")
        for idx, raw in enumerate(_as_list(payload.get("base"), "base"))
    )
    raw_family_tasks = _as_dict(payload.get("family_tasks", {}), "family_tasks")
    family_tasks: dict[str, tuple[TaskTemplate, ...]] = {}
    for name, raw_tasks in raw_family_tasks.items():
        if name not in family_names:
            raise CatalogError(f"tasks reference unknown family '{name}'")
        family_tasks[name] = tuple(
            _parse_task(raw, f"family_tasks.{name}[{idx}]")
            for idx, raw in enumerate(_as_list(raw_tasks, f"family_tasks.{name}"))
        )

    post_event = [
        template.task
        for template in (*base_tasks, *(t for ts in family_tasks.values() for t in ts))
        if template.offset.after_event
        or any(v.offset is not None and v.offset.after_event for v in template.variants)
    ]
    if len(post_event) > 1:
        raise CatalogError(f"only one post-event task is allowed, got {post_event}")

    pricing = _parse_pricing(payload, family_names)

    return RuleCatalog(
        event_types=event_types,
        families=families,
        question_sets=question_sets,
        default_questions=default_questions,
        base_tasks=base_tasks,
        family_tasks=MappingProxyType(family_tasks),
        pricing=pricing,
    )


def _parse_family(raw: Any, context: str) -> EventFamily:
    item = _as_dict(raw, context)
    name = _read_str(item, "name", context)
    keywords = _read_str_list(item.get("keywords", []), f"{context}.keywords")
    exact = _read_str_list(item.get("exact", []), f"{context}.exact")
    if not keywords and not exact:
        raise CatalogError(f"{context} needs at least one keyword or exact label")
    return EventFamily(
        name=name,
        keywords=tuple(keyword.lower() for keyword in keywords),
        exact=tuple(exact),
    )


def _parse_question_set(raw: Any, context: str) -> tuple[QuestionTemplate, ...]:
    questions: list[QuestionTemplate] = []
    for idx, raw_question in enumerate(_as_list(raw, context)):
        item = _as_dict(raw_question, f"{context}[{idx}]")
        multi_select = item.get("multi_select", False)
        if not isinstance(multi_select, bool):
            raise CatalogError(f"{context}[{idx}].multi_select must be a boolean")
        options = _read_str_list(item.get("options"), f"{context}[{idx}].options")
        if not options:
            raise CatalogError(f"{context}[{idx}].options must not be empty")
        questions.append(
            QuestionTemplate(
                id=_read_str(item, "id", f"{context}[{idx}]"),
                question=_read_str(item, "question", f"{context}[{idx}]"),
                options=tuple(options),
                multi_select=multi_select,
            )
        )

    ids = [question.id for question in questions]
    if len(set(ids)) != len(ids):
        raise CatalogError(f"duplicate question ids in {context}")
    return tuple(questions)


def _parse_task(raw: Any, context: str) -> TaskTemplate:
    item = _as_dict(raw, context)
    when = item.get("when")
    if when is not None:
        validate_rule(when, f"{context}.when")

    variants: list[TemplateVariant] = []
    for idx, raw_variant in enumerate(_as_list(item.get("variants", []), f"{context}.variants")):
        variant = _as_dict(raw_variant, f"{context}.variants[{idx}]")
        variant_context = f"{context}.variants[{idx}]"
        if "when" not in variant:
            raise CatalogError(f"{variant_context}.when is required")
        validate_rule(variant["when"], f"{variant_context}.when")
        variants.append(
            TemplateVariant(
                when=variant["when"],
                offset=(
                    _parse_offset(variant["deadline"], f"{variant_context}.deadline")
                    if "deadline" in variant
                    else None
                ),
                cost=(
                    _parse_cost(variant["cost"], f"{variant_context}.cost")
                    if "cost" in variant
                    else None
                ),
                description=_read_optional_str(variant, "description", variant_context),
            )
        )

    category = _read_optional_str(item, "category", context)
    if category is not None and category not in _VENDOR_CATEGORIES:
        raise CatalogError(f"{context}.category '{category}' is not a vendor category")

    return TaskTemplate(
        task=_read_str(item, "task", context),
        offset=_parse_offset(item.get("deadline"), f"{context}.deadline"),
        cost=_parse_cost(item.get("cost"), f"{context}.cost"),
        category=category,
        description=_read_optional_str(item, "description", context),
        when=when,
        variants=tuple(variants),
    )


def _parse_offset(raw: Any, context: str) -> CalendarOffset:
    item = _as_dict(raw, context)
    directions = [key for key in ("before", "after") if key in item]
    if len(directions) != 1 or len(item) != 1:
        raise CatalogError(f"{context} must contain exactly one of 'before' or 'after'")

    direction = directions[0]
    duration = _as_dict(item[direction], f"{context}.{direction}")
    unknown = sorted(set(duration) - set(_DURATION_UNITS))
    if unknown:
        raise CatalogError(f"{context}.{direction} has unknown duration units {unknown}")

    values: dict[str, int] = {}
    for unit in _DURATION_UNITS:
        value = duration.get(unit, 0)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise CatalogError(f"{context}.{direction}.{unit} must be a non-negative int")
        values[unit] = value

    return CalendarOffset(after_event=direction == "after", **values)


def _parse_cost(raw: Any, context: str) -> CostRule:
    item = _as_dict(raw, context)
    kinds = [kind for kind in CostKind if kind.value in item]
    if len(kinds) != 1 or len(item) != 1:
        raise CatalogError(
            f"{context} must contain exactly one of fixed, per_guest, budget_fraction"
        )

    kind = kinds[0]
    amount = _read_number(item, kind.value, context)
    if kind is CostKind.budget_fraction and amount > 1:
        raise CatalogError(f"{context}.budget_fraction must be between 0 and 1")
    return CostRule(kind=kind, amount=amount)


def _parse_pricing(payload: Mapping[str, Any], family_names: list[str]) -> PricingRules:
    threshold = payload.get("large_event_threshold")
    if isinstance(threshold, bool) or not isinstance(threshold, int) or threshold < 0:
        raise CatalogError("large_event_threshold must be a non-negative int")

    bands: list[GuestBand] = []
    raw_bands = _as_list(payload.get("guest_bands"), "guest_bands")
    for idx, raw_band in enumerate(raw_bands):
        band = _as_dict(raw_band, f"guest_bands[{idx}]")
        max_guests = band.get("max_guests")
        is_last = idx == len(raw_bands) - 1
        if is_last and max_guests is not None:
            raise CatalogError("the last guest band must not have max_guests")
        if not is_last and (isinstance(max_guests, bool) or not isinstance(max_guests, int)):
            raise CatalogError(f"guest_bands[{idx}].max_guests must be an int")
        if bands and max_guests is not None and max_guests <= (bands[-1].max_guests or 0):
            raise CatalogError("guest_bands must be in ascending max_guests order")
        bands.append(
            GuestBand(
                multiplier=_read_number(band, "multiplier", f"guest_bands[{idx}]"),
                max_guests=max_guests,
            )
        )
    if not bands:
        raise CatalogError("guest_bands must not be empty")

    quality = _as_dict(payload.get("quality_multipliers", {}), "quality_multipliers")
    quality_multipliers: dict[str, float] = {}
    for name in quality:
        if name not in family_names:
            raise CatalogError(f"quality_multipliers reference unknown family '{name}'")
        quality_multipliers[name] = _read_number(quality, name, "quality_multipliers")

    raw_adjustments = _as_dict(
        payload.get("category_adjustments", {}), "category_adjustments"
    )
    adjustments: dict[str, CategoryAdjustment] = {}
    for category, raw in raw_adjustments.items():
        context = f"category_adjustments.{category}"
        item = _as_dict(raw, context)
        adjustments[category] = CategoryAdjustment(
            factor=_read_number(item, "factor", context, default=1.0),
            large_event_factor=_read_number(
                item, "large_event_factor", context, default=1.0
            ),
            cap=(_read_number(item, "cap", context) if "cap" in item else None),
        )

    breakdown = tuple(
        _parse_breakdown_category(raw, f"breakdown[{idx}]", family_names)
        for idx, raw in enumerate(_as_list(payload.get("breakdown"), "breakdown"))
    )
    categories = [item.category for item in breakdown]
    if len(set(categories)) != len(categories):
        raise CatalogError("duplicate categories in breakdown")
    if MISCELLANEOUS_CATEGORY in categories:
        raise CatalogError(f"'{MISCELLANEOUS_CATEGORY}' is derived and cannot be listed")
    for family in (None, *family_names):
        total = sum(item.percentage_for(family) for item in breakdown)
        if total > 100:
            label = family or "default"
            raise CatalogError(f"breakdown percentages for {label} exceed 100 ({total})")

    return PricingRules(
        large_event_threshold=threshold,
        guest_bands=tuple(bands),
        quality_multipliers=MappingProxyType(quality_multipliers),
        default_quality_multiplier=_read_number(
            payload, "default_quality_multiplier", "pricing", default=1.0
        ),
        category_adjustments=MappingProxyType(adjustments),
        breakdown=breakdown,
        miscellaneous_description=_read_str(
            payload, "miscellaneous_description", "pricing"
        ),
    )


def _parse_breakdown_category(
    raw: Any, context: str, family_names: list[str]
) -> BreakdownCategory:
    item = _as_dict(raw, context)
    overrides = _as_dict(item.get("overrides", {}), f"{context}.overrides")
    for name, value in overrides.items():
        if name not in family_names:
            raise CatalogError(f"{context}.overrides reference unknown family '{name}'")
        _check_percentage(value, f"{context}.overrides.{name}")
    percentage = item.get("percentage")
    _check_percentage(percentage, f"{context}.percentage")
    return BreakdownCategory(
        category=_read_str(item, "category", context),
        percentage=percentage,
        description=_read_str(item, "description", context),
        overrides=MappingProxyType(dict(overrides)),
    )


def _check_percentage(value: Any, field: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 100:
        raise CatalogError(f"{field} must be an int between 0 and 100")


def _read_str(payload: Mapping[str, Any], key: str, context: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value:
        raise CatalogError(f"{context}.{key} must be a non-empty string")
    return value


def _read_optional_str(payload: Mapping[str, Any], key: str, context: str) -> str | None:
    if payload.get(key) is None:
        return None
    return _read_str(payload, key, context)


def _read_number(
    payload: Mapping[str, Any],
    key: str,
    context: str,
    default: float | None = None,
) -> float:
    value = payload.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise CatalogError(f"{context}.{key} must be a non-negative number")
    return float(value)


def _read_str_list(value: Any, field: str) -> list[str]:
    items = _as_list(value, field)
    if not all(isinstance(item, str) and item for item in items):
        raise CatalogError(f"all {field} entries must be non-empty strings")
    return items


def _as_list(value: Any, field: str) -> list[Any]:
    if not isinstance(value, list):
        raise CatalogError(f"{field} must be a list")
    return value


def _as_dict(value: Any, field: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise CatalogError(f"{field} must be an object")
    return value
