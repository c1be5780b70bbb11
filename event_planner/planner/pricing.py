from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from event_planner.planner.catalog import CostKind, CostRule, PricingRules


@dataclass(frozen=True)
class CostEstimate:
    estimated: int
    recommended: int


def guest_multiplier(pricing: PricingRules, guest_count: int) -> float:
    for band in pricing.guest_bands:
        if band.max_guests is None or guest_count <= band.max_guests:
            return band.multiplier
    return pricing.guest_bands[-1].multiplier


def category_multiplier(
    pricing: PricingRules, category: str | None, guest_count: int
) -> float:
    """Guest band, then the category factor and large-event boost, then the cap."""
    multiplier = guest_multiplier(pricing, guest_count)
    adjustment = pricing.category_adjustments.get(category) if category else None
    if adjustment is None:
        return multiplier

    multiplier *= adjustment.factor
    if pricing.is_large_event(guest_count):
        multiplier *= adjustment.large_event_factor
    if adjustment.cap is not None:
        multiplier = min(multiplier, adjustment.cap)
    return multiplier


def quality_multiplier(pricing: PricingRules, family: str | None) -> float:
    if family is None:
        return pricing.default_quality_multiplier
    return pricing.quality_multipliers.get(family, pricing.default_quality_multiplier)


def round_currency(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def estimate_task_cost(
    pricing: PricingRules,
    cost: CostRule,
    *,
    budget: float,
    guest_count: int,
    family: str | None,
) -> CostEstimate:
    base_cost = cost.base_amount(budget=budget, guest_count=guest_count)
    scaled = base_cost * guest_multiplier(pricing, guest_count)
    if cost.kind is not CostKind.budget_fraction:
        amount = round_currency(scaled)
        return CostEstimate(estimated=amount, recommended=amount)

    return CostEstimate(
        estimated=round_currency(scaled),
        recommended=round_currency(scaled * quality_multiplier(pricing, family)),
    )


def estimate_category_cost(
    pricing: PricingRules,
    category: str,
    base_cost: float,
    *,
    guest_count: int,
    family: str | None,
) -> CostEstimate:
    scaled = base_cost * category_multiplier(pricing, category, guest_count)
    return CostEstimate(
        estimated=round_currency(scaled),
        recommended=round_currency(scaled * quality_multiplier(pricing, family)),
    )
