"""Demand-based ticket pricing with loyalty tier discounts.

All arithmetic is on integers so that prices truncate identically on every
platform: ``price * (sold / total + 1/2)`` is evaluated as a single floor
division over a common denominator, then the tier percentage is applied with
another floor division.
"""

from __future__ import annotations

from app.economy.loyalty.types import LoyaltyTier
from app.economy.pricing.constants import (
    DEMAND_BASE_DENOMINATOR,
    DEMAND_BASE_NUMERATOR,
    NO_DISCOUNT_PERCENT,
    TIER_PRICE_PERCENT,
)
from app.economy.pricing.types import EventDemand, PriceBreakdown


def _validate_demand(demand: EventDemand) -> None:
    if demand.total_tickets <= 0:
        raise ValueError("total_tickets must be positive")
    if demand.ticket_price < 0:
        raise ValueError("ticket_price must be non-negative")
    if demand.tickets_sold < 0:
        raise ValueError("tickets_sold must be non-negative")


def demand_price(demand: EventDemand) -> int:
    _validate_demand(demand)
    numerator = demand.ticket_price * (
        DEMAND_BASE_DENOMINATOR * demand.tickets_sold + DEMAND_BASE_NUMERATOR * demand.total_tickets
    )
    return numerator // (DEMAND_BASE_DENOMINATOR * demand.total_tickets)


def discount_percent_for_tier(tier: LoyaltyTier | None) -> int:
    if tier is None:
        return NO_DISCOUNT_PERCENT
    return TIER_PRICE_PERCENT.get(tier, NO_DISCOUNT_PERCENT)


def price_breakdown(demand: EventDemand, tier: LoyaltyTier | None) -> PriceBreakdown:
    dynamic_price = demand_price(demand)
    percent = discount_percent_for_tier(tier)
    return PriceBreakdown(
        base_price=demand.ticket_price,
        demand_price=dynamic_price,
        discount_percent=percent,
        tier=tier,
        final_price=dynamic_price * percent // 100,
    )


def final_price(demand: EventDemand, tier: LoyaltyTier | None) -> int:
    return price_breakdown(demand, tier).final_price
