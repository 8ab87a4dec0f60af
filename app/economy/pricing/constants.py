from __future__ import annotations

from app.economy.loyalty.types import LoyaltyTier

# Demand multiplier is tickets_sold / total_tickets + DEMAND_BASE_NUMERATOR / DEMAND_BASE_DENOMINATOR.
DEMAND_BASE_NUMERATOR = 1
DEMAND_BASE_DENOMINATOR = 2

NO_DISCOUNT_PERCENT = 100
TIER_PRICE_PERCENT: dict[LoyaltyTier, int] = {
    LoyaltyTier.PLATINUM: 80,
    LoyaltyTier.GOLD: 85,
    LoyaltyTier.SILVER: 90,
    LoyaltyTier.BRONZE: 95,
}
