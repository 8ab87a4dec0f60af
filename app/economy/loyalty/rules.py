from __future__ import annotations

from dataclasses import replace

from app.economy.loyalty.constants import (
    MAX_POINTS_BALANCE,
    POINTS_PER_AMOUNT_DIVISOR,
    PURCHASE_BONUS_BRACKETS,
    TIER_THRESHOLDS,
)
from app.economy.loyalty.types import LoyaltySnapshot, LoyaltyTier, LoyaltyTierProgress


def points_for_purchase(amount: int) -> int:
    if amount < 0:
        raise ValueError("purchase amount must be non-negative")

    base_points = amount // POINTS_PER_AMOUNT_DIVISOR
    bonus_points = 0
    for min_amount, bonus_divisor in PURCHASE_BONUS_BRACKETS:
        if amount >= min_amount:
            bonus_points = base_points // bonus_divisor
            break
    return base_points + bonus_points


def tier_for_points(points: int) -> LoyaltyTier:
    for min_points, tier in TIER_THRESHOLDS:
        if points >= min_points:
            return LoyaltyTier(tier)
    return LoyaltyTier.BRONZE


def tier_progress(points: int) -> LoyaltyTierProgress:
    current = tier_for_points(points)
    next_threshold: tuple[int, str] | None = None
    for min_points, tier in TIER_THRESHOLDS:
        if min_points > points:
            next_threshold = (min_points, tier)

    if next_threshold is None:
        return LoyaltyTierProgress(tier=current, next_tier=None, points_to_next_tier=None)

    min_points, tier = next_threshold
    return LoyaltyTierProgress(
        tier=current,
        next_tier=LoyaltyTier(tier),
        points_to_next_tier=min_points - points,
    )


def credit_points(snapshot: LoyaltySnapshot, *, points: int) -> tuple[LoyaltySnapshot, bool]:
    if points < 0:
        raise ValueError("credited points must be non-negative")

    next_points = snapshot.points + points
    if next_points > MAX_POINTS_BALANCE:
        return snapshot, False
    return replace(snapshot, points=next_points, tier=tier_for_points(next_points)), True


def debit_points(snapshot: LoyaltySnapshot, *, points: int) -> tuple[LoyaltySnapshot, bool]:
    if points <= 0:
        raise ValueError("debited points must be positive")

    if snapshot.points < points:
        return snapshot, False
    next_points = snapshot.points - points
    return replace(snapshot, points=next_points, tier=tier_for_points(next_points)), True
