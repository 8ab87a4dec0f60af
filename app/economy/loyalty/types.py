from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class LoyaltyTier(str, Enum):
    BRONZE = "BRONZE"
    SILVER = "SILVER"
    GOLD = "GOLD"
    PLATINUM = "PLATINUM"


@dataclass(slots=True)
class LoyaltySnapshot:
    points: int
    tier: LoyaltyTier


@dataclass(frozen=True, slots=True)
class LoyaltyTierProgress:
    tier: LoyaltyTier
    next_tier: LoyaltyTier | None
    points_to_next_tier: int | None


@dataclass(slots=True)
class LoyaltyPointsEntry:
    transaction_id: int
    entry_type: str
    points: int
    balance_after: int
    description: str
    ticket_id: int | None
    created_at: datetime


@dataclass(slots=True)
class LoyaltyAwardResult:
    user_id: int
    points_earned: int
    points: int
    tier: LoyaltyTier
    previous_tier: LoyaltyTier
    account_created: bool

    @property
    def tier_changed(self) -> bool:
        return self.tier != self.previous_tier


@dataclass(slots=True)
class LoyaltyRedeemResult:
    user_id: int
    points_redeemed: int
    points: int
    tier: LoyaltyTier
    previous_tier: LoyaltyTier
    message: str


@dataclass(slots=True)
class LoyaltyAccountSummary:
    user_id: int
    points: int
    tier: LoyaltyTier
    next_tier: LoyaltyTier | None
    points_to_next_tier: int | None
    created_at: datetime
    updated_at: datetime
