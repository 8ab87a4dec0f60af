from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from app.economy.loyalty.types import LoyaltyTier


@dataclass(slots=True)
class EventRecord:
    event_id: int
    title: str
    ticket_price: int
    total_tickets: int
    tickets_sold: int
    created_at: datetime

    @property
    def tickets_remaining(self) -> int:
        return max(0, self.total_tickets - self.tickets_sold)


@dataclass(slots=True)
class TicketRecord:
    ticket_id: int
    event_id: int
    user_id: int
    seat_number: str
    purchase_date: datetime
    base_price: int
    demand_price: int
    discount_percent: int
    tier_at_purchase: LoyaltyTier | None
    price: int
    points_earned: int


@dataclass(slots=True)
class TicketPriceQuote:
    event_id: int
    user_id: int
    base_price: int
    demand_price: int
    discount_percent: int
    tier: LoyaltyTier | None
    final_price: int
    points_to_earn: int
    tickets_remaining: int


@dataclass(slots=True)
class TicketPurchaseResult:
    ticket: TicketRecord
    loyalty_points: int
    loyalty_tier: LoyaltyTier
    previous_loyalty_tier: LoyaltyTier
