from __future__ import annotations

from dataclasses import dataclass

from app.economy.loyalty.types import LoyaltyTier


@dataclass(frozen=True, slots=True)
class EventDemand:
    ticket_price: int
    total_tickets: int
    tickets_sold: int

    @property
    def is_sold_out(self) -> bool:
        return self.tickets_sold >= self.total_tickets


@dataclass(frozen=True, slots=True)
class PriceBreakdown:
    base_price: int
    demand_price: int
    discount_percent: int
    tier: LoyaltyTier | None
    final_price: int
