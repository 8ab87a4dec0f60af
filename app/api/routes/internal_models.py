from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from app.economy.tickets.constants import BIGINT_MAX, MAX_TICKET_PRICE, MAX_TOTAL_TICKETS


class EventCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    ticket_price: int = Field(ge=0, le=MAX_TICKET_PRICE)
    total_tickets: int = Field(gt=0, le=MAX_TOTAL_TICKETS)


class EventResponse(BaseModel):
    event_id: int
    title: str
    ticket_price: int
    total_tickets: int
    tickets_sold: int
    tickets_remaining: int
    created_at: datetime


class TicketPriceQuoteResponse(BaseModel):
    event_id: int
    user_id: int
    base_price: int
    demand_price: int
    discount_percent: int
    tier: str | None = None
    final_price: int
    points_to_earn: int
    tickets_remaining: int


class TicketPurchaseRequest(BaseModel):
    event_id: int = Field(gt=0, le=BIGINT_MAX)
    user_id: int = Field(gt=0, le=BIGINT_MAX)
    seat_number: str = Field(min_length=1, max_length=32)


class TicketResponse(BaseModel):
    ticket_id: int
    event_id: int
    user_id: int
    seat_number: str
    purchase_date: datetime
    base_price: int
    demand_price: int
    discount_percent: int
    tier_at_purchase: str | None = None
    price: int
    points_earned: int


class TicketPurchaseResponse(BaseModel):
    ticket: TicketResponse
    loyalty_points: int
    loyalty_tier: str
    tier_changed: bool


class TicketListResponse(BaseModel):
    tickets: list[TicketResponse]


class LoyaltyAwardRequest(BaseModel):
    user_id: int = Field(gt=0, le=BIGINT_MAX)
    purchase_amount: int = Field(ge=0, le=BIGINT_MAX)


class LoyaltyAwardResponse(BaseModel):
    user_id: int
    points_earned: int
    points: int
    tier: str
    tier_changed: bool
    account_created: bool


class LoyaltyRedeemRequest(BaseModel):
    user_id: int = Field(gt=0, le=BIGINT_MAX)
    amount: int = Field(gt=0, le=BIGINT_MAX)


class LoyaltyRedeemResponse(BaseModel):
    message: str
    user_id: int
    points_redeemed: int
    points: int
    tier: str


class LoyaltyAccountResponse(BaseModel):
    user_id: int
    points: int
    tier: str
    next_tier: str | None = None
    points_to_next_tier: int | None = None
    created_at: datetime
    updated_at: datetime


class LoyaltyHistoryItem(BaseModel):
    transaction_id: int
    entry_type: str
    points: int
    balance_after: int
    description: str
    ticket_id: int | None = None
    created_at: datetime


class LoyaltyHistoryResponse(BaseModel):
    user_id: int
    total: int
    items: list[LoyaltyHistoryItem]
