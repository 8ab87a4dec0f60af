from __future__ import annotations

import structlog
from fastapi import HTTPException, Request

from app.core.config import get_settings
from app.economy.loyalty.types import (
    LoyaltyAccountSummary,
    LoyaltyAwardResult,
    LoyaltyPointsEntry,
    LoyaltyRedeemResult,
)
from app.economy.tickets.types import (
    EventRecord,
    TicketPriceQuote,
    TicketPurchaseResult,
    TicketRecord,
)
from app.services.internal_auth import (
    extract_client_ip,
    is_client_ip_allowed,
    is_internal_request_authenticated,
)

from .internal_models import (
    EventResponse,
    LoyaltyAccountResponse,
    LoyaltyAwardResponse,
    LoyaltyHistoryItem,
    LoyaltyRedeemResponse,
    TicketPriceQuoteResponse,
    TicketPurchaseResponse,
    TicketResponse,
)

logger = structlog.get_logger(__name__)


def _assert_internal_access(request: Request) -> None:
    settings = get_settings()
    client_ip = extract_client_ip(
        request,
        trusted_proxies=settings.internal_api_trusted_proxies,
    )

    if not is_client_ip_allowed(client_ip=client_ip, allowlist=settings.internal_api_allowlist):
        logger.warning("internal_api_auth_failed", reason="ip_not_allowed", client_ip=client_ip)
        raise HTTPException(status_code=403, detail={"code": "E_FORBIDDEN"})

    if not is_internal_request_authenticated(
        request,
        expected_token=settings.internal_api_token,
    ):
        logger.warning(
            "internal_api_auth_failed",
            reason="invalid_credentials",
            client_ip=client_ip,
        )
        raise HTTPException(status_code=403, detail={"code": "E_FORBIDDEN"})


def _event_as_response(event: EventRecord) -> EventResponse:
    return EventResponse(
        event_id=event.event_id,
        title=event.title,
        ticket_price=event.ticket_price,
        total_tickets=event.total_tickets,
        tickets_sold=event.tickets_sold,
        tickets_remaining=event.tickets_remaining,
        created_at=event.created_at,
    )


def _quote_as_response(quote: TicketPriceQuote) -> TicketPriceQuoteResponse:
    return TicketPriceQuoteResponse(
        event_id=quote.event_id,
        user_id=quote.user_id,
        base_price=quote.base_price,
        demand_price=quote.demand_price,
        discount_percent=quote.discount_percent,
        tier=quote.tier.value if quote.tier is not None else None,
        final_price=quote.final_price,
        points_to_earn=quote.points_to_earn,
        tickets_remaining=quote.tickets_remaining,
    )


def _ticket_as_response(ticket: TicketRecord) -> TicketResponse:
    return TicketResponse(
        ticket_id=ticket.ticket_id,
        event_id=ticket.event_id,
        user_id=ticket.user_id,
        seat_number=ticket.seat_number,
        purchase_date=ticket.purchase_date,
        base_price=ticket.base_price,
        demand_price=ticket.demand_price,
        discount_percent=ticket.discount_percent,
        tier_at_purchase=ticket.tier_at_purchase.value if ticket.tier_at_purchase is not None else None,
        price=ticket.price,
        points_earned=ticket.points_earned,
    )


def _purchase_as_response(result: TicketPurchaseResult) -> TicketPurchaseResponse:
    return TicketPurchaseResponse(
        ticket=_ticket_as_response(result.ticket),
        loyalty_points=result.loyalty_points,
        loyalty_tier=result.loyalty_tier.value,
        tier_changed=result.loyalty_tier != result.previous_loyalty_tier,
    )


def _award_as_response(result: LoyaltyAwardResult) -> LoyaltyAwardResponse:
    return LoyaltyAwardResponse(
        user_id=result.user_id,
        points_earned=result.points_earned,
        points=result.points,
        tier=result.tier.value,
        tier_changed=result.tier_changed,
        account_created=result.account_created,
    )


def _redeem_as_response(result: LoyaltyRedeemResult) -> LoyaltyRedeemResponse:
    return LoyaltyRedeemResponse(
        message=result.message,
        user_id=result.user_id,
        points_redeemed=result.points_redeemed,
        points=result.points,
        tier=result.tier.value,
    )


def _account_as_response(summary: LoyaltyAccountSummary) -> LoyaltyAccountResponse:
    return LoyaltyAccountResponse(
        user_id=summary.user_id,
        points=summary.points,
        tier=summary.tier.value,
        next_tier=summary.next_tier.value if summary.next_tier is not None else None,
        points_to_next_tier=summary.points_to_next_tier,
        created_at=summary.created_at,
        updated_at=summary.updated_at,
    )


def _history_item(entry: LoyaltyPointsEntry) -> LoyaltyHistoryItem:
    return LoyaltyHistoryItem(
        transaction_id=entry.transaction_id,
        entry_type=entry.entry_type,
        points=entry.points,
        balance_after=entry.balance_after,
        description=entry.description,
        ticket_id=entry.ticket_id,
        created_at=entry.created_at,
    )
