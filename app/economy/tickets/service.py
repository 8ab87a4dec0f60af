from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.events import Event
from app.db.models.tickets import Ticket
from app.db.repo.events_repo import EventsRepo
from app.db.repo.loyalty_repo import LoyaltyRepo
from app.db.repo.tickets_repo import TicketsRepo
from app.economy.loyalty.constants import ENTRY_TYPE_EARN_TICKET, ticket_purchase_description
from app.economy.loyalty.rules import points_for_purchase
from app.economy.loyalty.service import LoyaltyService
from app.economy.loyalty.types import LoyaltyTier
from app.economy.pricing.rules import price_breakdown
from app.economy.pricing.types import EventDemand
from app.economy.tickets.constants import MAX_TICKET_PRICE, MAX_TOTAL_TICKETS
from app.economy.tickets.errors import (
    TicketEventNotFoundError,
    TicketEventSoldOutError,
    TicketEventValidationError,
    TicketNotFoundError,
    TicketPurchaseValidationError,
)
from app.economy.tickets.types import (
    EventRecord,
    TicketPriceQuote,
    TicketPurchaseResult,
    TicketRecord,
)

logger = structlog.get_logger(__name__)


def _demand_from_model(event: Event) -> EventDemand:
    return EventDemand(
        ticket_price=event.ticket_price,
        total_tickets=event.total_tickets,
        tickets_sold=event.tickets_sold,
    )


def _event_record(event: Event) -> EventRecord:
    return EventRecord(
        event_id=event.id,
        title=event.title,
        ticket_price=event.ticket_price,
        total_tickets=event.total_tickets,
        tickets_sold=event.tickets_sold,
        created_at=event.created_at,
    )


def _ticket_record(ticket: Ticket) -> TicketRecord:
    return TicketRecord(
        ticket_id=ticket.id,
        event_id=ticket.event_id,
        user_id=ticket.user_id,
        seat_number=ticket.seat_number,
        purchase_date=ticket.purchase_date,
        base_price=ticket.base_price,
        demand_price=ticket.demand_price,
        discount_percent=ticket.discount_percent,
        tier_at_purchase=LoyaltyTier(ticket.tier_at_purchase) if ticket.tier_at_purchase else None,
        price=ticket.price,
        points_earned=ticket.points_earned,
    )


class TicketService:
    @staticmethod
    async def create_event(
        session: AsyncSession,
        *,
        title: str,
        ticket_price: int,
        total_tickets: int,
        now_utc: datetime,
    ) -> EventRecord:
        normalized_title = title.strip()
        if not normalized_title:
            raise TicketEventValidationError
        if ticket_price < 0 or ticket_price > MAX_TICKET_PRICE:
            raise TicketEventValidationError
        # Pricing divides by total_tickets.
        if total_tickets <= 0 or total_tickets > MAX_TOTAL_TICKETS:
            raise TicketEventValidationError

        event = await EventsRepo.create(
            session,
            event=Event(
                title=normalized_title,
                ticket_price=ticket_price,
                total_tickets=total_tickets,
                tickets_sold=0,
                created_at=now_utc,
                updated_at=now_utc,
            ),
        )
        logger.info(
            "event_created",
            event_id=event.id,
            ticket_price=ticket_price,
            total_tickets=total_tickets,
        )
        return _event_record(event)

    @staticmethod
    async def get_event(session: AsyncSession, *, event_id: int) -> EventRecord:
        event = await EventsRepo.get_by_id(session, event_id)
        if event is None:
            raise TicketEventNotFoundError
        return _event_record(event)

    @staticmethod
    async def quote_ticket_price(
        session: AsyncSession,
        *,
        event_id: int,
        user_id: int,
    ) -> TicketPriceQuote:
        event = await EventsRepo.get_by_id(session, event_id)
        if event is None:
            raise TicketEventNotFoundError

        demand = _demand_from_model(event)
        if demand.is_sold_out:
            raise TicketEventSoldOutError

        account = await LoyaltyRepo.get_by_user_id(session, user_id)
        tier = LoyaltyTier(account.tier) if account is not None else None
        breakdown = price_breakdown(demand, tier)
        return TicketPriceQuote(
            event_id=event.id,
            user_id=user_id,
            base_price=breakdown.base_price,
            demand_price=breakdown.demand_price,
            discount_percent=breakdown.discount_percent,
            tier=breakdown.tier,
            final_price=breakdown.final_price,
            points_to_earn=points_for_purchase(breakdown.final_price),
            tickets_remaining=event.total_tickets - event.tickets_sold,
        )

    @staticmethod
    async def purchase_ticket(
        session: AsyncSession,
        *,
        event_id: int,
        user_id: int,
        seat_number: str,
        now_utc: datetime,
    ) -> TicketPurchaseResult:
        normalized_seat = seat_number.strip()
        if not normalized_seat:
            raise TicketPurchaseValidationError

        event = await EventsRepo.get_by_id_for_update(session, event_id)
        if event is None:
            raise TicketEventNotFoundError

        demand = _demand_from_model(event)
        if demand.is_sold_out:
            logger.info(
                "ticket_purchase_rejected_sold_out",
                event_id=event_id,
                user_id=user_id,
                total_tickets=event.total_tickets,
            )
            raise TicketEventSoldOutError

        tier = await LoyaltyService.get_tier_for_update(session, user_id=user_id)
        breakdown = price_breakdown(demand, tier)

        ticket = await TicketsRepo.create(
            session,
            ticket=Ticket(
                event_id=event.id,
                user_id=user_id,
                seat_number=normalized_seat,
                base_price=breakdown.base_price,
                demand_price=breakdown.demand_price,
                discount_percent=breakdown.discount_percent,
                tier_at_purchase=tier.value if tier is not None else None,
                price=breakdown.final_price,
                points_earned=points_for_purchase(breakdown.final_price),
                purchase_date=now_utc,
            ),
        )

        event.tickets_sold += 1
        event.updated_at = now_utc

        # Same transaction as the ticket: a failed credit rolls back the sale.
        award = await LoyaltyService.award_points(
            session,
            user_id=user_id,
            purchase_amount=breakdown.final_price,
            now_utc=now_utc,
            entry_type=ENTRY_TYPE_EARN_TICKET,
            description=ticket_purchase_description(ticket_id=ticket.id, price=breakdown.final_price),
            ticket_id=ticket.id,
        )
        await session.flush()

        logger.info(
            "ticket_purchased",
            ticket_id=ticket.id,
            event_id=event.id,
            user_id=user_id,
            price=breakdown.final_price,
            demand_price=breakdown.demand_price,
            discount_percent=breakdown.discount_percent,
            tickets_sold=event.tickets_sold,
            points_earned=award.points_earned,
        )
        return TicketPurchaseResult(
            ticket=_ticket_record(ticket),
            loyalty_points=award.points,
            loyalty_tier=award.tier,
            previous_loyalty_tier=award.previous_tier,
        )

    @staticmethod
    async def get_ticket(session: AsyncSession, *, ticket_id: int) -> TicketRecord:
        ticket = await TicketsRepo.get_by_id(session, ticket_id)
        if ticket is None:
            raise TicketNotFoundError
        return _ticket_record(ticket)

    @staticmethod
    async def list_user_tickets(
        session: AsyncSession,
        *,
        user_id: int,
        limit: int = 50,
        offset: int = 0,
    ) -> list[TicketRecord]:
        tickets = await TicketsRepo.list_by_user(session, user_id=user_id, limit=limit, offset=offset)
        return [_ticket_record(ticket) for ticket in tickets]
