from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Path, Query, Request

from app.db.session import SessionLocal
from app.economy.loyalty.errors import LoyaltyPointsOverflowError
from app.economy.tickets.constants import BIGINT_MAX
from app.economy.tickets.errors import (
    TicketEventNotFoundError,
    TicketEventSoldOutError,
    TicketEventValidationError,
    TicketNotFoundError,
    TicketPurchaseValidationError,
)
from app.economy.tickets.service import TicketService

from .internal_helpers import (
    _assert_internal_access,
    _event_as_response,
    _purchase_as_response,
    _quote_as_response,
    _ticket_as_response,
)
from .internal_models import (
    EventCreateRequest,
    EventResponse,
    TicketListResponse,
    TicketPriceQuoteResponse,
    TicketPurchaseRequest,
    TicketPurchaseResponse,
    TicketResponse,
)

router = APIRouter(tags=["internal", "tickets"])


@router.post("/internal/events", response_model=EventResponse, status_code=201)
async def create_event(payload: EventCreateRequest, request: Request) -> EventResponse:
    _assert_internal_access(request)

    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            event = await TicketService.create_event(
                session,
                title=payload.title,
                ticket_price=payload.ticket_price,
                total_tickets=payload.total_tickets,
                now_utc=now_utc,
            )
    except TicketEventValidationError as exc:
        raise HTTPException(status_code=422, detail={"code": "E_EVENT_INVALID"}) from exc

    return _event_as_response(event)


@router.get("/internal/events/{event_id}", response_model=EventResponse)
async def get_event(request: Request, event_id: int = Path(gt=0, le=BIGINT_MAX)) -> EventResponse:
    _assert_internal_access(request)

    try:
        async with SessionLocal.begin() as session:
            event = await TicketService.get_event(session, event_id=event_id)
    except TicketEventNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_EVENT_NOT_FOUND"}) from exc

    return _event_as_response(event)


@router.get("/internal/events/{event_id}/price", response_model=TicketPriceQuoteResponse)
async def quote_ticket_price(
    request: Request,
    event_id: int = Path(gt=0, le=BIGINT_MAX),
    user_id: int = Query(gt=0, le=BIGINT_MAX),
) -> TicketPriceQuoteResponse:
    _assert_internal_access(request)

    try:
        async with SessionLocal.begin() as session:
            quote = await TicketService.quote_ticket_price(session, event_id=event_id, user_id=user_id)
    except TicketEventNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_EVENT_NOT_FOUND"}) from exc
    except TicketEventSoldOutError as exc:
        raise HTTPException(status_code=409, detail={"code": "E_EVENT_SOLD_OUT"}) from exc

    return _quote_as_response(quote)


@router.post("/internal/tickets/purchase", response_model=TicketPurchaseResponse, status_code=201)
async def purchase_ticket_with_dynamic_pricing(
    payload: TicketPurchaseRequest,
    request: Request,
) -> TicketPurchaseResponse:
    _assert_internal_access(request)

    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            result = await TicketService.purchase_ticket(
                session,
                event_id=payload.event_id,
                user_id=payload.user_id,
                seat_number=payload.seat_number,
                now_utc=now_utc,
            )
    except TicketEventNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_EVENT_NOT_FOUND"}) from exc
    except TicketEventSoldOutError as exc:
        raise HTTPException(status_code=409, detail={"code": "E_EVENT_SOLD_OUT"}) from exc
    except TicketPurchaseValidationError as exc:
        raise HTTPException(status_code=422, detail={"code": "E_SEAT_NUMBER_INVALID"}) from exc
    except LoyaltyPointsOverflowError as exc:
        raise HTTPException(status_code=422, detail={"code": "E_POINTS_OVERFLOW"}) from exc

    return _purchase_as_response(result)


@router.get("/internal/tickets/{ticket_id}", response_model=TicketResponse)
async def get_ticket(request: Request, ticket_id: int = Path(gt=0, le=BIGINT_MAX)) -> TicketResponse:
    _assert_internal_access(request)

    try:
        async with SessionLocal.begin() as session:
            ticket = await TicketService.get_ticket(session, ticket_id=ticket_id)
    except TicketNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_TICKET_NOT_FOUND"}) from exc

    return _ticket_as_response(ticket)


@router.get("/internal/users/{user_id}/tickets", response_model=TicketListResponse)
async def list_user_tickets(
    request: Request,
    user_id: int = Path(gt=0, le=BIGINT_MAX),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
) -> TicketListResponse:
    _assert_internal_access(request)

    async with SessionLocal.begin() as session:
        tickets = await TicketService.list_user_tickets(
            session,
            user_id=user_id,
            limit=limit,
            offset=offset,
        )

    return TicketListResponse(tickets=[_ticket_as_response(ticket) for ticket in tickets])
