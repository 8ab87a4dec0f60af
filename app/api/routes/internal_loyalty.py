from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Path, Query, Request

from app.db.session import SessionLocal
from app.economy.loyalty.errors import (
    LoyaltyAccountNotFoundError,
    LoyaltyInsufficientPointsError,
    LoyaltyPointsOverflowError,
    LoyaltyRedeemValidationError,
)
from app.economy.loyalty.service import LoyaltyService
from app.economy.tickets.constants import BIGINT_MAX

from .internal_helpers import (
    _account_as_response,
    _assert_internal_access,
    _award_as_response,
    _history_item,
    _redeem_as_response,
)
from .internal_models import (
    LoyaltyAccountResponse,
    LoyaltyAwardRequest,
    LoyaltyAwardResponse,
    LoyaltyHistoryResponse,
    LoyaltyRedeemRequest,
    LoyaltyRedeemResponse,
)

router = APIRouter(tags=["internal", "loyalty"])


@router.post("/internal/loyalty/award", response_model=LoyaltyAwardResponse)
async def award_loyalty_points(payload: LoyaltyAwardRequest, request: Request) -> LoyaltyAwardResponse:
    _assert_internal_access(request)

    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            result = await LoyaltyService.award_points(
                session,
                user_id=payload.user_id,
                purchase_amount=payload.purchase_amount,
                now_utc=now_utc,
            )
    except LoyaltyPointsOverflowError as exc:
        raise HTTPException(status_code=422, detail={"code": "E_POINTS_OVERFLOW"}) from exc

    return _award_as_response(result)


@router.post("/internal/loyalty/redeem", response_model=LoyaltyRedeemResponse)
async def redeem_points(payload: LoyaltyRedeemRequest, request: Request) -> LoyaltyRedeemResponse:
    _assert_internal_access(request)

    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            result = await LoyaltyService.redeem_points(
                session,
                user_id=payload.user_id,
                amount=payload.amount,
                now_utc=now_utc,
            )
    except LoyaltyAccountNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_LOYALTY_ACCOUNT_NOT_FOUND"}) from exc
    except LoyaltyInsufficientPointsError as exc:
        raise HTTPException(status_code=409, detail={"code": "E_INSUFFICIENT_POINTS"}) from exc
    except LoyaltyRedeemValidationError as exc:
        raise HTTPException(status_code=422, detail={"code": "E_REDEEM_AMOUNT_INVALID"}) from exc

    return _redeem_as_response(result)


@router.get("/internal/loyalty/{user_id}", response_model=LoyaltyAccountResponse)
async def get_loyalty_account(
    request: Request,
    user_id: int = Path(gt=0, le=BIGINT_MAX),
) -> LoyaltyAccountResponse:
    _assert_internal_access(request)

    try:
        async with SessionLocal.begin() as session:
            summary = await LoyaltyService.get_account(session, user_id=user_id)
    except LoyaltyAccountNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_LOYALTY_ACCOUNT_NOT_FOUND"}) from exc

    return _account_as_response(summary)


@router.get("/internal/loyalty/{user_id}/history", response_model=LoyaltyHistoryResponse)
async def get_loyalty_history(
    request: Request,
    user_id: int = Path(gt=0, le=BIGINT_MAX),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
) -> LoyaltyHistoryResponse:
    _assert_internal_access(request)

    try:
        async with SessionLocal.begin() as session:
            entries, total = await LoyaltyService.get_history(
                session,
                user_id=user_id,
                limit=limit,
                offset=offset,
            )
    except LoyaltyAccountNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_LOYALTY_ACCOUNT_NOT_FOUND"}) from exc

    return LoyaltyHistoryResponse(
        user_id=user_id,
        total=total,
        items=[_history_item(entry) for entry in entries],
    )
