from __future__ import annotations

from datetime import datetime, timezone

import pytest
from sqlalchemy import select, text
from sqlalchemy.exc import DBAPIError

from app.db.models.loyalty_points_transactions import LoyaltyPointsTransaction
from app.db.session import SessionLocal
from app.economy.loyalty.service import LoyaltyService

UTC = timezone.utc


async def _award_and_get_transaction_id(*, user_id: int, now_utc: datetime) -> int:
    async with SessionLocal.begin() as session:
        await LoyaltyService.award_points(session, user_id=user_id, purchase_amount=1000, now_utc=now_utc)

    async with SessionLocal.begin() as session:
        result = await session.execute(
            select(LoyaltyPointsTransaction.id).where(LoyaltyPointsTransaction.user_id == user_id)
        )
        return int(result.scalar_one())


@pytest.mark.asyncio
async def test_points_transaction_update_fails_on_db_trigger() -> None:
    now_utc = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)
    transaction_id = await _award_and_get_transaction_id(user_id=901, now_utc=now_utc)

    with pytest.raises(DBAPIError) as exc_info:
        async with SessionLocal.begin() as session:
            await session.execute(
                text("UPDATE loyalty_points_transactions SET points = points + 1 WHERE id = :transaction_id"),
                {"transaction_id": transaction_id},
            )

    assert "append-only" in str(exc_info.value).lower()


@pytest.mark.asyncio
async def test_points_transaction_delete_fails_on_db_trigger() -> None:
    now_utc = datetime(2026, 3, 2, 9, 10, tzinfo=UTC)
    transaction_id = await _award_and_get_transaction_id(user_id=902, now_utc=now_utc)

    with pytest.raises(DBAPIError) as exc_info:
        async with SessionLocal.begin() as session:
            await session.execute(
                text("DELETE FROM loyalty_points_transactions WHERE id = :transaction_id"),
                {"transaction_id": transaction_id},
            )

    assert "append-only" in str(exc_info.value).lower()

    async with SessionLocal.begin() as session:
        entries, total = await LoyaltyService.get_history(session, user_id=902)

    assert total == 1
    assert entries[0].transaction_id == transaction_id
