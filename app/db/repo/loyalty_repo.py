from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.loyalty_accounts import LoyaltyAccount
from app.db.models.loyalty_points_transactions import LoyaltyPointsTransaction


class LoyaltyRepo:
    @staticmethod
    async def get_by_user_id(session: AsyncSession, user_id: int) -> LoyaltyAccount | None:
        return await session.get(LoyaltyAccount, user_id)

    @staticmethod
    async def get_by_user_id_for_update(session: AsyncSession, user_id: int) -> LoyaltyAccount | None:
        stmt = select(LoyaltyAccount).where(LoyaltyAccount.user_id == user_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def try_create_default_account(
        session: AsyncSession,
        *,
        user_id: int,
        now_utc: datetime,
    ) -> bool:
        stmt = (
            postgresql_insert(LoyaltyAccount)
            .values(
                user_id=user_id,
                points=0,
                tier="BRONZE",
                version=0,
                created_at=now_utc,
                updated_at=now_utc,
            )
            .on_conflict_do_nothing(index_elements=[LoyaltyAccount.user_id])
            .returning(LoyaltyAccount.user_id)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def append_transaction(
        session: AsyncSession,
        *,
        transaction: LoyaltyPointsTransaction,
    ) -> LoyaltyPointsTransaction:
        session.add(transaction)
        await session.flush()
        return transaction

    @staticmethod
    async def list_transactions(
        session: AsyncSession,
        *,
        user_id: int,
        limit: int = 100,
        offset: int = 0,
    ) -> list[LoyaltyPointsTransaction]:
        stmt = (
            select(LoyaltyPointsTransaction)
            .where(LoyaltyPointsTransaction.user_id == user_id)
            .order_by(LoyaltyPointsTransaction.id.asc())
            .offset(offset)
            .limit(limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def count_transactions(session: AsyncSession, *, user_id: int) -> int:
        stmt = select(func.count(LoyaltyPointsTransaction.id)).where(
            LoyaltyPointsTransaction.user_id == user_id
        )
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)
