from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.loyalty_accounts import LoyaltyAccount
from app.db.models.loyalty_points_transactions import LoyaltyPointsTransaction
from app.db.repo.loyalty_repo import LoyaltyRepo
from app.economy.loyalty.constants import (
    ENTRY_TYPE_EARN_PURCHASE,
    ENTRY_TYPE_REDEEM,
    REDEEM_DESCRIPTION,
    REDEEM_SUCCESS_MESSAGE,
    purchase_description,
)
from app.economy.loyalty.errors import (
    LoyaltyAccountNotFoundError,
    LoyaltyInsufficientPointsError,
    LoyaltyPointsOverflowError,
    LoyaltyRedeemValidationError,
)
from app.economy.loyalty.rules import (
    credit_points,
    debit_points,
    points_for_purchase,
    tier_progress,
)
from app.economy.loyalty.types import (
    LoyaltyAccountSummary,
    LoyaltyAwardResult,
    LoyaltyPointsEntry,
    LoyaltyRedeemResult,
    LoyaltySnapshot,
    LoyaltyTier,
)

logger = structlog.get_logger(__name__)


def _snapshot_from_model(account: LoyaltyAccount) -> LoyaltySnapshot:
    return LoyaltySnapshot(points=account.points, tier=LoyaltyTier(account.tier))


def _apply_snapshot_to_model(account: LoyaltyAccount, snapshot: LoyaltySnapshot, now_utc: datetime) -> None:
    account.points = snapshot.points
    account.tier = snapshot.tier.value
    account.updated_at = now_utc
    account.version += 1


def _entry_from_model(transaction: LoyaltyPointsTransaction) -> LoyaltyPointsEntry:
    return LoyaltyPointsEntry(
        transaction_id=transaction.id,
        entry_type=transaction.entry_type,
        points=transaction.points,
        balance_after=transaction.balance_after,
        description=transaction.description,
        ticket_id=transaction.ticket_id,
        created_at=transaction.created_at,
    )


class LoyaltyService:
    @staticmethod
    async def load_or_create_for_update(
        session: AsyncSession,
        *,
        user_id: int,
        now_utc: datetime,
    ) -> tuple[LoyaltyAccount, bool]:
        account = await LoyaltyRepo.get_by_user_id_for_update(session, user_id)
        if account is not None:
            return account, False

        # A concurrent first award may insert the row first; lock whichever row won.
        created = await LoyaltyRepo.try_create_default_account(session, user_id=user_id, now_utc=now_utc)
        account = await LoyaltyRepo.get_by_user_id_for_update(session, user_id)
        if account is None:
            raise LoyaltyAccountNotFoundError
        return account, created

    @staticmethod
    async def get_tier_for_update(session: AsyncSession, *, user_id: int) -> LoyaltyTier | None:
        account = await LoyaltyRepo.get_by_user_id_for_update(session, user_id)
        if account is None:
            return None
        return LoyaltyTier(account.tier)

    @staticmethod
    async def award_points(
        session: AsyncSession,
        *,
        user_id: int,
        purchase_amount: int,
        now_utc: datetime,
        entry_type: str = ENTRY_TYPE_EARN_PURCHASE,
        description: str | None = None,
        ticket_id: int | None = None,
    ) -> LoyaltyAwardResult:
        points_earned = points_for_purchase(purchase_amount)

        account, created = await LoyaltyService.load_or_create_for_update(
            session,
            user_id=user_id,
            now_utc=now_utc,
        )
        before = _snapshot_from_model(account)
        after, allowed = credit_points(before, points=points_earned)
        if not allowed:
            logger.error(
                "loyalty_points_overflow",
                user_id=user_id,
                points=before.points,
                points_earned=points_earned,
            )
            raise LoyaltyPointsOverflowError

        _apply_snapshot_to_model(account, after, now_utc)
        await LoyaltyRepo.append_transaction(
            session,
            transaction=LoyaltyPointsTransaction(
                user_id=user_id,
                entry_type=entry_type,
                points=points_earned,
                balance_after=after.points,
                description=description or purchase_description(purchase_amount),
                ticket_id=ticket_id,
                created_at=now_utc,
            ),
        )

        logger.info(
            "loyalty_points_awarded",
            user_id=user_id,
            purchase_amount=purchase_amount,
            points_earned=points_earned,
            points=after.points,
            tier=after.tier.value,
            account_created=created,
        )
        if after.tier != before.tier:
            logger.info(
                "loyalty_tier_changed",
                user_id=user_id,
                previous_tier=before.tier.value,
                tier=after.tier.value,
            )

        return LoyaltyAwardResult(
            user_id=user_id,
            points_earned=points_earned,
            points=after.points,
            tier=after.tier,
            previous_tier=before.tier,
            account_created=created,
        )

    @staticmethod
    async def redeem_points(
        session: AsyncSession,
        *,
        user_id: int,
        amount: int,
        now_utc: datetime,
    ) -> LoyaltyRedeemResult:
        if amount <= 0:
            raise LoyaltyRedeemValidationError

        account = await LoyaltyRepo.get_by_user_id_for_update(session, user_id)
        if account is None:
            raise LoyaltyAccountNotFoundError

        before = _snapshot_from_model(account)
        after, allowed = debit_points(before, points=amount)
        if not allowed:
            logger.info(
                "loyalty_redeem_rejected",
                user_id=user_id,
                requested=amount,
                points=before.points,
            )
            raise LoyaltyInsufficientPointsError

        _apply_snapshot_to_model(account, after, now_utc)
        await LoyaltyRepo.append_transaction(
            session,
            transaction=LoyaltyPointsTransaction(
                user_id=user_id,
                entry_type=ENTRY_TYPE_REDEEM,
                points=-amount,
                balance_after=after.points,
                description=REDEEM_DESCRIPTION,
                ticket_id=None,
                created_at=now_utc,
            ),
        )

        logger.info(
            "loyalty_points_redeemed",
            user_id=user_id,
            points_redeemed=amount,
            points=after.points,
            tier=after.tier.value,
        )
        return LoyaltyRedeemResult(
            user_id=user_id,
            points_redeemed=amount,
            points=after.points,
            tier=after.tier,
            previous_tier=before.tier,
            message=REDEEM_SUCCESS_MESSAGE,
        )

    @staticmethod
    async def get_account(session: AsyncSession, *, user_id: int) -> LoyaltyAccountSummary:
        account = await LoyaltyRepo.get_by_user_id(session, user_id)
        if account is None:
            raise LoyaltyAccountNotFoundError

        progress = tier_progress(account.points)
        return LoyaltyAccountSummary(
            user_id=account.user_id,
            points=account.points,
            tier=LoyaltyTier(account.tier),
            next_tier=progress.next_tier,
            points_to_next_tier=progress.points_to_next_tier,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )

    @staticmethod
    async def get_history(
        session: AsyncSession,
        *,
        user_id: int,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[LoyaltyPointsEntry], int]:
        account = await LoyaltyRepo.get_by_user_id(session, user_id)
        if account is None:
            raise LoyaltyAccountNotFoundError

        transactions = await LoyaltyRepo.list_transactions(
            session,
            user_id=user_id,
            limit=limit,
            offset=offset,
        )
        total = await LoyaltyRepo.count_transactions(session, user_id=user_id)
        return [_entry_from_model(transaction) for transaction in transactions], total
