from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class LoyaltyPointsTransaction(Base):
    __tablename__ = "loyalty_points_transactions"
    __table_args__ = (
        CheckConstraint(
            "entry_type IN ('EARN_PURCHASE','EARN_TICKET','REDEEM')",
            name="ck_loyalty_points_transactions_entry_type",
        ),
        CheckConstraint(
            "(entry_type = 'REDEEM' AND points < 0) OR (entry_type <> 'REDEEM' AND points >= 0)",
            name="ck_loyalty_points_transactions_points_sign",
        ),
        CheckConstraint(
            "balance_after >= 0",
            name="ck_loyalty_points_transactions_balance_after_non_negative",
        ),
        Index("idx_loyalty_points_transactions_user_id", "user_id", "id"),
        Index("idx_loyalty_points_transactions_ticket", "ticket_id"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("loyalty_accounts.user_id"),
        nullable=False,
    )
    entry_type: Mapped[str] = mapped_column(String(32), nullable=False)
    points: Mapped[int] = mapped_column(BigInteger, nullable=False)
    balance_after: Mapped[int] = mapped_column(BigInteger, nullable=False)
    description: Mapped[str] = mapped_column(String(256), nullable=False)
    ticket_id: Mapped[int | None] = mapped_column(BigInteger, ForeignKey("tickets.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
