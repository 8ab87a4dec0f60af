from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class LoyaltyAccount(Base):
    __tablename__ = "loyalty_accounts"
    __table_args__ = (
        CheckConstraint("points >= 0", name="ck_loyalty_accounts_points_non_negative"),
        CheckConstraint(
            "tier IN ('BRONZE','SILVER','GOLD','PLATINUM')",
            name="ck_loyalty_accounts_tier",
        ),
        Index("idx_loyalty_accounts_tier", "tier"),
    )

    user_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    points: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    tier: Mapped[str] = mapped_column(String(16), nullable=False, default="BRONZE")
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
