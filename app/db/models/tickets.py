from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    SmallInteger,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class Ticket(Base):
    __tablename__ = "tickets"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_tickets_price_non_negative"),
        CheckConstraint(
            "discount_percent > 0 AND discount_percent <= 100",
            name="ck_tickets_discount_percent_range",
        ),
        CheckConstraint("points_earned >= 0", name="ck_tickets_points_earned_non_negative"),
        CheckConstraint(
            "tier_at_purchase IS NULL OR tier_at_purchase IN ('BRONZE','SILVER','GOLD','PLATINUM')",
            name="ck_tickets_tier_at_purchase",
        ),
        Index("idx_tickets_user_purchase_date", "user_id", "purchase_date"),
        Index("idx_tickets_event", "event_id"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    event_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("events.id"), nullable=False)
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    seat_number: Mapped[str] = mapped_column(String(32), nullable=False)
    base_price: Mapped[int] = mapped_column(BigInteger, nullable=False)
    demand_price: Mapped[int] = mapped_column(BigInteger, nullable=False)
    discount_percent: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    tier_at_purchase: Mapped[str | None] = mapped_column(String(16), nullable=True)
    price: Mapped[int] = mapped_column(BigInteger, nullable=False)
    points_earned: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    purchase_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
