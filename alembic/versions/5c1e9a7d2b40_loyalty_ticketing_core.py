"""loyalty_ticketing_core

Revision ID: 5c1e9a7d2b40
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "5c1e9a7d2b40"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "events",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("ticket_price", sa.BigInteger(), nullable=False),
        sa.Column("total_tickets", sa.Integer(), nullable=False),
        sa.Column("tickets_sold", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("ticket_price >= 0", name="ck_events_ticket_price_non_negative"),
        sa.CheckConstraint("total_tickets > 0", name="ck_events_total_tickets_positive"),
        sa.CheckConstraint(
            "tickets_sold >= 0 AND tickets_sold <= total_tickets",
            name="ck_events_tickets_sold_within_capacity",
        ),
    )
    op.create_index("idx_events_created_at", "events", ["created_at"])

    op.create_table(
        "tickets",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("event_id", sa.BigInteger(), nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("seat_number", sa.String(32), nullable=False),
        sa.Column("base_price", sa.BigInteger(), nullable=False),
        sa.Column("demand_price", sa.BigInteger(), nullable=False),
        sa.Column("discount_percent", sa.SmallInteger(), nullable=False),
        sa.Column("tier_at_purchase", sa.String(16), nullable=True),
        sa.Column("price", sa.BigInteger(), nullable=False),
        sa.Column("points_earned", sa.BigInteger(), nullable=False, server_default=sa.text("0")),
        sa.Column("purchase_date", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("price >= 0", name="ck_tickets_price_non_negative"),
        sa.CheckConstraint(
            "discount_percent > 0 AND discount_percent <= 100",
            name="ck_tickets_discount_percent_range",
        ),
        sa.CheckConstraint("points_earned >= 0", name="ck_tickets_points_earned_non_negative"),
        sa.CheckConstraint(
            "tier_at_purchase IS NULL OR tier_at_purchase IN ('BRONZE','SILVER','GOLD','PLATINUM')",
            name="ck_tickets_tier_at_purchase",
        ),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"]),
    )
    op.create_index("idx_tickets_user_purchase_date", "tickets", ["user_id", "purchase_date"])
    op.create_index("idx_tickets_event", "tickets", ["event_id"])

    op.create_table(
        "loyalty_accounts",
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("points", sa.BigInteger(), nullable=False, server_default=sa.text("0")),
        sa.Column("tier", sa.String(16), nullable=False, server_default=sa.text("'BRONZE'")),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("points >= 0", name="ck_loyalty_accounts_points_non_negative"),
        sa.CheckConstraint(
            "tier IN ('BRONZE','SILVER','GOLD','PLATINUM')",
            name="ck_loyalty_accounts_tier",
        ),
        sa.PrimaryKeyConstraint("user_id"),
    )
    op.create_index("idx_loyalty_accounts_tier", "loyalty_accounts", ["tier"])

    op.create_table(
        "loyalty_points_transactions",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("entry_type", sa.String(32), nullable=False),
        sa.Column("points", sa.BigInteger(), nullable=False),
        sa.Column("balance_after", sa.BigInteger(), nullable=False),
        sa.Column("description", sa.String(256), nullable=False),
        sa.Column("ticket_id", sa.BigInteger(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "entry_type IN ('EARN_PURCHASE','EARN_TICKET','REDEEM')",
            name="ck_loyalty_points_transactions_entry_type",
        ),
        sa.CheckConstraint(
            "(entry_type = 'REDEEM' AND points < 0) OR (entry_type <> 'REDEEM' AND points >= 0)",
            name="ck_loyalty_points_transactions_points_sign",
        ),
        sa.CheckConstraint(
            "balance_after >= 0",
            name="ck_loyalty_points_transactions_balance_after_non_negative",
        ),
        sa.ForeignKeyConstraint(["user_id"], ["loyalty_accounts.user_id"]),
        sa.ForeignKeyConstraint(["ticket_id"], ["tickets.id"]),
    )
    op.create_index(
        "idx_loyalty_points_transactions_user_id",
        "loyalty_points_transactions",
        ["user_id", "id"],
    )
    op.create_index(
        "idx_loyalty_points_transactions_ticket",
        "loyalty_points_transactions",
        ["ticket_id"],
    )

    # History rows are append-only.
    op.execute(
        """
        CREATE OR REPLACE FUNCTION fn_loyalty_points_transactions_append_only()
        RETURNS trigger AS $$
        BEGIN
            RAISE EXCEPTION 'loyalty_points_transactions is append-only';
        END;
        $$ LANGUAGE plpgsql;
        """
    )
    op.execute(
        """
        CREATE TRIGGER trg_loyalty_points_transactions_append_only
        BEFORE UPDATE OR DELETE ON loyalty_points_transactions
        FOR EACH ROW EXECUTE FUNCTION fn_loyalty_points_transactions_append_only();
        """
    )


def downgrade() -> None:
    op.execute(
        "DROP TRIGGER IF EXISTS trg_loyalty_points_transactions_append_only ON loyalty_points_transactions"
    )
    op.execute("DROP FUNCTION IF EXISTS fn_loyalty_points_transactions_append_only()")
    op.drop_index("idx_loyalty_points_transactions_ticket", table_name="loyalty_points_transactions")
    op.drop_index("idx_loyalty_points_transactions_user_id", table_name="loyalty_points_transactions")
    op.drop_table("loyalty_points_transactions")
    op.drop_index("idx_loyalty_accounts_tier", table_name="loyalty_accounts")
    op.drop_table("loyalty_accounts")
    op.drop_index("idx_tickets_event", table_name="tickets")
    op.drop_index("idx_tickets_user_purchase_date", table_name="tickets")
    op.drop_table("tickets")
    op.drop_index("idx_events_created_at", table_name="events")
    op.drop_table("events")
