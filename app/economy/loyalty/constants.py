from __future__ import annotations

POINTS_PER_AMOUNT_DIVISOR = 10

# (min purchase amount, base points divisor), highest threshold first.
PURCHASE_BONUS_BRACKETS: tuple[tuple[int, int], ...] = (
    (1000, 2),
    (500, 4),
    (200, 10),
)

# (min points, tier value), highest threshold first.
TIER_THRESHOLDS: tuple[tuple[int, str], ...] = (
    (10_000, "PLATINUM"),
    (5_000, "GOLD"),
    (2_000, "SILVER"),
    (0, "BRONZE"),
)

# Upper bound of the BIGINT points column.
MAX_POINTS_BALANCE = 2**63 - 1

ENTRY_TYPE_EARN_PURCHASE = "EARN_PURCHASE"
ENTRY_TYPE_EARN_TICKET = "EARN_TICKET"
ENTRY_TYPE_REDEEM = "REDEEM"

REDEEM_DESCRIPTION = "Points redemption"
REDEEM_SUCCESS_MESSAGE = "Points successfully redeemed!"


def purchase_description(purchase_amount: int) -> str:
    return f"Points earned from purchase: {purchase_amount}"


def ticket_purchase_description(*, ticket_id: int, price: int) -> str:
    return f"Points earned from ticket {ticket_id} purchase: {price}"
