from __future__ import annotations

# Upper bound of BIGINT id and amount columns.
BIGINT_MAX = 2**63 - 1

# events.total_tickets is an INTEGER column.
MAX_TOTAL_TICKETS = 2**31 - 1

# Demand pricing reaches just under 1.5x the base price; keep that within BIGINT.
MAX_TICKET_PRICE = BIGINT_MAX * 2 // 3
