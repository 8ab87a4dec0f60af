from app.db.models.events import Event
from app.db.models.loyalty_accounts import LoyaltyAccount
from app.db.models.loyalty_points_transactions import LoyaltyPointsTransaction
from app.db.models.tickets import Ticket

__all__ = [
    "Event",
    "LoyaltyAccount",
    "LoyaltyPointsTransaction",
    "Ticket",
]
