from app.db.repo.events_repo import EventsRepo
from app.db.repo.loyalty_repo import LoyaltyRepo
from app.db.repo.tickets_repo import TicketsRepo

__all__ = [
    "EventsRepo",
    "LoyaltyRepo",
    "TicketsRepo",
]
