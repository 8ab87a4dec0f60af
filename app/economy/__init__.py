from app.economy.loyalty import LoyaltyService
from app.economy.tickets import TicketService

__all__ = [
    "LoyaltyService",
    "TicketService",
]
