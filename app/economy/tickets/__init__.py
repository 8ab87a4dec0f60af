from app.economy.tickets.service import TicketService

__all__ = ["TicketService"]
