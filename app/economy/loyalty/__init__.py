from app.economy.loyalty.service import LoyaltyService

__all__ = ["LoyaltyService"]
