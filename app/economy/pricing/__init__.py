from app.economy.pricing.rules import final_price, price_breakdown

__all__ = ["final_price", "price_breakdown"]
