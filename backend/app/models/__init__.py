from app.models.user import User
from app.models.card import Card
from app.models.card_special_category import CardSpecialCategory
from app.models.card_bonus_tier import CardBonusTier
from app.models.card_partner_bonus import CardPartnerBonus

__all__ = [
    "User", "Card", "CardSpecialCategory", "CardBonusTier", "CardPartnerBonus",
]
