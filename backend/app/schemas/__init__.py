from app.schemas.card import CardCreate, CardUpdate, CardOut, CardSummary
from app.schemas.card_rules import SpecialCategoryIn, BonusTierIn, PartnerBonusIn
from app.schemas.user import LoginRequest, RegisterRequest, TokenResponse, SessionOut
from app.schemas.allocation import AllocationRequest, AllocationResponse, AllocationResultOut
from app.schemas.catalog import CatalogCardOut

__all__ = [
    "CardCreate", "CardUpdate", "CardOut", "CardSummary",
    "SpecialCategoryIn", "BonusTierIn", "PartnerBonusIn",
    "LoginRequest", "RegisterRequest", "TokenResponse", "SessionOut",
    "AllocationRequest", "AllocationResponse", "AllocationResultOut",
    "CatalogCardOut",
]
