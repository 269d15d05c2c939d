from pydantic import BaseModel, Field

from app.schemas.card_rules import BonusTierIn, PartnerBonusIn, SpecialCategoryIn


class CatalogCardOut(BaseModel):
    id: str  # e.g. "chase-sapphire-reserve"
    name: str
    issuer: str | None = None
    annual_fee: float = Field(ge=0)
    min_spend: float = Field(ge=0)
    min_spend_period: int = Field(default=90, ge=1)
    welcome_bonus: int = Field(default=0, ge=0)
    reward_rate: float = Field(default=1, ge=0)
    reward_multiplier: float = Field(default=1, ge=1)
    point_value: float = Field(default=0.01, ge=0)
    special_categories: list[SpecialCategoryIn] = []
    bonus_tiers: list[BonusTierIn] = []
    partner_bonuses: list[PartnerBonusIn] = []
    notes: str | None = None
