from pydantic import BaseModel, Field

from app.schemas.card import CardSummary


class AllocationRequest(BaseModel):
    purchase_amount: float
    category: str | None = Field(default=None, max_length=200)
    partner_name: str | None = Field(default=None, max_length=200)
    card_ids: list[int] | None = Field(default=None, max_length=200)


class SpecialBonusOut(BaseModel):
    category: str | None = None
    partner_name: str | None = None
    additional_points: float
    additional_value: float
    description: str

    model_config = {"from_attributes": True}


class AllocationResultOut(BaseModel):
    card: CardSummary
    spend_amount: float
    points_earned: float
    welcome_bonus_value: float
    rewards_value: float
    net_benefit: float
    special_bonuses: list[SpecialBonusOut] | None = None

    model_config = {"from_attributes": True}


class AllocationResponse(BaseModel):
    results: list[AllocationResultOut]
    total_spend: float
    total_net_benefit: float
