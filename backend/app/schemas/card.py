from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.schemas.card_rules import (
    BonusTierIn,
    BonusTierOut,
    PartnerBonusIn,
    PartnerBonusOut,
    SpecialCategoryIn,
    SpecialCategoryOut,
)


def _clean_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("name cannot be blank")
    return v


class CardCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    annual_fee: float = Field(default=0, ge=0, le=99_999_999)
    min_spend: float = Field(default=0, ge=0, le=99_999_999)
    min_spend_period: int = Field(default=90, ge=1, le=3650)
    welcome_bonus: int = Field(default=0, ge=0, le=99_999_999)
    reward_rate: float = Field(default=1, ge=0, le=1000)
    reward_multiplier: float = Field(default=1, ge=1, le=1000)
    point_value: float = Field(default=0.01, ge=0, le=1000)
    special_categories: list[SpecialCategoryIn] = Field(default_factory=list, max_length=50)
    bonus_tiers: list[BonusTierIn] = Field(default_factory=list, max_length=50)
    partner_bonuses: list[PartnerBonusIn] = Field(default_factory=list, max_length=50)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _clean_name(v)


class CardUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    annual_fee: float | None = Field(default=None, ge=0, le=99_999_999)
    min_spend: float | None = Field(default=None, ge=0, le=99_999_999)
    min_spend_period: int | None = Field(default=None, ge=1, le=3650)
    welcome_bonus: int | None = Field(default=None, ge=0, le=99_999_999)
    reward_rate: float | None = Field(default=None, ge=0, le=1000)
    reward_multiplier: float | None = Field(default=None, ge=1, le=1000)
    point_value: float | None = Field(default=None, ge=0, le=1000)
    # A list that is present replaces the stored rules; omit it to keep them
    special_categories: list[SpecialCategoryIn] | None = Field(default=None, max_length=50)
    bonus_tiers: list[BonusTierIn] | None = Field(default=None, max_length=50)
    partner_bonuses: list[PartnerBonusIn] | None = Field(default=None, max_length=50)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _clean_name(v)


class CardOut(BaseModel):
    id: int
    user_id: int
    name: str
    annual_fee: float
    min_spend: float
    min_spend_period: int
    welcome_bonus: int
    reward_rate: float
    reward_multiplier: float
    point_value: float
    created_at: datetime
    updated_at: datetime
    special_categories: list[SpecialCategoryOut] = []
    bonus_tiers: list[BonusTierOut] = []
    partner_bonuses: list[PartnerBonusOut] = []

    model_config = {"from_attributes": True}


class CardSummary(BaseModel):
    id: int | None
    name: str
    annual_fee: float
    min_spend: float
    min_spend_period: int

    model_config = {"from_attributes": True}
