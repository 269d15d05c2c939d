from pydantic import BaseModel, Field, model_validator


class SpecialCategoryIn(BaseModel):
    category: str = Field(min_length=1, max_length=200)
    reward_rate: float = Field(ge=0, le=1000)
    min_spend: float | None = Field(default=None, ge=0, le=99_999_999)
    max_spend: float | None = Field(default=None, gt=0, le=99_999_999)

    @model_validator(mode="after")
    def validate_window(self) -> "SpecialCategoryIn":
        if self.min_spend and self.max_spend and self.min_spend > self.max_spend:
            raise ValueError("min_spend cannot exceed max_spend")
        return self


class SpecialCategoryOut(BaseModel):
    id: int
    category: str
    reward_rate: float
    min_spend: float | None
    max_spend: float | None

    model_config = {"from_attributes": True}


class BonusTierIn(BaseModel):
    min_spend: float = Field(ge=0, le=99_999_999)
    max_spend: float = Field(gt=0, le=99_999_999)
    point_value: float = Field(ge=0, le=1000)

    @model_validator(mode="after")
    def validate_band(self) -> "BonusTierIn":
        if self.max_spend <= self.min_spend:
            raise ValueError("max_spend must be greater than min_spend")
        return self


class BonusTierOut(BaseModel):
    id: int
    min_spend: float
    max_spend: float
    point_value: float

    model_config = {"from_attributes": True}


class PartnerBonusIn(BaseModel):
    partner_name: str = Field(min_length=1, max_length=200)
    bonus_rate: float = Field(ge=0, le=1000)
    description: str = Field(default="", max_length=1000)


class PartnerBonusOut(BaseModel):
    id: int
    partner_name: str
    bonus_rate: float
    description: str

    model_config = {"from_attributes": True}
