from datetime import datetime, timezone

from sqlalchemy import String, Integer, Float, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class Card(Base):
    __tablename__ = "cards"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(200))
    annual_fee: Mapped[float] = mapped_column(Float, default=0.0)

    # Welcome bonus is earned once min_spend is reached within min_spend_period days
    min_spend: Mapped[float] = mapped_column(Float, default=0.0)
    min_spend_period: Mapped[int] = mapped_column(Integer, default=90)
    welcome_bonus: Mapped[int] = mapped_column(Integer, default=0)

    reward_rate: Mapped[float] = mapped_column(Float, default=1.0)
    reward_multiplier: Mapped[float] = mapped_column(Float, default=1.0)
    point_value: Mapped[float] = mapped_column(Float, default=0.01)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(timezone.utc), index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    owner: Mapped["User"] = relationship(back_populates="cards")  # noqa: F821
    special_categories: Mapped[list["CardSpecialCategory"]] = relationship(  # noqa: F821
        back_populates="card", cascade="all, delete-orphan", order_by="CardSpecialCategory.id"
    )
    bonus_tiers: Mapped[list["CardBonusTier"]] = relationship(  # noqa: F821
        back_populates="card", cascade="all, delete-orphan", order_by="CardBonusTier.id"
    )
    partner_bonuses: Mapped[list["CardPartnerBonus"]] = relationship(  # noqa: F821
        back_populates="card", cascade="all, delete-orphan", order_by="CardPartnerBonus.id"
    )
