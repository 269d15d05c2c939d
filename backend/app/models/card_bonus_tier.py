from sqlalchemy import Float, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class CardBonusTier(Base):
    __tablename__ = "card_bonus_tiers"

    id: Mapped[int] = mapped_column(primary_key=True)
    card_id: Mapped[int] = mapped_column(ForeignKey("cards.id", ondelete="CASCADE"), index=True)
    min_spend: Mapped[float] = mapped_column(Float)
    max_spend: Mapped[float] = mapped_column(Float)
    point_value: Mapped[float] = mapped_column(Float)

    card: Mapped["Card"] = relationship(back_populates="bonus_tiers")  # noqa: F821
