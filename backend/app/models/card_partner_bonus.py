from sqlalchemy import String, Float, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class CardPartnerBonus(Base):
    __tablename__ = "card_partner_bonuses"

    id: Mapped[int] = mapped_column(primary_key=True)
    card_id: Mapped[int] = mapped_column(ForeignKey("cards.id", ondelete="CASCADE"), index=True)
    partner_name: Mapped[str] = mapped_column(String(200))
    bonus_rate: Mapped[float] = mapped_column(Float)
    description: Mapped[str] = mapped_column(Text, default="")

    card: Mapped["Card"] = relationship(back_populates="partner_bonuses")  # noqa: F821
