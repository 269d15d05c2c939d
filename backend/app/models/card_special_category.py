from sqlalchemy import String, Float, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class CardSpecialCategory(Base):
    __tablename__ = "card_special_categories"

    id: Mapped[int] = mapped_column(primary_key=True)
    card_id: Mapped[int] = mapped_column(ForeignKey("cards.id", ondelete="CASCADE"), index=True)
    category: Mapped[str] = mapped_column(String(200))
    reward_rate: Mapped[float] = mapped_column(Float)
    min_spend: Mapped[float | None] = mapped_column(Float, nullable=True)
    max_spend: Mapped[float | None] = mapped_column(Float, nullable=True)

    card: Mapped["Card"] = relationship(back_populates="special_categories")  # noqa: F821
