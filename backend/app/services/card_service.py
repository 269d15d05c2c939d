from sqlalchemy.orm import Session, selectinload

from app.models.card import Card
from app.models.card_bonus_tier import CardBonusTier
from app.models.card_partner_bonus import CardPartnerBonus
from app.models.card_special_category import CardSpecialCategory
from app.models.user import User
from app.schemas.card import CardCreate, CardUpdate
from app.schemas.card_rules import BonusTierIn, PartnerBonusIn, SpecialCategoryIn
from app.services.allocation import BonusTier, PartnerBonus, RewardCard, SpecialCategory

_RULE_FIELDS = ("special_categories", "bonus_tiers", "partner_bonuses")


def _card_query(db: Session, user: User):
    return (
        db.query(Card)
        .options(
            selectinload(Card.special_categories),
            selectinload(Card.bonus_tiers),
            selectinload(Card.partner_bonuses),
        )
        .filter(Card.user_id == user.id)
    )


def list_cards(db: Session, user: User) -> list[Card]:
    """All of the user's cards, newest first."""
    return _card_query(db, user).order_by(Card.created_at.desc(), Card.id.desc()).all()


def get_user_card(db: Session, user: User, card_id: int) -> Card | None:
    """Load a card only if it belongs to ``user``."""
    return _card_query(db, user).filter(Card.id == card_id).first()


def get_user_cards_by_ids(db: Session, user: User, card_ids: list[int]) -> list[Card]:
    """Load the requested cards in request order.

    Raises ValueError naming the first id the user does not own.
    """
    cards = {c.id: c for c in _card_query(db, user).filter(Card.id.in_(card_ids)).all()}
    ordered = []
    for card_id in dict.fromkeys(card_ids):
        card = cards.get(card_id)
        if card is None:
            raise ValueError(f"Card {card_id} not found")
        ordered.append(card)
    return ordered


def _build_special_categories(rules: list[SpecialCategoryIn]) -> list[CardSpecialCategory]:
    return [
        CardSpecialCategory(
            category=r.category,
            reward_rate=r.reward_rate,
            min_spend=r.min_spend,
            max_spend=r.max_spend,
        )
        for r in rules
    ]


def _build_bonus_tiers(rules: list[BonusTierIn]) -> list[CardBonusTier]:
    return [
        CardBonusTier(min_spend=r.min_spend, max_spend=r.max_spend, point_value=r.point_value)
        for r in rules
    ]


def _build_partner_bonuses(rules: list[PartnerBonusIn]) -> list[CardPartnerBonus]:
    return [
        CardPartnerBonus(partner_name=r.partner_name, bonus_rate=r.bonus_rate, description=r.description)
        for r in rules
    ]


_RULE_BUILDERS = {
    "special_categories": _build_special_categories,
    "bonus_tiers": _build_bonus_tiers,
    "partner_bonuses": _build_partner_bonuses,
}


def create_card(db: Session, data: CardCreate, user: User) -> Card:
    fields = data.model_dump(exclude=set(_RULE_FIELDS))
    card = Card(user_id=user.id, **fields)
    for name, build in _RULE_BUILDERS.items():
        setattr(card, name, build(getattr(data, name)))
    db.add(card)
    db.commit()
    db.refresh(card)
    return card


def update_card(db: Session, card: Card, data: CardUpdate) -> Card:
    update_data = data.model_dump(exclude_unset=True, exclude=set(_RULE_FIELDS))
    for field, value in update_data.items():
        if value is None:
            raise ValueError(f"{field} cannot be null")
        setattr(card, field, value)

    # Rule lists are replaced wholesale; delete-orphan removes the old rows
    for name, build in _RULE_BUILDERS.items():
        if name not in data.model_fields_set:
            continue
        rules = getattr(data, name)
        setattr(card, name, build(rules or []))

    db.commit()
    db.refresh(card)
    return card


def delete_card(db: Session, card: Card) -> None:
    db.delete(card)
    db.commit()


def to_reward_card(card: Card) -> RewardCard:
    """Snapshot a stored card as an immutable engine record."""
    return RewardCard(
        id=card.id,
        owner_id=card.user_id,
        name=card.name,
        annual_fee=card.annual_fee,
        min_spend=card.min_spend,
        min_spend_period=card.min_spend_period,
        welcome_bonus=card.welcome_bonus,
        reward_rate=card.reward_rate,
        reward_multiplier=card.reward_multiplier,
        point_value=card.point_value,
        special_categories=tuple(
            SpecialCategory(
                category=c.category,
                reward_rate=c.reward_rate,
                min_spend=c.min_spend,
                max_spend=c.max_spend,
            )
            for c in card.special_categories
        ),
        bonus_tiers=tuple(
            BonusTier(min_spend=t.min_spend, max_spend=t.max_spend, point_value=t.point_value)
            for t in card.bonus_tiers
        ),
        partner_bonuses=tuple(
            PartnerBonus(partner_name=p.partner_name, bonus_rate=p.bonus_rate, description=p.description)
            for p in card.partner_bonuses
        ),
    )
