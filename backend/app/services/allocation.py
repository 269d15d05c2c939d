"""Split a purchase across a user's cards to maximise net benefit.

The engine is a pure function of its inputs. Cards are ranked by value
density, each ranked card then receives up to its minimum spend so its
welcome bonus can be captured, and any amount left over goes to the card
with the best ongoing reward rate.
"""

import logging
import math
import numbers
from decimal import Decimal
from dataclasses import dataclass, field, replace
from typing import Iterable, Sequence

logger = logging.getLogger(__name__)


class AllocationError(ValueError):
    """Base class for allocation failures."""


class InvalidInputError(AllocationError):
    """The request itself cannot be allocated (bad amount, no cards)."""


class DataIntegrityError(AllocationError):
    """A card record carries values the engine cannot rank or score."""


@dataclass(frozen=True, slots=True)
class SpecialCategory:
    category: str
    reward_rate: float
    min_spend: float | None = None
    max_spend: float | None = None


@dataclass(frozen=True, slots=True)
class BonusTier:
    min_spend: float
    max_spend: float
    point_value: float


@dataclass(frozen=True, slots=True)
class PartnerBonus:
    partner_name: str
    bonus_rate: float
    description: str = ""


@dataclass(frozen=True, slots=True)
class RewardCard:
    name: str
    annual_fee: float
    min_spend: float
    welcome_bonus: float
    reward_rate: float
    point_value: float
    reward_multiplier: float = 1.0
    min_spend_period: int = 90  # days, informational only
    id: int | None = None
    owner_id: int | None = None
    special_categories: tuple[SpecialCategory, ...] = ()
    bonus_tiers: tuple[BonusTier, ...] = ()
    partner_bonuses: tuple[PartnerBonus, ...] = ()


@dataclass(frozen=True, slots=True)
class SpecialBonus:
    additional_points: float
    additional_value: float
    description: str
    category: str | None = None
    partner_name: str | None = None


@dataclass(frozen=True, slots=True)
class AllocationResult:
    card: RewardCard
    spend_amount: float
    points_earned: float
    welcome_bonus_value: float
    rewards_value: float
    net_benefit: float
    special_bonuses: tuple[SpecialBonus, ...] | None = field(default=None)


def ongoing_rate(card: RewardCard) -> float:
    """Currency value earned per unit spent at the card's base rate."""
    return card.reward_rate * card.reward_multiplier * card.point_value


def _match_category(card: RewardCard, category: str | None) -> SpecialCategory | None:
    if not category:
        return None
    return next((c for c in card.special_categories if c.category == category), None)


def _match_partner(card: RewardCard, partner_name: str | None) -> PartnerBonus | None:
    if not partner_name:
        return None
    return next((p for p in card.partner_bonuses if p.partner_name == partner_name), None)


def value_density(card: RewardCard, category: str | None = None, partner_name: str | None = None) -> float:
    """Ranking score: welcome bonus plus base earn per unit of minimum spend.

    A matching special category or partner bonus adds its rate, valued at the
    card's point value, on top.
    """
    score = (card.welcome_bonus * card.point_value + ongoing_rate(card)) / card.min_spend

    special = _match_category(card, category)
    if special is not None:
        score += special.reward_rate * card.point_value

    partner = _match_partner(card, partner_name)
    if partner is not None:
        score += partner.bonus_rate * card.point_value

    return score


def special_category_bonus(spend_amount: float, rule: SpecialCategory, point_value: float) -> tuple[float, float]:
    """Return (points, value) earned by a category rule on ``spend_amount``.

    Zero bounds count as unset.
    """
    eligible = spend_amount
    if rule.max_spend:
        eligible = min(eligible, rule.max_spend)
    if rule.min_spend and eligible < rule.min_spend:
        eligible = 0.0

    points = eligible * rule.reward_rate
    return points, points * point_value


def bonus_tier_bonus(spend_amount: float, tiers: Iterable[BonusTier]) -> tuple[float, float]:
    """Return (points, value) accumulated over every tier ``spend_amount`` reaches.

    The tier's point value is applied twice: once as the points-per-unit
    rate and again to value those points.
    """
    total_points = 0.0
    total_value = 0.0
    for tier in sorted(tiers, key=lambda t: t.min_spend):
        if spend_amount >= tier.min_spend:
            span = min(spend_amount, tier.max_spend) - tier.min_spend
            points = span * tier.point_value
            total_points += points
            total_value += points * tier.point_value
    return total_points, total_value


def _format_rate(rate: float) -> str:
    rate = float(rate)
    return str(int(rate)) if rate.is_integer() else repr(rate)


def _check_amount(purchase_amount) -> float:
    if isinstance(purchase_amount, bool) or not isinstance(purchase_amount, (numbers.Real, Decimal)):
        raise InvalidInputError(f"Purchase amount must be a number, got {purchase_amount!r}")
    try:
        amount = float(purchase_amount)
    except ValueError:
        raise InvalidInputError(f"Purchase amount must be a number, got {purchase_amount!r}")
    if not math.isfinite(amount) or amount <= 0:
        raise InvalidInputError(f"Purchase amount must be positive, got {purchase_amount!r}")
    return amount


def _check_card(card: RewardCard) -> None:
    label = card.name or f"card {card.id}"
    numeric = {
        "annual_fee": card.annual_fee,
        "min_spend": card.min_spend,
        "welcome_bonus": card.welcome_bonus,
        "reward_rate": card.reward_rate,
        "reward_multiplier": card.reward_multiplier,
        "point_value": card.point_value,
    }
    for name, value in numeric.items():
        if not math.isfinite(value):
            raise DataIntegrityError(f"{label}: {name} must be finite")

    if card.min_spend <= 0:
        raise DataIntegrityError(f"{label}: min_spend must be greater than zero to rank the card")
    if card.annual_fee < 0:
        raise DataIntegrityError(f"{label}: annual_fee cannot be negative")
    if card.welcome_bonus < 0:
        raise DataIntegrityError(f"{label}: welcome_bonus cannot be negative")
    if card.reward_rate < 0:
        raise DataIntegrityError(f"{label}: reward_rate cannot be negative")
    if card.reward_multiplier < 1:
        raise DataIntegrityError(f"{label}: reward_multiplier must be at least 1")
    if card.point_value < 0:
        raise DataIntegrityError(f"{label}: point_value cannot be negative")

    for rule in card.special_categories:
        bounds = [v for v in (rule.min_spend, rule.max_spend) if v is not None]
        if not all(math.isfinite(v) for v in (rule.reward_rate, *bounds)):
            raise DataIntegrityError(f"{label}: category '{rule.category}' has a non-finite value")
        if rule.reward_rate < 0:
            raise DataIntegrityError(f"{label}: category '{rule.category}' has a negative rate")
        if rule.min_spend and rule.max_spend and rule.min_spend > rule.max_spend:
            raise DataIntegrityError(f"{label}: category '{rule.category}' min_spend exceeds max_spend")
    for tier in card.bonus_tiers:
        if not all(math.isfinite(v) for v in (tier.min_spend, tier.max_spend, tier.point_value)):
            raise DataIntegrityError(f"{label}: bonus tier has a non-finite value")
        if tier.min_spend < 0 or tier.max_spend <= tier.min_spend:
            raise DataIntegrityError(
                f"{label}: bonus tier [{tier.min_spend}, {tier.max_spend}) is not a valid band"
            )
    for partner in card.partner_bonuses:
        if not math.isfinite(partner.bonus_rate):
            raise DataIntegrityError(f"{label}: partner '{partner.partner_name}' has a non-finite rate")
        if partner.bonus_rate < 0:
            raise DataIntegrityError(f"{label}: partner '{partner.partner_name}' has a negative rate")


def _score(card: RewardCard, spend_amount: float, category: str | None, partner_name: str | None) -> AllocationResult:
    points = spend_amount * card.reward_rate * card.reward_multiplier
    value = points * card.point_value
    bonuses: list[SpecialBonus] = []

    special = _match_category(card, category)
    if special is not None:
        extra_points, extra_value = special_category_bonus(spend_amount, special, card.point_value)
        points += extra_points
        value += extra_value
        bonuses.append(SpecialBonus(
            category=category,
            additional_points=extra_points,
            additional_value=extra_value,
            description=f"{_format_rate(special.reward_rate)}x points in {category}",
        ))

    partner = _match_partner(card, partner_name)
    if partner is not None:
        extra_points = spend_amount * partner.bonus_rate
        extra_value = extra_points * card.point_value
        points += extra_points
        value += extra_value
        bonuses.append(SpecialBonus(
            partner_name=partner_name,
            additional_points=extra_points,
            additional_value=extra_value,
            description=partner.description,
        ))

    if card.bonus_tiers:
        tier_points, tier_value = bonus_tier_bonus(spend_amount, card.bonus_tiers)
        points += tier_points
        value += tier_value

    welcome_bonus_value = card.welcome_bonus * card.point_value if spend_amount >= card.min_spend else 0.0

    return AllocationResult(
        card=card,
        spend_amount=spend_amount,
        points_earned=points,
        welcome_bonus_value=welcome_bonus_value,
        rewards_value=value,
        net_benefit=welcome_bonus_value + value - card.annual_fee,
        special_bonuses=tuple(bonuses) or None,
    )


def _absorb_residual(result: AllocationResult, amount: float) -> AllocationResult:
    card = result.card
    extra_points = amount * card.reward_rate * card.reward_multiplier
    extra_value = extra_points * card.point_value
    return replace(
        result,
        spend_amount=result.spend_amount + amount,
        points_earned=result.points_earned + extra_points,
        rewards_value=result.rewards_value + extra_value,
        net_benefit=result.net_benefit + extra_value,
    )


def rank_cards(cards: Iterable[RewardCard], category: str | None = None, partner_name: str | None = None) -> list[RewardCard]:
    """Cards by descending value density; equal scores keep input order."""
    return sorted(cards, key=lambda c: value_density(c, category, partner_name), reverse=True)


def allocate(
    purchase_amount: float,
    cards: Iterable[RewardCard],
    category: str | None = None,
    partner_name: str | None = None,
) -> list[AllocationResult]:
    """Recommend how much of ``purchase_amount`` to put on each card.

    ``purchase_amount`` may be any real number or a ``Decimal``. Raises
    InvalidInputError for a non-positive or non-numeric amount or an empty
    card set, and DataIntegrityError for a card that cannot be scored
    (for example ``min_spend`` of zero). Nothing is returned on failure.

    Results come back in ranked order. When the cards' combined minimum spend
    is smaller than the purchase, the remainder is folded into the result
    whose card earns the most per unit at its base rate.
    """
    amount = _check_amount(purchase_amount)
    cards = tuple(cards)
    if not cards:
        raise InvalidInputError("At least one card is required to allocate a purchase")
    for card in cards:
        _check_card(card)

    remaining = amount
    results: list[AllocationResult] = []
    for card in rank_cards(cards, category, partner_name):
        if remaining <= 0:
            break
        spend_amount = min(remaining, card.min_spend)
        if spend_amount <= 0:
            continue
        results.append(_score(card, spend_amount, category, partner_name))
        remaining -= spend_amount

    if remaining > 0 and results:
        best = 0
        for index in range(1, len(results)):
            if ongoing_rate(results[index].card) > ongoing_rate(results[best].card):
                best = index
        results[best] = _absorb_residual(results[best], remaining)

    logger.debug(
        "Allocated %.2f across %d of %d cards (category=%s, partner=%s)",
        amount, len(results), len(cards), category, partner_name,
    )
    return results


def total_spend(results: Sequence[AllocationResult]) -> float:
    return sum(r.spend_amount for r in results)


def total_net_benefit(results: Sequence[AllocationResult]) -> float:
    return sum(r.net_benefit for r in results)
