import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.routers.auth import require_auth
from app.schemas.allocation import AllocationRequest, AllocationResponse, AllocationResultOut
from app.services.allocation import (
    DataIntegrityError,
    InvalidInputError,
    allocate,
    total_net_benefit,
    total_spend,
)
from app.services.card_service import get_user_cards_by_ids, list_cards, to_reward_card

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/allocations", tags=["allocations"])


@router.post("", response_model=AllocationResponse)
def create_allocation(data: AllocationRequest, user: User = Depends(require_auth), db: Session = Depends(get_db)):
    """Recommend how to split a purchase across the user's cards."""
    if data.card_ids is not None:
        try:
            cards = get_user_cards_by_ids(db, user, data.card_ids)
        except ValueError as e:
            raise HTTPException(status_code=404, detail=str(e))
    else:
        cards = list_cards(db, user)

    try:
        results = allocate(
            data.purchase_amount,
            [to_reward_card(c) for c in cards],
            category=data.category or None,
            partner_name=data.partner_name or None,
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DataIntegrityError as e:
        logger.warning("Allocation for user %d rejected card data: %s", user.id, e)
        raise HTTPException(status_code=422, detail=str(e))

    return AllocationResponse(
        results=[AllocationResultOut.model_validate(r) for r in results],
        total_spend=total_spend(results),
        total_net_benefit=total_net_benefit(results),
    )
