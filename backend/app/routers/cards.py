from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.card import Card
from app.models.user import User
from app.routers.auth import require_auth
from app.schemas.card import CardCreate, CardUpdate, CardOut
from app.services.card_service import create_card, delete_card, get_user_card, list_cards, update_card

router = APIRouter(prefix="/api/cards", tags=["cards"])


def _verify_card_ownership(db: Session, user: User, card_id: int) -> Card:
    card = get_user_card(db, user, card_id)
    if not card:
        raise HTTPException(status_code=404, detail="Card not found")
    return card


@router.get("", response_model=list[CardOut])
def list_cards_endpoint(user: User = Depends(require_auth), db: Session = Depends(get_db)):
    return list_cards(db, user)


@router.post("", response_model=CardOut, status_code=201)
def create_card_endpoint(data: CardCreate, user: User = Depends(require_auth), db: Session = Depends(get_db)):
    return create_card(db, data, user)


@router.get("/{card_id}", response_model=CardOut)
def get_card(card_id: int, user: User = Depends(require_auth), db: Session = Depends(get_db)):
    return _verify_card_ownership(db, user, card_id)


@router.put("/{card_id}", response_model=CardOut)
def update_card_endpoint(card_id: int, data: CardUpdate, user: User = Depends(require_auth), db: Session = Depends(get_db)):
    card = _verify_card_ownership(db, user, card_id)
    try:
        return update_card(db, card, data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{card_id}", status_code=204)
def delete_card_endpoint(card_id: int, user: User = Depends(require_auth), db: Session = Depends(get_db)):
    card = _verify_card_ownership(db, user, card_id)
    delete_card(db, card)
