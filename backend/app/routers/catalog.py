from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.routers.auth import require_auth
from app.schemas.card import CardCreate, CardOut
from app.schemas.catalog import CatalogCardOut
from app.services.card_service import create_card
from app.services.catalog_loader import get_catalog, get_preset

router = APIRouter(prefix="/api/catalog", tags=["catalog"])


@router.get("", response_model=list[CatalogCardOut])
def list_catalog():
    """Public endpoint: card presets users can add in one step."""
    return get_catalog()


@router.get("/{preset_id}", response_model=CatalogCardOut)
def get_catalog_card(preset_id: str):
    preset = get_preset(preset_id)
    if not preset:
        raise HTTPException(status_code=404, detail="Catalog card not found")
    return preset


@router.post("/{preset_id}/add", response_model=CardOut, status_code=201)
def add_catalog_card(preset_id: str, user: User = Depends(require_auth), db: Session = Depends(get_db)):
    preset = get_preset(preset_id)
    if not preset:
        raise HTTPException(status_code=404, detail="Catalog card not found")
    data = CardCreate.model_validate(preset.model_dump(exclude={"id", "issuer", "notes"}))
    return create_card(db, data, user)
