"""Creche browsing endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from creche_api.app.db.session import get_db
from creche_api.app.dependencies.auth import get_current_user
from creche_api.app.models.user import User
from creche_api.app.schemas.creche import CrecheDetail, CrecheSummary
from creche_api.app.services.creches import get_creche_detail, search_creches

router = APIRouter(prefix="/creches", tags=["creches"])


@router.get("", response_model=list[CrecheSummary])
async def list_creches(
    q: str | None = None,
    city: str | None = None,
    suburb: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return search_creches(db, query=q, city=city, suburb=suburb)


@router.get("/{creche_id}", response_model=CrecheDetail)
async def get_creche(creche_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return get_creche_detail(db, creche_id, current_user.id)
