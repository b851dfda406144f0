"""Saved creche endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from creche_api.app.db.session import get_db
from creche_api.app.dependencies.auth import get_current_user
from creche_api.app.models.user import User
from creche_api.app.schemas.favorite import FavoriteCreate, FavoriteRead, FavoriteToggle
from creche_api.app.services import favorites as favorites_service

router = APIRouter(prefix="/favorites", tags=["favorites"])


@router.get("", response_model=list[FavoriteRead])
async def list_favorites(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return favorites_service.list_favorites(db, current_user.id)


@router.post("", response_model=FavoriteRead, status_code=status.HTTP_201_CREATED)
async def add_favorite(favorite_in: FavoriteCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return favorites_service.add_favorite(db, current_user.id, favorite_in.creche_id)


@router.post("/toggle/{creche_id}", response_model=FavoriteToggle)
async def toggle_favorite(creche_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return FavoriteToggle(creche_id=creche_id, is_favorite=favorites_service.toggle_favorite(db, current_user.id, creche_id))


@router.delete("/{favorite_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_favorite(favorite_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    favorites_service.remove_favorite(db, favorite_id, current_user.id)
