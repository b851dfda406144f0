"""Saved-creche list for a parent."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, contains_eager

from creche_api.app.core.errors import NotFoundError
from creche_api.app.models.creche import Creche
from creche_api.app.models.favorite import UserFavorite
from creche_api.app.services.creches import get_creche

logger = logging.getLogger(__name__)


def list_favorites(db: Session, user_id: int) -> list[UserFavorite]:
    """Favorite rows with their creche loaded by the same query."""
    return (
        db.query(UserFavorite)
        .join(Creche, UserFavorite.creche_id == Creche.id)
        .options(contains_eager(UserFavorite.creche))
        .filter(UserFavorite.user_id == user_id)
        .order_by(UserFavorite.created_at.desc(), UserFavorite.id.desc())
        .all()
    )


def _find(db: Session, user_id: int, creche_id: int) -> UserFavorite | None:
    return (
        db.query(UserFavorite)
        .filter(UserFavorite.user_id == user_id, UserFavorite.creche_id == creche_id)
        .first()
    )


def is_favorite(db: Session, user_id: int, creche_id: int) -> bool:
    return _find(db, user_id, creche_id) is not None


def add_favorite(db: Session, user_id: int, creche_id: int) -> UserFavorite:
    get_creche(db, creche_id)
    existing = _find(db, user_id, creche_id)
    if existing:
        return existing
    favorite = UserFavorite(user_id=user_id, creche_id=creche_id)
    db.add(favorite)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent add won; hand back that row
        db.rollback()
        return _find(db, user_id, creche_id)
    db.refresh(favorite)
    return favorite


def remove_favorite(db: Session, favorite_id: int, user_id: int) -> None:
    favorite = (
        db.query(UserFavorite)
        .filter(UserFavorite.id == favorite_id, UserFavorite.user_id == user_id)
        .first()
    )
    if not favorite:
        raise NotFoundError("Favorite not found")
    db.delete(favorite)
    db.commit()
    logger.info("Favorite %s removed for user %s", favorite_id, user_id)


def toggle_favorite(db: Session, user_id: int, creche_id: int) -> bool:
    """Flip the favorite state for a creche and return the new state."""
    existing = _find(db, user_id, creche_id)
    if existing:
        db.delete(existing)
        db.commit()
        return False
    add_favorite(db, user_id, creche_id)
    return True
