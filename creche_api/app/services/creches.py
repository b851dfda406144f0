"""Creche browsing and class capacity helpers."""

from sqlalchemy import func
from sqlalchemy.orm import Session

from creche_api.app.core.errors import NotFoundError
from creche_api.app.models.creche import Creche, CrecheClass, EnrolledStudent
from creche_api.app.models.favorite import UserFavorite


def capacity_label(percentage: int) -> str:
    if percentage >= 90:
        return "Almost Full"
    if percentage >= 75:
        return "Limited Spots"
    return "Available"


def get_creche(db: Session, creche_id: int) -> Creche:
    creche = db.query(Creche).filter(Creche.id == creche_id).first()
    if not creche:
        raise NotFoundError("Creche not found")
    return creche


def count_active_enrollment(db: Session, class_id: int) -> int:
    return (
        db.query(func.count(EnrolledStudent.id))
        .filter(EnrolledStudent.class_id == class_id, EnrolledStudent.status == "active")
        .scalar()
        or 0
    )


def classes_with_enrollment(db: Session, creche_id: int) -> list[dict]:
    """Classes for a creche, youngest first, each with its live enrollment count."""
    classes = (
        db.query(CrecheClass)
        .filter(CrecheClass.creche_id == creche_id)
        .order_by(CrecheClass.min_age_months.asc(), CrecheClass.id.asc())
        .all()
    )
    annotated = []
    for crecheclass in classes:
        enrolled = count_active_enrollment(db, crecheclass.id)
        percentage = round(enrolled * 100 / crecheclass.capacity) if crecheclass.capacity else 0
        annotated.append(
            {
                "id": crecheclass.id,
                "name": crecheclass.name,
                "color": crecheclass.color,
                "capacity": crecheclass.capacity,
                "min_age_months": crecheclass.min_age_months,
                "max_age_months": crecheclass.max_age_months,
                "current_enrollment": enrolled,
                "capacity_percentage": percentage,
                "capacity_label": capacity_label(percentage),
            }
        )
    return annotated


def follower_counts(db: Session, creche_ids) -> dict[int, int]:
    """Number of parents who saved each creche as a favorite."""
    creche_ids = list(creche_ids)
    if not creche_ids:
        return {}
    rows = (
        db.query(UserFavorite.creche_id, func.count(UserFavorite.id))
        .filter(UserFavorite.creche_id.in_(creche_ids))
        .group_by(UserFavorite.creche_id)
        .all()
    )
    return {creche_id: count for creche_id, count in rows}


def search_creches(
    db: Session,
    query: str | None = None,
    city: str | None = None,
    suburb: str | None = None,
    accepting_only: bool = True,
) -> list[Creche]:
    creches = db.query(Creche)
    if accepting_only:
        creches = creches.filter(Creche.accepting_applications.is_(True))
    if query and query.strip():
        creches = creches.filter(Creche.name.ilike(f"%{query.strip()}%"))
    if city:
        creches = creches.filter(func.lower(Creche.city) == city.strip().lower())
    if suburb:
        creches = creches.filter(func.lower(Creche.suburb) == suburb.strip().lower())
    return creches.order_by(Creche.name.asc()).all()


def get_creche_detail(db: Session, creche_id: int, user_id: int) -> dict:
    creche = get_creche(db, creche_id)
    is_favorite = (
        db.query(UserFavorite.id)
        .filter(UserFavorite.user_id == user_id, UserFavorite.creche_id == creche_id)
        .first()
        is not None
    )
    detail = {column.name: getattr(creche, column.name) for column in Creche.__table__.columns}
    detail["classes"] = classes_with_enrollment(db, creche_id)
    detail["is_favorite"] = is_favorite
    detail["follower_count"] = follower_counts(db, [creche_id]).get(creche_id, 0)
    return detail
