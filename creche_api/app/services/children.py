"""Child profiles owned by, or shared with, a parent."""

import logging
from datetime import date

from sqlalchemy import or_
from sqlalchemy.orm import Session

from creche_api.app.core.errors import ForbiddenError, NotFoundError, ValidationFailed
from creche_api.app.core.time import age_in_months, utc_now
from creche_api.app.models.child import Child, ChildParent
from creche_api.app.models.user import User

logger = logging.getLogger(__name__)


def _check_birth_date(date_of_birth: date) -> None:
    if date_of_birth > utc_now().date():
        raise ValidationFailed("Date of birth cannot be in the future")


def child_payload(child: Child, user_id: int) -> dict:
    return {
        "id": child.id,
        "user_id": child.user_id,
        "first_name": child.first_name,
        "last_name": child.last_name,
        "date_of_birth": child.date_of_birth,
        "gender": child.gender,
        "profile_picture_url": child.profile_picture_url,
        "age_in_months": age_in_months(child.date_of_birth),
        "is_owner": child.user_id == user_id,
        "created_at": child.created_at,
    }


def create_child(db: Session, user_id: int, first_name: str, last_name: str, date_of_birth: date, gender: str | None = None, profile_picture_url: str | None = None) -> Child:
    _check_birth_date(date_of_birth)
    child = Child(
        user_id=user_id,
        first_name=first_name,
        last_name=last_name,
        date_of_birth=date_of_birth,
        gender=gender,
        profile_picture_url=profile_picture_url,
    )
    db.add(child)
    db.commit()
    db.refresh(child)
    logger.info("Child %s added for user %s", child.id, user_id)
    return child


def list_children(db: Session, user_id: int) -> list[Child]:
    linked = db.query(ChildParent.child_id).filter(ChildParent.user_id == user_id)
    return (
        db.query(Child)
        .filter(or_(Child.user_id == user_id, Child.id.in_(linked)))
        .order_by(Child.created_at.desc(), Child.id.desc())
        .all()
    )


def get_accessible_child(db: Session, child_id: int, user_id: int) -> Child:
    child = db.query(Child).filter(Child.id == child_id).first()
    if not child:
        raise NotFoundError("Child not found")
    if child.user_id == user_id:
        return child
    linked = (
        db.query(ChildParent.id)
        .filter(ChildParent.child_id == child_id, ChildParent.user_id == user_id)
        .first()
    )
    if not linked:
        raise NotFoundError("Child not found")
    return child


def update_child(db: Session, child_id: int, user_id: int, changes: dict) -> Child:
    child = get_accessible_child(db, child_id, user_id)
    if child.user_id != user_id:
        raise ForbiddenError("Only the child's owner can edit this profile")
    if changes.get("date_of_birth") is not None:
        _check_birth_date(changes["date_of_birth"])
    for field, value in changes.items():
        if value is None:
            continue
        if field in ("first_name", "last_name"):
            value = value.strip()
            if not value:
                raise ValidationFailed("Name is required")
        setattr(child, field, value)
    db.commit()
    db.refresh(child)
    return child


def list_linked_parents(db: Session, child_id: int, user_id: int) -> list[dict]:
    get_accessible_child(db, child_id, user_id)
    rows = (
        db.query(ChildParent, User)
        .join(User, ChildParent.user_id == User.id)
        .filter(ChildParent.child_id == child_id)
        .order_by(ChildParent.joined_at.desc(), ChildParent.id.desc())
        .all()
    )
    return [
        {
            "id": link.id,
            "user_id": user.id,
            "relationship": link.relationship_label,
            "name": user.full_name or user.email,
            "email": user.email,
            "joined_at": link.joined_at,
        }
        for link, user in rows
    ]


def remove_linked_parent(db: Session, child_id: int, link_id: int, user_id: int) -> None:
    child = get_accessible_child(db, child_id, user_id)
    if child.user_id != user_id:
        raise ForbiddenError("Only the child's owner can remove linked parents")
    link = (
        db.query(ChildParent)
        .filter(ChildParent.id == link_id, ChildParent.child_id == child_id)
        .first()
    )
    if not link:
        raise NotFoundError("Linked parent not found")
    db.delete(link)
    db.commit()
    logger.info("Linked parent %s removed from child %s", link.user_id, child_id)
