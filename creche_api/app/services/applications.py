"""Application listing and the parent-side status changes."""

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from creche_api.app.core.errors import NotFoundError, ValidationFailed
from creche_api.app.core.time import utc_now
from creche_api.app.models.application import Application

logger = logging.getLogger(__name__)

EDITABLE_STATUSES = ("new", "pending")
HISTORY_STATUSES = ("approved", "declined", "completed", "withdrawn")
OFFER_MADE = "offer made"


def can_edit(application: Application) -> bool:
    return (application.application_status or "").lower() in EDITABLE_STATUSES


def _with_summaries(db: Session):
    return db.query(Application).options(joinedload(Application.creche), joinedload(Application.child))


def list_applications(db: Session, user_id: int, status_filter: str | None = None) -> list[Application]:
    query = _with_summaries(db).filter(Application.user_id == user_id)
    if status_filter and status_filter.lower() != "all":
        query = query.filter(func.lower(Application.application_status) == status_filter.lower())
    return query.order_by(Application.created_at.desc(), Application.id.desc()).all()


def list_application_history(db: Session, user_id: int) -> list[Application]:
    return (
        _with_summaries(db)
        .filter(
            Application.user_id == user_id,
            func.lower(Application.application_status).in_(HISTORY_STATUSES),
        )
        .order_by(Application.updated_at.desc(), Application.id.desc())
        .all()
    )


def get_application(db: Session, application_id: int, user_id: int) -> Application:
    application = (
        _with_summaries(db)
        .filter(Application.id == application_id, Application.user_id == user_id)
        .first()
    )
    if not application:
        raise NotFoundError("Application not found")
    return application


def withdraw_application(db: Session, application_id: int, user_id: int) -> Application:
    application = get_application(db, application_id, user_id)
    if not can_edit(application):
        raise ValidationFailed("Only new or pending applications can be withdrawn")
    application.application_status = "withdrawn"
    application.updated_at = utc_now()
    db.commit()
    db.refresh(application)
    logger.info("Application %s withdrawn", application.id)
    return application


def respond_to_offer(db: Session, application_id: int, user_id: int, response: str) -> Application:
    application = get_application(db, application_id, user_id)
    if (application.application_status or "").lower() != OFFER_MADE:
        raise ValidationFailed("There is no open offer on this application")
    application.offer_response = response
    if response == "ACCEPTED":
        application.application_status = "Approved"
    application.updated_at = utc_now()
    db.commit()
    db.refresh(application)
    logger.info("Offer on application %s answered with %s", application.id, response)
    return application


def delete_application(db: Session, application_id: int, user_id: int) -> None:
    application = get_application(db, application_id, user_id)
    db.delete(application)
    db.commit()
    logger.info("Application %s deleted", application_id)
