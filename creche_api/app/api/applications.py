"""Endpoints for a parent's submitted applications."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from creche_api.app.db.session import get_db
from creche_api.app.dependencies.auth import get_current_user
from creche_api.app.models.application import Application
from creche_api.app.models.user import User
from creche_api.app.schemas.application import ApplicationRead, OfferResponseRequest
from creche_api.app.services import applications as applications_service

router = APIRouter(prefix="/applications", tags=["applications"])


def _read(application: Application) -> ApplicationRead:
    read = ApplicationRead.model_validate(application)
    read.can_edit = applications_service.can_edit(application)
    return read


@router.get("", response_model=list[ApplicationRead])
async def list_applications(
    status_filter: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return [_read(app) for app in applications_service.list_applications(db, current_user.id, status_filter)]


@router.get("/history", response_model=list[ApplicationRead])
async def application_history(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return [_read(app) for app in applications_service.list_application_history(db, current_user.id)]


@router.get("/{application_id}", response_model=ApplicationRead)
async def get_application(application_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _read(applications_service.get_application(db, application_id, current_user.id))


@router.post("/{application_id}/withdraw", response_model=ApplicationRead)
async def withdraw_application(application_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _read(applications_service.withdraw_application(db, application_id, current_user.id))


@router.post("/{application_id}/offer-response", response_model=ApplicationRead)
async def respond_to_offer(
    application_id: int,
    body: OfferResponseRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _read(applications_service.respond_to_offer(db, application_id, current_user.id, body.response))


@router.delete("/{application_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_application(application_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    applications_service.delete_application(db, application_id, current_user.id)
