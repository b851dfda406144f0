"""Application wizard endpoints for one creche."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from creche_api.app.core.auth_session import SessionProvider
from creche_api.app.core.errors import ConflictError, NotFoundError
from creche_api.app.db.session import get_db
from creche_api.app.dependencies.auth import get_session_provider
from creche_api.app.schemas.application import (
    StepValidation,
    SubmissionConfirmation,
    WizardContext,
    WizardSelection,
)
from creche_api.app.services.application_wizard import DUPLICATE_MESSAGE, STEPS, ApplicationWizard

router = APIRouter(prefix="/apply", tags=["apply"])


def _load_wizard(db: Session, creche_id: int, provider: SessionProvider, selection: WizardSelection | None = None) -> ApplicationWizard:
    wizard = ApplicationWizard(db, creche_id, provider.user_id, profile=provider.profile).load()
    if selection is not None:
        wizard.select_child(selection.child_id)
        wizard.select_class(selection.class_id)
        wizard.set_notes(selection.message, selection.notes)
    return wizard


def _existing_payload(wizard: ApplicationWizard) -> dict:
    return {
        child_id: {
            "child_id": existing.child_id,
            "class_id": existing.class_id,
            "application_status": existing.application_status,
            "submitted_at": existing.submitted_at.isoformat(),
        }
        for child_id, existing in wizard.existing_applications.items()
    }


@router.get("/{creche_id}", response_model=WizardContext)
async def get_wizard_context(
    creche_id: int,
    db: Session = Depends(get_db),
    provider: SessionProvider = Depends(get_session_provider),
):
    wizard = _load_wizard(db, creche_id, provider)
    return {
        "creche": wizard.creche,
        "steps": list(STEPS),
        "classes": wizard.classes,
        "children": [
            {
                "id": child.id,
                "first_name": child.first_name,
                "last_name": child.last_name,
                "age_in_months": wizard.child_age_in_months(child.id),
                "eligible_class_ids": wizard.eligible_class_ids(child.id),
                "already_applied": child.id in wizard.existing_applications,
            }
            for child in wizard.children
        ],
        "existing_applications": _existing_payload(wizard),
    }


@router.post("/{creche_id}/steps/{step}/validate", response_model=StepValidation)
async def validate_step(
    creche_id: int,
    step: str,
    selection: WizardSelection,
    db: Session = Depends(get_db),
    provider: SessionProvider = Depends(get_session_provider),
):
    if step not in STEPS:
        raise NotFoundError("Unknown step")
    wizard = _load_wizard(db, creche_id, provider, selection)
    wizard.current_step = step
    valid = wizard.validate_step()
    forward = wizard.next_step()
    wizard.current_step = step
    backward = wizard.previous_step()
    return StepValidation(step=step, valid=valid, next_step=forward, previous_step=backward)


@router.post("/{creche_id}", response_model=SubmissionConfirmation, status_code=status.HTTP_201_CREATED)
async def submit_application(
    creche_id: int,
    selection: WizardSelection,
    db: Session = Depends(get_db),
    provider: SessionProvider = Depends(get_session_provider),
):
    wizard = _load_wizard(db, creche_id, provider, selection)
    result = wizard.submit()
    if result.already_applied:
        raise ConflictError(
            DUPLICATE_MESSAGE,
            extra={
                "redirect_to": result.redirect_to,
                "existing_applications": _existing_payload(wizard),
            },
        )
    return result.confirmation
