"""Four-step application wizard: child, class, notes, summary.

The wizard loads everything the steps need for one creche and one parent,
tracks the current selections, and turns them into a single application
row. A child may only ever hold one application per creche; whether that is
known before submitting or only discovered through the database's unique
constraint, the caller gets the same "already applied" outcome pointing at
their applications list.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from creche_api.app.core.errors import (
    ErrorKind,
    NotFoundError,
    RemoteError,
    ValidationFailed,
    classify_integrity_error,
)
from creche_api.app.core.time import age_in_months, utc_now
from creche_api.app.models.application import Application
from creche_api.app.models.child import Child
from creche_api.app.schemas.user import SessionProfile
from creche_api.app.services.creches import classes_with_enrollment, get_creche

logger = logging.getLogger(__name__)

STEPS = ("child", "class", "notes", "summary")
APPLICATIONS_ROUTE = "/applications"
APPLICATION_SOURCE = "mobile_app"
INITIAL_STATUS = "New"

SUBMITTED = "submitted"
ALREADY_APPLIED = "already_applied"

MISSING_FIELDS_MESSAGE = "Please complete all required fields"
AGE_MISMATCH_MESSAGE = "Child does not meet age requirements for selected class"
MISSING_PROFILE_MESSAGE = "Please complete your profile before applying"
DUPLICATE_MESSAGE = "This child already has an application for this creche."
SUBMIT_FAILED_MESSAGE = "Failed to submit application. Please try again."
CLOSED_MESSAGE = "This creche is not accepting applications at the moment."


@dataclass
class ExistingApplication:
    child_id: int
    class_id: Optional[int]
    application_status: str
    submitted_at: datetime


@dataclass
class SubmissionResult:
    outcome: str
    application: Optional[Application] = None
    confirmation: dict = field(default_factory=dict)
    redirect_to: Optional[str] = None

    @property
    def already_applied(self) -> bool:
        return self.outcome == ALREADY_APPLIED


def is_age_eligible(date_of_birth: date, min_age_months: int, max_age_months: int, today: date | None = None) -> bool:
    months = age_in_months(date_of_birth, today)
    return min_age_months <= months <= max_age_months


class ApplicationWizard:
    def __init__(self, db: Session, creche_id: int, user_id: int, profile: Optional[SessionProfile] = None):
        self.db = db
        self.creche_id = creche_id
        self.user_id = user_id
        self.profile = profile
        self.creche = None
        self.classes: list[dict] = []
        self.children: list[Child] = []
        self.existing_applications: dict[int, ExistingApplication] = {}
        self.selected_child_id: Optional[int] = None
        self.selected_class_id: Optional[int] = None
        self.message = ""
        self.notes = ""
        self.current_step = STEPS[0]

    def load(self) -> "ApplicationWizard":
        self.creche = get_creche(self.db, self.creche_id)
        if not self.creche.accepting_applications:
            raise ValidationFailed(CLOSED_MESSAGE)
        self.classes = classes_with_enrollment(self.db, self.creche_id)
        self.children = (
            self.db.query(Child)
            .filter(Child.user_id == self.user_id)
            .order_by(Child.created_at.desc(), Child.id.desc())
            .all()
        )
        self.refresh_existing_applications()
        return self

    def refresh_existing_applications(self) -> dict[int, ExistingApplication]:
        child_ids = [child.id for child in self.children]
        rows = []
        if child_ids:
            rows = (
                self.db.query(Application)
                .filter(
                    Application.creche_id == self.creche_id,
                    Application.user_id == self.user_id,
                    Application.child_id.in_(child_ids),
                )
                .all()
            )
        self.existing_applications = {
            row.child_id: ExistingApplication(
                child_id=row.child_id,
                class_id=row.class_id,
                application_status=row.application_status,
                submitted_at=row.submitted_at,
            )
            for row in rows
        }
        return self.existing_applications

    def _child(self, child_id: Optional[int]) -> Optional[Child]:
        return next((child for child in self.children if child.id == child_id), None)

    def _class(self, class_id: Optional[int]) -> Optional[dict]:
        return next((item for item in self.classes if item["id"] == class_id), None)

    def select_child(self, child_id: Optional[int]) -> None:
        if child_id is not None and self._child(child_id) is None:
            raise NotFoundError("Child not found")
        self.selected_child_id = child_id

    def select_class(self, class_id: Optional[int]) -> None:
        if class_id is not None and self._class(class_id) is None:
            raise NotFoundError("Class not found")
        self.selected_class_id = class_id

    def set_notes(self, message: str = "", notes: str = "") -> None:
        self.message = message or ""
        self.notes = notes or ""

    def validate_step(self, step: Optional[str] = None) -> bool:
        step = step or self.current_step
        if step == "child":
            return self.selected_child_id is not None and self.selected_child_id not in self.existing_applications
        if step == "class":
            return self.selected_class_id is not None
        if step in ("notes", "summary"):
            # Notes are optional
            return True
        return False

    def next_step(self) -> str:
        index = STEPS.index(self.current_step)
        if self.validate_step() and index < len(STEPS) - 1:
            self.current_step = STEPS[index + 1]
        return self.current_step

    def previous_step(self) -> str:
        index = STEPS.index(self.current_step)
        if self.validate_step() and index > 0:
            self.current_step = STEPS[index - 1]
        return self.current_step

    def child_age_in_months(self, child_id: int, today: date | None = None) -> int:
        child = self._child(child_id)
        if child is None:
            return 0
        return age_in_months(child.date_of_birth, today)

    def eligible_class_ids(self, child_id: int, today: date | None = None) -> list[int]:
        child = self._child(child_id)
        if child is None:
            return []
        return [
            item["id"]
            for item in self.classes
            if is_age_eligible(child.date_of_birth, item["min_age_months"], item["max_age_months"], today)
        ]

    def _already_applied(self) -> SubmissionResult:
        self.refresh_existing_applications()
        return SubmissionResult(outcome=ALREADY_APPLIED, redirect_to=APPLICATIONS_ROUTE)

    def submit(self, today: date | None = None) -> SubmissionResult:
        if self.selected_child_id is None or self.selected_class_id is None:
            raise ValidationFailed(MISSING_FIELDS_MESSAGE)

        child = self._child(self.selected_child_id)
        crecheclass = self._class(self.selected_class_id)
        if child is None or crecheclass is None:
            raise ValidationFailed(MISSING_FIELDS_MESSAGE)

        # Re-checked here whatever the class step allowed
        if not is_age_eligible(child.date_of_birth, crecheclass["min_age_months"], crecheclass["max_age_months"], today):
            raise ValidationFailed(AGE_MISMATCH_MESSAGE)

        if self.profile is None:
            raise ValidationFailed(MISSING_PROFILE_MESSAGE)

        if child.id in self.existing_applications:
            logger.info("Child %s already applied to creche %s", child.id, self.creche_id)
            return self._already_applied()

        application = Application(
            creche_id=self.creche_id,
            child_id=child.id,
            class_id=crecheclass["id"],
            user_id=self.user_id,
            parent_name=f"{self.profile.first_name or ''} {self.profile.last_name or ''}".strip(),
            parent_phone_number=self.profile.phone_number or "",
            parent_email=self.profile.email,
            parent_address=self.profile.address_line,
            message=self.message,
            notes=self.notes,
            source=APPLICATION_SOURCE,
            application_status=INITIAL_STATUS,
            submitted_at=utc_now(),
        )
        try:
            self.db.add(application)
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if classify_integrity_error(exc) == ErrorKind.CONFLICT:
                logger.info("Duplicate application for child %s at creche %s", child.id, self.creche_id)
                return self._already_applied()
            logger.exception("Error submitting application")
            raise RemoteError(SUBMIT_FAILED_MESSAGE) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Error submitting application")
            raise RemoteError(SUBMIT_FAILED_MESSAGE) from exc

        self.db.refresh(application)
        self.existing_applications[child.id] = ExistingApplication(
            child_id=child.id,
            class_id=application.class_id,
            application_status=application.application_status,
            submitted_at=application.submitted_at,
        )
        logger.info("Application %s submitted for child %s at creche %s", application.id, child.id, self.creche_id)
        return SubmissionResult(
            outcome=SUBMITTED,
            application=application,
            confirmation={
                "application_id": application.id,
                "creche_id": self.creche_id,
                "creche_name": self.creche.name if self.creche else "",
                "child_name": child.display_name,
                "class_name": crecheclass["name"],
            },
        )
