"""Application and application-wizard schemas."""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

from creche_api.app.schemas.creche import CrecheClassRead


class ApplicationCrecheSummary(BaseModel):
    id: int
    name: str
    header_image: Optional[str] = None
    address: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ApplicationChildSummary(BaseModel):
    id: int
    first_name: str
    last_name: str
    date_of_birth: Optional[date] = None

    model_config = ConfigDict(from_attributes=True)


class ApplicationRead(BaseModel):
    id: int
    creche_id: int
    child_id: int
    class_id: Optional[int] = None
    user_id: int
    parent_name: Optional[str] = None
    parent_phone_number: Optional[str] = None
    parent_email: Optional[str] = None
    parent_address: Optional[str] = None
    message: Optional[str] = None
    notes: Optional[str] = None
    source: str
    application_status: str
    offer_response: Optional[str] = None
    submitted_at: datetime
    created_at: datetime
    updated_at: datetime
    creche: Optional[ApplicationCrecheSummary] = None
    child: Optional[ApplicationChildSummary] = None
    can_edit: bool = False

    model_config = ConfigDict(from_attributes=True)


class OfferResponseRequest(BaseModel):
    response: Literal["ACCEPTED", "REJECTED"]


class ExistingApplicationRead(BaseModel):
    child_id: int
    class_id: Optional[int] = None
    application_status: str
    submitted_at: datetime


class WizardChild(BaseModel):
    id: int
    first_name: str
    last_name: str
    age_in_months: int
    eligible_class_ids: list[int]
    already_applied: bool


class WizardContext(BaseModel):
    creche: ApplicationCrecheSummary
    steps: list[str]
    classes: list[CrecheClassRead]
    children: list[WizardChild]
    existing_applications: dict[int, ExistingApplicationRead]


class WizardSelection(BaseModel):
    child_id: Optional[int] = None
    class_id: Optional[int] = None
    message: str = ""
    notes: str = ""


class StepValidation(BaseModel):
    step: str
    valid: bool
    next_step: Optional[str] = None
    previous_step: Optional[str] = None


class SubmissionConfirmation(BaseModel):
    application_id: int
    creche_id: int
    creche_name: str
    child_name: str
    class_name: str
