from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict


class CrecheSummary(BaseModel):
    id: int
    name: str
    header_image: Optional[str] = None
    address: Optional[str] = None
    suburb: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    monthly_price: Optional[Decimal] = None
    registered: bool = False
    accepting_applications: bool = True

    model_config = ConfigDict(from_attributes=True)


class CrecheClassRead(BaseModel):
    id: int
    name: str
    color: Optional[str] = None
    capacity: int
    min_age_months: int
    max_age_months: int
    current_enrollment: int = 0
    capacity_percentage: int = 0
    capacity_label: str = "Available"


class CrecheDetail(CrecheSummary):
    description: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    registration_fee: Optional[Decimal] = None
    capacity: Optional[int] = None
    classes: list[CrecheClassRead] = []
    is_favorite: bool = False
    follower_count: int = 0
