from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class ChildBase(BaseModel):
    first_name: str
    last_name: str
    date_of_birth: date
    gender: Optional[str] = None
    profile_picture_url: Optional[str] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value


class ChildCreate(ChildBase):
    pass


class ChildUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    profile_picture_url: Optional[str] = None


class ChildRead(ChildBase):
    id: int
    user_id: int
    age_in_months: int = 0
    is_owner: bool = True
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LinkedParentRead(BaseModel):
    id: int
    user_id: int
    relationship: str
    name: str
    email: str
    joined_at: datetime
