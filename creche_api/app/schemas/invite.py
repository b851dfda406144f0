from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr

InviteStatus = Literal["valid", "expired", "accepted", "declined"]


class InviteCreate(BaseModel):
    invitee_email: Optional[EmailStr] = None
    relationship: str = "parent"


class InviteRead(BaseModel):
    id: int
    child_id: int
    inviter_id: int
    invitee_email: Optional[str] = None
    share_code: str
    relationship: str
    status: str
    expires_at: datetime
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_invite(cls, invite) -> "InviteRead":
        return cls(
            id=invite.id,
            child_id=invite.child_id,
            inviter_id=invite.inviter_id,
            invitee_email=invite.invitee_email,
            share_code=invite.share_code,
            relationship=invite.relationship_label,
            status=invite.status,
            expires_at=invite.expires_at,
            created_at=invite.created_at,
        )


class InviteLookup(BaseModel):
    id: int
    child_id: int
    child_name: str
    inviter_name: str
    inviter_email: str
    relationship: str
    status: InviteStatus
    expires_at: datetime
    can_accept: bool


class InviteAcceptResponse(BaseModel):
    child_id: int
    child_name: str
    link_id: int
