"""Invite lookup and acceptance for parents joining a shared child profile."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from creche_api.app.db.session import get_db
from creche_api.app.dependencies.auth import get_current_user
from creche_api.app.models.user import User
from creche_api.app.schemas.invite import InviteAcceptResponse, InviteLookup, InviteRead
from creche_api.app.services import invites as invites_service

router = APIRouter(prefix="/invites", tags=["invites"])


@router.get("/code/{share_code}", response_model=InviteLookup)
async def lookup_invite(share_code: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    invite = invites_service.lookup_invite(db, share_code)
    invite_status = invites_service.computed_status(invite)
    inviter = invite.inviter
    return InviteLookup(
        id=invite.id,
        child_id=invite.child_id,
        child_name=invite.child.display_name,
        inviter_name=inviter.full_name or inviter.email,
        inviter_email=inviter.email,
        relationship=invite.relationship_label,
        status=invite_status,
        expires_at=invite.expires_at,
        can_accept=invite_status == "valid" and invite.child.user_id != current_user.id,
    )


@router.post("/{invite_id}/accept", response_model=InviteAcceptResponse)
async def accept_invite(invite_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    link = invites_service.accept_child_invitation(db, invite_id, current_user.id)
    return InviteAcceptResponse(child_id=link.child_id, child_name=link.child.display_name, link_id=link.id)


@router.post("/{invite_id}/cancel", response_model=InviteRead)
async def cancel_invite(invite_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return InviteRead.from_invite(invites_service.cancel_invite(db, invite_id, current_user.id))
