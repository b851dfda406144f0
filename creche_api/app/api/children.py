"""Child profile endpoints, including sharing with a second parent."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from creche_api.app.db.session import get_db
from creche_api.app.dependencies.auth import get_current_user
from creche_api.app.models.user import User
from creche_api.app.schemas.child import ChildCreate, ChildRead, ChildUpdate, LinkedParentRead
from creche_api.app.schemas.invite import InviteCreate, InviteRead
from creche_api.app.services import children as children_service
from creche_api.app.services import invites as invites_service

router = APIRouter(prefix="/children", tags=["children"])


@router.post("", response_model=ChildRead, status_code=status.HTTP_201_CREATED)
async def create_child(child_in: ChildCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    child = children_service.create_child(db, current_user.id, **child_in.model_dump())
    return children_service.child_payload(child, current_user.id)


@router.get("", response_model=list[ChildRead])
async def list_children(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return [children_service.child_payload(child, current_user.id) for child in children_service.list_children(db, current_user.id)]


@router.get("/{child_id}", response_model=ChildRead)
async def get_child(child_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    child = children_service.get_accessible_child(db, child_id, current_user.id)
    return children_service.child_payload(child, current_user.id)


@router.put("/{child_id}", response_model=ChildRead)
async def update_child(
    child_id: int,
    child_in: ChildUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    child = children_service.update_child(db, child_id, current_user.id, child_in.model_dump(exclude_unset=True))
    return children_service.child_payload(child, current_user.id)


@router.get("/{child_id}/parents", response_model=list[LinkedParentRead])
async def list_linked_parents(child_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return children_service.list_linked_parents(db, child_id, current_user.id)


@router.delete("/{child_id}/parents/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_linked_parent(
    child_id: int,
    link_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    children_service.remove_linked_parent(db, child_id, link_id, current_user.id)


@router.get("/{child_id}/invites", response_model=list[InviteRead])
async def list_child_invites(child_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return [InviteRead.from_invite(invite) for invite in invites_service.list_pending_invites(db, child_id, current_user.id)]


@router.post("/{child_id}/invites", response_model=InviteRead, status_code=status.HTTP_201_CREATED)
async def create_child_invite(
    child_id: int,
    invite_in: InviteCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    invite = invites_service.create_invite(
        db,
        child_id=child_id,
        inviter_id=current_user.id,
        invitee_email=invite_in.invitee_email,
        relationship=invite_in.relationship,
    )
    return InviteRead.from_invite(invite)
