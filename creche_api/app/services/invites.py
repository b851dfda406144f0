"""Share-code invitations that link a second parent to a child.

Stored invite statuses are ``pending``, ``accepted``, ``declined`` and
``expired``. Callers see a computed status where a pending invite that is
still in date reads ``valid`` and one past ``expires_at`` reads ``expired``
whatever is stored.
"""

import logging
import secrets
from datetime import datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from creche_api.app.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationFailed
from creche_api.app.core.settings import get_settings
from creche_api.app.core.time import ensure_utc, utc_now
from creche_api.app.models.child import Child, ChildParent
from creche_api.app.models.child_invite import ChildInvite

logger = logging.getLogger(__name__)

# No 0/O or 1/I so codes survive being read aloud
SHARE_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
MAX_CODE_ATTEMPTS = 10


def normalize_share_code(code: str) -> str:
    return (code or "").strip().upper()


def generate_share_code(db: Session, length: int | None = None) -> str:
    length = length or get_settings().share_code_length
    for _ in range(MAX_CODE_ATTEMPTS):
        code = "".join(secrets.choice(SHARE_CODE_ALPHABET) for _ in range(length))
        taken = db.query(ChildInvite.id).filter(ChildInvite.share_code == code).first()
        if taken is None:
            return code
    raise ConflictError("Could not allocate a share code, please try again")


def is_expired(invite: ChildInvite, now: datetime | None = None) -> bool:
    now = now or utc_now()
    return ensure_utc(invite.expires_at) < now


def computed_status(invite: ChildInvite, now: datetime | None = None) -> str:
    if invite.status == "accepted":
        return "accepted"
    if invite.status == "declined":
        return "declined"
    if invite.status == "expired" or is_expired(invite, now):
        return "expired"
    return "valid"


def _owned_child(db: Session, child_id: int, user_id: int) -> Child:
    child = db.query(Child).filter(Child.id == child_id).first()
    if not child:
        raise NotFoundError("Child not found")
    if child.user_id != user_id:
        raise ForbiddenError("Only the child's owner can manage sharing")
    return child


def create_invite(
    db: Session,
    child_id: int,
    inviter_id: int,
    invitee_email: str | None = None,
    relationship: str = "parent",
    now: datetime | None = None,
) -> ChildInvite:
    _owned_child(db, child_id, inviter_id)
    now = now or utc_now()
    invite = ChildInvite(
        child_id=child_id,
        inviter_id=inviter_id,
        invitee_email=invitee_email.strip().lower() if invitee_email else None,
        share_code=generate_share_code(db),
        relationship_label=relationship or "parent",
        status="pending",
        expires_at=now + timedelta(days=get_settings().invite_expiry_days),
        created_at=now,
    )
    db.add(invite)
    db.commit()
    db.refresh(invite)
    logger.info("Invite %s created for child %s", invite.id, child_id)
    return invite


def lookup_invite(db: Session, share_code: str, now: datetime | None = None) -> ChildInvite:
    """Find an invite by code, marking it expired in storage if its time has passed."""
    code = normalize_share_code(share_code)
    if not code:
        raise ValidationFailed("Please enter an invite code")
    invite = db.query(ChildInvite).filter(ChildInvite.share_code == code).first()
    if not invite:
        raise NotFoundError("Invite not found")
    if invite.status == "pending" and is_expired(invite, now):
        invite.status = "expired"
        db.commit()
        db.refresh(invite)
        logger.info("Invite %s expired on lookup", invite.id)
    return invite


def accept_child_invitation(db: Session, invitation_id: int, user_id: int, now: datetime | None = None) -> ChildParent:
    """Link ``user_id`` to the invited child and consume the invite, all or nothing."""
    now = now or utc_now()
    invite = db.query(ChildInvite).filter(ChildInvite.id == invitation_id).first()
    if not invite:
        raise NotFoundError("Invite not found")
    status = computed_status(invite, now)
    if status != "valid":
        raise ValidationFailed(f"This invitation is {status}")
    child = invite.child
    if child.user_id == user_id:
        raise ValidationFailed("You already own this child's profile")
    already_linked = (
        db.query(ChildParent)
        .filter(ChildParent.child_id == child.id, ChildParent.user_id == user_id)
        .first()
    )
    if already_linked:
        raise ConflictError("You are already linked to this child")

    link = ChildParent(child_id=child.id, user_id=user_id, relationship_label=invite.relationship_label, joined_at=now)
    invite.status = "accepted"
    invite.accepted_by_id = user_id
    invite.accepted_at = now
    db.add(link)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("You are already linked to this child") from exc
    db.refresh(link)
    logger.info("User %s linked to child %s via invite %s", user_id, child.id, invite.id)
    return link


def cancel_invite(db: Session, invitation_id: int, user_id: int) -> ChildInvite:
    invite = db.query(ChildInvite).filter(ChildInvite.id == invitation_id).first()
    if not invite:
        raise NotFoundError("Invite not found")
    if invite.inviter_id != user_id:
        raise ForbiddenError("Only the inviter can cancel this invitation")
    if invite.status != "pending":
        raise ValidationFailed("Only pending invitations can be cancelled")
    invite.status = "declined"
    db.commit()
    db.refresh(invite)
    return invite


def list_pending_invites(db: Session, child_id: int, user_id: int) -> list[ChildInvite]:
    _owned_child(db, child_id, user_id)
    return (
        db.query(ChildInvite)
        .filter(ChildInvite.child_id == child_id, ChildInvite.status == "pending")
        .order_by(ChildInvite.created_at.desc(), ChildInvite.id.desc())
        .all()
    )
