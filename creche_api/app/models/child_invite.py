"""Time-bound share-code invitations to link a second parent to a child."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from creche_api.app.core.time import utc_now
from creche_api.app.db.base_class import Base


class ChildInvite(Base):
    __tablename__ = "child_invites"

    id = Column(Integer, primary_key=True, index=True)
    child_id = Column(Integer, ForeignKey("children.id", ondelete="CASCADE"), nullable=False, index=True)
    inviter_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    invitee_email = Column(String, nullable=True)
    share_code = Column(String(16), unique=True, index=True, nullable=False)
    relationship_label = Column("relationship", String(50), nullable=False, default="parent")
    status = Column(String(20), nullable=False, default="pending")
    expires_at = Column(DateTime(timezone=True), nullable=False)
    accepted_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    accepted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    child = relationship("Child", back_populates="invites")
    inviter = relationship("User", foreign_keys=[inviter_id])
    accepted_by = relationship("User", foreign_keys=[accepted_by_id])
