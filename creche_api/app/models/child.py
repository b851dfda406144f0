"""Child profiles and the parents linked to them."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from creche_api.app.core.time import utc_now
from creche_api.app.db.base_class import Base


class Child(Base):
    __tablename__ = "children"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    date_of_birth = Column(Date, nullable=False)
    gender = Column(String(20), nullable=True)
    profile_picture_url = Column(String(512), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    owner = relationship("User", back_populates="children", foreign_keys=[user_id])
    parent_links = relationship("ChildParent", back_populates="child", cascade="all, delete-orphan")
    invites = relationship("ChildInvite", back_populates="child", cascade="all, delete-orphan")
    applications = relationship("Application", back_populates="child")

    @property
    def display_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class ChildParent(Base):
    __tablename__ = "child_parents"

    id = Column(Integer, primary_key=True, index=True)
    child_id = Column(Integer, ForeignKey("children.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    relationship_label = Column("relationship", String(50), nullable=False, default="parent")
    joined_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    __table_args__ = (
        UniqueConstraint("child_id", "user_id", name="uq_child_parent"),
    )

    child = relationship("Child", back_populates="parent_links")
    user = relationship("User", back_populates="child_links", foreign_keys=[user_id])
