"""Enrollment application submitted by a parent for one child at one creche."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from creche_api.app.core.time import utc_now
from creche_api.app.db.base_class import Base


class Application(Base):
    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, index=True)
    creche_id = Column(Integer, ForeignKey("creches.id"), nullable=False, index=True)
    child_id = Column(Integer, ForeignKey("children.id"), nullable=False, index=True)
    class_id = Column(Integer, ForeignKey("creche_classes.id"), nullable=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    parent_name = Column(String(255), nullable=True)
    parent_phone_number = Column(String(50), nullable=True)
    parent_email = Column(String, nullable=True)
    parent_address = Column(String(512), nullable=True)
    message = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    source = Column(String(50), nullable=False, default="mobile_app")
    application_status = Column(String(50), nullable=False, default="New")
    offer_response = Column(String(20), nullable=True)
    submitted_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    __table_args__ = (
        UniqueConstraint("child_id", "creche_id", name="uq_application_child_creche"),
    )

    creche = relationship("Creche")
    child = relationship("Child", back_populates="applications")
    crecheclass = relationship("CrecheClass")
    user = relationship("User", back_populates="applications", foreign_keys=[user_id])
