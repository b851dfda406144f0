"""Creche listings, their classes and enrolled students."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from creche_api.app.core.time import utc_now
from creche_api.app.db.base_class import Base


class Creche(Base):
    __tablename__ = "creches"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    header_image = Column(String(512), nullable=True)
    address = Column(String(512), nullable=True)
    suburb = Column(String(120), nullable=True)
    city = Column(String(120), nullable=True)
    province = Column(String(120), nullable=True)
    latitude = Column(String(32), nullable=True)
    longitude = Column(String(32), nullable=True)
    description = Column(Text, nullable=True)
    phone_number = Column(String(50), nullable=True)
    email = Column(String, nullable=True)
    monthly_price = Column(Numeric(10, 2), nullable=True)
    registration_fee = Column(Numeric(10, 2), nullable=True)
    capacity = Column(Integer, nullable=True)
    registered = Column(Boolean, nullable=False, default=False)
    accepting_applications = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    classes = relationship(
        "CrecheClass",
        back_populates="creche",
        cascade="all, delete-orphan",
        order_by="CrecheClass.min_age_months",
    )
    articles = relationship("Article", back_populates="creche")


class CrecheClass(Base):
    __tablename__ = "creche_classes"

    id = Column(Integer, primary_key=True, index=True)
    creche_id = Column(Integer, ForeignKey("creches.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(120), nullable=False)
    color = Column(String(20), nullable=True)
    capacity = Column(Integer, nullable=False, default=0)
    min_age_months = Column(Integer, nullable=False, default=0)
    max_age_months = Column(Integer, nullable=False, default=72)

    creche = relationship("Creche", back_populates="classes")
    students = relationship("EnrolledStudent", back_populates="crecheclass")


class EnrolledStudent(Base):
    """Enrollment row maintained by the provider side; read here for counts."""

    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    creche_id = Column(Integer, ForeignKey("creches.id", ondelete="CASCADE"), nullable=False, index=True)
    class_id = Column(Integer, ForeignKey("creche_classes.id", ondelete="SET NULL"), nullable=True, index=True)
    child_id = Column(Integer, ForeignKey("children.id", ondelete="SET NULL"), nullable=True)
    status = Column(String(20), nullable=False, default="active")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    crecheclass = relationship("CrecheClass", back_populates="students")
