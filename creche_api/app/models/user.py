from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from creche_api.app.core.time import utc_now
from creche_api.app.db.base_class import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    display_name = Column(String(200), nullable=True)
    phone_number = Column(String(50), nullable=True)
    id_number = Column(String(50), nullable=True)
    profile_picture_url = Column(String(512), nullable=True)
    bio = Column(Text, nullable=True)
    suburb = Column(String(120), nullable=True)
    city = Column(String(120), nullable=True)
    province = Column(String(120), nullable=True)
    latitude = Column(String(32), nullable=True)
    longitude = Column(String(32), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    children = relationship("Child", back_populates="owner", cascade="all, delete-orphan", foreign_keys="Child.user_id")
    child_links = relationship("ChildParent", back_populates="user", cascade="all, delete-orphan", foreign_keys="ChildParent.user_id")
    applications = relationship("Application", back_populates="user", foreign_keys="Application.user_id")
    favorites = relationship("UserFavorite", back_populates="user", cascade="all, delete-orphan")
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")

    @property
    def full_name(self) -> str:
        return " ".join(part for part in [self.first_name, self.last_name] if part)
