"""Handles parent account registration."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from creche_api.app.core.errors import ConflictError
from creche_api.app.core.security import get_password_hash
from creche_api.app.db.session import get_db
from creche_api.app.models.user import User
from creche_api.app.schemas.user import UserCreate, UserRead

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register_user(user_in: UserCreate, db: Session = Depends(get_db)):
    email = user_in.email.lower()
    existing = db.query(User).filter(User.email == email).first()
    if existing:
        raise ConflictError("Email already registered")
    hashed_password = get_password_hash(user_in.password)  # Hash password before storing
    user = User(
        email=email,
        hashed_password=hashed_password,
        first_name=user_in.first_name,
        last_name=user_in.last_name,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
