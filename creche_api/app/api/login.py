"""Login endpoint issuing bearer tokens."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from creche_api.app.core.errors import InvalidCredentialsError, ValidationFailed
from creche_api.app.core.security import create_access_token, verify_password
from creche_api.app.core.time import utc_now
from creche_api.app.db.session import get_db
from creche_api.app.dependencies.auth import get_current_user
from creche_api.app.models.user import User
from creche_api.app.schemas.user import LoginRequest, UserRead

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == credentials.email.lower()).first()
    if not user or not user.hashed_password:
        raise InvalidCredentialsError("Invalid login credentials")
    if not user.is_active:
        raise ValidationFailed("User is inactive")
    if not verify_password(credentials.password, user.hashed_password):
        raise InvalidCredentialsError("Invalid login credentials")

    user.last_login = utc_now()
    db.commit()
    token = create_access_token(user.id, email=user.email)
    return {"access_token": token, "token_type": "bearer"}


@router.get("/me", response_model=UserRead)
def read_me(current_user: User = Depends(get_current_user)):
    return current_user
