"""User profile endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from creche_api.app.core.auth_session import AuthEvent, SessionProvider
from creche_api.app.core.errors import NotFoundError
from creche_api.app.db.session import get_db
from creche_api.app.dependencies.auth import get_session_provider
from creche_api.app.models.user import User
from creche_api.app.schemas.user import UserProfileRead, UserProfileUpdate

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("/me", response_model=UserProfileRead)
async def get_my_profile(provider: SessionProvider = Depends(get_session_provider)):
    if provider.profile is None:
        raise NotFoundError("User not found")
    return provider.profile


@router.put("/me", response_model=UserProfileRead)
async def update_my_profile(
    profile: UserProfileUpdate,
    db: Session = Depends(get_db),
    provider: SessionProvider = Depends(get_session_provider),
):
    user = db.query(User).filter(User.id == provider.user_id).first()
    if not user:
        raise NotFoundError("User not found")
    for field, value in profile.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(user, field, value)
    db.commit()
    provider.handle_auth_event(AuthEvent.USER_UPDATED, provider.session)
    return provider.profile
