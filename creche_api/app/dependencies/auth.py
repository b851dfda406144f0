"""Request dependencies that resolve the signed-in parent."""

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from creche_api.app.core.auth_session import AuthEvent, AuthSession, SessionProvider
from creche_api.app.core.security import decode_access_token, token_expiry
from creche_api.app.db.session import get_db
from creche_api.app.models.user import User


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )


def _bearer_token(authorization: str | None) -> str:
    # Expect Authorization: Bearer <token>
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise _unauthorized()
    return token


def _token_payload(authorization: str | None) -> dict:
    try:
        return decode_access_token(_bearer_token(authorization))
    except ValueError:
        raise _unauthorized()


def get_current_user(db: Session = Depends(get_db), authorization: str | None = Header(default=None)) -> User:
    payload = _token_payload(authorization)
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise _unauthorized()

    user = db.get(User, user_id)
    if not user or not user.is_active:
        raise _unauthorized()
    return user


def get_session_provider(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    authorization: str | None = Header(default=None),
) -> SessionProvider:
    """Request-scoped session provider restored from the bearer token."""
    payload = _token_payload(authorization)
    provider = SessionProvider(profile_loader=lambda user_id: db.get(User, user_id))
    provider.handle_auth_event(
        AuthEvent.INITIAL_SESSION,
        AuthSession(
            user_id=current_user.id,
            access_token=_bearer_token(authorization),
            expires_at=token_expiry(payload),
        ),
    )
    return provider
