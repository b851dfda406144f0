"""Session provider holding the signed-in user and their profile.

A provider is created by whoever hosts it (one per request in the HTTP
layer) and fed auth state events. Consumers read ``session`` and
``profile`` but never assign them, and register for changes through
``subscribe`` which hands back the matching unsubscribe callable.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from creche_api.app.schemas.user import SessionProfile

logger = logging.getLogger(__name__)


class AuthEvent(str, Enum):
    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"
    SIGNED_OUT = "SIGNED_OUT"


@dataclass(frozen=True)
class AuthSession:
    user_id: int
    access_token: str
    expires_at: Optional[datetime] = None


Listener = Callable[[AuthEvent, "SessionProvider"], None]


class SessionProvider:
    def __init__(self, profile_loader: Callable[[int], object | None]):
        self._profile_loader = profile_loader
        self._session: Optional[AuthSession] = None
        self._profile: Optional[SessionProfile] = None
        self._listeners: list[Listener] = []

    @property
    def session(self) -> Optional[AuthSession]:
        return self._session

    @property
    def user_id(self) -> Optional[int]:
        return self._session.user_id if self._session else None

    @property
    def profile(self) -> Optional[SessionProfile]:
        return self._profile

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def handle_auth_event(self, event: AuthEvent, session: Optional[AuthSession]) -> None:
        logger.debug("Auth state changed: %s", event.value)
        self._session = None if event == AuthEvent.SIGNED_OUT else session
        if self._session is not None:
            self.refresh_profile()
        else:
            self._profile = None
        for listener in list(self._listeners):
            listener(event, self)

    def refresh_profile(self) -> Optional[SessionProfile]:
        if self._session is None:
            return None
        row = self._profile_loader(self._session.user_id)
        if row is None:
            logger.warning("No profile row for user %s", self._session.user_id)
            self._profile = None
        else:
            self._profile = SessionProfile.model_validate(row)
        return self._profile

    def sign_out(self) -> None:
        self.handle_auth_event(AuthEvent.SIGNED_OUT, None)
