"""Notification inbox and the unread badge."""

import logging
from typing import Callable

from sqlalchemy.orm import Session

from creche_api.app.core.auth_session import AuthEvent, SessionProvider
from creche_api.app.core.errors import NotFoundError
from creche_api.app.core.time import utc_now
from creche_api.app.models.notification import Notification

logger = logging.getLogger(__name__)

TYPE_KEYWORDS = ("application", "payment", "reminder", "message", "announcement", "attendance")


def notification_type(title: str | None, message: str | None) -> str:
    title = (title or "").lower()
    message = (message or "").lower()
    for keyword in TYPE_KEYWORDS:
        if keyword in title or keyword in message:
            return keyword
    return "system"


def _unread(db: Session, user_id: int):
    return db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.read_at.is_(None),
        Notification.deleted.is_(False),
    )


def unread_count(db: Session, user_id: int) -> int:
    return _unread(db, user_id).count()


def notification_payload(notification: Notification) -> dict:
    return {
        "id": notification.id,
        "title": notification.title,
        "message": notification.message,
        "type": notification_type(notification.title, notification.message),
        "is_read": notification.read_at is not None,
        "read_at": notification.read_at,
        "created_at": notification.created_at,
    }


def list_notifications(db: Session, user_id: int) -> list[dict]:
    rows = (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.deleted.is_(False))
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .all()
    )
    return [notification_payload(row) for row in rows]


def mark_as_read(db: Session, user_id: int, notification_ids: list[int]) -> int:
    if not notification_ids:
        return 0
    updated = (
        _unread(db, user_id)
        .filter(Notification.id.in_(notification_ids))
        .update({Notification.read_at: utc_now()}, synchronize_session=False)
    )
    db.commit()
    return updated


def mark_all_as_read(db: Session, user_id: int) -> int:
    updated = _unread(db, user_id).update({Notification.read_at: utc_now()}, synchronize_session=False)
    db.commit()
    return updated


def delete_notification(db: Session, user_id: int, notification_id: int) -> None:
    notification = (
        db.query(Notification)
        .filter(
            Notification.id == notification_id,
            Notification.user_id == user_id,
            Notification.deleted.is_(False),
        )
        .first()
    )
    if not notification:
        raise NotFoundError("Notification not found")
    notification.deleted = True
    db.commit()


class NotificationBadge:
    """Unread count for the signed-in user of a session provider.

    The badge follows the provider: it refreshes on sign-in and profile
    changes and drops to zero on sign-out. ``close`` detaches it.
    """

    def __init__(self, db: Session, provider: SessionProvider):
        self.db = db
        self.provider = provider
        self.unread_count = 0
        self._listeners: list[Callable[[int], None]] = []
        self._unsubscribe = provider.subscribe(self._on_auth_event)
        if provider.user_id is not None:
            self.refresh()

    def subscribe(self, listener: Callable[[int], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        self._unsubscribe()

    def _set(self, value: int) -> None:
        if value != self.unread_count:
            self.unread_count = value
            for listener in list(self._listeners):
                listener(value)

    def _on_auth_event(self, event: AuthEvent, provider: SessionProvider) -> None:
        if event == AuthEvent.SIGNED_OUT or provider.user_id is None:
            self._set(0)
        else:
            self.refresh()

    def refresh(self) -> int:
        user_id = self.provider.user_id
        self._set(unread_count(self.db, user_id) if user_id is not None else 0)
        return self.unread_count

    def mark_as_read(self, notification_id: int) -> None:
        user_id = self.provider.user_id
        if user_id is None:
            return
        if mark_as_read(self.db, user_id, [notification_id]):
            self._set(max(0, self.unread_count - 1))

    def mark_all_as_read(self) -> None:
        user_id = self.provider.user_id
        if user_id is None or self.unread_count == 0:
            return
        mark_all_as_read(self.db, user_id)
        self._set(0)
