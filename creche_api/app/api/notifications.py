"""Notification inbox endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from creche_api.app.core.auth_session import SessionProvider
from creche_api.app.db.session import get_db
from creche_api.app.dependencies.auth import get_session_provider
from creche_api.app.schemas.notification import MarkReadRequest, NotificationRead, UnreadCount
from creche_api.app.services import notifications as notifications_service
from creche_api.app.services.notifications import NotificationBadge

router = APIRouter(prefix="/notifications", tags=["notifications"])


def get_badge(db: Session = Depends(get_db), provider: SessionProvider = Depends(get_session_provider)):
    badge = NotificationBadge(db, provider)
    try:
        yield badge
    finally:
        badge.close()


@router.get("", response_model=list[NotificationRead])
async def list_notifications(db: Session = Depends(get_db), provider: SessionProvider = Depends(get_session_provider)):
    return notifications_service.list_notifications(db, provider.user_id)


@router.get("/unread-count", response_model=UnreadCount)
async def get_unread_count(badge: NotificationBadge = Depends(get_badge)):
    return UnreadCount(unread_count=badge.unread_count)


@router.post("/read", response_model=UnreadCount)
async def mark_read(body: MarkReadRequest, db: Session = Depends(get_db), badge: NotificationBadge = Depends(get_badge)):
    notifications_service.mark_as_read(db, badge.provider.user_id, body.notification_ids)
    badge.refresh()
    return UnreadCount(unread_count=badge.unread_count)


@router.post("/{notification_id}/read", response_model=UnreadCount)
async def mark_one_read(notification_id: int, badge: NotificationBadge = Depends(get_badge)):
    badge.mark_as_read(notification_id)
    return UnreadCount(unread_count=badge.unread_count)


@router.post("/read-all", response_model=UnreadCount)
async def mark_all_read(badge: NotificationBadge = Depends(get_badge)):
    badge.mark_all_as_read()
    return UnreadCount(unread_count=badge.unread_count)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    provider: SessionProvider = Depends(get_session_provider),
):
    notifications_service.delete_notification(db, provider.user_id, notification_id)
