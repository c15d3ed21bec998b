from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.auth import get_current_actor
from app.database import get_db
from app.models.notification import Notification
from app.schemas.notification import MarkAllReadResponse, NotificationResponse, UnreadCountResponse
from app.services.authorization import Actor
from app.services.notification_emitter import NotificationEmitter

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


def to_response(n: Notification) -> NotificationResponse:
    return NotificationResponse(
        id=n.id,
        kind=n.kind,
        title=n.title,
        description=n.description,
        related_request_id=n.related_request_id,
        created_at=n.created_at,
        read_at=n.read_at,
        is_read=n.read_at is not None,
    )


@router.get("", response_model=list[NotificationResponse])
def list_notifications(
    unread_only: bool = False,
    limit: int = 50,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """My non-expired notifications, newest first."""
    items = NotificationEmitter(db).list_for_user(
        actor, actor.actor_id, unread_only=unread_only, limit=max(1, min(limit, 200))
    )
    return [to_response(n) for n in items]


@router.get("/unread-count", response_model=UnreadCountResponse)
def unread_count(
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    return UnreadCountResponse(count=NotificationEmitter(db).count_unread(actor.actor_id))


@router.post("/read-all", response_model=MarkAllReadResponse)
def mark_all_read(
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    return MarkAllReadResponse(updated=NotificationEmitter(db).mark_all_read(actor.actor_id))


@router.post("/{notification_id}/read", response_model=NotificationResponse)
def mark_read(
    notification_id: str,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Only the recipient may mark a notification read (403 otherwise, admins included)."""
    return to_response(NotificationEmitter(db).mark_read(notification_id, actor.actor_id))
