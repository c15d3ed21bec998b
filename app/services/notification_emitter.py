"""
Notification emitter. emit() is called only by the request ledger, inside its
transaction: it flushes and never commits, so a ledger rollback drops the
notification too. Reads and mark-read are exposed to the presentation layer.
"""
import logging
from datetime import timedelta

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.config import get_settings
from app.errors import Forbidden, NotificationNotFound
from app.models.notification import Notification, NotificationKind
from app.services.authorization import Action, Actor, GateContext, authorize
from app.utils.clock import utcnow

logger = logging.getLogger(__name__)


class NotificationEmitter:
    def __init__(self, db: Session):
        self._db = db
        self._expiry_days = get_settings().notification_expiry_days

    def emit(
        self,
        recipient_id: str,
        kind: NotificationKind,
        related_request_id: str,
        title: str,
        description: str | None = None,
    ) -> Notification:
        now = utcnow()
        notification = Notification(
            user_id=recipient_id,
            kind=kind.value,
            related_request_id=related_request_id,
            title=title,
            description=description,
            created_at=now,
            expires_at=now + timedelta(days=self._expiry_days),
        )
        self._db.add(notification)
        self._db.flush()
        return notification

    def _visible(self, user_id: str):
        return self._db.query(Notification).filter(
            Notification.user_id == user_id,
            Notification.expires_at > utcnow(),
        )

    def list_for_user(
        self,
        actor: Actor,
        user_id: str,
        *,
        unread_only: bool = False,
        limit: int = 50,
    ) -> list[Notification]:
        """Non-expired notifications for user_id, newest first. Owner or admin only."""
        authorize(actor, Action.NOTIFICATION_READ, GateContext(actor_id=actor.actor_id, owner_id=user_id))
        q = self._visible(user_id)
        if unread_only:
            q = q.filter(Notification.read_at.is_(None))
        return q.order_by(Notification.created_at.desc()).limit(limit).all()

    def count_unread(self, user_id: str) -> int:
        return self._visible(user_id).filter(Notification.read_at.is_(None)).count()

    def mark_read(self, notification_id: str, reader_id: str) -> Notification:
        """Only the recipient may mark a notification read. Re-marking keeps the first read_at."""
        notification = self._db.query(Notification).filter(Notification.id == notification_id).first()
        if not notification:
            raise NotificationNotFound(notification_id)
        if notification.user_id != reader_id:
            raise Forbidden("Only the recipient can mark this notification as read.")
        if notification.read_at is None:
            notification.read_at = utcnow()
            self._db.commit()
            self._db.refresh(notification)
        return notification

    def mark_all_read(self, user_id: str) -> int:
        """Mark every visible unread notification read; expired ones are left untouched."""
        now = utcnow()
        result = self._db.execute(
            update(Notification)
            .where(
                Notification.user_id == user_id,
                Notification.read_at.is_(None),
                Notification.expires_at > now,
            )
            .values(read_at=now)
        )
        self._db.commit()
        logger.info("Marked %s notifications read for user %s", result.rowcount, user_id)
        return result.rowcount
