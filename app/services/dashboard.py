"""
Dashboard summaries. Read-only; every figure is derived from the ledger / notification
tables on each call (no caching of request status).
"""
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.access_request import AccessRequest
from app.models.audit_log import AdminAuditLog
from app.models.classroom import Class
from app.models.notification import Notification
from app.models.user import UserRole
from app.services.audit_log import AuditLogService
from app.services.authorization import Action, Actor, authorize
from app.services.notification_emitter import NotificationEmitter
from app.services.request_ledger import RequestLedger


@dataclass
class UserDashboard:
    pending_requests_count: int
    unread_notifications_count: int
    recent_requests: list[AccessRequest] = field(default_factory=list)
    recent_notifications: list[Notification] = field(default_factory=list)


@dataclass
class AdminDashboard:
    pending_requests_count: int
    active_classes_count: int
    total_classes_count: int
    recent_audit_logs: list[AdminAuditLog] = field(default_factory=list)


class DashboardService:
    def __init__(self, db: Session):
        self._db = db
        self._ledger = RequestLedger(db)
        self._emitter = NotificationEmitter(db)
        self._limit = get_settings().recent_items_limit

    def for_user(self, actor: Actor) -> UserDashboard:
        # Personal view: admins see their own requests here, not everyone's.
        return UserDashboard(
            pending_requests_count=self._ledger.count_pending(actor.actor_id, UserRole.USER),
            unread_notifications_count=self._emitter.count_unread(actor.actor_id),
            recent_requests=self._ledger.list_for_actor(actor.actor_id, UserRole.USER, limit=self._limit),
            recent_notifications=self._emitter.list_for_user(
                actor, actor.actor_id, unread_only=True, limit=self._limit
            ),
        )

    def for_admin(self, actor: Actor) -> AdminDashboard:
        authorize(actor, Action.REQUEST_APPROVE)
        return AdminDashboard(
            pending_requests_count=self._ledger.count_pending(actor.actor_id, actor.role),
            active_classes_count=self._db.query(Class).filter(Class.is_active.is_(True)).count(),
            total_classes_count=self._db.query(Class).count(),
            recent_audit_logs=AuditLogService(self._db).list(limit=self._limit),
        )
