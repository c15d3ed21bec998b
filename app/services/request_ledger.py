"""
Request ledger: owns AccessRequest rows and their PENDING -> APPROVED | REJECTED lifecycle.

- submit: gate check, insert PENDING, notify every admin; one transaction. The partial
  unique index (requester_id, class_id) WHERE status = 'PENDING' is the real guard
  against two racing submits; the read-check only gives a friendlier early error.
- decide: gate check, compare-and-swap UPDATE ... WHERE status = 'PENDING', notify the
  requester, write the audit row; one transaction. A CAS that touches zero rows means
  another admin decided first -> AlreadyDecided, and nothing is written.
"""
import logging

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.database import transaction
from app.errors import DuplicatePendingRequest, RequestNotFound, UnknownClass, ValidationError, AlreadyDecided
from app.models.access_request import AccessRequest, AccessRequestStatus
from app.models.audit_log import AdminAction, AuditEntityType
from app.models.classroom import Class
from app.models.notification import NotificationKind
from app.models.user import User, UserRole
from app.services.audit_log import AuditLogService
from app.services.authorization import (
    Action,
    Actor,
    GateContext,
    ReadScope,
    authorize,
    coerce_role,
    read_scope,
)
from app.services.notification_emitter import NotificationEmitter
from app.services.request_state import Approved, Rejected, state_of, transition
from app.utils.clock import utcnow

logger = logging.getLogger(__name__)


def coerce_outcome(outcome: AccessRequestStatus | str) -> AccessRequestStatus:
    try:
        value = AccessRequestStatus(str(getattr(outcome, "value", outcome)).upper())
    except ValueError:
        value = None
    if value not in (AccessRequestStatus.APPROVED, AccessRequestStatus.REJECTED):
        raise ValidationError("status must be APPROVED or REJECTED", field="status")
    return value


class RequestLedger:
    def __init__(
        self,
        db: Session,
        emitter: NotificationEmitter | None = None,
        audit: AuditLogService | None = None,
    ):
        self._db = db
        self._emitter = emitter or NotificationEmitter(db)
        self._audit = audit or AuditLogService(db)

    # ---------- submit ----------

    def _has_pending(self, requester_id: str, class_id: str) -> bool:
        return (
            self._db.query(AccessRequest.id)
            .filter(
                AccessRequest.requester_id == requester_id,
                AccessRequest.class_id == class_id,
                AccessRequest.status == AccessRequestStatus.PENDING.value,
            )
            .first()
            is not None
        )

    def submit(self, actor: Actor, class_id: str, message: str | None = None) -> AccessRequest:
        has_pending = self._has_pending(actor.actor_id, class_id)
        authorize(actor, Action.REQUEST_CREATE, GateContext(actor_id=actor.actor_id, has_pending=has_pending))

        target = (
            self._db.query(Class)
            .filter(Class.id == class_id, Class.is_active.is_(True))
            .first()
        )
        if not target:
            raise UnknownClass(class_id)

        req = AccessRequest(
            class_id=class_id,
            requester_id=actor.actor_id,
            message=(message or "").strip() or None,
            status=AccessRequestStatus.PENDING.value,
        )
        try:
            with transaction(self._db):
                self._db.add(req)
                self._db.flush()
                admins = self._db.query(User.id).filter(User.role == UserRole.ADMIN.value).all()
                for (admin_id,) in admins:
                    self._emitter.emit(
                        admin_id,
                        NotificationKind.REQUEST_SUBMITTED,
                        req.id,
                        title=f"New access request: {target.name}",
                        description="A user has requested access to this class.",
                    )
        except IntegrityError as e:
            if self._has_pending(actor.actor_id, class_id):
                logger.warning(
                    "Duplicate pending request blocked by index: user=%s class=%s",
                    actor.actor_id, class_id,
                )
                raise DuplicatePendingRequest() from e
            raise
        self._db.refresh(req)
        logger.info("Access request %s submitted by %s for class %s", req.id, actor.actor_id, class_id)
        return req

    # ---------- decide ----------

    def decide(
        self,
        request_id: str,
        admin: Actor,
        outcome: AccessRequestStatus | str,
        reason: str | None = None,
    ) -> AccessRequest:
        outcome = coerce_outcome(outcome)
        action = Action.REQUEST_APPROVE if outcome is AccessRequestStatus.APPROVED else Action.REQUEST_REJECT
        authorize(admin, action)
        reason = (reason or "").strip() or None

        req = self._db.query(AccessRequest).filter(AccessRequest.id == request_id).first()
        if not req:
            raise RequestNotFound(request_id)
        # Unknown and already-decided requests fail the same way whatever the body says.
        decided = transition(state_of(req), outcome, admin.actor_id, utcnow(), reason)
        if isinstance(decided, Rejected) and not reason:
            raise ValidationError("Rejection reason is required", field="reason")

        target = self._db.query(Class).filter(Class.id == req.class_id).first()
        class_name = target.name if target else req.class_id
        if isinstance(decided, Approved):
            kind = NotificationKind.REQUEST_APPROVED
            audit_action = AdminAction.APPROVE_REQUEST
            title = f"Access approved: {class_name}"
            description = f'Your access request for "{class_name}" has been approved!'
        else:
            kind = NotificationKind.REQUEST_REJECTED
            audit_action = AdminAction.REJECT_REQUEST
            title = f"Access rejected: {class_name}"
            description = f'Your access request for "{class_name}" was rejected: {reason}'

        try:
            with transaction(self._db):
                result = self._db.execute(
                    update(AccessRequest)
                    .where(
                        AccessRequest.id == request_id,
                        AccessRequest.status == AccessRequestStatus.PENDING.value,
                    )
                    .values(
                        status=decided.status.value,
                        decided_at=decided.decided_at,
                        decided_by_id=decided.decided_by_id,
                        reason=decided.reason,
                    )
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount != 1:
                    raise AlreadyDecided(request_id)
                self._emitter.emit(req.requester_id, kind, request_id, title=title, description=description)
                self._audit.record(
                    admin.actor_id,
                    audit_action,
                    AuditEntityType.REQUEST,
                    request_id,
                    f"{decided.status.value.title()} access request for \"{class_name}\"",
                    {
                        "requester_id": req.requester_id,
                        "class_id": req.class_id,
                        "reason": reason,
                    },
                )
        except AlreadyDecided:
            logger.warning("Access request %s was decided concurrently; %s lost", request_id, admin.actor_id)
            raise
        self._db.refresh(req)
        logger.info("Access request %s %s by %s", request_id, req.status, admin.actor_id)
        return req

    # ---------- reads ----------

    def get(self, actor: Actor, request_id: str) -> AccessRequest:
        req = self._db.query(AccessRequest).filter(AccessRequest.id == request_id).first()
        if not req:
            raise RequestNotFound(request_id)
        authorize(actor, Action.REQUEST_READ, GateContext(actor_id=actor.actor_id, owner_id=req.requester_id))
        return req

    def _visible(self, actor_id: str, role: UserRole | str):
        q = self._db.query(AccessRequest)
        if read_scope(coerce_role(role), Action.REQUEST_READ) is ReadScope.OWN:
            q = q.filter(AccessRequest.requester_id == actor_id)
        return q

    def list_for_actor(
        self,
        actor_id: str,
        role: UserRole | str,
        *,
        status: AccessRequestStatus | None = None,
        class_id: str | None = None,
        limit: int | None = None,
    ) -> list[AccessRequest]:
        """Own requests for users, every request for admins; newest requested_at first."""
        q = self._visible(actor_id, role)
        if status is not None:
            q = q.filter(AccessRequest.status == status.value)
        if class_id is not None:
            q = q.filter(AccessRequest.class_id == class_id)
        q = q.order_by(AccessRequest.requested_at.desc(), AccessRequest.id.desc())
        if limit is not None:
            q = q.limit(limit)
        return q.all()

    def count_pending(self, actor_id: str, role: UserRole | str) -> int:
        return (
            self._visible(actor_id, role)
            .filter(AccessRequest.status == AccessRequestStatus.PENDING.value)
            .count()
        )
