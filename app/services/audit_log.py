"""
Admin audit trail. Rows are appended inside the caller's transaction (flush, no commit)
so an admin action and its audit entry commit or roll back together.
"""
import json
from typing import Any

from sqlalchemy.orm import Session

from app.models.audit_log import AdminAction, AdminAuditLog, AuditEntityType


class AuditLogService:
    def __init__(self, db: Session):
        self._db = db

    def record(
        self,
        admin_id: str,
        action: AdminAction,
        entity_type: AuditEntityType,
        entity_id: str,
        description: str,
        details: dict[str, Any] | None = None,
    ) -> AdminAuditLog:
        entry = AdminAuditLog(
            admin_id=admin_id,
            action=action.value,
            entity_type=entity_type.value,
            entity_id=entity_id,
            description=description,
            details=json.dumps(details, default=str) if details else None,
        )
        self._db.add(entry)
        self._db.flush()
        return entry

    def list(
        self,
        *,
        limit: int = 50,
        offset: int = 0,
        action: AdminAction | None = None,
        entity_type: AuditEntityType | None = None,
        entity_id: str | None = None,
    ) -> list[AdminAuditLog]:
        q = self._db.query(AdminAuditLog)
        if action is not None:
            q = q.filter(AdminAuditLog.action == action.value)
        if entity_type is not None:
            q = q.filter(AdminAuditLog.entity_type == entity_type.value)
        if entity_id is not None:
            q = q.filter(AdminAuditLog.entity_id == entity_id)
        return (
            q.order_by(AdminAuditLog.performed_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
