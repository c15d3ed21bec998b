from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.guard import require_admin
from app.models.audit_log import AdminAction, AuditEntityType
from app.routers.dashboard import audit_response
from app.schemas.dashboard import AuditLogResponse
from app.services.audit_log import AuditLogService
from app.services.authorization import Actor

router = APIRouter(prefix="/api/audit-logs", tags=["audit"])


@router.get("", response_model=list[AuditLogResponse])
def list_audit_logs(
    action: str | None = None,
    entity_type: str | None = None,
    entity_id: str | None = None,
    limit: int = 50,
    offset: int = 0,
    _admin: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Admin actions, newest first. Optional ?action=approve_request&entity_type=request."""
    try:
        action_value = AdminAction(action) if action else None
        entity_value = AuditEntityType(entity_type) if entity_type else None
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unknown action or entity_type")
    entries = AuditLogService(db).list(
        limit=max(1, min(limit, 200)),
        offset=max(0, offset),
        action=action_value,
        entity_type=entity_value,
        entity_id=entity_id,
    )
    return [audit_response(e) for e in entries]
