import json
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.auth import get_current_actor
from app.database import get_db
from app.guard import require_admin
from app.models.audit_log import AdminAuditLog
from app.routers.notifications import to_response as notification_response
from app.routers.requests import build_request_responses
from app.schemas.dashboard import AdminDashboardResponse, AuditLogResponse, UserDashboardResponse
from app.services.authorization import Actor
from app.services.dashboard import DashboardService

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


def audit_response(entry: AdminAuditLog) -> AuditLogResponse:
    return AuditLogResponse(
        id=entry.id,
        admin_id=entry.admin_id,
        action=entry.action,
        entity_type=entry.entity_type,
        entity_id=entry.entity_id,
        description=entry.description,
        details=json.loads(entry.details) if entry.details else None,
        performed_at=entry.performed_at,
    )


@router.get("", response_model=UserDashboardResponse)
def user_dashboard(
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """My pending requests, unread notifications and the most recent of each."""
    data = DashboardService(db).for_user(actor)
    return UserDashboardResponse(
        pending_requests_count=data.pending_requests_count,
        unread_notifications_count=data.unread_notifications_count,
        recent_requests=build_request_responses(db, data.recent_requests),
        recent_notifications=[notification_response(n) for n in data.recent_notifications],
    )


@router.get("/admin", response_model=AdminDashboardResponse)
def admin_dashboard(
    admin: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    data = DashboardService(db).for_admin(admin)
    return AdminDashboardResponse(
        pending_requests_count=data.pending_requests_count,
        active_classes_count=data.active_classes_count,
        total_classes_count=data.total_classes_count,
        recent_audit_logs=[audit_response(e) for e in data.recent_audit_logs],
    )
