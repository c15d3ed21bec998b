from datetime import datetime
from pydantic import BaseModel
from app.schemas.access_request import AccessRequestResponse
from app.schemas.notification import NotificationResponse


class AuditLogResponse(BaseModel):
    id: str
    admin_id: str
    action: str
    entity_type: str
    entity_id: str
    description: str
    details: dict | None
    performed_at: datetime


class UserDashboardResponse(BaseModel):
    pending_requests_count: int
    unread_notifications_count: int
    recent_requests: list[AccessRequestResponse]
    recent_notifications: list[NotificationResponse]


class AdminDashboardResponse(BaseModel):
    pending_requests_count: int
    active_classes_count: int
    total_classes_count: int
    recent_audit_logs: list[AuditLogResponse]
