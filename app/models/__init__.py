from app.models.user import User, UserRole
from app.models.classroom import Class
from app.models.access_request import AccessRequest, AccessRequestStatus
from app.models.notification import Notification, NotificationKind
from app.models.audit_log import AdminAuditLog, AdminAction, AuditEntityType

__all__ = [
    "User", "UserRole", "Class", "AccessRequest", "AccessRequestStatus",
    "Notification", "NotificationKind", "AdminAuditLog", "AdminAction", "AuditEntityType",
]
