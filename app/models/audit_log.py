import uuid
import enum
from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from app.database import Base
from app.utils.clock import utcnow


class AdminAction(str, enum.Enum):
    CREATE_CLASS = "create_class"
    UPDATE_CLASS = "update_class"
    ARCHIVE_CLASS = "archive_class"
    RESTORE_CLASS = "restore_class"
    APPROVE_REQUEST = "approve_request"
    REJECT_REQUEST = "reject_request"


class AuditEntityType(str, enum.Enum):
    CLASS = "class"
    REQUEST = "request"


class AdminAuditLog(Base):
    __tablename__ = "admin_audit_logs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    admin_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    action = Column(String(30), nullable=False, index=True)
    entity_type = Column(String(20), nullable=False)
    entity_id = Column(String(36), nullable=False, index=True)
    description = Column(Text, nullable=False)
    details = Column(Text, nullable=True)  # JSON string
    performed_at = Column(DateTime, nullable=False, default=utcnow, index=True)
