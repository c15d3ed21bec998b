import uuid
import enum
from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from app.database import Base
from app.utils.clock import utcnow


class NotificationKind(str, enum.Enum):
    REQUEST_SUBMITTED = "request_submitted"
    REQUEST_APPROVED = "request_approved"
    REQUEST_REJECTED = "request_rejected"


class Notification(Base):
    """Ledger event addressed to one user. Only read_at ever changes after insert."""
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    kind = Column(String(30), nullable=False)
    related_request_id = Column(String(36), ForeignKey("access_requests.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    expires_at = Column(DateTime, nullable=False)
    read_at = Column(DateTime, nullable=True)
