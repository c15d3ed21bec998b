import uuid
import enum
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Index, text
from app.database import Base
from app.utils.clock import utcnow


class AccessRequestStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class AccessRequest(Base):
    """A user's request for access to a class. Admin approves or rejects it exactly once."""
    __tablename__ = "access_requests"
    __table_args__ = (
        # One PENDING per (requester, class); closes the submit race at the storage layer.
        Index(
            "ix_access_requests_requester_class_pending",
            "requester_id",
            "class_id",
            unique=True,
            postgresql_where=text("status = 'PENDING'"),
            sqlite_where=text("status = 'PENDING'"),
        ),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    class_id = Column(String(36), ForeignKey("classes.id"), nullable=False, index=True)
    requester_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    message = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=AccessRequestStatus.PENDING.value)
    requested_at = Column(DateTime, nullable=False, default=utcnow)
    decided_at = Column(DateTime, nullable=True)
    decided_by_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    reason = Column(Text, nullable=True)
