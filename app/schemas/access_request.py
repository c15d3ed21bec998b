from datetime import datetime
from pydantic import BaseModel
from app.models.access_request import AccessRequestStatus


class RequestAccessBody(BaseModel):
    """Body for submitting an access request. Requester comes from the JWT."""
    class_id: str
    message: str | None = None


class AccessRequestResponse(BaseModel):
    id: str
    class_id: str
    class_name: str
    requester_id: str
    requester_email: str
    requester_full_name: str
    message: str | None
    status: str
    requested_at: datetime
    decided_at: datetime | None
    decided_by_id: str | None
    reason: str | None

    class Config:
        from_attributes = True


class AccessRequestReview(BaseModel):
    """Body for admin approve/reject. reason is required when rejecting."""
    status: AccessRequestStatus  # APPROVED or REJECTED
    reason: str | None = None
