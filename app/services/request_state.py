"""
Access request lifecycle as a tagged variant: Pending | Approved | Rejected.

Only Pending has transitions. Approved and Rejected are terminal and frozen, so a
decided request cannot be re-decided by accident; superseding it means a new row.
"""
from dataclasses import dataclass
from datetime import datetime

from app.errors import AlreadyDecided, ValidationError
from app.models.access_request import AccessRequest, AccessRequestStatus


@dataclass(frozen=True)
class Pending:
    request_id: str
    status = AccessRequestStatus.PENDING

    def approve(self, admin_id: str, at: datetime, reason: str | None = None) -> "Approved":
        return Approved(request_id=self.request_id, decided_by_id=admin_id, decided_at=at, reason=reason)

    def reject(self, admin_id: str, at: datetime, reason: str | None = None) -> "Rejected":
        return Rejected(request_id=self.request_id, decided_by_id=admin_id, decided_at=at, reason=reason)


@dataclass(frozen=True)
class Approved:
    request_id: str
    decided_by_id: str
    decided_at: datetime
    reason: str | None = None
    status = AccessRequestStatus.APPROVED


@dataclass(frozen=True)
class Rejected:
    request_id: str
    decided_by_id: str
    decided_at: datetime
    reason: str | None = None
    status = AccessRequestStatus.REJECTED


RequestState = Pending | Approved | Rejected
Decided = Approved | Rejected


def state_of(req: AccessRequest) -> RequestState:
    """Read the variant back from a persisted row."""
    if req.status == AccessRequestStatus.PENDING.value:
        return Pending(request_id=req.id)
    if req.status == AccessRequestStatus.APPROVED.value:
        return Approved(req.id, req.decided_by_id, req.decided_at, req.reason)
    if req.status == AccessRequestStatus.REJECTED.value:
        return Rejected(req.id, req.decided_by_id, req.decided_at, req.reason)
    raise ValueError(f"Unknown access request status {req.status!r} on {req.id}")


def transition(
    state: RequestState,
    outcome: AccessRequestStatus,
    admin_id: str,
    at: datetime,
    reason: str | None = None,
) -> Decided:
    """Apply an admin decision. Terminal states raise AlreadyDecided."""
    if not isinstance(state, Pending):
        raise AlreadyDecided(state.request_id, state.status.value)
    if outcome is AccessRequestStatus.APPROVED:
        return state.approve(admin_id, at, reason)
    if outcome is AccessRequestStatus.REJECTED:
        return state.reject(admin_id, at, reason)
    raise ValidationError(f"Outcome must be APPROVED or REJECTED, got {outcome.value}", field="status")
