"""
Access requests. Users submit and read their own; admins read all and approve/reject.
Every state change goes through RequestLedger so notification + audit rows commit with it.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.auth import get_current_actor
from app.database import get_db
from app.guard import require_admin
from app.models.access_request import AccessRequest, AccessRequestStatus
from app.models.classroom import Class
from app.models.user import User
from app.schemas.access_request import AccessRequestResponse, AccessRequestReview, RequestAccessBody
from app.services.authorization import Actor
from app.services.request_ledger import RequestLedger

router = APIRouter(prefix="/api/requests", tags=["requests"])


def build_request_responses(db: Session, reqs: list[AccessRequest]) -> list[AccessRequestResponse]:
    """Attach class name and requester info, one query per table."""
    class_ids = {r.class_id for r in reqs}
    user_ids = {r.requester_id for r in reqs}
    classes = {c.id: c for c in db.query(Class).filter(Class.id.in_(class_ids)).all()} if class_ids else {}
    users = {u.id: u for u in db.query(User).filter(User.id.in_(user_ids)).all()} if user_ids else {}
    out = []
    for req in reqs:
        c = classes.get(req.class_id)
        u = users.get(req.requester_id)
        out.append(
            AccessRequestResponse(
                id=req.id,
                class_id=req.class_id,
                class_name=c.name if c else "",
                requester_id=req.requester_id,
                requester_email=u.email if u else "",
                requester_full_name=(u.full_name or u.email) if u else "",
                message=req.message,
                status=req.status,
                requested_at=req.requested_at,
                decided_at=req.decided_at,
                decided_by_id=req.decided_by_id,
                reason=req.reason,
            )
        )
    return out


@router.post("", response_model=AccessRequestResponse, status_code=status.HTTP_201_CREATED)
def submit_request(
    body: RequestAccessBody,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Request access to a class. 409 duplicate_pending if one is already waiting."""
    req = RequestLedger(db).submit(actor, body.class_id, body.message)
    return build_request_responses(db, [req])[0]


@router.get("", response_model=list[AccessRequestResponse])
def list_requests(
    status_filter: str | None = None,
    class_id: str | None = None,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Own requests for users, all requests for admins. Optional ?status_filter=PENDING."""
    try:
        status_value = AccessRequestStatus(status_filter.upper()) if status_filter else None
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unknown status_filter")
    reqs = RequestLedger(db).list_for_actor(actor.actor_id, actor.role, status=status_value, class_id=class_id)
    return build_request_responses(db, reqs)


@router.get("/{request_id}", response_model=AccessRequestResponse)
def get_request(
    request_id: str,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    req = RequestLedger(db).get(actor, request_id)
    return build_request_responses(db, [req])[0]


@router.patch("/{request_id}", response_model=AccessRequestResponse)
def review_request(
    request_id: str,
    body: AccessRequestReview,
    admin: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Approve or reject (admin only). Decisions are final: a second review gets 409 already_decided."""
    req = RequestLedger(db).decide(request_id, admin, body.status, body.reason)
    return build_request_responses(db, [req])[0]
