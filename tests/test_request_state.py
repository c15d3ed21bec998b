from datetime import datetime

import pytest

from app.errors import AlreadyDecided, ValidationError
from app.models.access_request import AccessRequest, AccessRequestStatus
from app.services.request_state import Approved, Pending, Rejected, state_of, transition

NOW = datetime(2026, 10, 19, 9, 30)


def test_pending_approves():
    state = transition(Pending("r1"), AccessRequestStatus.APPROVED, "a1", NOW)
    assert state == Approved("r1", "a1", NOW, None)
    assert state.status is AccessRequestStatus.APPROVED


def test_pending_rejects_with_reason():
    state = transition(Pending("r1"), AccessRequestStatus.REJECTED, "a1", NOW, "capacity full")
    assert isinstance(state, Rejected)
    assert state.reason == "capacity full"


@pytest.mark.parametrize(
    "terminal",
    [Approved("r1", "a1", NOW), Rejected("r1", "a1", NOW, "no")],
)
@pytest.mark.parametrize("outcome", [AccessRequestStatus.APPROVED, AccessRequestStatus.REJECTED])
def test_terminal_states_cannot_transition(terminal, outcome):
    with pytest.raises(AlreadyDecided) as exc:
        transition(terminal, outcome, "a2", NOW)
    assert exc.value.request_id == "r1"
    assert exc.value.status == terminal.status.value


def test_terminal_variants_have_no_transition_methods():
    assert not hasattr(Approved("r1", "a1", NOW), "approve")
    assert not hasattr(Rejected("r1", "a1", NOW), "reject")


def test_pending_is_not_an_outcome():
    with pytest.raises(ValidationError):
        transition(Pending("r1"), AccessRequestStatus.PENDING, "a1", NOW)


def test_state_of_reads_rows():
    row = AccessRequest(id="r1", status="PENDING")
    assert state_of(row) == Pending("r1")
    row = AccessRequest(id="r2", status="REJECTED", decided_by_id="a1", decided_at=NOW, reason="dup")
    assert state_of(row) == Rejected("r2", "a1", NOW, "dup")


def test_state_of_unknown_status():
    with pytest.raises(ValueError):
        state_of(AccessRequest(id="r1", status="WITHDRAWN"))
