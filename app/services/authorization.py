"""
Authorization gate: pure (role, action, context) -> Decision.

Shared by the request ledger, the class registry, the notification reads and the
route guard. No database access here; callers look up whatever the context needs
(e.g. whether a pending request already exists) and pass it in.

Expected denials are returned as Decision(allowed=False, reason=...). Only malformed
input (unknown action or role, context missing a field the rule needs) raises.
"""
import enum
from dataclasses import dataclass

from app.errors import DuplicatePendingRequest, Forbidden, ForbiddenRole, ValidationError
from app.models.user import UserRole


class Action(str, enum.Enum):
    CLASS_CREATE = "class.create"
    CLASS_UPDATE = "class.update"
    REQUEST_CREATE = "request.create"
    REQUEST_APPROVE = "request.approve"
    REQUEST_REJECT = "request.reject"
    REQUEST_READ = "request.read"
    NOTIFICATION_READ = "notification.read"


class DenyReason(str, enum.Enum):
    FORBIDDEN_ROLE = "forbidden_role"
    DUPLICATE_PENDING = "duplicate_pending"
    NOT_OWNER = "not_owner"


@dataclass(frozen=True)
class Actor:
    """Already-authenticated caller, as supplied by the identity layer."""
    actor_id: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN


@dataclass(frozen=True)
class GateContext:
    actor_id: str | None = None
    owner_id: str | None = None
    has_pending: bool | None = None


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: DenyReason | None = None

    def __bool__(self) -> bool:
        return self.allowed

    def raise_for_denial(self, action: "Action | str", role: "UserRole | str") -> None:
        """Turn a denial into the matching ClassVaultError; no-op when allowed."""
        if self.allowed:
            return
        if self.reason is DenyReason.DUPLICATE_PENDING:
            raise DuplicatePendingRequest()
        if self.reason is DenyReason.NOT_OWNER:
            raise Forbidden("You can only access your own records.")
        raise ForbiddenRole(_value(action), _value(role))


ALLOW = Decision(allowed=True)

_ADMIN_ONLY = frozenset({
    Action.CLASS_CREATE,
    Action.CLASS_UPDATE,
    Action.REQUEST_APPROVE,
    Action.REQUEST_REJECT,
})
_OWNER_OR_ADMIN = frozenset({Action.REQUEST_READ, Action.NOTIFICATION_READ})


def _value(v) -> str:
    return v.value if isinstance(v, enum.Enum) else str(v)


def _deny(reason: DenyReason) -> Decision:
    return Decision(allowed=False, reason=reason)


def coerce_role(role: "UserRole | str") -> UserRole:
    if isinstance(role, UserRole):
        return role
    try:
        return UserRole(str(role).upper())
    except ValueError:
        raise ValidationError(f"Unknown role: {role!r}", field="role") from None


def coerce_action(action: "Action | str") -> Action:
    if isinstance(action, Action):
        return action
    try:
        return Action(action)
    except ValueError:
        raise ValidationError(f"Unknown action: {action!r}", field="action") from None


def decide(
    role: "UserRole | str",
    action: "Action | str",
    context: GateContext | None = None,
) -> Decision:
    role = coerce_role(role)
    action = coerce_action(action)

    if action in _ADMIN_ONLY:
        return ALLOW if role is UserRole.ADMIN else _deny(DenyReason.FORBIDDEN_ROLE)

    if action is Action.REQUEST_CREATE:
        if role is not UserRole.USER:
            return _deny(DenyReason.FORBIDDEN_ROLE)
        if context is None or context.has_pending is None:
            raise ValidationError("request.create needs has_pending in context", field="context")
        return _deny(DenyReason.DUPLICATE_PENDING) if context.has_pending else ALLOW

    if action in _OWNER_OR_ADMIN:
        if role is UserRole.ADMIN:
            return ALLOW
        if context is None or context.actor_id is None or context.owner_id is None:
            raise ValidationError(f"{action.value} needs actor_id and owner_id in context", field="context")
        return ALLOW if context.actor_id == context.owner_id else _deny(DenyReason.NOT_OWNER)

    # Every Action member is covered above; reaching here means the table is out of date.
    raise ValidationError(f"No rule for action {action.value}", field="action")


def meets_role(role: "UserRole | str", required_role: "UserRole | str | None" = None) -> Decision:
    """Page-level role gate: ADMIN satisfies any requirement, USER satisfies USER."""
    role = coerce_role(role)
    if required_role is None:
        return ALLOW
    required_role = coerce_role(required_role)
    if role is UserRole.ADMIN or role is required_role:
        return ALLOW
    return _deny(DenyReason.FORBIDDEN_ROLE)


def authorize(actor: Actor, action: "Action | str", context: GateContext | None = None) -> None:
    """decide() and raise on denial. For service code that should stop on a deny."""
    decide(actor.role, action, context).raise_for_denial(action, actor.role)


class ReadScope(str, enum.Enum):
    ALL = "all"
    OWN = "own"


def read_scope(role: "UserRole | str", action: "Action | str") -> ReadScope:
    """For owner-or-admin listings: which rows the role may see without a per-row check."""
    role = coerce_role(role)
    action = coerce_action(action)
    if action not in _OWNER_OR_ADMIN:
        raise ValidationError(f"{action.value} is not an owner-scoped read", field="action")
    return ReadScope.ALL if role is UserRole.ADMIN else ReadScope.OWN
