"""
Route guard for the presentation layer.

check_access is a pure predicate evaluated on every request / navigation. It reuses
the authorization gate's role ordering instead of keeping its own rule table.
"""
from dataclasses import dataclass

from fastapi import Depends, Request

from app.auth import get_current_actor
from app.errors import ForbiddenRole
from app.models.user import UserRole
from app.services.authorization import Actor, meets_role

SIGN_IN_PATH = "/sign-in"
HOME_PATH = "/"


@dataclass(frozen=True)
class AccessCheck:
    allowed: bool
    redirect_hint: str | None = None


def check_access(actor: Actor | None, required_role: UserRole | str | None = None) -> AccessCheck:
    if actor is None:
        return AccessCheck(allowed=False, redirect_hint=SIGN_IN_PATH)
    if not meets_role(actor.role, required_role):
        return AccessCheck(allowed=False, redirect_hint=HOME_PATH)
    return AccessCheck(allowed=True)


def require_role(required_role: UserRole):
    """FastAPI dependency: authenticated actor whose role meets required_role, else ForbiddenRole (403)."""

    def dependency(request: Request, actor: Actor = Depends(get_current_actor)) -> Actor:
        if not check_access(actor, required_role).allowed:
            raise ForbiddenRole(f"{request.method} {request.url.path}", actor.role.value)
        return actor

    return dependency


require_admin = require_role(UserRole.ADMIN)
