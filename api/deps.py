"""
Request identity.

GOVERNANCE:
- Every role-specific route resolves the acting user first
- Role mismatches are 403, unknown users are 401
"""

from typing import Callable, Optional

from fastapi import Depends, Header, HTTPException

from api.models import Role, User
from storage import get_storage


def get_current_user(x_user_id: Optional[str] = Header(None)) -> User:
    """Resolve the acting user from the ``X-User-Id`` header."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")

    user = get_storage().users.get(x_user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


def require_role(role: Role) -> Callable[..., User]:
    """Dependency factory restricting a route to one role."""

    def dependency(user: User = Depends(get_current_user)) -> User:
        if user.role != role:
            raise HTTPException(
                status_code=403,
                detail=f"Forbidden: {role.value.title()} access required",
            )
        return user

    return dependency


require_parent = require_role(Role.PARENT)
require_therapist = require_role(Role.THERAPIST)
require_manager = require_role(Role.MANAGER)
