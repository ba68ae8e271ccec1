from __future__ import annotations

"""Role-based permissions for designer routes."""
from enum import Enum
from typing import Set, Callable
from fastapi import Depends, HTTPException, status

from .auth import User, get_current_user


class Permission(str, Enum):
    PROJECT_READ = "project:read"
    PROJECT_WRITE = "project:write"
    REVISION_WRITE = "revision:write"
    DELIVERABLE_WRITE = "deliverable:write"
    PROJECT_DELIVER = "project:deliver"
    ADMIN = "admin:*"


ROLE_PERMISSIONS = {
    "viewer": {Permission.PROJECT_READ},
    "designer": {
        Permission.PROJECT_READ,
        Permission.PROJECT_WRITE,
        Permission.REVISION_WRITE,
        Permission.DELIVERABLE_WRITE,
        Permission.PROJECT_DELIVER,
    },
    "admin": {Permission.ADMIN},
}


def permissions_for(user: User) -> Set[Permission]:
    perms: Set[Permission] = set()
    for role in user.roles:
        perms |= ROLE_PERMISSIONS.get(role, set())
    return perms


def is_admin(user: User) -> bool:
    return Permission.ADMIN in permissions_for(user)


def _is_authorized(user: User, required: Permission) -> bool:
    perms = permissions_for(user)
    if Permission.ADMIN in perms:
        return True
    return required in perms


def require_permission(required: Permission) -> Callable[[User], User]:
    """FastAPI dependency to enforce a single permission on a route."""

    def dependency(user: User = Depends(get_current_user)) -> User:
        if not _is_authorized(user, required):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return user

    return dependency
