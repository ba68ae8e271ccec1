from __future__ import annotations

from typing import List
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ...security.auth import User, get_current_user
from ...security.rbac import permissions_for

router = APIRouter(prefix="/auth", tags=["auth"])


class WhoAmI(BaseModel):
    user: User
    permissions: List[str]


@router.get("/me", response_model=WhoAmI)
def me(user: User = Depends(get_current_user)) -> WhoAmI:
    """Echo the verified token identity with the permissions its roles grant."""
    return WhoAmI(user=user, permissions=sorted(p.value for p in permissions_for(user)))
