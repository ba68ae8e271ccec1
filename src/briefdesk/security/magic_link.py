from __future__ import annotations

"""Magic-link access for clients.

A client never signs in: the project's ``magic_link_token`` travels in the
``x-magic-token`` header or the ``?token=`` query parameter and is compared
in constant time.
"""

import hmac
import os
import secrets
from typing import Optional

from fastapi import Header, HTTPException, Query, Request, status

from ..domain.models import Project
from ..infrastructure.repository import get_repo
from .rate_limit import CLIENT_ACCESS, enforce


def generate_token() -> str:
    return secrets.token_urlsafe(32)


def tokens_match(expected: Optional[str], provided: Optional[str]) -> bool:
    if not expected or not provided:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), provided.encode("utf-8"))


def magic_link_url(project: Project) -> str:
    base = (os.getenv("BRIEFDESK_APP_URL") or "http://localhost:3000").rstrip("/")
    return f"{base}/brief/t/{project.magic_link_token}"


def _client_identifier(request: Request, project_id: str) -> str:
    host = request.client.host if request.client else "unknown"
    return f"{host}:{project_id}"


def require_client_project(
    project_id: str,
    request: Request,
    token: Optional[str] = Query(default=None),
    x_magic_token: Optional[str] = Header(default=None),
) -> Project:
    """FastAPI dependency resolving the project a magic-link token grants.

    The ``x-magic-token`` header wins over the ``?token=`` query parameter.
    """
    provided = x_magic_token or token
    if not provided:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token required")
    enforce(CLIENT_ACCESS, _client_identifier(request, project_id))
    proj = get_repo().get(project_id)
    if proj is None or not tokens_match(proj.magic_link_token, provided):
        # Same answer for unknown projects and bad tokens
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token")
    return proj
