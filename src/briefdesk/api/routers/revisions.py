from __future__ import annotations

from typing import List
from fastapi import APIRouter, Depends, status

from ...domain.review_models import RevisionCreate, RevisionRequest
from ...infrastructure.events import publish_event
from ...infrastructure.revision_store import get_revision_store
from ...security.auth import User
from ...security.rbac import require_permission, Permission
from .projects import load_owned_project

router = APIRouter(prefix="/projects", tags=["revisions"])


@router.get("/{project_id}/revisions", response_model=List[RevisionRequest])
def list_revisions(
    project_id: str,
    user: User = Depends(require_permission(Permission.PROJECT_READ)),
) -> List[RevisionRequest]:
    load_owned_project(project_id, user)
    return get_revision_store().list(project_id)


@router.post("/{project_id}/revisions", response_model=RevisionRequest, status_code=status.HTTP_201_CREATED)
def create_revision(
    project_id: str,
    payload: RevisionCreate,
    user: User = Depends(require_permission(Permission.REVISION_WRITE)),
) -> RevisionRequest:
    load_owned_project(project_id, user)
    rev = get_revision_store().create(project_id, user.email, payload)
    publish_event(
        "revision.requested",
        {"project_id": project_id, "revision_id": rev.revision_id, "step_key": rev.step_key},
    )
    return rev
