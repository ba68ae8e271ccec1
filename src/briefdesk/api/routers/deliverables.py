from __future__ import annotations

from typing import List
from fastapi import APIRouter, Depends, HTTPException, Response, status

from ...domain.review_models import Deliverable, DeliverableCreate, DeliverableUpdate
from ...infrastructure.deliverable_store import get_deliverable_store
from ...infrastructure.events import publish_event
from ...security.auth import User
from ...security.rbac import require_permission, Permission
from .projects import load_owned_project

router = APIRouter(prefix="/projects", tags=["deliverables"])


@router.get("/{project_id}/deliverables", response_model=List[Deliverable])
def list_deliverables(
    project_id: str,
    user: User = Depends(require_permission(Permission.PROJECT_READ)),
) -> List[Deliverable]:
    load_owned_project(project_id, user)
    return get_deliverable_store().list(project_id)


@router.post("/{project_id}/deliverables", response_model=Deliverable, status_code=status.HTTP_201_CREATED)
def create_deliverable(
    project_id: str,
    payload: DeliverableCreate,
    user: User = Depends(require_permission(Permission.DELIVERABLE_WRITE)),
) -> Deliverable:
    load_owned_project(project_id, user)
    return get_deliverable_store().create(project_id, payload)


@router.patch("/{project_id}/deliverables/{deliverable_id}", response_model=Deliverable)
def update_deliverable(
    project_id: str,
    deliverable_id: str,
    payload: DeliverableUpdate,
    user: User = Depends(require_permission(Permission.DELIVERABLE_WRITE)),
) -> Deliverable:
    load_owned_project(project_id, user)
    store = get_deliverable_store()
    before = store.get(project_id, deliverable_id)
    if before is None:
        raise HTTPException(status_code=404, detail="Deliverable not found")
    was_shared = before.shared_with_client
    updated = store.update(project_id, deliverable_id, payload.model_dump(exclude_unset=True, exclude_none=True))
    if updated is None:
        raise HTTPException(status_code=404, detail="Deliverable not found")
    if updated.shared_with_client and not was_shared:
        publish_event("deliverable.shared", {"project_id": project_id, "deliverable_id": deliverable_id})
    return updated


@router.delete(
    "/{project_id}/deliverables/{deliverable_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
def delete_deliverable(
    project_id: str,
    deliverable_id: str,
    user: User = Depends(require_permission(Permission.DELIVERABLE_WRITE)),
) -> Response:
    load_owned_project(project_id, user)
    if not get_deliverable_store().delete(project_id, deliverable_id):
        raise HTTPException(status_code=404, detail="Deliverable not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
