from __future__ import annotations

from typing import List
import logging
from fastapi import APIRouter, HTTPException, status, Response, Depends

from ...domain.models import (
    DeliverRequest,
    Project,
    ProjectCreate,
    ProjectStatus,
    ProjectUpdate,
    SendResponse,
    StatusChange,
)
from ...domain.brief_models import QuestionnaireResponse, StructuredBrief
from ...domain.progress_models import ProjectProgress, TimelineEvent
from ...infrastructure.repository import get_repo
from ...infrastructure.deliverable_store import get_deliverable_store
from ...infrastructure.response_store import get_response_store
from ...infrastructure.events import publish_event
from ...observability.metrics import record_phase
from ...security.auth import User
from ...security.magic_link import generate_token, magic_link_url
from ...security.rate_limit import RESEND, enforce
from ...security.rbac import require_permission, is_admin, Permission
from ...services.lifecycle_service import (
    InvalidTransition,
    deliver,
    project_progress,
    project_timeline,
    purge_project,
    transition_project,
)


router = APIRouter(prefix="/projects", tags=["projects"])
logger = logging.getLogger(__name__)


def load_owned_project(project_id: str, user: User) -> Project:
    """Fetch a project the caller may act on; others' projects read as missing."""
    proj = get_repo().get(project_id)
    if not proj or (proj.designer_email != user.email.lower() and not is_admin(user)):
        raise HTTPException(status_code=404, detail="Project not found")
    return proj


def _transition_or_409(proj: Project, target: ProjectStatus, actor: str) -> Project:
    try:
        return transition_project(proj, target, actor)
    except InvalidTransition as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.get("", response_model=List[Project])
def list_projects(user: User = Depends(require_permission(Permission.PROJECT_READ))) -> List[Project]:
    repo = get_repo()
    if is_admin(user):
        return repo.list()
    return repo.list(designer_email=user.email)


@router.post("", response_model=Project, status_code=status.HTTP_201_CREATED)
def create_project(payload: ProjectCreate, user: User = Depends(require_permission(Permission.PROJECT_WRITE))) -> Project:
    proj = get_repo().create(payload, designer_email=user.email)
    logger.info("Created project %s for %s", proj.project_id, proj.client_email)
    return proj


@router.get("/{project_id}", response_model=Project)
def get_project(project_id: str, user: User = Depends(require_permission(Permission.PROJECT_READ))) -> Project:
    return load_owned_project(project_id, user)


@router.patch("/{project_id}", response_model=Project)
def update_project(
    project_id: str,
    payload: ProjectUpdate,
    user: User = Depends(require_permission(Permission.PROJECT_WRITE)),
) -> Project:
    load_owned_project(project_id, user)
    # An explicit null means "leave unchanged"; required fields must never be cleared.
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "client_email" in changes and changes["client_email"]:
        changes["client_email"] = str(changes["client_email"]).lower()
    updated = get_repo().update(project_id, changes)
    if updated is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return updated


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_project(project_id: str, user: User = Depends(require_permission(Permission.ADMIN))) -> Response:
    if not purge_project(project_id):
        raise HTTPException(status_code=404, detail="Project not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{project_id}/send", response_model=SendResponse)
def send_project(project_id: str, user: User = Depends(require_permission(Permission.PROJECT_WRITE))) -> SendResponse:
    """Issue the client's magic link, or resend the existing one."""
    proj = load_owned_project(project_id, user)
    repo = get_repo()

    if proj.status == ProjectStatus.DRAFT.value:
        repo.update(project_id, {"magic_link_token": generate_token()})
        sent = _transition_or_409(proj, ProjectStatus.SENT, user.email)
        return SendResponse(project=sent, magic_link_url=magic_link_url(sent), resent=False)

    if not proj.magic_link_token:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Project has no magic link to resend")
    enforce(RESEND, f"{user.email.lower()}:{project_id}")
    publish_event("project.link_resent", {"project_id": project_id, "client_email": proj.client_email})
    return SendResponse(project=proj, magic_link_url=magic_link_url(proj), resent=True)


@router.post("/{project_id}/status", response_model=Project)
def change_status(
    project_id: str,
    req: StatusChange,
    user: User = Depends(require_permission(Permission.PROJECT_WRITE)),
) -> Project:
    proj = load_owned_project(project_id, user)
    return _transition_or_409(proj, req.status, user.email)


@router.post("/{project_id}/deliver", response_model=Project)
def deliver_project(
    project_id: str,
    req: DeliverRequest,
    user: User = Depends(require_permission(Permission.PROJECT_DELIVER)),
) -> Project:
    proj = load_owned_project(project_id, user)
    if not req.deliverable_ids:
        raise HTTPException(status_code=400, detail="At least one deliverable must be selected")
    if proj.status != ProjectStatus.COMPLETED.value:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Only completed projects can be delivered")

    store = get_deliverable_store()
    missing = [did for did in req.deliverable_ids if store.get(project_id, did) is None]
    if missing:
        raise HTTPException(status_code=404, detail=f"Deliverable not found: {missing[0]}")
    try:
        return deliver(proj, req.deliverable_ids, req.notes, user.email)
    except InvalidTransition as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.get("/{project_id}/progress", response_model=ProjectProgress)
def get_progress(project_id: str, user: User = Depends(require_permission(Permission.PROJECT_READ))) -> ProjectProgress:
    proj = load_owned_project(project_id, user)
    progress = project_progress(proj)
    record_phase(progress.phase.value, "designer")
    return progress


@router.get("/{project_id}/timeline", response_model=List[TimelineEvent])
def get_timeline(project_id: str, user: User = Depends(require_permission(Permission.PROJECT_READ))) -> List[TimelineEvent]:
    return project_timeline(load_owned_project(project_id, user))


@router.get("/{project_id}/responses", response_model=List[QuestionnaireResponse])
def get_responses(
    project_id: str,
    user: User = Depends(require_permission(Permission.PROJECT_READ)),
) -> List[QuestionnaireResponse]:
    load_owned_project(project_id, user)
    return get_response_store().list(project_id)


@router.get("/{project_id}/brief", response_model=StructuredBrief)
def get_brief(project_id: str, user: User = Depends(require_permission(Permission.PROJECT_READ))) -> StructuredBrief:
    load_owned_project(project_id, user)
    brief = get_response_store().latest_brief(project_id)
    if brief is None:
        raise HTTPException(status_code=404, detail="Brief not submitted yet")
    return brief
