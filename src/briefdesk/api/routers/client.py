from __future__ import annotations

from typing import List, Optional
import logging
from fastapi import APIRouter, Depends, HTTPException, status

from ...core.progress import client_status_label
from ...domain.brief_models import QuestionnaireResponse, ResponseUpsert, StructuredBrief
from ...domain.models import PROJECT_STATUS_LABELS, PROJECT_TYPE_LABELS, Project, ProjectStatus
from ...domain.progress_models import ClientProjectSummary, ClientProjectView, ProjectProgress
from ...domain.review_models import Deliverable, RevisionReply, RevisionRequest
from ...infrastructure.deliverable_store import get_deliverable_store
from ...infrastructure.events import publish_event
from ...infrastructure.response_store import get_response_store
from ...infrastructure.revision_store import get_revision_store
from ...observability.metrics import record_phase
from ...security.magic_link import require_client_project
from ...security.rate_limit import RESPONSE_SAVE, enforce
from ...services.lifecycle_service import (
    InvalidTransition,
    project_progress,
    project_timeline,
    save_answers,
    submit_brief,
    transition_project,
)

router = APIRouter(prefix="/client/projects", tags=["client"])
logger = logging.getLogger(__name__)

_CLIENT_ACTOR = "client"


def _summary(proj: Project) -> ClientProjectSummary:
    return ClientProjectSummary(
        project_id=proj.project_id,
        client_name=proj.client_name,
        project_type=proj.project_type,
        project_type_label=PROJECT_TYPE_LABELS.get(proj.project_type or ""),
        designer_email=proj.designer_email,
        status=proj.status,
        status_label=PROJECT_STATUS_LABELS.get(proj.status, proj.status),
        created_at=proj.created_at,
        completed_at=proj.completed_at,
    )


@router.get("/{project_id}", response_model=ClientProjectView)
def client_project(proj: Project = Depends(require_client_project)) -> ClientProjectView:
    progress = project_progress(proj)
    record_phase(progress.phase.value, "client")
    return ClientProjectView(
        project=_summary(proj),
        badge=client_status_label(proj.status, progress.has_pending_revision),
        progress=progress,
        timeline=project_timeline(proj),
        deliverables=get_deliverable_store().list(proj.project_id, shared_only=True),
        brief=get_response_store().latest_brief(proj.project_id),
    )


@router.get("/{project_id}/progress", response_model=ProjectProgress)
def client_progress(proj: Project = Depends(require_client_project)) -> ProjectProgress:
    progress = project_progress(proj)
    record_phase(progress.phase.value, "client")
    return progress


@router.post("/{project_id}/start", response_model=ClientProjectSummary)
def start_brief(proj: Project = Depends(require_client_project)) -> ClientProjectSummary:
    if proj.status == ProjectStatus.IN_PROGRESS.value:
        return _summary(proj)
    try:
        updated = transition_project(proj, ProjectStatus.IN_PROGRESS, _CLIENT_ACTOR)
    except InvalidTransition as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return _summary(updated)


@router.get("/{project_id}/responses", response_model=List[QuestionnaireResponse])
def client_responses(proj: Project = Depends(require_client_project)) -> List[QuestionnaireResponse]:
    return get_response_store().list(proj.project_id)


@router.post("/{project_id}/responses", response_model=QuestionnaireResponse)
def save_response(req: ResponseUpsert, proj: Project = Depends(require_client_project)) -> QuestionnaireResponse:
    """Auto-save one questionnaire step."""
    enforce(RESPONSE_SAVE, proj.project_id)
    try:
        return save_answers(proj, req.step_key, req.answers)
    except InvalidTransition:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Brief already submitted")


@router.post("/{project_id}/submit", response_model=StructuredBrief)
def submit(proj: Project = Depends(require_client_project)) -> StructuredBrief:
    if proj.status in (ProjectStatus.COMPLETED.value, ProjectStatus.REVIEWED.value):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Brief already submitted")
    try:
        return submit_brief(proj, _CLIENT_ACTOR)
    except InvalidTransition as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.get("/{project_id}/brief", response_model=Optional[StructuredBrief])
def client_brief(proj: Project = Depends(require_client_project)) -> Optional[StructuredBrief]:
    return get_response_store().latest_brief(proj.project_id)


@router.get("/{project_id}/revisions", response_model=List[RevisionRequest])
def client_revisions(proj: Project = Depends(require_client_project)) -> List[RevisionRequest]:
    return get_revision_store().list(proj.project_id)


@router.patch("/{project_id}/revisions", response_model=RevisionRequest)
def reply_to_revision(req: RevisionReply, proj: Project = Depends(require_client_project)) -> RevisionRequest:
    store = get_revision_store()
    updated = store.respond(proj.project_id, req.revision_id, req.response)
    if updated is None:
        raise HTTPException(status_code=404, detail="Revision not found")
    publish_event(
        "revision.responded",
        {"project_id": proj.project_id, "revision_id": req.revision_id},
    )
    return updated


@router.get("/{project_id}/deliverables", response_model=List[Deliverable])
def client_deliverables(proj: Project = Depends(require_client_project)) -> List[Deliverable]:
    return get_deliverable_store().list(proj.project_id, shared_only=True)
