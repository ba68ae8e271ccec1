from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any, Dict, List, Optional

from ..core.brief_generator import generate_brief
from ..core.progress import build_progress, build_timeline
from ..core.state_machine import is_valid_transition
from ..domain.brief_models import QuestionnaireResponse, StructuredBrief
from ..domain.models import Project, ProjectStatus
from ..domain.progress_models import ProjectProgress, TimelineEvent
from ..domain.review_models import DeliverableStatus
from ..infrastructure.deliverable_store import get_deliverable_store
from ..infrastructure.events import publish_event
from ..infrastructure.repository import get_repo
from ..infrastructure.response_store import get_response_store
from ..infrastructure.revision_store import get_revision_store


logger = logging.getLogger("briefdesk.lifecycle")


class InvalidTransition(ValueError):
    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Cannot move project from '{current}' to '{target}'")
        self.current = current
        self.target = target


def transition_project(project: Project, target: ProjectStatus, actor: str) -> Project:
    """Move the persisted status along the lifecycle and announce it."""
    current = project.status
    if not is_valid_transition(current, target.value):
        raise InvalidTransition(current, target.value)
    updated = get_repo().update_status(project.project_id, target.value)
    if updated is None:
        raise LookupError(project.project_id)
    logger.info("Project %s: %s -> %s (by %s)", project.project_id, current, target.value, actor)
    publish_event(
        "project.status_changed",
        {
            "project_id": project.project_id,
            "from": current,
            "to": target.value,
            "actor": actor,
        },
    )
    return updated


def project_progress(project: Project) -> ProjectProgress:
    revisions = get_revision_store().list(project.project_id)
    deliverables = get_deliverable_store().list(project.project_id)
    return build_progress(project, revisions, deliverables)


def project_timeline(project: Project) -> List[TimelineEvent]:
    return build_timeline(project, get_revision_store().list(project.project_id))


def save_answers(project: Project, step_key: str, answers: Dict[str, Any]) -> QuestionnaireResponse:
    """Upsert one questionnaire step; the first save moves a sent project into progress."""
    if project.status in (ProjectStatus.COMPLETED.value, ProjectStatus.REVIEWED.value):
        raise InvalidTransition(project.status, ProjectStatus.IN_PROGRESS.value)
    saved = get_response_store().upsert(project.project_id, step_key, answers)
    if project.status == ProjectStatus.SENT.value:
        transition_project(project, ProjectStatus.IN_PROGRESS, "client")
    return saved


def submit_brief(project: Project, actor: str = "client") -> StructuredBrief:
    """Build a brief from the saved answers and mark the questionnaire completed."""
    if not is_valid_transition(project.status, ProjectStatus.COMPLETED.value):
        raise InvalidTransition(project.status, ProjectStatus.COMPLETED.value)
    store = get_response_store()
    brief = generate_brief(
        project.project_id,
        project.project_type,
        project.client_name or project.client_email,
        project.client_email,
        store.answers_by_step(project.project_id),
        version=store.next_brief_version(project.project_id),
    )
    store.save_brief(brief)
    transition_project(project, ProjectStatus.COMPLETED, actor)
    logger.info(
        "Brief v%d generated for %s (confidence %s)",
        brief.version,
        project.project_id,
        brief.confidence_score,
    )
    publish_event("brief.submitted", {"project_id": project.project_id, "version": brief.version})
    return brief


def deliver(project: Project, deliverable_ids: List[str], notes: Optional[str], actor: str) -> Project:
    """Finalize and share the chosen deliverables, then close the project as reviewed."""
    store = get_deliverable_store()
    for did in deliverable_ids:
        store.update(project.project_id, did, {"status": DeliverableStatus.FINAL, "shared_with_client": True})
        publish_event("deliverable.shared", {"project_id": project.project_id, "deliverable_id": did})
    get_repo().update(project.project_id, {"delivery_notes": notes, "delivered_at": datetime.now(UTC)})
    return transition_project(project, ProjectStatus.REVIEWED, actor)


def purge_project(project_id: str) -> bool:
    ok = get_repo().delete(project_id)
    if ok:
        revs = get_revision_store().delete_project(project_id)
        dels = get_deliverable_store().delete_project(project_id)
        steps = get_response_store().delete_project(project_id)
        logger.info(
            "Deleted project %s (%d revisions, %d deliverables, %d answered steps)",
            project_id,
            revs,
            dels,
            steps,
        )
    return ok
