from __future__ import annotations

"""Progress views built on top of the phase resolver.

Everything here is recomputed from the current project row and its revision
and deliverable records; nothing is cached or stored.
"""

from typing import Iterable, List, Sequence, Tuple

from ..domain.models import Project
from ..domain.progress_models import PhaseStep, ProjectProgress, TimelineEvent
from ..domain.review_models import Deliverable, RevisionRequest, RevisionStatus
from .phase_resolver import resolve_phase
from .phases import StepState, build_steps, phase_label


def derive_flags(
    revisions: Iterable[RevisionRequest],
    deliverables: Iterable[Deliverable],
) -> Tuple[bool, bool]:
    """Return ``(has_pending_revision, has_shared_deliverables)``."""
    has_pending = any(r.status == RevisionStatus.PENDING for r in revisions)
    has_shared = any(d.shared_with_client for d in deliverables)
    return has_pending, has_shared


def build_progress(
    project: Project,
    revisions: Sequence[RevisionRequest],
    deliverables: Sequence[Deliverable],
) -> ProjectProgress:
    has_pending, has_shared = derive_flags(revisions, deliverables)
    phase = resolve_phase(project.status, has_pending, has_shared)
    return ProjectProgress(
        project_id=project.project_id,
        status=project.status,
        phase=phase,
        phase_label=phase_label(phase),
        has_pending_revision=has_pending,
        has_shared_deliverables=has_shared,
        steps=[PhaseStep(**step) for step in build_steps(phase)],
    )


def client_status_label(status: str, has_pending_revision: bool) -> str:
    if has_pending_revision:
        return "Needs Revision"
    if status == "reviewed":
        return "Done"
    if status == "completed":
        return "Ready for Review"
    if status == "in_progress":
        return "In Design"
    return "Brief Submitted"


def build_timeline(project: Project, revisions: Sequence[RevisionRequest]) -> List[TimelineEvent]:
    s = project.status
    submitted = s in ("completed", "reviewed")
    events: List[TimelineEvent] = [
        TimelineEvent(label="Brief created", date=project.created_at, status=StepState.COMPLETED)
    ]

    if submitted:
        events.append(TimelineEvent(label="Brief submitted", date=project.completed_at, status=StepState.COMPLETED))
    elif s == "in_progress":
        events.append(TimelineEvent(label="Brief in progress", status=StepState.CURRENT))
    else:
        events.append(TimelineEvent(label="Brief submitted", status=StepState.UPCOMING))

    if submitted:
        reviewing = StepState.CURRENT if s == "completed" and not revisions else StepState.COMPLETED
        events.append(TimelineEvent(label="Designer reviewing", date=project.completed_at, status=reviewing))
    else:
        events.append(TimelineEvent(label="Designer reviewing", status=StepState.UPCOMING))

    if revisions:
        latest = max(revisions, key=lambda r: r.created_at)
        pending = any(r.status == RevisionStatus.PENDING for r in revisions)
        events.append(
            TimelineEvent(
                label="Revision requested",
                date=latest.created_at,
                status=StepState.CURRENT if pending else StepState.COMPLETED,
            )
        )

    events.append(
        TimelineEvent(
            label="Approved",
            status=StepState.COMPLETED if s == "reviewed" else StepState.UPCOMING,
        )
    )
    return events
