from datetime import UTC, datetime, timedelta

import pytest

from src.briefdesk.core.progress import build_progress, build_timeline, client_status_label, derive_flags
from src.briefdesk.domain.models import Project
from src.briefdesk.domain.review_models import Deliverable, RevisionRequest, RevisionStatus

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def _project(status: str, completed: bool = False) -> Project:
    return Project(
        project_id="PRJ-2026-0001",
        designer_email="designer@briefdesk.dev",
        client_name="Acme",
        client_email="owner@acme.example",
        status=status,
        created_at=NOW,
        completed_at=NOW + timedelta(days=2) if completed else None,
    )


def _revision(status: RevisionStatus, offset_days: int = 3) -> RevisionRequest:
    return RevisionRequest(
        revision_id=f"rev-{offset_days}",
        project_id="PRJ-2026-0001",
        designer_email="designer@briefdesk.dev",
        step_key="style_direction",
        message="More contrast please",
        status=status,
        created_at=NOW + timedelta(days=offset_days),
    )


def _deliverable(shared: bool) -> Deliverable:
    return Deliverable(
        deliverable_id="d1",
        project_id="PRJ-2026-0001",
        title="Logo",
        shared_with_client=shared,
        created_at=NOW,
    )


def test_derive_flags():
    assert derive_flags([], []) == (False, False)
    assert derive_flags([_revision(RevisionStatus.RESPONDED)], [_deliverable(False)]) == (False, False)
    assert derive_flags([_revision(RevisionStatus.PENDING)], [_deliverable(True)]) == (True, True)


def test_build_progress_uses_resolver_and_steps():
    progress = build_progress(_project("completed", True), [_revision(RevisionStatus.PENDING)], [])
    assert progress.phase == "revisions"
    assert progress.phase_label == "Revisions"
    assert progress.has_pending_revision is True
    assert progress.has_shared_deliverables is False
    states = [s.state.value for s in progress.steps]
    assert states == ["completed", "completed", "completed", "current", "upcoming", "upcoming"]


def test_shared_deliverables_do_not_move_completed_project():
    without = build_progress(_project("completed", True), [], [])
    with_shared = build_progress(_project("completed", True), [], [_deliverable(True)])
    assert without.phase == with_shared.phase == "review"
    assert with_shared.has_shared_deliverables is True


@pytest.mark.parametrize(
    "status,pending,label",
    [
        ("completed", True, "Needs Revision"),
        ("reviewed", False, "Done"),
        ("completed", False, "Ready for Review"),
        ("in_progress", False, "In Design"),
        ("sent", False, "Brief Submitted"),
        ("draft", False, "Brief Submitted"),
    ],
)
def test_client_status_label(status, pending, label):
    assert client_status_label(status, pending) == label


def _labels_and_states(events):
    return [(e.label, e.status.value) for e in events]


def test_timeline_for_sent_project():
    events = build_timeline(_project("sent"), [])
    assert _labels_and_states(events) == [
        ("Brief created", "completed"),
        ("Brief submitted", "upcoming"),
        ("Designer reviewing", "upcoming"),
        ("Approved", "upcoming"),
    ]
    assert events[0].date == NOW


def test_timeline_for_in_progress_project():
    events = build_timeline(_project("in_progress"), [])
    assert events[1].label == "Brief in progress"
    assert events[1].status.value == "current"


def test_timeline_for_completed_project_without_revisions():
    proj = _project("completed", True)
    events = build_timeline(proj, [])
    assert _labels_and_states(events)[1:3] == [
        ("Brief submitted", "completed"),
        ("Designer reviewing", "current"),
    ]
    assert events[1].date == proj.completed_at


def test_timeline_with_revisions_uses_latest_date():
    older = _revision(RevisionStatus.RESPONDED, offset_days=3)
    newer = _revision(RevisionStatus.PENDING, offset_days=5)
    events = build_timeline(_project("completed", True), [older, newer])
    assert _labels_and_states(events) == [
        ("Brief created", "completed"),
        ("Brief submitted", "completed"),
        ("Designer reviewing", "completed"),
        ("Revision requested", "current"),
        ("Approved", "upcoming"),
    ]
    assert events[3].date == newer.created_at


def test_timeline_for_reviewed_project():
    events = build_timeline(_project("reviewed", True), [_revision(RevisionStatus.RESPONDED)])
    assert events[3].status.value == "completed"
    assert events[-1].label == "Approved"
    assert events[-1].status.value == "completed"
