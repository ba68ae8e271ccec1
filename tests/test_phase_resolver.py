from concurrent.futures import ThreadPoolExecutor
import itertools

import pytest

from src.briefdesk.core.phase_resolver import resolve_phase
from src.briefdesk.core.phases import PhaseKey
from src.briefdesk.domain.models import ProjectStatus


@pytest.mark.parametrize("pending,shared", list(itertools.product([True, False], repeat=2)))
def test_reviewed_always_delivered(pending, shared):
    assert resolve_phase("reviewed", pending, shared) == PhaseKey.DELIVERED


def test_completed_without_revision_is_review_regardless_of_shared():
    assert resolve_phase("completed", False, False) == "review"
    assert resolve_phase("completed", False, True) == "review"


def test_completed_with_pending_revision_is_revisions():
    assert resolve_phase("completed", True, False) == PhaseKey.REVISIONS
    assert resolve_phase("completed", True, True) == PhaseKey.REVISIONS


def test_pending_revision_outranks_in_progress():
    assert resolve_phase("in_progress", True, False) == PhaseKey.REVISIONS


def test_in_progress_is_in_design():
    assert resolve_phase("in_progress", False, False) == PhaseKey.IN_DESIGN


@pytest.mark.parametrize("status", ["draft", "sent", "anything_unrecognized", "", "COMPLETED"])
def test_fallback_is_submitted(status):
    assert resolve_phase(status, False, False) == PhaseKey.SUBMITTED


def test_none_status_falls_back():
    assert resolve_phase(None, False, False) == PhaseKey.SUBMITTED


def test_accepts_status_enum():
    assert resolve_phase(ProjectStatus.REVIEWED, False, False) == PhaseKey.DELIVERED
    assert resolve_phase(ProjectStatus.IN_PROGRESS, False, True) == PhaseKey.IN_DESIGN


def test_result_serializes_as_plain_key():
    assert resolve_phase("completed", False, False).value == "review"


def test_repeated_calls_are_identical():
    inputs = [
        (status, pending, shared)
        for status in ("draft", "sent", "in_progress", "completed", "reviewed", "bogus")
        for pending in (True, False)
        for shared in (True, False)
    ]
    first = [resolve_phase(*args) for args in inputs]
    second = [resolve_phase(*args) for args in inputs]
    assert first == second


def test_concurrent_callers_agree():
    args = ("completed", True, False)
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: resolve_phase(*args), range(200)))
    assert set(results) == {PhaseKey.REVISIONS}
