from __future__ import annotations

from typing import Any

from .phases import PhaseKey


def resolve_phase(status: Any, has_pending_revision: bool, has_shared_deliverables: bool) -> PhaseKey:
    """Map a persisted project status plus derived flags to the current phase.

    Rules are checked in priority order and the first match wins. Any status
    not listed falls back to ``submitted``; this never raises.

    ``has_shared_deliverables`` is accepted for callers but does not affect
    the result: a completed project reads as ``review`` either way.
    """
    status_value = getattr(status, "value", status)
    s = "" if status_value is None else str(status_value)

    if s == "reviewed":
        return PhaseKey.DELIVERED
    if s == "completed" and not has_pending_revision:
        return PhaseKey.REVIEW
    if has_pending_revision:
        return PhaseKey.REVISIONS
    if s == "in_progress":
        return PhaseKey.IN_DESIGN
    # draft, sent, or anything unrecognized
    return PhaseKey.SUBMITTED
