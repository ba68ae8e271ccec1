from __future__ import annotations

from typing import Dict, List

# Persisted project status transitions. The displayed phase is derived
# separately by phase_resolver and is never advanced here.
STATUS_TRANSITIONS: Dict[str, List[str]] = {
    "draft": ["sent"],
    "sent": ["in_progress", "completed"],
    "in_progress": ["completed"],
    "completed": ["reviewed"],
    "reviewed": [],
}


def is_valid_transition(current: str, target: str) -> bool:
    return target in STATUS_TRANSITIONS.get(current, [])
