from __future__ import annotations

"""Client-facing progress phases.

The phase list is fixed and ordered: a phase's index is its position in the
lifecycle, so the progress stepper can mark earlier phases completed and
later ones upcoming. Phases are never stored; see ``phase_resolver`` for how
the current one is derived.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union
import logging
import os


logger = logging.getLogger("briefdesk.phases")

UNKNOWN_INDEX = -1


class PhaseKey(str, Enum):
    SUBMITTED = "submitted"
    IN_DESIGN = "in_design"
    REVIEW = "review"
    REVISIONS = "revisions"
    APPROVED = "approved"
    DELIVERED = "delivered"


class StepState(str, Enum):
    COMPLETED = "completed"
    CURRENT = "current"
    UPCOMING = "upcoming"


@dataclass(frozen=True)
class Phase:
    key: PhaseKey
    label: str


PHASES: Tuple[Phase, ...] = (
    Phase(PhaseKey.SUBMITTED, "Brief Submitted"),
    Phase(PhaseKey.IN_DESIGN, "In Design"),
    Phase(PhaseKey.REVIEW, "Review"),
    Phase(PhaseKey.REVISIONS, "Revisions"),
    Phase(PhaseKey.APPROVED, "Approved"),
    Phase(PhaseKey.DELIVERED, "Delivered"),
)

_INDEX: Dict[str, int] = {p.key.value: i for i, p in enumerate(PHASES)}


class UnknownPhaseError(KeyError):
    """Raised in strict mode when a phase key outside the closed set is looked up."""

    def __init__(self, key: object) -> None:
        super().__init__(f"Unknown phase key: {key!r}")
        self.key = key


def _strict_mode() -> bool:
    for name in ("BRIEFDESK_STRICT_PHASES", "BRIEFDESK_DEBUG"):
        val = os.getenv(name)
        if val and val.lower() in ("1", "true", "yes", "on"):
            return True
    return False


def phase_index(key: Union[PhaseKey, str], strict: Optional[bool] = None) -> int:
    """Return the position of ``key`` in the phase order.

    Unknown keys are a caller bug. In strict mode they raise
    ``UnknownPhaseError``; otherwise ``UNKNOWN_INDEX`` (-1) is returned and
    callers render the step as upcoming.
    """
    raw = key.value if isinstance(key, PhaseKey) else str(key)
    idx = _INDEX.get(raw)
    if idx is not None:
        return idx
    if strict if strict is not None else _strict_mode():
        raise UnknownPhaseError(key)
    logger.warning("phase_index: unknown phase key %r", key)
    return UNKNOWN_INDEX


def phase_label(key: Union[PhaseKey, str]) -> str:
    idx = phase_index(key)
    if idx == UNKNOWN_INDEX:
        return str(key)
    return PHASES[idx].label


def step_state(index: int, current_index: int) -> StepState:
    # Unknown on either side renders as upcoming so progress is never overstated.
    if index == UNKNOWN_INDEX or current_index == UNKNOWN_INDEX:
        return StepState.UPCOMING
    if index < current_index:
        return StepState.COMPLETED
    if index == current_index:
        return StepState.CURRENT
    return StepState.UPCOMING


def build_steps(current: Union[PhaseKey, str]) -> List[Dict[str, object]]:
    """Ordered stepper entries for the progress tracker."""
    current_idx = phase_index(current)
    return [
        {
            "key": phase.key.value,
            "label": phase.label,
            "index": i,
            "state": step_state(i, current_idx).value,
        }
        for i, phase in enumerate(PHASES)
    ]
