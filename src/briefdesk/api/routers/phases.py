from __future__ import annotations

from typing import List
from fastapi import APIRouter

from ...core.phases import PHASES
from ...domain.progress_models import PhaseInfo

router = APIRouter(prefix="/phases", tags=["phases"])


@router.get("", response_model=List[PhaseInfo])
def list_phases() -> List[PhaseInfo]:
    """Ordered progress phases for rendering a step indicator."""
    return [PhaseInfo(key=p.key, label=p.label) for p in PHASES]
