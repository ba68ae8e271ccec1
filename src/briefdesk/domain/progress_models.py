from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel

from ..core.phases import PhaseKey, StepState
from .brief_models import StructuredBrief
from .review_models import Deliverable


class PhaseInfo(BaseModel):
    key: PhaseKey
    label: str


class PhaseStep(BaseModel):
    key: PhaseKey
    label: str
    index: int
    state: StepState


class ProjectProgress(BaseModel):
    project_id: str
    status: str
    phase: PhaseKey
    phase_label: str
    has_pending_revision: bool
    has_shared_deliverables: bool
    steps: List[PhaseStep]


class TimelineEvent(BaseModel):
    label: str
    date: Optional[datetime] = None
    status: StepState


class ClientProjectSummary(BaseModel):
    project_id: str
    client_name: str
    project_type: Optional[str] = None
    project_type_label: Optional[str] = None
    designer_email: str
    status: str
    status_label: str
    created_at: datetime
    completed_at: Optional[datetime] = None


class ClientProjectView(BaseModel):
    project: ClientProjectSummary
    badge: str
    progress: ProjectProgress
    timeline: List[TimelineEvent]
    deliverables: List[Deliverable]
    brief: Optional[StructuredBrief] = None
