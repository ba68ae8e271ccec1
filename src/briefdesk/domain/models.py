from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ProjectStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    REVIEWED = "reviewed"


PROJECT_STATUS_LABELS: Dict[str, str] = {
    ProjectStatus.DRAFT.value: "Draft",
    ProjectStatus.SENT.value: "Sent to Client",
    ProjectStatus.IN_PROGRESS.value: "In Progress",
    ProjectStatus.COMPLETED.value: "Completed",
    ProjectStatus.REVIEWED.value: "Reviewed",
}


class ProjectType(str, Enum):
    BRANDING = "branding"
    WEB_DESIGN = "web_design"
    SOCIAL_MEDIA = "social_media"
    PACKAGING = "packaging"
    ILLUSTRATION = "illustration"
    UI_UX = "ui_ux"
    PRINT = "print"
    MOTION = "motion"
    APP_DESIGN = "app_design"


PROJECT_TYPE_LABELS: Dict[str, str] = {
    ProjectType.BRANDING.value: "Branding",
    ProjectType.WEB_DESIGN.value: "Web Design",
    ProjectType.SOCIAL_MEDIA.value: "Social Media",
    ProjectType.PACKAGING.value: "Packaging",
    ProjectType.ILLUSTRATION.value: "Illustration",
    ProjectType.UI_UX.value: "UI/UX Design",
    ProjectType.PRINT.value: "Print Design",
    ProjectType.MOTION.value: "Motion Design",
    ProjectType.APP_DESIGN.value: "App Design",
}


class ProjectCreate(BaseModel):
    client_name: str = Field(min_length=1)
    client_email: EmailStr
    project_type: Optional[ProjectType] = Field(default=None, description="Kind of design engagement")
    description: Optional[str] = None


class Project(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    project_id: str
    designer_email: str
    client_name: str
    client_email: str
    project_type: Optional[str] = None
    description: Optional[str] = None
    # Kept as a plain string: stored rows may hold values outside ProjectStatus.
    status: str = ProjectStatus.DRAFT.value
    magic_link_token: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    delivery_notes: Optional[str] = None
    metadata: dict = Field(default_factory=dict)


class ProjectUpdate(BaseModel):
    client_name: Optional[str] = Field(default=None, min_length=1)
    client_email: Optional[EmailStr] = None
    project_type: Optional[ProjectType] = None
    description: Optional[str] = None


class StatusChange(BaseModel):
    status: ProjectStatus


class SendResponse(BaseModel):
    project: Project
    magic_link_url: str
    resent: bool = False


class DeliverRequest(BaseModel):
    deliverable_ids: List[str] = Field(default_factory=list)
    notes: Optional[str] = Field(default=None, max_length=5000)
