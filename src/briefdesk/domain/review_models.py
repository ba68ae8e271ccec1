from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


MAX_REVISION_RESPONSE_CHARS = 5000


class RevisionStatus(str, Enum):
    PENDING = "pending"
    RESPONDED = "responded"


class RevisionCreate(BaseModel):
    step_key: str = Field(min_length=1, description="Questionnaire step the revision refers to")
    field_key: Optional[str] = None
    message: str = Field(min_length=1)


class RevisionRequest(BaseModel):
    revision_id: str
    project_id: str
    designer_email: str
    step_key: str
    field_key: Optional[str] = None
    message: str
    status: RevisionStatus = RevisionStatus.PENDING
    response: Optional[str] = None
    created_at: datetime
    responded_at: Optional[datetime] = None


class RevisionReply(BaseModel):
    revision_id: str
    response: str = Field(min_length=1, max_length=MAX_REVISION_RESPONSE_CHARS)


class DeliverableStatus(str, Enum):
    DRAFT = "draft"
    FINAL = "final"


class DeliverableCreate(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    file_url: Optional[str] = None
    file_type: Optional[str] = None
    version: int = Field(default=1, ge=1)
    round_number: int = Field(default=1, ge=1)


class Deliverable(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    deliverable_id: str
    project_id: str
    title: str
    description: Optional[str] = None
    file_url: Optional[str] = None
    file_type: Optional[str] = None
    version: int = 1
    round_number: int = 1
    status: DeliverableStatus = DeliverableStatus.DRAFT
    shared_with_client: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None


class DeliverableUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    file_url: Optional[str] = None
    file_type: Optional[str] = None
    status: Optional[DeliverableStatus] = None
    shared_with_client: Optional[bool] = None
