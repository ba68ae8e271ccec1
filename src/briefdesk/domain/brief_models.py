from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class ResponseUpsert(BaseModel):
    step_key: str = Field(min_length=1, description="Questionnaire step the answers belong to")
    answers: Dict[str, Any]


class QuestionnaireResponse(BaseModel):
    project_id: str
    step_key: str
    answers: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime


class BriefSection(BaseModel):
    title: str
    summary: str
    data: Dict[str, Any] = Field(default_factory=dict)
    confidence: Optional[float] = None
    flags: List[str] = Field(default_factory=list)
    highlights: List[str] = Field(default_factory=list)


class DesignerInsights(BaseModel):
    strong_areas: List[str] = Field(default_factory=list)
    uncertain_areas: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)


class StructuredBrief(BaseModel):
    """Designer-facing brief assembled from the client's questionnaire answers."""

    project_id: str
    version: int = 1
    generated_at: datetime
    summary: str
    project_type: str
    client_name: str
    client_email: str
    overall_confidence: float
    confidence_score: str
    sections: Dict[str, BriefSection]
    raw_responses: Dict[str, Any] = Field(default_factory=dict)
    designer_insights: DesignerInsights = Field(default_factory=DesignerInsights)
