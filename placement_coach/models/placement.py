from datetime import datetime
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Dict, List, Optional

from placement_coach.models.scoring import CategoryStats
from placement_coach.services.scoring_service import round_half_up

class ApplicationCreate(BaseModel):
    """Start a company placement pipeline"""
    company: str = Field(...)

    @field_validator('company')
    def validate_company(cls, v):
        if not v or len(v.strip()) == 0:
            raise ValueError('Company cannot be empty')
        return v.strip()

class StageSubmissionRequest(BaseModel):
    """
    Answers for one stage. Score and total are only used for stages whose
    questions are not stored (externally scored rounds).
    """
    answers: Dict[str, str] = {}
    score: int = Field(0, ge=0)
    total: int = Field(0, ge=0)
    time_spent: Optional[int] = Field(None, ge=0, description="Seconds")

    @model_validator(mode="after")
    def validate_score(self):
        if self.score > self.total:
            raise ValueError("Score cannot exceed total")
        return self

class StageSubmissionResponse(BaseModel):
    is_passed: bool
    next_stage: Optional[str] = None
    percentage: int
    score: int
    total: int
    category_breakdown: Dict[str, CategoryStats] = {}
    track: Optional[str] = None
    message: Optional[str] = None

class AssessmentStageResponse(BaseModel):
    id: str
    stage_name: str
    score: Optional[int] = None
    total: Optional[int] = None
    percentage: Optional[int] = None
    is_passed: Optional[bool] = None
    time_spent: Optional[int] = None
    started_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None

    @field_validator('percentage', mode="before")
    def round_percentage(cls, v):
        # Stored unrounded
        return round_half_up(v) if v is not None else v

    class Config:
        from_attributes = True

class PlacementApplicationResponse(BaseModel):
    id: str
    company: str
    current_stage: str
    status: str
    final_track: Optional[str] = None
    final_decision: Optional[str] = None
    created_at: datetime
    assessment_stages: List[AssessmentStageResponse] = []

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "company": "TCS",
                "current_stage": "advanced",
                "status": "advanced",
                "final_track": None,
                "final_decision": None,
                "created_at": "2025-01-15T10:30:00Z",
                "assessment_stages": [
                    {
                        "id": "7d1f1c3e-4a0b-4c6e-9f6e-2b1f0f2a9c11",
                        "stage_name": "foundation",
                        "score": 13,
                        "total": 20,
                        "percentage": 65,
                        "is_passed": True,
                    }
                ],
            }
        }
