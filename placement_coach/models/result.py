from datetime import datetime
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Dict, List, Optional

from placement_coach.models.scoring import CategoryStats, WrongQuestion

class ResultCreate(BaseModel):
    """Finished practice or company test"""
    test_title: str = Field(...)
    test_type: str = Field("practice")
    company: Optional[str] = None
    score: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    duration: Optional[int] = Field(None, ge=1, description="Minutes")

    @field_validator('test_title')
    def validate_test_title(cls, v):
        if not v or len(v.strip()) == 0:
            raise ValueError('Test title cannot be empty')
        return v.strip()

    @field_validator('test_type')
    def validate_test_type(cls, v):
        if v not in ("practice", "company"):
            raise ValueError('Test type must be practice or company')
        return v

    @model_validator(mode="after")
    def validate_score(self):
        if self.score > self.total:
            raise ValueError("Score cannot exceed total")
        return self

class ResultCreateResponse(BaseModel):
    result_id: str
    score: int
    total: int
    percentage: int
    ai_summary: Optional[str] = None

class ResultResponse(BaseModel):
    id: str
    test_id: str
    test_title: str
    test_type: str
    company: Optional[str] = None
    score: int
    total: int
    percentage: int
    ai_feedback: Optional[str] = None
    created_at: datetime

class AISummaryRequest(BaseModel):
    """Statistics of an attempt scored on the client"""
    score: int = Field(..., ge=0, le=100)
    total_questions: int = Field(..., ge=0)
    correct: int = Field(..., ge=0)
    wrong: int = Field(..., ge=0)
    test_title: str
    category_breakdown: Dict[str, CategoryStats] = {}
    wrong_questions: List[WrongQuestion] = []

class AISummaryResponse(BaseModel):
    summary: str
