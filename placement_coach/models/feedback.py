from pydantic import BaseModel, Field
from typing import Dict, List

from placement_coach.models.scoring import CategoryStats, WrongQuestion

class FieldAnalysisInput(BaseModel):
    """Statistics consumed by the field-wise analysis report"""
    score: int = Field(..., description="Overall percentage")
    total_questions: int = 0
    correct: int = 0
    wrong: int = 0
    category_breakdown: Dict[str, CategoryStats] = {}
    wrong_questions: List[WrongQuestion] = []

class TopicStats(BaseModel):
    correct: int = 0
    total: int = 0

class TestStats(BaseModel):
    """Statistics consumed by the comprehensive summary"""
    __test__ = False

    score: int
    accuracy: int
    total_questions: int
    topics: Dict[str, TopicStats] = {}

class ComprehensiveSummary(BaseModel):
    """
    Structured coaching report, produced by Gemini or the deterministic fallback
    """
    performance_overview: str
    strengths_analysis: str
    weakness_analysis: str
    topic_breakdown: Dict[str, str] = {}
    study_recommendations: List[str] = []
    action_plan: str
    motivational_message: str
