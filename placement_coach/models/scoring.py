from pydantic import BaseModel, Field
from typing import Dict, List

class CategoryStats(BaseModel):
    """Per-category correctness"""
    correct: int = 0
    total: int = 0
    percentage: int = Field(0, ge=0, le=100)

class WrongQuestion(BaseModel):
    """Incorrectly answered question with both answers"""
    id: str
    text: str
    category: str
    user_answer: str
    correct_answer: str

class ScoreReport(BaseModel):
    """
    Outcome of evaluating an answer submission against the answer key
    """
    total_correct: int
    total_questions: int
    category_breakdown: Dict[str, CategoryStats] = {}
    wrong_questions: List[WrongQuestion] = []
