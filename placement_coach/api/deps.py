from typing import Optional

from fastapi import Depends, Header, HTTPException

from placement_coach.models.identity import SessionIdentity
from placement_coach.services.feedback_service import FeedbackSummaryBuilder, get_feedback_builder
from placement_coach.services.placement_service import PlacementService
from placement_coach.services.result_service import ResultService

def get_identity(
    x_user_email: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None),
) -> SessionIdentity:
    """Caller identity forwarded by the session layer"""
    if not x_user_email or not x_user_email.strip():
        raise HTTPException(status_code=401, detail="Unauthorized")
    return SessionIdentity(email=x_user_email.strip(), role=(x_user_role or "student").strip())

def get_placement_service(builder: FeedbackSummaryBuilder = Depends(get_feedback_builder)) -> PlacementService:
    return PlacementService(builder)

def get_result_service(builder: FeedbackSummaryBuilder = Depends(get_feedback_builder)) -> ResultService:
    return ResultService(builder)
