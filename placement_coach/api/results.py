from fastapi import APIRouter, HTTPException, Path, Depends
from sqlalchemy.orm import Session
import logging

from placement_coach.api.deps import get_identity, get_result_service
from placement_coach.databases.postgres.database import get_db
from placement_coach.exceptions import PlacementError
from placement_coach.models.identity import SessionIdentity
from placement_coach.models.result import AISummaryRequest, ResultCreate
from placement_coach.services.result_service import ResultService
from placement_coach.utils.response import create_response

router = APIRouter()

@router.post("/results", status_code=201)
async def create_result(
    request: ResultCreate,
    db: Session = Depends(get_db),
    identity: SessionIdentity = Depends(get_identity),
    service: ResultService = Depends(get_result_service),
):
    """
    Record a finished test together with its AI field analysis
    """
    try:
        result = await service.create_result(db, identity, request)
        return create_response(True, "Result saved", result.model_dump(mode="json"))
    except PlacementError:
        raise
    except Exception as e:
        logging.error(f"Result submission error: {str(e)}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.get("/results")
async def list_results(
    db: Session = Depends(get_db),
    identity: SessionIdentity = Depends(get_identity),
    service: ResultService = Depends(get_result_service),
):
    try:
        results = service.list_results(db, identity)
        return create_response(True, "Results found", [r.model_dump(mode="json") for r in results])
    except PlacementError:
        raise
    except Exception as e:
        logging.error(f"Results fetch error: {str(e)}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.post("/results/ai-summary")
async def generate_ai_summary(
    request: AISummaryRequest,
    identity: SessionIdentity = Depends(get_identity),
    service: ResultService = Depends(get_result_service),
):
    """Field-wise analysis for an attempt scored on the client"""
    try:
        summary = await service.generate_ai_summary(request)
        return create_response(True, "Summary generated", summary.model_dump(mode="json"))
    except Exception as e:
        logging.error(f"AI summary generation error: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to generate AI summary")

@router.get("/results/{result_id}")
async def get_result(
    result_id: str = Path(...),
    db: Session = Depends(get_db),
    identity: SessionIdentity = Depends(get_identity),
    service: ResultService = Depends(get_result_service),
):
    try:
        result = service.get_result(db, identity, result_id)
        return create_response(True, "Result found", result.model_dump(mode="json"))
    except PlacementError:
        raise
    except Exception as e:
        logging.error(f"Results fetch error: {str(e)}")
        raise HTTPException(status_code=500, detail="Internal server error")
