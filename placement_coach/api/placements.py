from fastapi import APIRouter, HTTPException, Path, Depends
from sqlalchemy.orm import Session
import logging

from placement_coach.api.deps import get_identity, get_placement_service
from placement_coach.databases.postgres.database import get_db
from placement_coach.exceptions import PlacementError
from placement_coach.models.identity import SessionIdentity
from placement_coach.models.placement import (
    ApplicationCreate,
    AssessmentStageResponse,
    PlacementApplicationResponse,
    StageSubmissionRequest,
)
from placement_coach.services.placement_service import PlacementService
from placement_coach.utils.response import create_response

router = APIRouter()

@router.post("/placements", status_code=201)
async def create_application(
    request: ApplicationCreate,
    db: Session = Depends(get_db),
    identity: SessionIdentity = Depends(get_identity),
    service: PlacementService = Depends(get_placement_service),
):
    """
    Start a placement pipeline at the company's first stage
    """
    try:
        application = service.create_application(db, identity, request.company)
        return create_response(
            True,
            "Application created",
            PlacementApplicationResponse.model_validate(application).model_dump(mode="json"),
        )
    except PlacementError:
        raise
    except Exception as e:
        logging.error(f"Failed to create application: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to create application")

@router.get("/placements/{application_id}")
async def get_application(
    application_id: str = Path(...),
    db: Session = Depends(get_db),
    identity: SessionIdentity = Depends(get_identity),
    service: PlacementService = Depends(get_placement_service),
):
    try:
        application = service.get_application(db, identity, application_id)
        return create_response(
            True,
            "Application found",
            PlacementApplicationResponse.model_validate(application).model_dump(mode="json"),
        )
    except PlacementError:
        raise
    except Exception as e:
        logging.error(f"Failed to get application: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to retrieve application")

@router.post("/placements/{application_id}/stages/{stage_name}/start")
async def start_stage(
    application_id: str = Path(...),
    stage_name: str = Path(...),
    db: Session = Depends(get_db),
    identity: SessionIdentity = Depends(get_identity),
    service: PlacementService = Depends(get_placement_service),
):
    try:
        stage = service.start_stage(db, identity, application_id, stage_name)
        return create_response(
            True,
            "Stage started",
            AssessmentStageResponse.model_validate(stage).model_dump(mode="json"),
        )
    except PlacementError:
        raise
    except Exception as e:
        logging.error(f"Failed to start stage: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to start stage")

@router.post("/placements/{application_id}/stages/{stage_name}")
async def submit_stage(
    request: StageSubmissionRequest,
    application_id: str = Path(...),
    stage_name: str = Path(...),
    db: Session = Depends(get_db),
    identity: SessionIdentity = Depends(get_identity),
    service: PlacementService = Depends(get_placement_service),
):
    """
    Submit a stage assessment; each stage accepts exactly one submission
    """
    try:
        result = service.submit_stage(db, identity, application_id, stage_name, request)
        return create_response(True, "Stage submitted", result.model_dump(mode="json"))
    except PlacementError:
        raise
    except Exception as e:
        logging.error(f"Failed to submit stage: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to submit stage assessment")

@router.get("/placements/{application_id}/stages/{stage_name}/summary")
async def get_stage_summary(
    application_id: str = Path(...),
    stage_name: str = Path(...),
    db: Session = Depends(get_db),
    identity: SessionIdentity = Depends(get_identity),
    service: PlacementService = Depends(get_placement_service),
):
    """Comprehensive study guide for a submitted stage"""
    try:
        summary = await service.build_stage_summary(db, identity, application_id, stage_name)
        return create_response(True, "Summary generated", summary.model_dump(mode="json"))
    except PlacementError:
        raise
    except Exception as e:
        logging.error(f"Failed to build stage summary: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to generate summary")
