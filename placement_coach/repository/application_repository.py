import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

import placement_coach.databases.postgres.model as models
from placement_coach.exceptions import AlreadySubmittedError

def create_application(db: Session, user_id: str, company: str, first_stage: str) -> models.PlacementApplication:
    application = models.PlacementApplication(
        user_id=user_id,
        company=company,
        current_stage=first_stage,
        status=first_stage,
    )
    db.add(application)
    db.flush()
    logging.info(f"Created {company} application {application.id} for user {user_id}")
    return application

def find_application_by_id(db: Session, application_id: str) -> Optional[models.PlacementApplication]:
    result = (
        db.query(models.PlacementApplication)
        .options(
            joinedload(models.PlacementApplication.user),
            selectinload(models.PlacementApplication.assessment_stages),
        )
        .filter(models.PlacementApplication.id == application_id)
        .first()
    )
    logging.info(f"Result query: {result}")
    return result

def find_stage(db: Session, application_id: str, stage_name: str) -> Optional[models.AssessmentStage]:
    result = (
        db.query(models.AssessmentStage)
        .filter(
            models.AssessmentStage.application_id == application_id,
            models.AssessmentStage.stage_name == stage_name,
        )
        .execution_options(populate_existing=True)
        .first()
    )
    logging.info(f"Result query: {result}")
    return result

def find_submitted_stages(db: Session, application_id: str) -> List[models.AssessmentStage]:
    result = (
        db.query(models.AssessmentStage)
        .filter(
            models.AssessmentStage.application_id == application_id,
            models.AssessmentStage.submitted_at.isnot(None),
        )
        .execution_options(populate_existing=True)
        .order_by(models.AssessmentStage.submitted_at)
        .all()
    )
    logging.info(f"Found {len(result)} submitted stages for application {application_id}")
    return result

def start_stage(db: Session, application_id: str, stage_name: str) -> models.AssessmentStage:
    """Unsubmitted stage row carrying the start time; an existing row is returned untouched"""
    existing = find_stage(db, application_id, stage_name)
    if existing is not None:
        return existing

    stage = models.AssessmentStage(
        application_id=application_id,
        stage_name=stage_name,
        started_at=datetime.now(timezone.utc),
    )
    db.add(stage)
    try:
        db.flush()
    except IntegrityError:
        # Started concurrently
        db.rollback()
        return find_stage(db, application_id, stage_name)
    logging.info(f"Started stage {stage_name} of application {application_id}")
    return stage

def submit_stage(db: Session, application_id: str, stage_name: str, values: Dict[str, Any]) -> models.AssessmentStage:
    """
    Record a stage submission exactly once.

    An unsubmitted row is completed with a conditional UPDATE; otherwise a new
    row is inserted and the unique (application, stage) constraint decides
    concurrent inserts. Raises AlreadySubmittedError when the stage was
    already submitted, leaving the stored row unchanged.
    """
    submitted_at = datetime.now(timezone.utc)
    updated = (
        db.query(models.AssessmentStage)
        .filter(
            models.AssessmentStage.application_id == application_id,
            models.AssessmentStage.stage_name == stage_name,
            models.AssessmentStage.submitted_at.is_(None),
        )
        .update({**values, "submitted_at": submitted_at}, synchronize_session=False)
    )

    if updated == 0:
        if find_stage(db, application_id, stage_name) is not None:
            raise AlreadySubmittedError(f"Stage {stage_name} already submitted")

        db.add(models.AssessmentStage(
            application_id=application_id,
            stage_name=stage_name,
            started_at=submitted_at,
            submitted_at=submitted_at,
            **values,
        ))
        try:
            db.flush()
        except IntegrityError as e:
            db.rollback()
            raise AlreadySubmittedError(f"Stage {stage_name} already submitted") from e

    logging.info(f"Stage {stage_name} of application {application_id} submitted: {values}")
    return find_stage(db, application_id, stage_name)
