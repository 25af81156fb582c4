import logging
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

import placement_coach.databases.postgres.model as models

def create_result(db: Session, user_id: str, test_id: str, score: int, total: int, ai_feedback: Optional[str]) -> models.Result:
    """Results are append-only; every attempt is a new row"""
    result = models.Result(
        user_id=user_id,
        test_id=test_id,
        score=score,
        total=total,
        ai_feedback=ai_feedback,
    )
    db.add(result)
    db.flush()
    logging.info(f"Created result {result.id} for user {user_id} on test {test_id}")
    return result

def find_result_by_id(db: Session, result_id: str) -> Optional[models.Result]:
    result = (
        db.query(models.Result)
        .options(joinedload(models.Result.test), joinedload(models.Result.user))
        .filter(models.Result.id == result_id)
        .first()
    )
    logging.info(f"Result query: {result}")
    return result

def find_results_by_user_id(db: Session, user_id: str) -> List[models.Result]:
    result = (
        db.query(models.Result)
        .options(joinedload(models.Result.test))
        .filter(models.Result.user_id == user_id)
        .order_by(models.Result.created_at.desc())
        .all()
    )
    logging.info(f"Found {len(result)} results for user {user_id}")
    return result
