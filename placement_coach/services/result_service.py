import logging
from typing import List

from sqlalchemy.orm import Session

import placement_coach.databases.postgres.model as models
from placement_coach.exceptions import ForbiddenError, NotFoundError
from placement_coach.models.feedback import FieldAnalysisInput
from placement_coach.models.identity import SessionIdentity
from placement_coach.models.result import (
    AISummaryRequest,
    AISummaryResponse,
    ResultCreate,
    ResultCreateResponse,
    ResultResponse,
)
from placement_coach.models.scoring import CategoryStats
from placement_coach.repository import result_repository, test_repository, user_repository
from placement_coach.services.feedback_service import FeedbackSummaryBuilder
from placement_coach.services.scoring_service import percentage_of


def to_result_response(result: models.Result) -> ResultResponse:
    return ResultResponse(
        id=result.id,
        test_id=result.test_id,
        test_title=result.test.title,
        test_type=result.test.type,
        company=result.test.company,
        score=result.score,
        total=result.total,
        percentage=percentage_of(result.score, result.total),
        ai_feedback=result.ai_feedback,
        created_at=result.created_at,
    )


class ResultService:
    """
    Test attempts and their coaching reports
    """

    def __init__(self, feedback_builder: FeedbackSummaryBuilder):
        self.feedback = feedback_builder

    async def create_result(self, db: Session, identity: SessionIdentity, request: ResultCreate) -> ResultCreateResponse:
        """Record a finished test with a field analysis; every call appends a new result"""
        user = user_repository.find_user_by_email(db, identity.email)
        if not user:
            raise NotFoundError("User not found")

        test = test_repository.find_test(db, request.test_title, request.test_type, request.company)
        if not test:
            test = test_repository.create_test(
                db,
                title=request.test_title,
                test_type=request.test_type,
                company=request.company,
                duration=request.duration or 60,
                description=f"{request.company} placement test" if request.company else None,
                topic=request.company,
            )

        percentage = percentage_of(request.score, request.total)
        wrong = max(0, request.total - request.score)
        logging.info(f"Generating AI summary for test: {request.test_title}, score: {percentage}")

        # Only totals are known for these attempts, no per-question detail
        ai_summary = await self.feedback.generate_field_analysis(
            FieldAnalysisInput(
                score=percentage,
                total_questions=request.total,
                correct=request.score,
                wrong=wrong,
                category_breakdown={
                    request.test_title: CategoryStats(correct=request.score, total=request.total, percentage=percentage),
                },
                wrong_questions=[],
            ),
            request.test_title,
        )

        result = result_repository.create_result(
            db,
            user_id=user.id,
            test_id=test.id,
            score=request.score,
            total=request.total,
            ai_feedback=ai_summary,
        )
        db.commit()

        return ResultCreateResponse(
            result_id=result.id,
            score=request.score,
            total=request.total,
            percentage=percentage,
            ai_summary=ai_summary,
        )

    def get_result(self, db: Session, identity: SessionIdentity, result_id: str) -> ResultResponse:
        result = result_repository.find_result_by_id(db, result_id)
        if not result:
            raise NotFoundError(f"Result not found: {result_id}")

        if result.user.email != identity.email and not identity.is_admin:
            raise ForbiddenError("Forbidden")

        return to_result_response(result)

    def list_results(self, db: Session, identity: SessionIdentity) -> List[ResultResponse]:
        """Caller's results, newest first"""
        user = user_repository.find_user_by_email(db, identity.email)
        if not user:
            return []
        return [to_result_response(r) for r in result_repository.find_results_by_user_id(db, user.id)]

    async def generate_ai_summary(self, request: AISummaryRequest) -> AISummaryResponse:
        logging.info(
            f"AI summary request received: score={request.score}, "
            f"categories={list(request.category_breakdown.keys())}, "
            f"wrong_questions={len(request.wrong_questions)}"
        )
        summary = await self.feedback.generate_field_analysis(
            FieldAnalysisInput(
                score=request.score,
                total_questions=request.total_questions,
                correct=request.correct,
                wrong=request.wrong,
                category_breakdown=request.category_breakdown,
                wrong_questions=request.wrong_questions,
            ),
            request.test_title,
        )
        logging.info(f"AI summary generated, length: {len(summary)}")
        return AISummaryResponse(summary=summary)
