"""
Company placement pipelines: applications, stage submissions and the
final track decision.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

import placement_coach.databases.postgres.model as models
from placement_coach.exceptions import (
    AlreadySubmittedError,
    ForbiddenError,
    NotFoundError,
    PipelineClosedError,
    StageOutOfOrderError,
)
from placement_coach.models.feedback import ComprehensiveSummary, TestStats, TopicStats
from placement_coach.models.identity import SessionIdentity
from placement_coach.models.placement import StageSubmissionRequest, StageSubmissionResponse
from placement_coach.models.scoring import CategoryStats, ScoreReport
from placement_coach.repository import application_repository, test_repository, user_repository
from placement_coach.services.feedback_service import FeedbackSummaryBuilder, topics_from_breakdown
from placement_coach.services.scoring_service import evaluate_answers, exact_percentage, round_half_up
from placement_coach.services.stage_policy import COMPLETED, REJECTED, StagePolicy, get_stage_policy
from placement_coach.services.track_service import assign_track

SELECTED = "selected"


def _check_access(identity: SessionIdentity, application: models.PlacementApplication) -> None:
    if application.user.email != identity.email and not identity.is_admin:
        raise ForbiddenError("Forbidden")


def _check_open_stage(application: models.PlacementApplication, stage_name: str) -> None:
    """Only the current stage of a pipeline still in progress accepts work"""
    if application.status in (COMPLETED, REJECTED):
        raise PipelineClosedError(f"Application is already {application.status}")
    if stage_name != application.current_stage:
        raise StageOutOfOrderError(
            f"Stage {stage_name} is not open, current stage is {application.current_stage}"
        )


class PlacementService:
    """
    Placement pipeline operations
    """

    def __init__(self, feedback_builder: FeedbackSummaryBuilder, policy: Optional[StagePolicy] = None):
        self.feedback = feedback_builder
        self.policy = policy or get_stage_policy()

    def create_application(self, db: Session, identity: SessionIdentity, company: str) -> models.PlacementApplication:
        """Open an application at the company's first stage"""
        first_stage = self.policy.first_stage(company)

        user = user_repository.find_user_by_email(db, identity.email)
        if not user:
            raise NotFoundError("User not found")

        application = application_repository.create_application(db, user.id, company, first_stage)
        db.commit()
        return application_repository.find_application_by_id(db, application.id)

    def get_application(self, db: Session, identity: SessionIdentity, application_id: str) -> models.PlacementApplication:
        application = application_repository.find_application_by_id(db, application_id)
        if not application:
            raise NotFoundError(f"Application not found: {application_id}")
        _check_access(identity, application)
        return application

    def start_stage(self, db: Session, identity: SessionIdentity, application_id: str, stage_name: str) -> models.AssessmentStage:
        application = self.get_application(db, identity, application_id)
        self.policy.require_stage(application.company, stage_name)
        _check_open_stage(application, stage_name)

        stage = application_repository.start_stage(db, application.id, stage_name)
        db.commit()
        return stage

    def _score_stage(
        self,
        db: Session,
        company: str,
        stage_name: str,
        submission: StageSubmissionRequest,
    ) -> ScoreReport:
        stage_test = self.policy.stage_test(company, stage_name)
        questions: List[models.Question] = []
        if stage_test is not None:
            test = test_repository.find_company_test_for_topic(db, stage_test.company, stage_test.topic)
            if test is not None:
                questions = test_repository.find_questions_by_test_id(db, test.id)

        if questions:
            return evaluate_answers(submission.answers, questions)

        # Externally scored round, nothing stored to check against
        logging.info(f"No stored questions for {company}/{stage_name}, using reported score")
        return ScoreReport(total_correct=submission.score, total_questions=submission.total)

    def submit_stage(
        self,
        db: Session,
        identity: SessionIdentity,
        application_id: str,
        stage_name: str,
        submission: StageSubmissionRequest,
    ) -> StageSubmissionResponse:
        """
        Score a stage, record it once and advance, reject or complete the
        application.

        Raises NotFoundError, ForbiddenError, UnknownCompanyOrStageError,
        AlreadySubmittedError, PipelineClosedError or StageOutOfOrderError;
        nothing is written in those cases.
        """
        application = self.get_application(db, identity, application_id)
        company = application.company
        self.policy.require_stage(company, stage_name)

        existing = application_repository.find_stage(db, application.id, stage_name)
        if existing is not None and existing.submitted_at is not None:
            raise AlreadySubmittedError(f"Stage {stage_name} already submitted")
        _check_open_stage(application, stage_name)

        report = self._score_stage(db, company, stage_name, submission)
        exact = exact_percentage(report.total_correct, report.total_questions)
        percentage = round_half_up(exact)
        is_passed = self.policy.evaluate_pass(company, stage_name, exact, report.total_correct)

        application_repository.submit_stage(db, application.id, stage_name, {
            "score": report.total_correct,
            "total": report.total_questions,
            "percentage": exact,
            "is_passed": is_passed,
            "time_spent": submission.time_spent,
            "feedback": {
                "category_breakdown": {k: v.model_dump() for k, v in report.category_breakdown.items()},
                "wrong_questions": [q.model_dump() for q in report.wrong_questions],
            },
        })

        next_stage = self.policy.next_stage(company, stage_name, is_passed)
        response = StageSubmissionResponse(
            is_passed=is_passed,
            next_stage=next_stage,
            percentage=percentage,
            score=report.total_correct,
            total=report.total_questions,
            category_breakdown=report.category_breakdown,
        )

        if not is_passed:
            application.status = REJECTED
            application.final_decision = REJECTED
            response.next_stage = None
        elif self.policy.is_last_stage(company, next_stage) and not application.final_track:
            submitted = application_repository.find_submitted_stages(db, application.id)
            track = assign_track(company, submitted)
            application.current_stage = next_stage
            application.status = COMPLETED
            application.final_track = track
            application.final_decision = SELECTED
            response.next_stage = COMPLETED
            response.track = track
            response.message = f"Congratulations! You have been selected for {track} track."
        else:
            application.current_stage = next_stage
            application.status = next_stage

        db.commit()
        logging.info(
            f"Application {application.id} stage {stage_name}: "
            f"{report.total_correct}/{report.total_questions} ({percentage}%), passed={is_passed}, "
            f"status={application.status}"
        )
        return response

    async def build_stage_summary(
        self,
        db: Session,
        identity: SessionIdentity,
        application_id: str,
        stage_name: str,
    ) -> ComprehensiveSummary:
        """Study guide for a submitted stage, from its stored category breakdown"""
        application = self.get_application(db, identity, application_id)
        self.policy.require_stage(application.company, stage_name)

        stage = application_repository.find_stage(db, application.id, stage_name)
        if stage is None or stage.submitted_at is None:
            raise NotFoundError(f"Stage {stage_name} has not been submitted")

        breakdown = {
            category: CategoryStats(**values)
            for category, values in ((stage.feedback or {}).get("category_breakdown") or {}).items()
        }
        score = round_half_up(stage.percentage or 0)
        stats = TestStats(
            score=score,
            accuracy=score,
            total_questions=stage.total or 0,
            topics={topic: TopicStats(**values) for topic, values in topics_from_breakdown(breakdown).items()},
        )
        title = f"{application.company} {stage_name.capitalize()} Assessment"
        return await self.feedback.generate_comprehensive_summary(stats, title)
