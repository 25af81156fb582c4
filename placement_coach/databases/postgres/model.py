import uuid

from sqlalchemy import Boolean, Column, ForeignKey, Float, Integer, String, DateTime, Text, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func, text as sa_text

from .database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


# JSONB on Postgres, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class BaseAuditMixin:
    """Reusable audit columns for all tables."""
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class User(Base, BaseAuditMixin):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid)
    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=True)
    role = Column(String(20), nullable=False, server_default=sa_text("'student'"))

    # Relationships
    results = relationship("Result", back_populates="user")
    applications = relationship("PlacementApplication", back_populates="user")


class Test(Base, BaseAuditMixin):
    __tablename__ = "tests"
    # Not a pytest test class
    __test__ = False

    id = Column(String(36), primary_key=True, default=_uuid)
    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    duration = Column(Integer, nullable=False, server_default=sa_text("60"))
    difficulty = Column(String(20), nullable=False, server_default=sa_text("'Medium'"))
    type = Column(String(20), nullable=False, index=True)
    company = Column(String(50), nullable=True, index=True)
    topic = Column(String(100), nullable=True)

    # Relationships
    questions = relationship("Question", back_populates="test", order_by="Question.position")
    results = relationship("Result", back_populates="test")


class Question(Base, BaseAuditMixin):
    __tablename__ = "questions"

    id = Column(String(36), primary_key=True, default=_uuid)
    test_id = Column(String(36), ForeignKey("tests.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    # Nullable: inferred from the text when absent
    category = Column(String(100), nullable=True)
    position = Column(Integer, nullable=False, server_default=sa_text("0"))

    # Relationships
    test = relationship("Test", back_populates="questions")
    options = relationship("Option", back_populates="question", order_by="Option.position", cascade="all, delete-orphan")


class Option(Base):
    __tablename__ = "options"

    id = Column(String(36), primary_key=True, default=_uuid)
    question_id = Column(String(36), ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    is_correct = Column(Boolean, nullable=False, server_default=sa_text("false"))
    position = Column(Integer, nullable=False, server_default=sa_text("0"))

    # Relationships
    question = relationship("Question", back_populates="options")


class Result(Base, BaseAuditMixin):
    """Append-only test attempt record"""
    __tablename__ = "results"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    test_id = Column(String(36), ForeignKey("tests.id", ondelete="CASCADE"), nullable=False, index=True)
    score = Column(Integer, nullable=False)
    total = Column(Integer, nullable=False)
    ai_feedback = Column(Text, nullable=True)

    # Relationships
    user = relationship("User", back_populates="results")
    test = relationship("Test", back_populates="results")


class PlacementApplication(Base, BaseAuditMixin):
    __tablename__ = "placement_applications"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    company = Column(String(50), nullable=False)
    current_stage = Column(String(50), nullable=False)
    # A stage name while in progress, then "rejected" or "completed"
    status = Column(String(50), nullable=False)
    final_track = Column(String(50), nullable=True)
    final_decision = Column(String(20), nullable=True)

    # Relationships
    user = relationship("User", back_populates="applications")
    assessment_stages = relationship("AssessmentStage", back_populates="application", order_by="AssessmentStage.created_at")


class AssessmentStage(Base, BaseAuditMixin):
    __tablename__ = "assessment_stages"

    id = Column(String(36), primary_key=True, default=_uuid)
    application_id = Column(String(36), ForeignKey("placement_applications.id", ondelete="CASCADE"), nullable=False, index=True)
    stage_name = Column(String(50), nullable=False)
    score = Column(Integer, nullable=True)
    total = Column(Integer, nullable=True)
    # Unrounded; pass rules and tracks compare the exact ratio
    percentage = Column(Float, nullable=True)
    is_passed = Column(Boolean, nullable=True)
    time_spent = Column(Integer, nullable=True)
    # {"category_breakdown": {...}, "wrong_questions": [...]}
    feedback = Column(JSONType, nullable=True)
    started_at = Column(DateTime(timezone=True), nullable=True)
    # Absent until the stage is submitted; set exactly once
    submitted_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("application_id", "stage_name", name="uq_assessment_stage_application_stage"),
    )

    # Relationships
    application = relationship("PlacementApplication", back_populates="assessment_stages")
