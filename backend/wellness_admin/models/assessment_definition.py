from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Boolean, Float, Integer
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..platform.database import Base
from ..shared.utils import new_id


class AssessmentDefinition(Base):
    __tablename__ = "assessment_definitions"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False, unique=True, index=True)  # slug, e.g. "phq_9"
    category = Column(String, nullable=False, index=True)
    description = Column(Text)
    time_estimate = Column(String, nullable=True)
    scoring_config = Column(Text, nullable=True)  # JSON-encoded ScoringConfig
    tags = Column(Text, nullable=True)  # comma-separated
    is_active = Column(Boolean, default=True, nullable=False)
    created_by = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    questions = relationship(
        "AssessmentQuestion",
        back_populates="assessment",
        cascade="all, delete-orphan",
        order_by="AssessmentQuestion.order",
    )


class AssessmentQuestion(Base):
    __tablename__ = "assessment_questions"

    id = Column(String(32), primary_key=True, default=new_id)
    assessment_id = Column(
        String(32), ForeignKey("assessment_definitions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    text = Column(Text, nullable=False)
    order = Column(Integer, nullable=False)
    response_type = Column(String, nullable=False)  # likert | likert_5 | binary | multiple_choice
    domain = Column(String, nullable=True)
    reverse_scored = Column(Boolean, default=False, nullable=False)
    # "metadata" is reserved on declarative classes
    metadata_json = Column("metadata", Text, nullable=True)

    assessment = relationship("AssessmentDefinition", back_populates="questions")
    options = relationship(
        "ResponseOption",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by="ResponseOption.order",
    )


class ResponseOption(Base):
    __tablename__ = "response_options"

    id = Column(String(32), primary_key=True, default=new_id)
    question_id = Column(
        String(32), ForeignKey("assessment_questions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    value = Column(Float, nullable=False)
    text = Column(String, nullable=False)
    order = Column(Integer, nullable=False)

    question = relationship("AssessmentQuestion", back_populates="options")
