"""
AI-generated topic content: alternative explanations and quality reviews.
"""

from enum import Enum

from sqlalchemy import Column, String, Text, Integer, Boolean, ForeignKey, JSON

from learnhub.core.database import Base
from learnhub.models.base import uuid_pk, created_at_column, updated_at_column


class VariationType(str, Enum):
    EXPLANATION = "explanation"
    EXAMPLE = "example"
    ANALOGY = "analogy"
    SUMMARY = "summary"
    DEEP_DIVE = "deep_dive"


class TopicContentVariation(Base):
    __tablename__ = "topic_content_variations"

    id = uuid_pk()
    topic_id = Column(String(36), ForeignKey("topics.id", ondelete="CASCADE"), nullable=False, index=True)
    variation_type = Column(String(20), nullable=False)
    difficulty_level = Column(String(20), nullable=False)
    title = Column(String(255), nullable=True)
    content = Column(Text, nullable=False)

    generated_by_ai = Column(Boolean, nullable=False, default=False)
    ai_provider_id = Column(String(36), ForeignKey("ai_providers.id", ondelete="SET NULL"), nullable=True)
    ai_model = Column(String(100), nullable=True)

    upvotes = Column(Integer, nullable=False, default=0)
    downvotes = Column(Integer, nullable=False, default=0)
    is_published = Column(Boolean, nullable=False, default=True)

    created_by = Column(String(36), ForeignKey("users.id"), nullable=False)
    created_at = created_at_column()
    updated_at = updated_at_column()


class TopicReview(Base):
    """
    AI quality review of a topic. findings holds a list of
    {category, severity, title, description, affectedItems, suggestion}.
    """

    __tablename__ = "topic_reviews"

    id = uuid_pk()
    topic_id = Column(String(36), ForeignKey("topics.id", ondelete="CASCADE"), nullable=False, index=True)
    overall_score = Column(Integer, nullable=False)
    summary = Column(Text, nullable=False)
    findings = Column(JSON, nullable=False, default=list)

    generated_by_ai = Column(Boolean, nullable=False, default=True)
    ai_provider_id = Column(String(36), ForeignKey("ai_providers.id", ondelete="SET NULL"), nullable=True)
    ai_model = Column(String(100), nullable=True)
    reviewed_by = Column(String(36), ForeignKey("users.id"), nullable=False)

    # What was reviewed
    objectives_count = Column(Integer, nullable=False, default=0)
    exercises_count = Column(Integer, nullable=False, default=0)
    quizzes_count = Column(Integer, nullable=False, default=0)

    created_at = created_at_column()
    updated_at = updated_at_column()
