"""
Curriculum structure that AI-generated content hangs off: curricula, topics
and learning objectives. Full CRUD lives in the curriculum service; the
generators only read these rows.
"""

from enum import Enum

from sqlalchemy import Column, String, Text, Integer, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from learnhub.core.database import Base
from learnhub.models.base import uuid_pk, created_at_column, updated_at_column


class DifficultyLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class Curriculum(Base):
    __tablename__ = "curricula"

    id = uuid_pk()
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    domain = Column(String(100), nullable=False)
    difficulty_level = Column(String(20), nullable=False, default=DifficultyLevel.BEGINNER.value)
    is_published = Column(Boolean, nullable=False, default=False)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=False)
    created_at = created_at_column()
    updated_at = updated_at_column()

    topics = relationship("Topic", back_populates="curriculum", order_by="Topic.order_index")


class Topic(Base):
    __tablename__ = "topics"

    id = uuid_pk()
    curriculum_id = Column(String(36), ForeignKey("curricula.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    content = Column(Text, nullable=True)
    difficulty_level = Column(String(20), nullable=False, default=DifficultyLevel.BEGINNER.value)
    order_index = Column(Integer, nullable=False, default=0)
    created_at = created_at_column()
    updated_at = updated_at_column()

    curriculum = relationship("Curriculum", back_populates="topics")
    objectives = relationship("LearningObjective", back_populates="topic", cascade="all, delete-orphan")
    exercises = relationship("Exercise", back_populates="topic", cascade="all, delete-orphan")
    quizzes = relationship("Quiz", back_populates="topic", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Topic(id={self.id}, title={self.title})>"


class LearningObjective(Base):
    __tablename__ = "learning_objectives"

    id = uuid_pk()
    topic_id = Column(String(36), ForeignKey("topics.id", ondelete="CASCADE"), nullable=False, index=True)
    objective_text = Column(Text, nullable=False)
    order_index = Column(Integer, nullable=False, default=0)
    requires_exercise = Column(Boolean, nullable=False, default=False)
    created_at = created_at_column()

    topic = relationship("Topic", back_populates="objectives")
