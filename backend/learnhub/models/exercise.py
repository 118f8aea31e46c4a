"""
Coding exercises with their progressive hints and test cases.
"""

from enum import Enum

from sqlalchemy import Column, String, Text, Integer, Boolean, ForeignKey, JSON
from sqlalchemy.orm import relationship

from learnhub.core.database import Base
from learnhub.models.base import uuid_pk, created_at_column, updated_at_column


class ProgrammingLanguage(str, Enum):
    JAVASCRIPT = "javascript"
    JAVA = "java"
    PYTHON = "python"


class TestCaseType(str, Enum):
    PUBLIC = "public"
    HIDDEN = "hidden"
    EDGE_CASE = "edge_case"


class Exercise(Base):
    __tablename__ = "exercises"

    id = uuid_pk()
    topic_id = Column(String(36), ForeignKey("topics.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    instructions = Column(Text, nullable=False)
    language = Column(String(20), nullable=False)
    difficulty_level = Column(String(20), nullable=False)
    starter_code = Column(Text, nullable=True)
    solution_code = Column(Text, nullable=True)
    explanation = Column(Text, nullable=True)
    order_index = Column(Integer, nullable=False, default=0)
    points = Column(Integer, nullable=False, default=10)
    time_limit_seconds = Column(Integer, nullable=True, default=300)
    is_published = Column(Boolean, nullable=False, default=False)

    generated_by_ai = Column(Boolean, nullable=False, default=False)
    ai_provider_id = Column(String(36), ForeignKey("ai_providers.id", ondelete="SET NULL"), nullable=True)
    ai_model = Column(String(100), nullable=True)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=False)
    created_at = created_at_column()
    updated_at = updated_at_column()

    topic = relationship("Topic", back_populates="exercises")
    hints = relationship(
        "ExerciseHint",
        back_populates="exercise",
        cascade="all, delete-orphan",
        order_by="ExerciseHint.hint_level",
    )
    test_cases = relationship(
        "ExerciseTestCase",
        back_populates="exercise",
        cascade="all, delete-orphan",
        order_by="ExerciseTestCase.order_index",
    )

    def __repr__(self) -> str:
        return f"<Exercise(id={self.id}, title={self.title})>"


class ExerciseHint(Base):
    """Progressive hint; level 1 is the vaguest."""

    __tablename__ = "exercise_hints"

    id = uuid_pk()
    exercise_id = Column(String(36), ForeignKey("exercises.id", ondelete="CASCADE"), nullable=False, index=True)
    hint_level = Column(Integer, nullable=False)
    hint_text = Column(Text, nullable=False)
    reveals_solution = Column(Boolean, nullable=False, default=False)

    generated_by_ai = Column(Boolean, nullable=False, default=False)
    ai_provider_id = Column(String(36), ForeignKey("ai_providers.id", ondelete="SET NULL"), nullable=True)
    ai_model = Column(String(100), nullable=True)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=False)
    created_at = created_at_column()

    exercise = relationship("Exercise", back_populates="hints")


class ExerciseTestCase(Base):
    """Function-style test: input_data {"args": [...]} / expected_output {"result": ...}."""

    __tablename__ = "exercise_test_cases"

    id = uuid_pk()
    exercise_id = Column(String(36), ForeignKey("exercises.id", ondelete="CASCADE"), nullable=False, index=True)
    test_name = Column(String(255), nullable=False)
    test_type = Column(String(20), nullable=False, default=TestCaseType.PUBLIC.value)
    input_data = Column(JSON, nullable=True)
    expected_output = Column(JSON, nullable=True)
    stdin = Column(Text, nullable=True)
    expected_stdout = Column(Text, nullable=True)
    points = Column(Integer, nullable=False, default=1)
    is_hidden = Column(Boolean, nullable=False, default=False)
    timeout_ms = Column(Integer, nullable=True, default=5000)
    order_index = Column(Integer, nullable=False, default=0)

    generated_by_ai = Column(Boolean, nullable=False, default=False)
    ai_provider_id = Column(String(36), ForeignKey("ai_providers.id", ondelete="SET NULL"), nullable=True)
    ai_model = Column(String(100), nullable=True)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=False)
    created_at = created_at_column()

    exercise = relationship("Exercise", back_populates="test_cases")
