"""
Quizzes with multiple-choice questions and their options.
"""

from sqlalchemy import Column, String, Text, Integer, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from learnhub.core.database import Base
from learnhub.models.base import uuid_pk, created_at_column, updated_at_column


class Quiz(Base):
    __tablename__ = "quizzes"

    id = uuid_pk()
    topic_id = Column(String(36), ForeignKey("topics.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    passing_score = Column(Integer, nullable=False, default=70)
    is_published = Column(Boolean, nullable=False, default=False)

    generated_by_ai = Column(Boolean, nullable=False, default=False)
    ai_provider_id = Column(String(36), ForeignKey("ai_providers.id", ondelete="SET NULL"), nullable=True)
    ai_model = Column(String(100), nullable=True)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=False)
    created_at = created_at_column()
    updated_at = updated_at_column()

    topic = relationship("Topic", back_populates="quizzes")
    questions = relationship(
        "QuizQuestion",
        back_populates="quiz",
        cascade="all, delete-orphan",
        order_by="QuizQuestion.order_index",
    )


class QuizQuestion(Base):
    __tablename__ = "quiz_questions"

    id = uuid_pk()
    quiz_id = Column(String(36), ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)
    question_type = Column(String(30), nullable=False, default="multiple_choice")
    question_text = Column(Text, nullable=False)
    explanation = Column(Text, nullable=True)
    points = Column(Integer, nullable=False, default=1)
    order_index = Column(Integer, nullable=False, default=0)
    generated_by_ai = Column(Boolean, nullable=False, default=False)
    created_at = created_at_column()

    quiz = relationship("Quiz", back_populates="questions")
    options = relationship(
        "QuizQuestionOption",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by="QuizQuestionOption.order_index",
    )


class QuizQuestionOption(Base):
    __tablename__ = "quiz_question_options"

    id = uuid_pk()
    question_id = Column(String(36), ForeignKey("quiz_questions.id", ondelete="CASCADE"), nullable=False, index=True)
    option_text = Column(Text, nullable=False)
    is_correct = Column(Boolean, nullable=False, default=False)
    explanation = Column(Text, nullable=True)
    order_index = Column(Integer, nullable=False, default=0)

    question = relationship("QuizQuestion", back_populates="options")
