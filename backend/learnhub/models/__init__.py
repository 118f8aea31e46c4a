"""
Models package initialization.
"""

from learnhub.models.user import User, UserRole
from learnhub.models.ai_provider import (
    AIProviderConfig,
    AIModel,
    AIUsageLog,
    ProviderType,
    ModelType,
    LOCAL_PROVIDER_TYPES,
)
from learnhub.models.curriculum import Curriculum, Topic, LearningObjective, DifficultyLevel
from learnhub.models.exercise import (
    Exercise,
    ExerciseHint,
    ExerciseTestCase,
    ProgrammingLanguage,
    TestCaseType,
)
from learnhub.models.quiz import Quiz, QuizQuestion, QuizQuestionOption
from learnhub.models.content import TopicContentVariation, TopicReview, VariationType

__all__ = [
    "User",
    "UserRole",
    "AIProviderConfig",
    "AIModel",
    "AIUsageLog",
    "ProviderType",
    "ModelType",
    "LOCAL_PROVIDER_TYPES",
    "Curriculum",
    "Topic",
    "LearningObjective",
    "DifficultyLevel",
    "Exercise",
    "ExerciseHint",
    "ExerciseTestCase",
    "ProgrammingLanguage",
    "TestCaseType",
    "Quiz",
    "QuizQuestion",
    "QuizQuestionOption",
    "TopicContentVariation",
    "TopicReview",
    "VariationType",
]
