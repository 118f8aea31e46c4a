"""
Shape validation for parsed AI output.

The repair pipeline returns an untyped JSON value; each generator coerces it
into a typed artifact variant here and fails explicitly when the model
returned the wrong structure.
"""

from typing import Annotated, Any, List

from pydantic import Field, StrictStr, TypeAdapter, ValidationError

from learnhub.core.errors import InvalidAIResponseShape
from learnhub.core.logging import get_logger
from learnhub.schemas.generation import (
    ExerciseDraft,
    FindingDeepDive,
    QuizQuestionDraft,
    TestCaseDraft,
    TopicReviewDraft,
    TopicSuggestion,
)

logger = get_logger()

NonEmptyText = Annotated[StrictStr, Field(min_length=1)]

_EXERCISE = TypeAdapter(ExerciseDraft)
_HINTS = TypeAdapter(Annotated[List[NonEmptyText], Field(min_length=1)])
_TEST_CASES = TypeAdapter(Annotated[List[TestCaseDraft], Field(min_length=1)])
_TOPICS = TypeAdapter(Annotated[List[TopicSuggestion], Field(min_length=1)])
_OBJECTIVES = TypeAdapter(Annotated[List[NonEmptyText], Field(min_length=1)])
_QUIZ_QUESTIONS = TypeAdapter(Annotated[List[QuizQuestionDraft], Field(min_length=1)])
_REVIEW = TypeAdapter(TopicReviewDraft)
_DEEP_DIVE = TypeAdapter(FindingDeepDive)


def _validate(adapter: TypeAdapter, value: Any, what: str) -> Any:
    try:
        return adapter.validate_python(value)
    except ValidationError as e:
        first = e.errors()[0] if e.errors() else {}
        logger.warning(
            "AI response shape invalid for %s: %s at %s (%d errors)",
            what,
            first.get("msg"),
            ".".join(str(p) for p in first.get("loc", ())),
            e.error_count(),
        )
        raise InvalidAIResponseShape(f"AI did not return a valid {what}") from e


def as_exercise(value: Any) -> ExerciseDraft:
    return _validate(_EXERCISE, value, "exercise object")


def as_hints(value: Any) -> List[str]:
    return _validate(_HINTS, value, "hints array")


def as_test_cases(value: Any) -> List[TestCaseDraft]:
    return _validate(_TEST_CASES, value, "test cases array")


def as_topics(value: Any) -> List[TopicSuggestion]:
    return _validate(_TOPICS, value, "topics array")


def as_objectives(value: Any) -> List[str]:
    return _validate(_OBJECTIVES, value, "objectives array")


def as_quiz_questions(value: Any) -> List[QuizQuestionDraft]:
    return _validate(_QUIZ_QUESTIONS, value, "questions array")


def as_topic_review(value: Any) -> TopicReviewDraft:
    return _validate(_REVIEW, value, "topic review object")


def as_deep_dive(value: Any) -> FindingDeepDive:
    return _validate(_DEEP_DIVE, value, "deep-dive object")
