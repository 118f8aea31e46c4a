"""
Schemas for AI content generation: request bodies, typed artifact variants
parsed from model output, and persisted artifact responses.
"""

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from learnhub.models.content import VariationType
from learnhub.models.curriculum import DifficultyLevel
from learnhub.models.exercise import ProgrammingLanguage


# Request bodies
class GenerateTopicContentRequest(BaseModel):
    topic_id: str
    variation_type: VariationType = VariationType.EXPLANATION
    difficulty_level: Optional[DifficultyLevel] = None  # defaults to the topic's level
    provider_id: Optional[str] = None


class GenerateExerciseRequest(BaseModel):
    topic_id: str
    language: ProgrammingLanguage = ProgrammingLanguage.JAVASCRIPT
    difficulty_level: Optional[DifficultyLevel] = None
    exercise_description: Optional[str] = Field(None, description="Extra requirements for the exercise")
    provider_id: Optional[str] = None


class GenerateHintsRequest(BaseModel):
    exercise_id: str
    num_hints: int = Field(3, ge=1, le=5)
    provider_id: Optional[str] = None


class GenerateTestCasesRequest(BaseModel):
    exercise_id: str
    num_test_cases: int = Field(5, ge=1, le=10)
    provider_id: Optional[str] = None


class GenerateTopicsRequest(BaseModel):
    curriculum_id: str
    num_topics: int = Field(5, ge=1, le=10)
    provider_id: Optional[str] = None


class GenerateObjectivesRequest(BaseModel):
    topic_id: str
    num_objectives: int = Field(5, ge=1, le=8)
    provider_id: Optional[str] = None


class GenerateQuizRequest(BaseModel):
    topic_id: str
    num_questions: int = Field(5, ge=1, le=20)
    title: Optional[str] = None
    passing_score: int = Field(70, ge=0, le=100)
    provider_id: Optional[str] = None


class TopicReviewRequest(BaseModel):
    provider_id: Optional[str] = None


# Artifact variants parsed from model output
class ExerciseDraft(BaseModel):
    title: str
    description: str
    instructions: str
    starter_code: str = Field(..., alias="starterCode")
    solution_code: str = Field(..., alias="solutionCode")

    class Config:
        populate_by_name = True


class TestCaseDraft(BaseModel):
    test_name: str
    test_type: Literal["public", "hidden", "edge_case"] = "public"
    input_data: Any = None
    expected_output: Any = None


class TopicSuggestion(BaseModel):
    title: str
    description: str
    suggested_content: Optional[str] = Field(None, alias="suggestedContent")
    estimated_duration_minutes: Optional[int] = Field(None, alias="estimatedDurationMinutes")

    class Config:
        populate_by_name = True


class QuizOptionDraft(BaseModel):
    text: str
    is_correct: bool = Field(False, alias="isCorrect")
    explanation: Optional[str] = None

    class Config:
        populate_by_name = True


class QuizQuestionDraft(BaseModel):
    question: str
    options: List[QuizOptionDraft] = Field(..., min_length=2)
    explanation: Optional[str] = None

    @model_validator(mode="after")
    def _has_correct_option(self):
        if not any(o.is_correct for o in self.options):
            raise ValueError("question has no correct option")
        return self


class ReviewFinding(BaseModel):
    """One review finding. category: alignment, coverage, quality, difficulty, completeness, pedagogy."""

    category: str
    severity: str  # critical, warning, suggestion
    title: str
    description: str
    affected_items: List[str] = Field(default_factory=list, alias="affectedItems")
    suggestion: str = ""

    class Config:
        populate_by_name = True


class TopicReviewDraft(BaseModel):
    overall_score: int = Field(..., ge=0, le=100, alias="overallScore")
    summary: str
    findings: List[ReviewFinding]

    class Config:
        populate_by_name = True


class FindingDeepDive(BaseModel):
    enhanced_description: str = Field(..., alias="enhancedDescription")
    enhanced_suggestion: str = Field(..., alias="enhancedSuggestion")
    enhanced_affected_items: List[str] = Field(default_factory=list, alias="enhancedAffectedItems")

    class Config:
        populate_by_name = True


class DeepDiveRequest(BaseModel):
    finding: ReviewFinding
    provider_id: Optional[str] = None


# Persisted artifact responses
class ContentVariationResponse(BaseModel):
    id: str
    topic_id: str
    variation_type: str
    difficulty_level: str
    content: str
    ai_provider_id: Optional[str] = None
    ai_model: Optional[str] = None
    created_at: str

    class Config:
        from_attributes = True


class ExerciseResponse(BaseModel):
    id: str
    topic_id: str
    title: str
    description: str
    instructions: str
    language: str
    difficulty_level: str
    starter_code: Optional[str] = None
    solution_code: Optional[str] = None
    generated_by_ai: bool
    ai_provider_id: Optional[str] = None
    ai_model: Optional[str] = None
    created_at: str

    class Config:
        from_attributes = True


class HintResponse(BaseModel):
    id: str
    exercise_id: str
    hint_level: int
    hint_text: str
    reveals_solution: bool
    generated_by_ai: bool

    class Config:
        from_attributes = True


class TestCaseResponse(BaseModel):
    id: str
    exercise_id: str
    test_name: str
    test_type: str
    input_data: Any = None
    expected_output: Any = None
    is_hidden: bool
    points: int
    order_index: int
    generated_by_ai: bool

    class Config:
        from_attributes = True


class QuizOptionResponse(BaseModel):
    id: str
    option_text: str
    is_correct: bool
    explanation: Optional[str] = None
    order_index: int

    class Config:
        from_attributes = True


class QuizQuestionResponse(BaseModel):
    id: str
    question_text: str
    explanation: Optional[str] = None
    points: int
    order_index: int
    options: List[QuizOptionResponse] = Field(default_factory=list)

    class Config:
        from_attributes = True


class QuizResponse(BaseModel):
    id: str
    topic_id: str
    title: str
    description: Optional[str] = None
    passing_score: int
    generated_by_ai: bool
    ai_provider_id: Optional[str] = None
    ai_model: Optional[str] = None
    questions: List[QuizQuestionResponse] = Field(default_factory=list)

    class Config:
        from_attributes = True


class TopicReviewResponse(BaseModel):
    id: str
    topic_id: str
    overall_score: int
    summary: str
    findings: List[Any] = Field(default_factory=list)
    ai_provider_id: Optional[str] = None
    ai_model: Optional[str] = None
    objectives_count: int
    exercises_count: int
    quizzes_count: int
    created_at: str

    class Config:
        from_attributes = True
