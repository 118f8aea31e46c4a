"""
Schemas package initialization.
"""

from learnhub.schemas.chat import (
    ChatMessage,
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatRequest,
    TokenUsage,
)
from learnhub.schemas.ai_provider import (
    ProviderCreate,
    ProviderUpdate,
    ProviderResponse,
    ModelCreate,
    ModelResponse,
    ConnectionTestResponse,
    VendorModelsResponse,
    UsageStatsResponse,
)
from learnhub.schemas.generation import (
    ExerciseDraft,
    TestCaseDraft,
    TopicSuggestion,
    QuizOptionDraft,
    QuizQuestionDraft,
    ReviewFinding,
    TopicReviewDraft,
    FindingDeepDive,
)

__all__ = [
    "ChatMessage",
    "ChatCompletionRequest",
    "ChatCompletionResponse",
    "ChatRequest",
    "TokenUsage",
    "ProviderCreate",
    "ProviderUpdate",
    "ProviderResponse",
    "ModelCreate",
    "ModelResponse",
    "ConnectionTestResponse",
    "VendorModelsResponse",
    "UsageStatsResponse",
    "ExerciseDraft",
    "TestCaseDraft",
    "TopicSuggestion",
    "QuizOptionDraft",
    "QuizQuestionDraft",
    "ReviewFinding",
    "TopicReviewDraft",
    "FindingDeepDive",
]
