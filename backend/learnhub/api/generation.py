"""
AI chat and content generation API routes.
"""

from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from learnhub.core.database import get_db
from learnhub.core.logging import get_logger
from learnhub.core.security import get_current_user_id
from learnhub.schemas.chat import ChatCompletionResponse, ChatRequest
from learnhub.schemas.generation import (
    ContentVariationResponse,
    ExerciseResponse,
    GenerateExerciseRequest,
    GenerateHintsRequest,
    GenerateObjectivesRequest,
    GenerateTestCasesRequest,
    GenerateTopicContentRequest,
    GenerateTopicsRequest,
    HintResponse,
    TestCaseResponse,
    TopicSuggestion,
)
from learnhub.services.ai_gateway import get_ai_gateway
from learnhub.services.content_generator import get_content_generator

logger = get_logger()

router = APIRouter(prefix="/ai", tags=["AI Generation"])


@router.post("/chat", response_model=ChatCompletionResponse)
async def chat(
    request: ChatRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Send a chat completion through the user's default or a given provider."""
    return await get_ai_gateway(db).send_chat_completion(user_id, request, request.provider_id)


@router.post("/chat/stream")
async def chat_stream(
    request: ChatRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Stream the completion as plain text deltas."""
    stream = await get_ai_gateway(db).stream_chat_completion(user_id, request, request.provider_id)
    return StreamingResponse(stream, media_type="text/plain; charset=utf-8")


@router.post("/generate/topic-content", response_model=ContentVariationResponse)
async def generate_topic_content(
    request: GenerateTopicContentRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return await get_content_generator(db).generate_topic_content_variation(user_id, request)


@router.post("/generate/exercise", response_model=ExerciseResponse)
async def generate_exercise(
    request: GenerateExerciseRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return await get_content_generator(db).generate_exercise(user_id, request)


@router.post("/generate/hints", response_model=List[HintResponse])
async def generate_hints(
    request: GenerateHintsRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Replace the exercise's AI hints with a freshly generated set."""
    return await get_content_generator(db).generate_hints(user_id, request)


@router.post("/generate/test-cases", response_model=List[TestCaseResponse])
async def generate_test_cases(
    request: GenerateTestCasesRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return await get_content_generator(db).generate_test_cases(user_id, request)


@router.post("/generate/topics", response_model=List[TopicSuggestion], response_model_by_alias=True)
async def generate_topics(
    request: GenerateTopicsRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Topic suggestions for a curriculum; nothing is stored."""
    return await get_content_generator(db).generate_curriculum_topics(user_id, request)


@router.post("/generate/objectives", response_model=List[str])
async def generate_objectives(
    request: GenerateObjectivesRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Learning objective suggestions for a topic; nothing is stored."""
    return await get_content_generator(db).generate_learning_objectives(user_id, request)
