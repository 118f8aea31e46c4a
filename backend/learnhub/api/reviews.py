"""
Topic review API routes.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from learnhub.core.database import get_db
from learnhub.core.security import get_current_user_id
from learnhub.schemas.generation import (
    DeepDiveRequest,
    FindingDeepDive,
    TopicReviewRequest,
    TopicReviewResponse,
)
from learnhub.services.content_generator import get_content_generator

router = APIRouter(prefix="/topics", tags=["Topic Reviews"])


@router.post("/{topic_id}/review", response_model=TopicReviewResponse, status_code=201)
async def review_topic(
    topic_id: str,
    request: TopicReviewRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Run an AI quality review of the topic and its materials."""
    return await get_content_generator(db).review_topic(user_id, topic_id, request.provider_id)


@router.post("/{topic_id}/review/deep-dive", response_model=FindingDeepDive)
async def deep_dive_finding(
    topic_id: str,
    request: DeepDiveRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return await get_content_generator(db).deep_dive_finding(
        user_id, topic_id, request.finding, request.provider_id
    )
