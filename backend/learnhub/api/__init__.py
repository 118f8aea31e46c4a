"""
API routes package initialization.
"""

from fastapi import APIRouter

from learnhub.api.ai_providers import router as ai_providers_router
from learnhub.api.generation import router as generation_router
from learnhub.api.quizzes import router as quizzes_router
from learnhub.api.reviews import router as reviews_router

# Create main API router with v1 versioning
api_router = APIRouter(prefix="/api/v1")

api_router.include_router(ai_providers_router)
api_router.include_router(generation_router)
api_router.include_router(quizzes_router)
api_router.include_router(reviews_router)

__all__ = ["api_router"]
