"""
Quiz generation API routes.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from learnhub.core.database import get_db
from learnhub.core.security import get_current_user_id
from learnhub.schemas.generation import GenerateQuizRequest, QuizResponse
from learnhub.services.quiz_generation import get_quiz_generator

router = APIRouter(prefix="/quizzes", tags=["Quizzes"])


@router.post("/generate", response_model=QuizResponse, status_code=201)
async def generate_quiz(
    request: GenerateQuizRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """
    Generate multiple-choice questions for a topic and store them as a quiz.

    The quiz, its questions and their options are written together or not
    at all.
    """
    return await get_quiz_generator(db).create_ai_generated_quiz(user_id, request)
