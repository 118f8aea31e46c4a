"""
AI quiz generation: multiple-choice questions for a topic, stored as a quiz
with its questions and options in one transaction.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from learnhub.core.database import transaction
from learnhub.core.logging import get_logger
from learnhub.models import Quiz, QuizQuestion, QuizQuestionOption
from learnhub.schemas.generation import GenerateQuizRequest, QuizQuestionDraft
from learnhub.services import ai_prompts
from learnhub.services.artifact_shapes import as_quiz_questions
from learnhub.services.content_generator import BaseGenerationService, describe_topic

logger = get_logger()


class QuizGenerationService(BaseGenerationService):
    async def generate_quiz_questions(
        self,
        user_id: str,
        topic_id: str,
        num_questions: int = 5,
        provider_id: Optional[str] = None,
    ):
        """
        Ask the model for multiple-choice questions on a topic.

        Returns:
            (questions, response): the validated question drafts and the chat
            response they came from (for provenance).
        """
        topic = self._get_topic(topic_id)
        prompt = ai_prompts.QUIZ_PROMPT.format(
            num_questions=num_questions,
            topic_title=topic.title,
            topic_details=describe_topic(topic),
            level=topic.difficulty_level,
            format_rules=ai_prompts.JSON_FORMAT_RULES,
        )
        return await self._chat_json(
            user_id,
            ai_prompts.QUIZ_SYSTEM,
            prompt,
            as_quiz_questions,
            temperature=0.7,
            max_tokens=2000,
            provider_id=provider_id,
            what="quiz questions",
        )

    async def create_ai_generated_quiz(self, user_id: str, data: GenerateQuizRequest) -> Quiz:
        """Generate questions for a topic and store them as a new quiz."""
        topic = self._get_topic(data.topic_id)
        questions, response = await self.generate_quiz_questions(
            user_id, topic.id, data.num_questions, data.provider_id
        )
        title = data.title or f"Quiz: {topic.title}"

        with transaction(self.db):
            quiz = Quiz(
                topic_id=topic.id,
                title=title,
                description=f"AI-generated quiz for {topic.title}",
                passing_score=data.passing_score,
                generated_by_ai=True,
                ai_provider_id=response.provider_id,
                ai_model=response.model,
                created_by=user_id,
            )
            self.db.add(quiz)
            self.db.flush()
            self._add_questions(quiz, questions)
        self.db.refresh(quiz)

        logger.info(
            "Created AI quiz %s for topic %s with %d questions (model=%s)",
            quiz.id,
            topic.id,
            len(questions),
            response.model,
        )
        return quiz

    def _add_questions(self, quiz: Quiz, questions: List[QuizQuestionDraft]) -> None:
        for q_index, draft in enumerate(questions):
            question = QuizQuestion(
                quiz_id=quiz.id,
                question_type="multiple_choice",
                question_text=draft.question,
                explanation=draft.explanation,
                points=1,
                order_index=q_index,
                generated_by_ai=True,
            )
            self.db.add(question)
            self.db.flush()
            for o_index, option in enumerate(draft.options):
                self.db.add(
                    QuizQuestionOption(
                        question_id=question.id,
                        option_text=option.text,
                        is_correct=option.is_correct,
                        explanation=option.explanation,
                        order_index=o_index,
                    )
                )


def get_quiz_generator(db: Session) -> QuizGenerationService:
    return QuizGenerationService(db)
