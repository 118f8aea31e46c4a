"""
AI content generation: topic content variations, exercises, hints, test
cases, curriculum topics, learning objectives, topic reviews and finding
deep-dives.

Every generator follows the same path: build a prompt from stored records,
call the AI gateway with a system and a user message, recover JSON with the
repair pipeline, validate its shape, then persist the artifact group in a
single transaction. No generator retries; a bad response is surfaced to the
caller, who may resubmit.
"""

from typing import Any, List, Optional, Tuple

from sqlalchemy.orm import Session

from learnhub.core.config import get_config
from learnhub.core.database import transaction
from learnhub.core.errors import InvalidAIResponseShape, NotFound, UnparsableAIResponse
from learnhub.core.logging import get_logger
from learnhub.models import (
    Curriculum,
    Exercise,
    ExerciseHint,
    ExerciseTestCase,
    Topic,
    TopicContentVariation,
    TopicReview,
)
from learnhub.schemas.chat import ChatCompletionRequest, ChatCompletionResponse, ChatMessage
from learnhub.schemas.generation import (
    FindingDeepDive,
    GenerateExerciseRequest,
    GenerateHintsRequest,
    GenerateObjectivesRequest,
    GenerateTestCasesRequest,
    GenerateTopicContentRequest,
    GenerateTopicsRequest,
    ReviewFinding,
    TopicSuggestion,
)
from learnhub.services import ai_prompts
from learnhub.services.ai_gateway import AIGatewayService, get_ai_gateway
from learnhub.services.artifact_shapes import (
    as_deep_dive,
    as_exercise,
    as_hints,
    as_objectives,
    as_test_cases,
    as_topic_review,
    as_topics,
)
from learnhub.services.json_repair import ResponseRepairPipeline

logger = get_logger()


class BaseGenerationService:
    """Shared plumbing for the generators: gateway calls, JSON recovery and record loading."""

    def __init__(
        self,
        db: Session,
        gateway: Optional[AIGatewayService] = None,
        repair: Optional[ResponseRepairPipeline] = None,
    ):
        self.db = db
        self.gateway = gateway or get_ai_gateway(db)
        self.preview_chars = get_config().ai.preview_chars
        self.repair = repair or ResponseRepairPipeline(self.preview_chars)

    async def _chat(
        self,
        user_id: str,
        system_prompt: str,
        prompt: str,
        *,
        temperature: float,
        max_tokens: int,
        provider_id: Optional[str],
    ) -> ChatCompletionResponse:
        request = ChatCompletionRequest(
            messages=[
                ChatMessage(role="system", content=system_prompt),
                ChatMessage(role="user", content=prompt),
            ],
            temperature=temperature,
            max_tokens=max_tokens,
        )
        logger.debug(
            "AI generation request: user=%s provider=%s prompt_length=%d temperature=%s",
            user_id,
            provider_id or "default",
            len(prompt),
            temperature,
        )
        logger.debug("Prompt content:\n%s", prompt)
        return await self.gateway.send_chat_completion(user_id, request, provider_id)

    async def _chat_json(
        self,
        user_id: str,
        system_prompt: str,
        prompt: str,
        validate,
        *,
        temperature: float,
        max_tokens: int,
        provider_id: Optional[str],
        what: str,
    ) -> Tuple[Any, ChatCompletionResponse]:
        """Call the gateway, recover JSON from the reply and coerce it with validate()."""
        response = await self._chat(
            user_id,
            system_prompt,
            prompt,
            temperature=temperature,
            max_tokens=max_tokens,
            provider_id=provider_id,
        )
        try:
            value = self.repair.repair(response.content)
            return validate(value), response
        except (UnparsableAIResponse, InvalidAIResponseShape) as e:
            logger.error(
                "Failed to generate %s: %s. Response preview: %r",
                what,
                e.message,
                response.content[: self.preview_chars],
            )
            raise

    def _get_topic(self, topic_id: str) -> Topic:
        topic = self.db.query(Topic).filter(Topic.id == topic_id).first()
        if topic is None:
            raise NotFound("Topic", topic_id)
        return topic

    def _get_exercise(self, exercise_id: str) -> Exercise:
        exercise = self.db.query(Exercise).filter(Exercise.id == exercise_id).first()
        if exercise is None:
            raise NotFound("Exercise", exercise_id)
        return exercise


def _code_block(code: Optional[str], language: str = "") -> str:
    return f"```{language}\n{code or ''}\n```"


def describe_topic(topic: Topic) -> str:
    lines = []
    if topic.description:
        lines.append(f"Topic Description: {topic.description}")
    if topic.content:
        lines.append(f"Topic Content:\n{topic.content}")
    return "\n".join(lines)


def _bullets(items: List[str]) -> str:
    return "\n".join(f"- {item}" for item in items) if items else "None."


def _topic_context(topic: Topic) -> dict:
    """Objectives, exercises and quizzes of a topic, rendered for review prompts."""
    objectives = [
        f"Objective {i}: {o.objective_text}"
        for i, o in enumerate(sorted(topic.objectives, key=lambda o: o.order_index), start=1)
    ]
    exercises = [f"{e.title} ({e.difficulty_level}): {e.description}" for e in topic.exercises]
    quizzes = [f"{q.title} ({len(q.questions)} questions)" for q in topic.quizzes]
    return {
        "objectives": _bullets(objectives),
        "exercises": _bullets(exercises),
        "quizzes": _bullets(quizzes),
        "counts": (len(objectives), len(exercises), len(quizzes)),
    }


class AIContentGeneratorService(BaseGenerationService):
    """Generates and stores AI learning content for topics and exercises."""

    async def generate_topic_content_variation(
        self, user_id: str, data: GenerateTopicContentRequest
    ) -> TopicContentVariation:
        """Generate an alternative markdown rendition of a topic (explanation, analogy, ...)."""
        topic = self._get_topic(data.topic_id)
        level = (data.difficulty_level.value if data.difficulty_level else topic.difficulty_level)
        variation_type = data.variation_type.value
        prompt = ai_prompts.CONTENT_VARIATION_PROMPT.format(
            topic_title=topic.title,
            topic_content=topic.content or topic.description or "",
            instruction=ai_prompts.VARIATION_INSTRUCTIONS[variation_type].format(level=level),
            level=level,
        )
        response = await self._chat(
            user_id,
            ai_prompts.CONTENT_VARIATION_SYSTEM,
            prompt,
            temperature=0.7,
            max_tokens=2000,
            provider_id=data.provider_id,
        )
        if not response.content.strip():
            logger.error("Failed to generate topic content variation: empty response")
            raise InvalidAIResponseShape("AI returned empty content")

        with transaction(self.db):
            variation = TopicContentVariation(
                topic_id=topic.id,
                variation_type=variation_type,
                difficulty_level=level,
                content=response.content,
                generated_by_ai=True,
                ai_provider_id=response.provider_id,
                ai_model=response.model,
                created_by=user_id,
            )
            self.db.add(variation)
        self.db.refresh(variation)

        logger.info(
            "Generated topic content variation: topic=%s type=%s level=%s model=%s",
            topic.id,
            variation_type,
            level,
            response.model,
        )
        return variation

    async def generate_exercise(self, user_id: str, data: GenerateExerciseRequest) -> Exercise:
        """Generate a complete exercise with starter code and solution and store it under the topic."""
        topic = self._get_topic(data.topic_id)
        level = data.difficulty_level.value if data.difficulty_level else topic.difficulty_level
        language = data.language.value
        requirements = (
            f"\nSpecific Requirements:\n{data.exercise_description}\n" if data.exercise_description else ""
        )
        prompt = ai_prompts.EXERCISE_PROMPT.format(
            language=language,
            level=level,
            topic_title=topic.title,
            topic_content=topic.content or topic.description or "",
            requirements=requirements,
            format_rules=ai_prompts.JSON_FORMAT_RULES,
        )
        draft, response = await self._chat_json(
            user_id,
            ai_prompts.EXERCISE_SYSTEM,
            prompt,
            as_exercise,
            temperature=0.8,
            max_tokens=3000,
            provider_id=data.provider_id,
            what="exercise",
        )

        with transaction(self.db):
            order_index = self.db.query(Exercise).filter(Exercise.topic_id == topic.id).count()
            exercise = Exercise(
                topic_id=topic.id,
                title=draft.title,
                description=draft.description,
                instructions=draft.instructions,
                language=language,
                difficulty_level=level,
                starter_code=draft.starter_code,
                solution_code=draft.solution_code,
                order_index=order_index,
                generated_by_ai=True,
                ai_provider_id=response.provider_id,
                ai_model=response.model,
                created_by=user_id,
            )
            self.db.add(exercise)
        self.db.refresh(exercise)

        logger.info("Generated exercise %s for topic %s (%s, %s)", exercise.id, topic.id, language, level)
        return exercise

    async def generate_hints(self, user_id: str, data: GenerateHintsRequest) -> List[ExerciseHint]:
        """
        Generate progressive hints for an exercise.

        Replaces the exercise's previous AI-generated hints; hand-written
        hints are kept. hint_level runs 1..N and only the last hint may
        reveal the solution.
        """
        exercise = self._get_exercise(data.exercise_id)
        prompt = ai_prompts.HINTS_PROMPT.format(
            num_hints=data.num_hints,
            exercise_title=exercise.title,
            exercise_description=exercise.description,
            solution_code=_code_block(exercise.solution_code),
            format_rules=ai_prompts.JSON_FORMAT_RULES,
        )
        hints, response = await self._chat_json(
            user_id,
            ai_prompts.HINTS_SYSTEM,
            prompt,
            as_hints,
            temperature=0.7,
            max_tokens=1500,
            provider_id=data.provider_id,
            what="hints",
        )

        rows = []
        with transaction(self.db):
            removed = (
                self.db.query(ExerciseHint)
                .filter(ExerciseHint.exercise_id == exercise.id, ExerciseHint.generated_by_ai.is_(True))
                .delete(synchronize_session="fetch")
            )
            for i, hint_text in enumerate(hints):
                row = ExerciseHint(
                    exercise_id=exercise.id,
                    hint_level=i + 1,
                    hint_text=hint_text,
                    reveals_solution=(i == len(hints) - 1),
                    generated_by_ai=True,
                    ai_provider_id=response.provider_id,
                    ai_model=response.model,
                    created_by=user_id,
                )
                self.db.add(row)
                rows.append(row)

        logger.info(
            "Generated %d hints for exercise %s (replaced %d previous AI hints)",
            len(rows),
            exercise.id,
            removed,
        )
        return rows

    async def generate_test_cases(self, user_id: str, data: GenerateTestCasesRequest) -> List[ExerciseTestCase]:
        """Generate test cases for an exercise, replacing its previous AI-generated ones."""
        exercise = self._get_exercise(data.exercise_id)
        prompt = ai_prompts.TEST_CASES_PROMPT.format(
            num_test_cases=data.num_test_cases,
            language=exercise.language,
            exercise_title=exercise.title,
            exercise_description=exercise.description,
            solution_code=_code_block(exercise.solution_code, exercise.language),
            format_rules=ai_prompts.JSON_FORMAT_RULES,
        )
        drafts, response = await self._chat_json(
            user_id,
            ai_prompts.TEST_CASES_SYSTEM,
            prompt,
            as_test_cases,
            temperature=0.6,
            max_tokens=2500,
            provider_id=data.provider_id,
            what="test cases",
        )

        rows = []
        with transaction(self.db):
            removed = (
                self.db.query(ExerciseTestCase)
                .filter(
                    ExerciseTestCase.exercise_id == exercise.id,
                    ExerciseTestCase.generated_by_ai.is_(True),
                )
                .delete(synchronize_session="fetch")
            )
            for i, tc in enumerate(drafts):
                row = ExerciseTestCase(
                    exercise_id=exercise.id,
                    test_name=tc.test_name,
                    test_type=tc.test_type,
                    input_data=tc.input_data,
                    expected_output=tc.expected_output,
                    is_hidden=(tc.test_type == "hidden"),
                    points=1,
                    order_index=i,
                    generated_by_ai=True,
                    ai_provider_id=response.provider_id,
                    ai_model=response.model,
                    created_by=user_id,
                )
                self.db.add(row)
                rows.append(row)

        logger.info(
            "Generated %d test cases for exercise %s (replaced %d previous AI test cases)",
            len(rows),
            exercise.id,
            removed,
        )
        return rows

    async def generate_curriculum_topics(
        self, user_id: str, data: GenerateTopicsRequest
    ) -> List[TopicSuggestion]:
        """Suggest topics for a curriculum. Suggestions are returned, not stored."""
        curriculum = self.db.query(Curriculum).filter(Curriculum.id == data.curriculum_id).first()
        if curriculum is None:
            raise NotFound("Curriculum", data.curriculum_id)
        prompt = ai_prompts.TOPICS_PROMPT.format(
            num_topics=data.num_topics,
            domain=curriculum.domain,
            curriculum_title=curriculum.title,
            curriculum_description=curriculum.description or "",
            level=curriculum.difficulty_level,
            format_rules=ai_prompts.JSON_FORMAT_RULES,
        )
        topics, _ = await self._chat_json(
            user_id,
            ai_prompts.TOPICS_SYSTEM,
            prompt,
            as_topics,
            temperature=0.7,
            max_tokens=3000,
            provider_id=data.provider_id,
            what="curriculum topics",
        )
        logger.info(
            "Generated %d curriculum topics for curriculum %s (domain=%s)",
            len(topics),
            curriculum.id,
            curriculum.domain,
        )
        return topics

    async def generate_learning_objectives(self, user_id: str, data: GenerateObjectivesRequest) -> List[str]:
        """Suggest learning objectives for a topic. Objectives are returned, not stored."""
        topic = self._get_topic(data.topic_id)
        prompt = ai_prompts.OBJECTIVES_PROMPT.format(
            num_objectives=data.num_objectives,
            topic_title=topic.title,
            topic_details=describe_topic(topic),
            level=topic.difficulty_level,
            format_rules=ai_prompts.JSON_FORMAT_RULES,
        )
        objectives, _ = await self._chat_json(
            user_id,
            ai_prompts.OBJECTIVES_SYSTEM,
            prompt,
            as_objectives,
            temperature=0.6,
            max_tokens=1500,
            provider_id=data.provider_id,
            what="learning objectives",
        )
        logger.info("Generated %d learning objectives for topic %s", len(objectives), topic.id)
        return objectives

    async def review_topic(self, user_id: str, topic_id: str, provider_id: Optional[str] = None) -> TopicReview:
        """Run an AI quality review of a topic with its objectives, exercises and quizzes and store it."""
        topic = self._get_topic(topic_id)
        context = _topic_context(topic)
        prompt = ai_prompts.REVIEW_PROMPT.format(
            topic_title=topic.title,
            topic_description=topic.description or "",
            topic_content=topic.content or "",
            objectives=context["objectives"],
            exercises=context["exercises"],
            quizzes=context["quizzes"],
            format_rules=ai_prompts.JSON_FORMAT_RULES,
        )
        draft, response = await self._chat_json(
            user_id,
            ai_prompts.REVIEW_SYSTEM,
            prompt,
            as_topic_review,
            temperature=0.4,
            max_tokens=3000,
            provider_id=provider_id,
            what="topic review",
        )

        objectives_count, exercises_count, quizzes_count = context["counts"]
        with transaction(self.db):
            review = TopicReview(
                topic_id=topic.id,
                overall_score=draft.overall_score,
                summary=draft.summary,
                findings=[f.model_dump(by_alias=True) for f in draft.findings],
                generated_by_ai=True,
                ai_provider_id=response.provider_id,
                ai_model=response.model,
                reviewed_by=user_id,
                objectives_count=objectives_count,
                exercises_count=exercises_count,
                quizzes_count=quizzes_count,
            )
            self.db.add(review)
        self.db.refresh(review)

        logger.info(
            "Reviewed topic %s: score=%d findings=%d",
            topic.id,
            review.overall_score,
            len(draft.findings),
        )
        return review

    async def deep_dive_finding(
        self,
        user_id: str,
        topic_id: str,
        finding: ReviewFinding,
        provider_id: Optional[str] = None,
    ) -> FindingDeepDive:
        """Expand one review finding into a detailed description and suggestion. Not stored."""
        topic = self._get_topic(topic_id)
        context = _topic_context(topic)
        prompt = ai_prompts.DEEP_DIVE_PROMPT.format(
            topic_title=topic.title,
            topic_content=topic.content or topic.description or "",
            objectives=context["objectives"],
            exercises=context["exercises"],
            quizzes=context["quizzes"],
            category=finding.category,
            severity=finding.severity,
            finding_title=finding.title,
            finding_description=finding.description,
            affected_items=", ".join(finding.affected_items) or "None",
            suggestion=finding.suggestion or "None",
            format_rules=ai_prompts.JSON_FORMAT_RULES,
        )
        result, _ = await self._chat_json(
            user_id,
            ai_prompts.DEEP_DIVE_SYSTEM,
            prompt,
            as_deep_dive,
            temperature=0.5,
            max_tokens=2000,
            provider_id=provider_id,
            what="finding deep-dive",
        )
        logger.info("Deep-dive completed for finding %r on topic %s", finding.title, topic.id)
        return result


def get_content_generator(db: Session) -> AIContentGeneratorService:
    """Get a content generator bound to the given session."""
    return AIContentGeneratorService(db)
