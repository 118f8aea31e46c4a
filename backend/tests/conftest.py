"""
Test configuration and fixtures
"""

import os
import sys
import tempfile
from typing import List, Optional

import pytest

# Add backend to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Keep logs and any SQLite files out of the source tree
os.environ.setdefault("LOGS_DIR", tempfile.mkdtemp(prefix="learnhub-logs-"))
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="learnhub-data-"))

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from learnhub.core.database import Base, _enable_sqlite_foreign_keys
from learnhub.models import Curriculum, Exercise, LearningObjective, Topic, User
from learnhub.models.ai_provider import ProviderType
from learnhub.schemas.ai_provider import ProviderCreate
from learnhub.schemas.chat import ChatCompletionRequest, ChatCompletionResponse, TokenUsage
from learnhub.services.ai_gateway import AIGatewayService
from learnhub.services.ai_providers.base import validate_chat_request
from learnhub.services.provider_repository import AIProviderRepository

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


@pytest.fixture
def engine():
    """In-memory SQLite shared by every connection of the test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    import learnhub.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def repo(db):
    return AIProviderRepository(db)


@pytest.fixture
def provider(repo):
    """USER_ID's default OpenAI provider with the predefined model catalog."""
    return repo.create_provider(
        USER_ID,
        ProviderCreate(
            provider_type=ProviderType.OPENAI,
            provider_name="My OpenAI",
            api_key="sk-test",
        ),
    )


@pytest.fixture
def other_provider(repo):
    """A provider owned by OTHER_USER_ID."""
    return repo.create_provider(
        OTHER_USER_ID,
        ProviderCreate(
            provider_type=ProviderType.OPENAI,
            provider_name="Someone else's OpenAI",
            api_key="sk-other",
        ),
    )


@pytest.fixture
def curriculum(db, repo):
    repo.ensure_user(USER_ID)
    curriculum = Curriculum(
        title="JavaScript Fundamentals",
        description="Core language features for new developers",
        domain="programming",
        difficulty_level="beginner",
        created_by=USER_ID,
    )
    db.add(curriculum)
    db.commit()
    return curriculum


@pytest.fixture
def topic(db, curriculum):
    topic = Topic(
        curriculum_id=curriculum.id,
        title="Arrays",
        description="Working with arrays",
        content="Arrays hold ordered values. Use push() to append and length to count.",
        difficulty_level="beginner",
    )
    db.add(topic)
    db.flush()
    db.add(LearningObjective(topic_id=topic.id, objective_text="Append values to an array", order_index=0))
    db.commit()
    return topic


@pytest.fixture
def exercise(db, topic):
    exercise = Exercise(
        topic_id=topic.id,
        title="Sum an array",
        description="Add up all numbers in an array",
        instructions="Implement sum(numbers)",
        language="javascript",
        difficulty_level="beginner",
        starter_code="function sum(numbers) {\n  // TODO\n}",
        solution_code="function sum(numbers) {\n  return numbers.reduce((a, b) => a + b, 0);\n}",
        created_by=USER_ID,
    )
    db.add(exercise)
    db.commit()
    return exercise


class ScriptedAdapter:
    """
    Adapter double that replies with canned content, one reply per call.
    Records every request it receives.
    """

    def __init__(self, replies: List[str], model: str = "gpt-4", usage: Optional[TokenUsage] = None):
        self.replies = list(replies)
        self.model = model
        self.usage = usage or TokenUsage(prompt_tokens=100, completion_tokens=50, total_tokens=150)
        self.requests: List[ChatCompletionRequest] = []

    def validate_request(self, request: ChatCompletionRequest) -> None:
        validate_chat_request(request)

    async def send_chat_completion(self, request: ChatCompletionRequest) -> ChatCompletionResponse:
        self.requests.append(request)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return ChatCompletionResponse(content=reply, model=self.model, usage=self.usage)

    async def stream_chat_completion(self, request: ChatCompletionRequest):
        self.requests.append(request)
        for reply in self.replies:
            if isinstance(reply, Exception):
                raise reply
            yield reply

    async def test_connection(self) -> bool:
        return True

    async def list_models(self) -> List[str]:
        return [self.model]


@pytest.fixture
def scripted_gateway(repo):
    """
    Build a gateway whose adapter factory returns a ScriptedAdapter.

    Usage:
        gateway, adapter = scripted_gateway(['["a", "b"]'])
    """

    def build(replies, **kwargs):
        adapter = ScriptedAdapter(replies, **kwargs)
        return AIGatewayService(repo, adapter_factory=lambda config: adapter), adapter

    return build
