"""
AI provider configuration, model descriptors and usage logs.
API keys are encrypted before storage (see learnhub.core.security).
"""

from enum import Enum

from sqlalchemy import (
    Column,
    String,
    Text,
    Boolean,
    Integer,
    Float,
    ForeignKey,
    JSON,
    Index,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import relationship

from learnhub.core.database import Base
from learnhub.models.base import uuid_pk, created_at_column, updated_at_column


class ProviderType(str, Enum):
    """Supported AI vendors."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    OLLAMA = "ollama"
    LMSTUDIO = "lmstudio"


LOCAL_PROVIDER_TYPES = (ProviderType.OLLAMA.value, ProviderType.LMSTUDIO.value)


class ModelType(str, Enum):
    CHAT = "chat"
    COMPLETION = "completion"
    EMBEDDING = "embedding"


class AIProviderConfig(Base):
    """
    A user's configured AI provider (e.g. "My OpenAI", "Local Llama").

    At most one config per user carries is_default; the partial unique index
    enforces it at the database level and AIProviderRepository unsets the
    previous default before setting a new one.
    """

    __tablename__ = "ai_providers"
    __table_args__ = (
        Index(
            "uq_ai_providers_default_per_user",
            "user_id",
            unique=True,
            sqlite_where=text("is_default = 1"),
            postgresql_where=text("is_default"),
        ),
    )

    id = uuid_pk()
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    provider_type = Column(String(50), nullable=False)
    provider_name = Column(String(100), nullable=False)
    api_key_encrypted = Column(Text, nullable=True)  # null for local LLMs
    api_endpoint = Column(Text, nullable=True)  # required for ollama / lmstudio
    is_active = Column(Boolean, nullable=False, default=True)
    is_default = Column(Boolean, nullable=False, default=False)
    # Provider-specific settings: timeout (seconds), defaultModel, maxRetries, apiMode
    config_metadata = Column(JSON, nullable=False, default=dict)
    created_at = created_at_column()
    updated_at = updated_at_column()

    user = relationship("User", back_populates="ai_providers")
    models = relationship(
        "AIModel",
        back_populates="provider",
        cascade="all, delete-orphan",
        order_by="AIModel.created_at",
    )

    def __repr__(self) -> str:
        return f"<AIProviderConfig(id={self.id}, type={self.provider_type}, name={self.provider_name})>"


class AIModel(Base):
    """Model available on a configured provider, with capabilities and pricing."""

    __tablename__ = "ai_models"
    __table_args__ = (
        UniqueConstraint("provider_id", "model_id", name="uq_ai_models_provider_model"),
        Index(
            "uq_ai_models_default_per_provider",
            "provider_id",
            unique=True,
            sqlite_where=text("is_default = 1"),
            postgresql_where=text("is_default"),
        ),
    )

    id = uuid_pk()
    provider_id = Column(String(36), ForeignKey("ai_providers.id", ondelete="CASCADE"), nullable=False, index=True)
    model_id = Column(String(100), nullable=False)  # vendor identifier, e.g. "gpt-4"
    model_name = Column(String(100), nullable=False)
    model_type = Column(String(20), nullable=False, default=ModelType.CHAT.value)
    capabilities = Column(JSON, nullable=False, default=dict)  # function_calling, vision, json_mode
    pricing_info = Column(JSON, nullable=False, default=dict)  # input_per_1k, output_per_1k (USD)
    max_tokens = Column(Integer, nullable=True)  # context window
    is_available = Column(Boolean, nullable=False, default=True)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = created_at_column()
    updated_at = updated_at_column()

    provider = relationship("AIProviderConfig", back_populates="models")

    def __repr__(self) -> str:
        return f"<AIModel(id={self.id}, model_id={self.model_id})>"


class AIUsageLog(Base):
    """Append-only record of one gateway call, successful or not."""

    __tablename__ = "ai_usage_logs"

    id = uuid_pk()
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    provider_id = Column(String(36), ForeignKey("ai_providers.id", ondelete="CASCADE"), nullable=False)
    model_id = Column(String(36), ForeignKey("ai_models.id", ondelete="SET NULL"), nullable=True)
    request_tokens = Column(Integer, nullable=False, default=0)
    response_tokens = Column(Integer, nullable=False, default=0)
    total_tokens = Column(Integer, nullable=False, default=0)
    latency_ms = Column(Integer, nullable=True)
    cost_usd = Column(Float, nullable=True)
    error_message = Column(Text, nullable=True)
    created_at = created_at_column()

    def __repr__(self) -> str:
        return f"<AIUsageLog(id={self.id}, tokens={self.total_tokens}, error={bool(self.error_message)})>"
