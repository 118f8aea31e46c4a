"""
Canonical, vendor-agnostic chat completion types.

These are deliberately unconstrained: adapters validate requests before
dispatch (BaseProviderAdapter.validate_request) so that a malformed request
surfaces as InvalidRequest rather than a schema error.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


VALID_ROLES = ("system", "user", "assistant")


class ChatMessage(BaseModel):
    """A single chat message."""

    role: str
    content: str


class ChatCompletionRequest(BaseModel):
    """Canonical chat completion request."""

    messages: List[ChatMessage] = Field(default_factory=list)
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    model: Optional[str] = None


class TokenUsage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatCompletionResponse(BaseModel):
    """Canonical chat completion response."""

    content: str
    model: str
    usage: TokenUsage = Field(default_factory=TokenUsage)
    finish_reason: str = "stop"
    latency_ms: int = 0
    # Set by AIGatewayService to the provider config that served the call
    provider_id: Optional[str] = None


class ChatRequest(ChatCompletionRequest):
    """Body of POST /ai/chat: a canonical request plus an optional provider."""

    provider_id: Optional[str] = None
