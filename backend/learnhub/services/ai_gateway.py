"""
AI gateway: resolves which provider and model serve a request, calls the
vendor adapter and records usage and cost for every call.
"""

import time
from typing import AsyncIterator, Callable, Optional

from sqlalchemy.orm import Session

from learnhub.core.errors import NoDefaultProvider, ProviderInactive, ProviderNotFound
from learnhub.core.logging import get_logger
from learnhub.models import AIModel, AIProviderConfig
from learnhub.schemas.chat import ChatCompletionRequest, ChatCompletionResponse, TokenUsage
from learnhub.services.ai_providers import create_adapter
from learnhub.services.ai_providers.interface import ProviderAdapter
from learnhub.services.ai_providers.base import validate_chat_request
from learnhub.services.provider_repository import AIProviderRepository

logger = get_logger()

AdapterFactory = Callable[[AIProviderConfig], ProviderAdapter]


def calculate_cost(usage: TokenUsage, model: Optional[AIModel]) -> Optional[float]:
    """
    Cost in USD: prompt_tokens/1000 * input price + completion_tokens/1000 * output price.

    Returns None when the model is unknown or has no pricing configured.
    """
    if model is None:
        return None
    pricing = model.pricing_info or {}
    input_price = pricing.get("input_per_1k")
    output_price = pricing.get("output_per_1k")
    if input_price is None and output_price is None:
        return None
    cost = (usage.prompt_tokens / 1000) * (input_price or 0) + (usage.completion_tokens / 1000) * (
        output_price or 0
    )
    return round(cost, 8)


class AIGatewayService:
    """
    Single entry point for chat completions on behalf of a user.

    The repository and adapter factory are injected so the gateway can be
    exercised without a live vendor.
    """

    def __init__(self, repository: AIProviderRepository, adapter_factory: AdapterFactory = create_adapter):
        self.repository = repository
        self.adapter_factory = adapter_factory

    def resolve_provider(self, user_id: str, provider_id: Optional[str] = None) -> AIProviderConfig:
        """
        Return the provider config to use: the explicit one (owned by user_id)
        or the user's default.

        Raises:
            ProviderNotFound: provider_id is missing or owned by another user.
            NoDefaultProvider: No provider_id and the user has no default.
            ProviderInactive: The resolved provider is switched off.
        """
        if provider_id:
            provider = self.repository.get_provider(provider_id, user_id)
            if provider is None:
                raise ProviderNotFound(provider_id)
        else:
            provider = self.repository.get_default_provider(user_id)
            if provider is None:
                raise NoDefaultProvider()
        if not provider.is_active:
            raise ProviderInactive(provider.provider_name)
        return provider

    def resolve_model(self, provider: AIProviderConfig, request: ChatCompletionRequest) -> Optional[str]:
        """
        Explicit request model, else the provider's default descriptor.
        None leaves the choice to the adapter (config defaultModel, then its built-in default).
        """
        if request.model:
            return request.model
        default_model = self.repository.get_default_model(provider.id)
        return default_model.model_id if default_model else None

    async def send_chat_completion(
        self,
        user_id: str,
        request: ChatCompletionRequest,
        provider_id: Optional[str] = None,
    ) -> ChatCompletionResponse:
        """
        Send a chat completion for user_id and log usage.

        Exactly one usage record is written per call that reaches the adapter
        stage, whether it succeeds or fails. Malformed requests are rejected
        before that stage and leave no record. Errors are re-raised unchanged.
        """
        provider = self.resolve_provider(user_id, provider_id)
        model = self.resolve_model(provider, request)
        resolved_request = request.model_copy(update={"model": model})
        validate_chat_request(resolved_request)

        start = time.monotonic()
        try:
            adapter = self.adapter_factory(provider)
            response = await adapter.send_chat_completion(resolved_request)
        except Exception as e:
            latency_ms = int((time.monotonic() - start) * 1000)
            logger.error(
                "Chat completion failed: user=%s provider=%s error=%s",
                user_id,
                provider.provider_name,
                e,
            )
            self._log_failure(user_id, provider, latency_ms, e)
            raise
        latency_ms = int((time.monotonic() - start) * 1000)

        descriptor = self.repository.find_model(provider.id, response.model)
        if descriptor is None and model and model != response.model:
            # Vendors often answer with a dated variant of the requested model
            descriptor = self.repository.find_model(provider.id, model)
        cost = calculate_cost(response.usage, descriptor)
        try:
            self.repository.log_usage(
                user_id=user_id,
                provider_id=provider.id,
                model_id=descriptor.id if descriptor else None,
                request_tokens=response.usage.prompt_tokens,
                response_tokens=response.usage.completion_tokens,
                total_tokens=response.usage.total_tokens,
                latency_ms=latency_ms,
                cost_usd=cost,
            )
        except Exception as log_error:
            logger.warning("Failed to record AI usage for provider %s: %s", provider.id, log_error)

        logger.info(
            "Chat completion successful: user=%s provider=%s model=%s tokens=%s latency_ms=%s",
            user_id,
            provider.provider_name,
            response.model,
            response.usage.total_tokens,
            latency_ms,
        )
        response.provider_id = provider.id
        return response

    async def stream_chat_completion(
        self,
        user_id: str,
        request: ChatCompletionRequest,
        provider_id: Optional[str] = None,
    ) -> AsyncIterator[str]:
        """
        Resolve provider and model, then return an iterator of text deltas.

        Resolution and validation errors, and a vendor failure before the
        first delta, are raised here so callers can still answer with a
        proper error status. No usage is recorded for streams.
        """
        provider = self.resolve_provider(user_id, provider_id)
        model = self.resolve_model(provider, request)
        adapter = self.adapter_factory(provider)
        resolved_request = request.model_copy(update={"model": model})
        adapter.validate_request(resolved_request)

        deltas = adapter.stream_chat_completion(resolved_request)
        try:
            first = await deltas.__anext__()
        except StopAsyncIteration:
            first = None
        except Exception as e:
            logger.error(
                "Stream completion failed: user=%s provider=%s error=%s",
                user_id,
                provider.provider_name,
                e,
            )
            raise
        return self._relay_stream(deltas, first, user_id, provider)

    async def _relay_stream(
        self,
        deltas: AsyncIterator[str],
        first: Optional[str],
        user_id: str,
        provider: AIProviderConfig,
    ) -> AsyncIterator[str]:
        if first is None:
            logger.info("Stream completion returned no content: user=%s provider=%s", user_id, provider.provider_name)
            return
        yield first
        try:
            async for delta in deltas:
                yield delta
        except Exception as e:
            logger.error(
                "Stream completion failed: user=%s provider=%s error=%s",
                user_id,
                provider.provider_name,
                e,
            )
            raise
        logger.info("Stream completion successful: user=%s provider=%s", user_id, provider.provider_name)

    def _log_failure(self, user_id: str, provider: AIProviderConfig, latency_ms: int, error: Exception) -> None:
        """Best-effort usage record for a failed call; never masks the original error."""
        try:
            default_model = self.repository.get_default_model(provider.id)
            self.repository.log_usage(
                user_id=user_id,
                provider_id=provider.id,
                model_id=default_model.id if default_model else None,
                latency_ms=latency_ms,
                error_message=str(error) or error.__class__.__name__,
            )
        except Exception as log_error:
            logger.warning("Failed to record failed AI call for provider %s: %s", provider.id, log_error)


def get_ai_gateway(db: Session) -> AIGatewayService:
    """Get a gateway bound to the given session."""
    return AIGatewayService(AIProviderRepository(db))
