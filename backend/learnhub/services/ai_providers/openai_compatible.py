"""
OpenAI-compatible adapter: OpenAI itself, LM Studio, and Ollama when it is
configured with apiMode "openai". Chat goes through LiteLLM with the openai/
model prefix; model listing uses GET {base}/models.
"""

import time
from typing import Any, AsyncIterator, Dict, List, Optional

from learnhub.core.errors import ProviderRequestFailed
from learnhub.core.logging import get_logger
from learnhub.schemas.chat import ChatCompletionRequest, ChatCompletionResponse, TokenUsage
from learnhub.services.ai_providers._litellm import completion, stream_completion
from learnhub.services.ai_providers.base import DEFAULT_TEMPERATURE, BaseProviderAdapter

logger = get_logger()

OPENAI_BASE_URL = "https://api.openai.com/v1"

# Local servers ignore the key, but the OpenAI client refuses to send a request without one
LOCAL_PLACEHOLDER_KEY = "not-needed"


class OpenAICompatibleAdapter(BaseProviderAdapter):
    """Adapter for any server speaking the OpenAI chat completions protocol."""

    provider_label = "OpenAI"
    default_model = "gpt-3.5-turbo"

    def __init__(
        self,
        api_key: Optional[str],
        api_endpoint: Optional[str],
        config_metadata: Optional[Dict[str, Any]] = None,
        *,
        label: Optional[str] = None,
        local: bool = False,
        default_model: Optional[str] = None,
        model_prefix_filter: Optional[str] = None,
        **kwargs: Any,
    ):
        """
        Args:
            label: Vendor label for logs and errors (OpenAI, LM Studio, Ollama)
            local: True for self-hosted servers; api_endpoint is then the server
                root and /v1 is appended, and no API key is required
            default_model: Fallback model when neither request nor config names one
            model_prefix_filter: Only list models whose id starts with this prefix
        """
        super().__init__(api_key, api_endpoint, config_metadata, **kwargs)
        if label:
            self.provider_label = label
        if default_model:
            self.default_model = default_model
        self.local = local
        self.model_prefix_filter = model_prefix_filter
        if not local and not api_key:
            raise ProviderRequestFailed(self.provider_label, "API key is required")

    @property
    def base_url(self) -> str:
        if self.local:
            return f"{self.api_endpoint}/v1"
        return self.api_endpoint or OPENAI_BASE_URL

    def _litellm_kwargs(self, request: ChatCompletionRequest) -> Dict[str, Any]:
        return {
            "model": f"openai/{self.resolve_model(request)}",
            "messages": [{"role": m.role, "content": m.content} for m in request.messages],
            "api_base": self.base_url if (self.local or self.api_endpoint) else None,
            "api_key": self.api_key or LOCAL_PLACEHOLDER_KEY,
            "timeout": self.timeout,
            "temperature": request.temperature if request.temperature is not None else DEFAULT_TEMPERATURE,
            "max_tokens": request.max_tokens,
        }

    async def send_chat_completion(self, request: ChatCompletionRequest) -> ChatCompletionResponse:
        self.validate_request(request)
        start = time.monotonic()
        kwargs = self._litellm_kwargs(request)
        try:
            result = await completion(**kwargs)
        except Exception as e:
            raise self._failure("sendChatCompletion", e) from e
        latency_ms = int((time.monotonic() - start) * 1000)

        content = result.get("content") or ""
        usage = result.get("usage")
        if usage:
            token_usage = TokenUsage(**usage)
        else:
            # Local servers often omit usage; estimate from text length
            prompt_tokens = self.estimate_prompt_tokens(request)
            completion_tokens = self.estimate_tokens(content)
            token_usage = TokenUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            )
        model = result.get("model") or self.resolve_model(request)
        self._log_info(
            "sendChatCompletion",
            "Completed successfully (model=%s, tokens=%s, latency_ms=%s)",
            model,
            token_usage.total_tokens,
            latency_ms,
        )
        return ChatCompletionResponse(
            content=content,
            model=model,
            usage=token_usage,
            finish_reason=result.get("finish_reason") or "stop",
            latency_ms=latency_ms,
        )

    async def stream_chat_completion(self, request: ChatCompletionRequest) -> AsyncIterator[str]:
        self.validate_request(request)
        kwargs = self._litellm_kwargs(request)
        try:
            async for delta in stream_completion(**kwargs):
                yield delta
        except Exception as e:
            raise self._failure("streamChatCompletion", e) from e
        self._log_info("streamChatCompletion", "Stream completed successfully")

    async def test_connection(self) -> bool:
        try:
            await self._fetch_model_ids()
        except Exception as e:
            logger.warning("[%s] testConnection failed: %s", self.provider_label, e)
            return False
        self._log_info("testConnection", "Connection test successful")
        return True

    async def list_models(self) -> List[str]:
        try:
            ids = await self._fetch_model_ids()
        except Exception as e:
            raise self._failure("getAvailableModels", e) from e
        if self.model_prefix_filter:
            ids = [m for m in ids if m.startswith(self.model_prefix_filter)]
        self._log_info("getAvailableModels", "Found %d models", len(ids))
        return ids

    async def _fetch_model_ids(self) -> List[str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        async with self._client(self.base_url, headers) as client:
            r = await client.get("/models")
            r.raise_for_status()
            data = r.json()
        # OpenAI returns { data: [ { id: "gpt-4", ... } ] }
        raw = data.get("data") or data.get("models") or []
        ids = [(m.get("id") or m.get("model")) if isinstance(m, dict) else str(m) for m in raw if m]
        return [i for i in ids if i]
