"""
Anthropic adapter using the native Messages API (/v1/messages) over httpx.
"""

import json
import time
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

from learnhub.core.errors import ProviderRequestFailed
from learnhub.core.logging import get_logger
from learnhub.schemas.chat import ChatCompletionRequest, ChatCompletionResponse, TokenUsage
from learnhub.services.ai_providers.base import DEFAULT_TEMPERATURE, BaseProviderAdapter

logger = get_logger()

ANTHROPIC_BASE_URL = "https://api.anthropic.com"
ANTHROPIC_VERSION = "2023-06-01"

# Anthropic has no model discovery endpoint for these models
KNOWN_MODELS = [
    "claude-3-opus-20240229",
    "claude-3-sonnet-20240229",
    "claude-3-haiku-20240307",
    "claude-2.1",
    "claude-2.0",
]

PROBE_MODEL = "claude-3-haiku-20240307"


class AnthropicAdapter(BaseProviderAdapter):
    """Claude models via the Messages API."""

    provider_label = "Anthropic"
    default_model = "claude-3-sonnet-20240229"

    def __init__(self, api_key: Optional[str], api_endpoint: Optional[str] = None, config_metadata=None, **kwargs):
        super().__init__(api_key, api_endpoint, config_metadata, **kwargs)
        if not api_key:
            raise ProviderRequestFailed(self.provider_label, "API key is required")

    def _headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }

    @staticmethod
    def split_system(request: ChatCompletionRequest) -> Tuple[Optional[str], List[Dict[str, str]]]:
        """Hoist system messages into the separate system field Anthropic expects."""
        system_parts = [m.content for m in request.messages if m.role == "system"]
        conversation = [
            {"role": m.role, "content": m.content} for m in request.messages if m.role != "system"
        ]
        return ("\n\n".join(system_parts) or None), conversation

    def _payload(self, request: ChatCompletionRequest, stream: bool = False) -> Dict[str, Any]:
        system, conversation = self.split_system(request)
        payload: Dict[str, Any] = {
            "model": self.resolve_model(request),
            "max_tokens": request.max_tokens or self.default_max_tokens,
            "temperature": request.temperature if request.temperature is not None else DEFAULT_TEMPERATURE,
            "messages": conversation,
        }
        if system:
            payload["system"] = system
        if stream:
            payload["stream"] = True
        return payload

    async def send_chat_completion(self, request: ChatCompletionRequest) -> ChatCompletionResponse:
        self.validate_request(request)
        start = time.monotonic()
        payload = self._payload(request)
        try:
            async with self._client(self.api_endpoint or ANTHROPIC_BASE_URL, self._headers()) as client:
                r = await client.post("/v1/messages", json=payload)
                r.raise_for_status()
                data = r.json()
            blocks = data.get("content") or []
            if not blocks:
                raise ValueError("No response from Anthropic")
            text_block = next((b for b in blocks if b.get("type") == "text"), None)
            if text_block is None:
                raise ValueError("No text content in Anthropic response")
        except Exception as e:
            raise self._failure("sendChatCompletion", e) from e
        latency_ms = int((time.monotonic() - start) * 1000)

        content = text_block.get("text") or ""
        usage = data.get("usage") or {}
        prompt_tokens = usage.get("input_tokens")
        completion_tokens = usage.get("output_tokens")
        if prompt_tokens is None:
            prompt_tokens = self.estimate_prompt_tokens(request)
        if completion_tokens is None:
            completion_tokens = self.estimate_tokens(content)
        model = data.get("model") or payload["model"]
        self._log_info(
            "sendChatCompletion",
            "Completed successfully (model=%s, tokens=%s, latency_ms=%s)",
            model,
            prompt_tokens + completion_tokens,
            latency_ms,
        )
        return ChatCompletionResponse(
            content=content,
            model=model,
            usage=TokenUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            ),
            finish_reason=data.get("stop_reason") or "end_turn",
            latency_ms=latency_ms,
        )

    async def stream_chat_completion(self, request: ChatCompletionRequest) -> AsyncIterator[str]:
        self.validate_request(request)
        payload = self._payload(request, stream=True)
        try:
            async with self._client(self.api_endpoint or ANTHROPIC_BASE_URL, self._headers()) as client:
                async with client.stream("POST", "/v1/messages", json=payload) as r:
                    if r.status_code >= 400:
                        await r.aread()
                        r.raise_for_status()
                    async for line in r.aiter_lines():
                        # Server-sent events: only the data lines carry JSON
                        if not line.startswith("data:"):
                            continue
                        event = json.loads(line[5:].strip())
                        if event.get("type") == "error":
                            raise ValueError((event.get("error") or {}).get("message") or "stream error")
                        if event.get("type") != "content_block_delta":
                            continue
                        delta = event.get("delta") or {}
                        if delta.get("type") == "text_delta" and delta.get("text"):
                            yield delta["text"]
        except Exception as e:
            raise self._failure("streamChatCompletion", e) from e
        self._log_info("streamChatCompletion", "Stream completed successfully")

    async def test_connection(self) -> bool:
        probe = {
            "model": self.config.get("defaultModel") or PROBE_MODEL,
            "max_tokens": 10,
            "messages": [{"role": "user", "content": "Hi"}],
        }
        try:
            async with self._client(self.api_endpoint or ANTHROPIC_BASE_URL, self._headers()) as client:
                r = await client.post("/v1/messages", json=probe)
                r.raise_for_status()
        except Exception as e:
            logger.warning("[%s] testConnection failed: %s", self.provider_label, e)
            return False
        self._log_info("testConnection", "Connection test successful")
        return True

    async def list_models(self) -> List[str]:
        self._log_info("getAvailableModels", "Returning %d known models", len(KNOWN_MODELS))
        return list(KNOWN_MODELS)
