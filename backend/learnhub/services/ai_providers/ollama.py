"""
Ollama adapter using the native API (/api/chat, /api/tags) over httpx.
"""

import json
import time
from typing import Any, AsyncIterator, Dict, List

from learnhub.core.logging import get_logger
from learnhub.schemas.chat import ChatCompletionRequest, ChatCompletionResponse, TokenUsage
from learnhub.services.ai_providers.base import DEFAULT_TEMPERATURE, BaseProviderAdapter

logger = get_logger()


class OllamaAdapter(BaseProviderAdapter):
    """Self-hosted Ollama server. Requires an endpoint such as http://localhost:11434."""

    provider_label = "Ollama"

    def _model_or_fail(self, request: ChatCompletionRequest) -> str:
        model = self.resolve_model(request)
        if not model:
            raise ValueError("No model specified. Please configure a default model for this provider.")
        return model

    def _payload(self, request: ChatCompletionRequest, stream: bool) -> Dict[str, Any]:
        options: Dict[str, Any] = {
            "temperature": request.temperature if request.temperature is not None else DEFAULT_TEMPERATURE,
        }
        if request.max_tokens is not None:
            options["num_predict"] = request.max_tokens
        return {
            "model": self._model_or_fail(request),
            "messages": [{"role": m.role, "content": m.content} for m in request.messages],
            "stream": stream,
            "options": options,
        }

    async def send_chat_completion(self, request: ChatCompletionRequest) -> ChatCompletionResponse:
        self.validate_request(request)
        start = time.monotonic()
        try:
            payload = self._payload(request, stream=False)
            async with self._client(self.api_endpoint) as client:
                r = await client.post("/api/chat", json=payload)
                r.raise_for_status()
                data = r.json()
        except Exception as e:
            raise self._failure("sendChatCompletion", e) from e
        latency_ms = int((time.monotonic() - start) * 1000)

        content = (data.get("message") or {}).get("content") or ""
        prompt_tokens = data.get("prompt_eval_count") or self.estimate_prompt_tokens(request)
        completion_tokens = data.get("eval_count") or self.estimate_tokens(content)
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
            finish_reason="stop" if data.get("done") else "length",
            latency_ms=latency_ms,
        )

    async def stream_chat_completion(self, request: ChatCompletionRequest) -> AsyncIterator[str]:
        self.validate_request(request)
        try:
            payload = self._payload(request, stream=True)
            async with self._client(self.api_endpoint) as client:
                async with client.stream("POST", "/api/chat", json=payload) as r:
                    if r.status_code >= 400:
                        await r.aread()
                        r.raise_for_status()
                    # Newline-delimited JSON, one object per chunk
                    async for line in r.aiter_lines():
                        if not line.strip():
                            continue
                        chunk = json.loads(line)
                        if chunk.get("error"):
                            raise ValueError(chunk["error"])
                        content = (chunk.get("message") or {}).get("content")
                        if content:
                            yield content
                        if chunk.get("done"):
                            break
        except Exception as e:
            raise self._failure("streamChatCompletion", e) from e
        self._log_info("streamChatCompletion", "Stream completed successfully")

    async def test_connection(self) -> bool:
        try:
            await self._fetch_tags()
        except Exception as e:
            logger.warning("[%s] testConnection failed: %s", self.provider_label, e)
            return False
        self._log_info("testConnection", "Connection test successful")
        return True

    async def list_models(self) -> List[str]:
        try:
            models = await self._fetch_tags()
        except Exception as e:
            raise self._failure("getAvailableModels", e) from e
        self._log_info("getAvailableModels", "Found %d models", len(models))
        return models

    async def _fetch_tags(self) -> List[str]:
        async with self._client(self.api_endpoint) as client:
            r = await client.get("/api/tags")
            r.raise_for_status()
            data = r.json()
        names = [m.get("name") or m.get("model") for m in data.get("models") or []]
        return [n for n in names if n]
