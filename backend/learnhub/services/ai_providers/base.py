"""
Base class shared by the vendor adapters: request validation, token
estimation, model resolution and vendor error normalization.
"""

import json
import math
from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx

from learnhub.core.errors import InvalidRequest, ProviderRequestFailed
from learnhub.core.logging import get_logger
from learnhub.schemas.chat import VALID_ROLES, ChatCompletionRequest, ChatCompletionResponse

logger = get_logger()

DEFAULT_TEMPERATURE = 0.7


def _http_error_message(status_code: int) -> str:
    """Return a user-friendly message for HTTP errors without a usable body."""
    if status_code == 401:
        return "Invalid API key or unauthorized. Check your API key."
    if status_code == 403:
        return "Access forbidden. Check your API key and permissions."
    if status_code == 404:
        return "Endpoint or model not found. Check the endpoint URL and model."
    if status_code == 429:
        return "Rate limit exceeded. Try again later."
    if 400 <= status_code < 500:
        return f"Request failed ({status_code}). Check endpoint and API key."
    if status_code >= 500:
        return f"Provider server error ({status_code}). Try again later."
    return f"Request failed (HTTP {status_code})."


def http_error_detail(response: httpx.Response) -> str:
    """Extract the vendor's error message from an error response."""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        err = data.get("error")
        if isinstance(err, str) and err:
            return err
        if isinstance(err, dict):
            return err.get("message") or json.dumps(err)
    text = response.text.strip()
    if text and len(text) < 500:
        return text
    return _http_error_message(response.status_code)


def validate_chat_request(request: ChatCompletionRequest) -> None:
    """Check a canonical request before any network call; raise InvalidRequest on violation."""
    if not request.messages:
        raise InvalidRequest("Messages array is required and cannot be empty")
    for message in request.messages:
        if not message.role or not message.content:
            raise InvalidRequest("Each message must have a role and content")
        if message.role not in VALID_ROLES:
            raise InvalidRequest(f"Invalid message role: {message.role}")
    if request.temperature is not None and not 0 <= request.temperature <= 2:
        raise InvalidRequest("Temperature must be between 0 and 2")
    if request.max_tokens is not None and request.max_tokens < 1:
        raise InvalidRequest("max_tokens must be greater than 0")


class BaseProviderAdapter(ABC):
    """Base class for all vendor adapters."""

    # Human-readable vendor label used in log lines and error messages
    provider_label = "AI"
    default_model: Optional[str] = None

    def __init__(
        self,
        api_key: Optional[str],
        api_endpoint: Optional[str],
        config_metadata: Optional[Dict[str, Any]] = None,
        *,
        timeout: float = 60,
        default_max_tokens: int = 4096,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            api_key: Decrypted vendor API key (None for local vendors)
            api_endpoint: Vendor base URL; None means the vendor's public endpoint
            config_metadata: Provider settings (defaultModel, apiMode, ...)
            timeout: Request timeout in seconds
            default_max_tokens: Output token cap for vendors that require one
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.api_key = api_key
        self.api_endpoint = api_endpoint.rstrip("/") if api_endpoint else None
        self.config = config_metadata or {}
        self.timeout = timeout
        self.default_max_tokens = default_max_tokens
        self._transport = transport

    @abstractmethod
    async def send_chat_completion(self, request: ChatCompletionRequest) -> ChatCompletionResponse:
        pass

    @abstractmethod
    def stream_chat_completion(self, request: ChatCompletionRequest) -> AsyncIterator[str]:
        pass

    @abstractmethod
    async def test_connection(self) -> bool:
        pass

    @abstractmethod
    async def list_models(self) -> List[str]:
        pass

    def validate_request(self, request: ChatCompletionRequest) -> None:
        validate_chat_request(request)

    @staticmethod
    def estimate_tokens(text: str) -> int:
        """Rough token estimate: about 4 characters per token for English text."""
        return math.ceil(len(text) / 4)

    def estimate_prompt_tokens(self, request: ChatCompletionRequest) -> int:
        return self.estimate_tokens(" ".join(m.content for m in request.messages))

    def resolve_model(self, request: ChatCompletionRequest) -> Optional[str]:
        return request.model or self.config.get("defaultModel") or self.default_model

    def _client(self, base_url: str, headers: Optional[Dict[str, str]] = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=self.timeout,
            transport=self._transport,
        )

    def _log_info(self, method: str, message: str, *args: Any) -> None:
        logger.info(f"[{self.provider_label}] {method}: {message}", *args)

    def _failure(self, method: str, error: Exception) -> ProviderRequestFailed:
        """Normalize any vendor-side exception into ProviderRequestFailed."""
        if isinstance(error, ProviderRequestFailed):
            return error
        if isinstance(error, httpx.HTTPStatusError):
            message = http_error_detail(error.response)
        elif isinstance(error, httpx.TimeoutException):
            message = f"Request timed out after {self.timeout}s"
        elif isinstance(error, httpx.ConnectError):
            message = f"Cannot connect to {self.api_endpoint or 'vendor endpoint'}"
        else:
            message = str(error) or error.__class__.__name__
        logger.error("[%s] %s failed: %s", self.provider_label, method, message)
        return ProviderRequestFailed(self.provider_label, message)
