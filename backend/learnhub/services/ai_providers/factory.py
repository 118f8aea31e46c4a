"""
Provider factory: builds a vendor adapter from a stored provider config.
"""

from typing import Any, Callable, Dict, List, Optional

import httpx

from learnhub.core.config import get_config
from learnhub.core.errors import MissingEndpoint, UnsupportedVendor
from learnhub.core.logging import get_logger
from learnhub.core.security import decrypt_api_key
from learnhub.models.ai_provider import AIProviderConfig, ProviderType
from learnhub.services.ai_providers.anthropic import AnthropicAdapter
from learnhub.services.ai_providers.base import BaseProviderAdapter
from learnhub.services.ai_providers.ollama import OllamaAdapter
from learnhub.services.ai_providers.openai_compatible import OpenAICompatibleAdapter

logger = get_logger()


def _openai(api_key, endpoint, metadata, **kwargs) -> BaseProviderAdapter:
    return OpenAICompatibleAdapter(api_key, endpoint, metadata, model_prefix_filter="gpt", **kwargs)


def _anthropic(api_key, endpoint, metadata, **kwargs) -> BaseProviderAdapter:
    return AnthropicAdapter(api_key, endpoint, metadata, **kwargs)


def _ollama(api_key, endpoint, metadata, **kwargs) -> BaseProviderAdapter:
    if (metadata or {}).get("apiMode") == "openai":
        return OpenAICompatibleAdapter(api_key, endpoint, metadata, label="Ollama", local=True, **kwargs)
    return OllamaAdapter(api_key, endpoint, metadata, **kwargs)


def _lmstudio(api_key, endpoint, metadata, **kwargs) -> BaseProviderAdapter:
    return OpenAICompatibleAdapter(
        api_key, endpoint, metadata, label="LM Studio", local=True, default_model="local-model", **kwargs
    )


_ADAPTER_MAP: Dict[str, Callable[..., BaseProviderAdapter]] = {
    ProviderType.OPENAI.value: _openai,
    ProviderType.ANTHROPIC.value: _anthropic,
    ProviderType.OLLAMA.value: _ollama,
    ProviderType.LMSTUDIO.value: _lmstudio,
}

_ENDPOINT_EXAMPLES = {
    ProviderType.OLLAMA.value: ("Ollama", "http://localhost:11434"),
    ProviderType.LMSTUDIO.value: ("LM Studio", "http://localhost:1234"),
}


def _default_timeout(provider_type: str) -> int:
    ai = get_config().ai
    if provider_type == ProviderType.OPENAI.value:
        return ai.openai_timeout
    if provider_type == ProviderType.ANTHROPIC.value:
        return ai.anthropic_timeout
    return ai.local_timeout


def create_adapter(
    config: AIProviderConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> BaseProviderAdapter:
    """
    Return an adapter for the given provider config.

    Decrypts the stored API key (if any) and selects the adapter by
    provider_type. Stateless apart from decryption.

    Raises:
        UnsupportedVendor: Unknown provider_type.
        MissingEndpoint: Ollama or LM Studio configured without an endpoint.
    """
    provider_type = (config.provider_type or "").strip().lower()
    builder = _ADAPTER_MAP.get(provider_type)
    if not builder:
        raise UnsupportedVendor(config.provider_type)

    endpoint = (config.api_endpoint or "").strip() or None
    if provider_type in _ENDPOINT_EXAMPLES and not endpoint:
        label, example = _ENDPOINT_EXAMPLES[provider_type]
        raise MissingEndpoint(f"{label} requires an API endpoint (e.g., {example})")

    api_key = decrypt_api_key(config.api_key_encrypted) if config.api_key_encrypted else None
    metadata: Dict[str, Any] = dict(config.config_metadata or {})
    timeout = metadata.get("timeout") or _default_timeout(provider_type)

    return builder(
        api_key,
        endpoint,
        metadata,
        timeout=float(timeout),
        default_max_tokens=get_config().ai.default_max_tokens,
        transport=transport,
    )


def list_provider_types() -> List[str]:
    """Return the supported provider types."""
    return list(_ADAPTER_MAP.keys())


async def test_provider(config: AIProviderConfig, transport: Optional[httpx.AsyncBaseTransport] = None) -> bool:
    """Return True if the provider answers a probe request. Never raises."""
    try:
        adapter = create_adapter(config, transport=transport)
        return await adapter.test_connection()
    except Exception as e:
        logger.warning("Provider test failed for %s: %s", config.id, e)
        return False


async def get_provider_models(
    config: AIProviderConfig, transport: Optional[httpx.AsyncBaseTransport] = None
) -> List[str]:
    """Return the model ids the vendor reports for this provider config."""
    adapter = create_adapter(config, transport=transport)
    return await adapter.list_models()
