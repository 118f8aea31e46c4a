"""
Tests for building adapters from stored provider configs.
"""

import httpx
import pytest

from learnhub.core.errors import MissingEndpoint, UnsupportedVendor
from learnhub.core.security import encrypt_api_key
from learnhub.models import AIProviderConfig
from learnhub.services.ai_providers import create_adapter, factory, list_provider_types
from learnhub.services.ai_providers.anthropic import AnthropicAdapter
from learnhub.services.ai_providers.ollama import OllamaAdapter
from learnhub.services.ai_providers.openai_compatible import OpenAICompatibleAdapter


def make_config(provider_type, api_key=None, endpoint=None, metadata=None) -> AIProviderConfig:
    return AIProviderConfig(
        id="provider-1",
        user_id="user-1",
        provider_type=provider_type,
        provider_name=f"My {provider_type}",
        api_key_encrypted=encrypt_api_key(api_key) if api_key else None,
        api_endpoint=endpoint,
        is_active=True,
        is_default=True,
        config_metadata=metadata or {},
    )


class TestCreateAdapter:
    def test_openai(self):
        adapter = create_adapter(make_config("openai", api_key="sk-test"))
        assert isinstance(adapter, OpenAICompatibleAdapter)
        assert adapter.api_key == "sk-test"
        assert adapter.model_prefix_filter == "gpt"
        assert adapter.timeout == 60

    def test_anthropic(self):
        adapter = create_adapter(make_config("anthropic", api_key="sk-ant"))
        assert isinstance(adapter, AnthropicAdapter)
        assert adapter.timeout == 120

    def test_ollama_native(self):
        adapter = create_adapter(make_config("ollama", endpoint="http://localhost:11434"))
        assert isinstance(adapter, OllamaAdapter)

    def test_ollama_openai_mode(self):
        adapter = create_adapter(
            make_config("ollama", endpoint="http://localhost:11434", metadata={"apiMode": "openai"})
        )
        assert isinstance(adapter, OpenAICompatibleAdapter)
        assert adapter.provider_label == "Ollama"
        assert adapter.base_url == "http://localhost:11434/v1"

    def test_lmstudio(self):
        adapter = create_adapter(make_config("lmstudio", endpoint="http://localhost:1234"))
        assert isinstance(adapter, OpenAICompatibleAdapter)
        assert adapter.provider_label == "LM Studio"
        assert adapter.default_model == "local-model"

    def test_metadata_timeout_overrides_default(self):
        adapter = create_adapter(make_config("openai", api_key="sk-test", metadata={"timeout": 15}))
        assert adapter.timeout == 15

    def test_provider_type_is_case_insensitive(self):
        adapter = create_adapter(make_config("OpenAI", api_key="sk-test"))
        assert isinstance(adapter, OpenAICompatibleAdapter)

    def test_unknown_vendor(self):
        with pytest.raises(UnsupportedVendor, match="Unsupported provider type: gemini"):
            create_adapter(make_config("gemini", api_key="x"))

    def test_local_vendor_requires_endpoint(self):
        with pytest.raises(MissingEndpoint, match="http://localhost:11434"):
            create_adapter(make_config("ollama"))
        with pytest.raises(MissingEndpoint, match="LM Studio"):
            create_adapter(make_config("lmstudio", endpoint="  "))

    def test_list_provider_types(self):
        assert list_provider_types() == ["openai", "anthropic", "ollama", "lmstudio"]


class TestConnectionChecks:
    @pytest.mark.asyncio
    async def test_connection_check_never_raises(self):
        # Missing endpoint is reported as a failed connection test
        assert await factory.test_provider(make_config("ollama")) is False

    @pytest.mark.asyncio
    async def test_connection_and_models_with_mock_transport(self):
        transport = httpx.MockTransport(
            lambda r: httpx.Response(200, json={"models": [{"name": "llama2"}]})
        )
        config = make_config("ollama", endpoint="http://localhost:11434")
        assert await factory.test_provider(config, transport=transport) is True
        assert await factory.get_provider_models(config, transport=transport) == ["llama2"]
