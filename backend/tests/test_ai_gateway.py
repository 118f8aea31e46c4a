"""
Tests for provider/model resolution, usage logging and cost calculation.
"""

import pytest

from learnhub.core.errors import (
    InvalidRequest,
    NoDefaultProvider,
    ProviderInactive,
    ProviderNotFound,
    ProviderRequestFailed,
)
from learnhub.models import AIModel, AIUsageLog
from learnhub.schemas.ai_provider import ProviderCreate, ProviderUpdate
from learnhub.schemas.chat import ChatCompletionRequest, ChatMessage, TokenUsage
from learnhub.services.ai_gateway import AIGatewayService, calculate_cost

from conftest import OTHER_USER_ID, USER_ID, ScriptedAdapter


def hello_request(**kwargs) -> ChatCompletionRequest:
    return ChatCompletionRequest(messages=[ChatMessage(role="user", content="Hello")], **kwargs)


class TestCalculateCost:
    def test_gpt4_pricing(self):
        model = AIModel(pricing_info={"input_per_1k": 0.03, "output_per_1k": 0.06})
        usage = TokenUsage(prompt_tokens=150, completion_tokens=100, total_tokens=250)
        assert calculate_cost(usage, model) == pytest.approx(0.0105)

    def test_claude_sonnet_pricing(self):
        model = AIModel(pricing_info={"input_per_1k": 0.003, "output_per_1k": 0.015})
        usage = TokenUsage(prompt_tokens=1000, completion_tokens=500, total_tokens=1500)
        assert calculate_cost(usage, model) == pytest.approx(0.0105)

    def test_missing_output_price_counts_as_zero(self):
        model = AIModel(pricing_info={"input_per_1k": 0.01})
        usage = TokenUsage(prompt_tokens=1000, completion_tokens=1000, total_tokens=2000)
        assert calculate_cost(usage, model) == pytest.approx(0.01)

    def test_no_pricing(self):
        usage = TokenUsage(prompt_tokens=10, completion_tokens=10, total_tokens=20)
        assert calculate_cost(usage, AIModel(pricing_info={})) is None
        assert calculate_cost(usage, None) is None


class TestProviderResolution:
    def test_default_provider(self, repo, provider):
        gateway = AIGatewayService(repo)
        assert gateway.resolve_provider(USER_ID).id == provider.id

    def test_explicit_provider(self, repo, provider):
        second = repo.create_provider(
            USER_ID, ProviderCreate(provider_type="anthropic", provider_name="Claude", api_key="sk-ant")
        )
        gateway = AIGatewayService(repo)
        assert gateway.resolve_provider(USER_ID, second.id).id == second.id

    def test_no_default(self, repo):
        with pytest.raises(NoDefaultProvider, match="No default AI provider configured"):
            AIGatewayService(repo).resolve_provider(USER_ID)

    def test_other_users_provider_is_not_found(self, repo, provider, other_provider):
        with pytest.raises(ProviderNotFound):
            AIGatewayService(repo).resolve_provider(USER_ID, other_provider.id)

    def test_inactive_provider(self, repo, provider):
        repo.update_provider(provider.id, USER_ID, ProviderUpdate(is_active=False))
        with pytest.raises(ProviderInactive, match="My OpenAI is not active"):
            AIGatewayService(repo).resolve_provider(USER_ID)

    def test_model_resolution(self, repo, provider):
        gateway = AIGatewayService(repo)
        # The first catalog model is the provider's default descriptor
        assert gateway.resolve_model(provider, hello_request()) == "gpt-4-turbo-preview"
        assert gateway.resolve_model(provider, hello_request(model="gpt-4")) == "gpt-4"


class TestSendChatCompletion:
    @pytest.mark.asyncio
    async def test_success_logs_usage_and_cost(self, db, provider, scripted_gateway):
        gateway, adapter = scripted_gateway(
            ["Hi!"],
            model="gpt-4",
            usage=TokenUsage(prompt_tokens=150, completion_tokens=100, total_tokens=250),
        )
        response = await gateway.send_chat_completion(USER_ID, hello_request(model="gpt-4"))

        assert response.content == "Hi!"
        assert response.provider_id == provider.id
        assert adapter.requests[0].model == "gpt-4"

        logs = db.query(AIUsageLog).all()
        assert len(logs) == 1
        log = logs[0]
        gpt4 = db.query(AIModel).filter(AIModel.provider_id == provider.id, AIModel.model_id == "gpt-4").one()
        assert log.model_id == gpt4.id
        assert log.total_tokens == 250
        assert log.cost_usd == pytest.approx(0.0105)
        assert log.error_message is None

    @pytest.mark.asyncio
    async def test_default_model_is_passed_to_adapter(self, provider, scripted_gateway):
        gateway, adapter = scripted_gateway(["ok"], model="gpt-4-turbo-preview")
        await gateway.send_chat_completion(USER_ID, hello_request())
        assert adapter.requests[0].model == "gpt-4-turbo-preview"

    @pytest.mark.asyncio
    async def test_unknown_response_model_is_logged_without_descriptor(self, db, provider, scripted_gateway):
        gateway, _ = scripted_gateway(["ok"], model="some-new-model")
        await gateway.send_chat_completion(USER_ID, hello_request(model="some-new-model"))
        log = db.query(AIUsageLog).one()
        assert log.model_id is None
        assert log.cost_usd is None

    @pytest.mark.asyncio
    async def test_failure_logs_error_and_reraises(self, db, provider, scripted_gateway):
        gateway, _ = scripted_gateway([ProviderRequestFailed("OpenAI", "Rate limit exceeded")])
        with pytest.raises(ProviderRequestFailed, match="Rate limit exceeded"):
            await gateway.send_chat_completion(USER_ID, hello_request())

        log = db.query(AIUsageLog).one()
        assert "Rate limit exceeded" in log.error_message
        assert log.total_tokens == 0
        assert log.cost_usd is None

    @pytest.mark.asyncio
    async def test_invalid_request_is_rejected_without_usage(self, db, provider, scripted_gateway):
        gateway, adapter = scripted_gateway(["never"])
        request = ChatCompletionRequest(messages=[])
        with pytest.raises(InvalidRequest, match="cannot be empty"):
            await gateway.send_chat_completion(USER_ID, request)
        assert adapter.requests == []
        assert db.query(AIUsageLog).count() == 0

    @pytest.mark.asyncio
    async def test_resolution_failure_writes_nothing(self, db, provider, other_provider, scripted_gateway):
        gateway, adapter = scripted_gateway(["never"])
        with pytest.raises(ProviderNotFound):
            await gateway.send_chat_completion(USER_ID, hello_request(), provider_id=other_provider.id)
        assert adapter.requests == []
        assert db.query(AIUsageLog).count() == 0

    @pytest.mark.asyncio
    async def test_usage_is_scoped_per_user(self, repo, provider, other_provider, scripted_gateway):
        gateway, _ = scripted_gateway(["a", "b"])
        await gateway.send_chat_completion(USER_ID, hello_request())
        await gateway.send_chat_completion(OTHER_USER_ID, hello_request())
        assert repo.get_usage_stats(USER_ID)["total_requests"] == 1
        assert repo.get_usage_stats(OTHER_USER_ID)["total_requests"] == 1


class TestStreamChatCompletion:
    @pytest.mark.asyncio
    async def test_relays_deltas_without_usage(self, db, provider, scripted_gateway):
        gateway, _ = scripted_gateway(["Hel", "lo"])
        stream = await gateway.stream_chat_completion(USER_ID, hello_request())
        assert [c async for c in stream] == ["Hel", "lo"]
        assert db.query(AIUsageLog).count() == 0

    @pytest.mark.asyncio
    async def test_resolution_errors_raise_before_streaming(self, repo):
        gateway = AIGatewayService(repo, adapter_factory=lambda config: ScriptedAdapter([]))
        with pytest.raises(NoDefaultProvider):
            await gateway.stream_chat_completion(USER_ID, hello_request())

    @pytest.mark.asyncio
    async def test_invalid_request_raises_before_streaming(self, provider, scripted_gateway):
        gateway, adapter = scripted_gateway(["never"])
        with pytest.raises(InvalidRequest, match="cannot be empty"):
            await gateway.stream_chat_completion(USER_ID, ChatCompletionRequest(messages=[]))
        assert adapter.requests == []

    @pytest.mark.asyncio
    async def test_vendor_failure_before_first_delta_raises(self, provider, scripted_gateway):
        gateway, _ = scripted_gateway([ProviderRequestFailed("OpenAI", "Rate limit exceeded")])
        with pytest.raises(ProviderRequestFailed, match="Rate limit exceeded"):
            await gateway.stream_chat_completion(USER_ID, hello_request())

    @pytest.mark.asyncio
    async def test_failure_after_first_delta_surfaces_in_iteration(self, provider, scripted_gateway):
        gateway, _ = scripted_gateway(["Hel", ProviderRequestFailed("OpenAI", "connection reset")])
        stream = await gateway.stream_chat_completion(USER_ID, hello_request())
        received = []
        with pytest.raises(ProviderRequestFailed):
            async for delta in stream:
                received.append(delta)
        assert received == ["Hel"]

    @pytest.mark.asyncio
    async def test_empty_stream(self, provider, scripted_gateway):
        gateway, _ = scripted_gateway([])
        stream = await gateway.stream_chat_completion(USER_ID, hello_request())
        assert [c async for c in stream] == []
