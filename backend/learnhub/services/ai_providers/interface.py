"""
Common interface for all AI vendor adapters.

Everything above the adapter layer (gateway, orchestrators) talks to vendors
through this interface only. Implementations hide vendor wire formats and
vendor SDK exceptions; every vendor failure surfaces as ProviderRequestFailed.
"""

from typing import AsyncIterator, List, Protocol, runtime_checkable

from learnhub.schemas.chat import ChatCompletionRequest, ChatCompletionResponse


@runtime_checkable
class ProviderAdapter(Protocol):
    """Vendor-agnostic chat completion contract."""

    def validate_request(self, request: ChatCompletionRequest) -> None:
        """Raise InvalidRequest for a malformed request without touching the network."""
        ...

    async def send_chat_completion(self, request: ChatCompletionRequest) -> ChatCompletionResponse:
        """
        Send a canonical chat request and return the normalized response.

        Raises:
            InvalidRequest: The request is malformed (checked before any network call).
            ProviderRequestFailed: The vendor call failed for any reason.
        """
        ...

    def stream_chat_completion(self, request: ChatCompletionRequest) -> AsyncIterator[str]:
        """
        Yield text deltas as the vendor produces them.

        The caller may stop iterating at any point; the underlying HTTP stream
        is closed when the iterator is closed.
        """
        ...

    async def test_connection(self) -> bool:
        """Issue a cheap probe request. Returns False on any failure."""
        ...

    async def list_models(self) -> List[str]:
        """Return the vendor model identifiers available to this configuration."""
        ...
