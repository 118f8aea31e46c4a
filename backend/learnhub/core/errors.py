"""
Error taxonomy for the AI provider layer and content generation.

Every error carries a human-readable message safe to return to API callers
and an HTTP status code used by the exception handler in main.py. Raw model
output and stack traces are logged, never attached to the message.
"""

from typing import Optional


class LearnHubError(Exception):
    """Base class for all application errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequest(LearnHubError):
    """Malformed canonical chat request; rejected before any network call."""

    status_code = 400


class ProviderRequestFailed(LearnHubError):
    """A vendor call failed (network, auth, vendor-side error, malformed reply)."""

    status_code = 502

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider} request failed: {message}")
        self.provider = provider
        self.reason = message


class ProviderNotFound(LearnHubError):
    """Provider id does not exist or is owned by another user."""

    status_code = 404

    def __init__(self, provider_id: str):
        super().__init__(f"Provider {provider_id} not found")
        self.provider_id = provider_id


class NoDefaultProvider(LearnHubError):
    status_code = 400

    def __init__(self):
        super().__init__(
            "No default AI provider configured. Please configure an AI provider first."
        )


class ProviderInactive(LearnHubError):
    status_code = 400

    def __init__(self, provider_name: str):
        super().__init__(f"Provider {provider_name} is not active")
        self.provider_name = provider_name


class MissingEndpoint(LearnHubError):
    """Local vendor (Ollama, LM Studio) configured without an API endpoint."""

    status_code = 400


class UnsupportedVendor(LearnHubError):
    status_code = 400

    def __init__(self, provider_type: str):
        super().__init__(f"Unsupported provider type: {provider_type}")
        self.provider_type = provider_type


class UnparsableAIResponse(LearnHubError):
    """The repair pipeline could not recover JSON from the model output."""

    status_code = 502

    def __init__(self, preview: str):
        super().__init__("Could not parse JSON from AI response")
        self.preview = preview


class InvalidAIResponseShape(LearnHubError):
    """The model output parsed, but not into the structure that was asked for."""

    status_code = 502


class NotFound(LearnHubError):
    status_code = 404

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        message = f"{resource} not found" if resource_id is None else f"{resource} {resource_id} not found"
        super().__init__(message)
