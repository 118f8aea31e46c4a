"""
Internal helper for LiteLLM-based adapters.
Do not import from outside ai_providers package.
"""

from typing import Any, AsyncIterator, Dict, List, Optional


def _build_kwargs(
    model: str,
    messages: List[Dict[str, Any]],
    api_base: Optional[str],
    api_key: Optional[str],
    timeout: float,
    temperature: Optional[float],
    max_tokens: Optional[int],
) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {
        "model": model,
        "messages": messages,
        "timeout": timeout,
    }
    if api_base:
        kwargs["api_base"] = api_base
    if api_key:
        kwargs["api_key"] = api_key
    if temperature is not None:
        kwargs["temperature"] = temperature
    if max_tokens is not None:
        kwargs["max_tokens"] = max_tokens
    return kwargs


async def completion(
    model: str,
    messages: List[Dict[str, Any]],
    *,
    api_base: Optional[str] = None,
    api_key: Optional[str] = None,
    timeout: float = 60,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Run LiteLLM acompletion with the given model and messages.

    Args:
        model: LiteLLM model string (e.g. openai/gpt-4, openai/local-model).
        messages: List of {"role": "user"|"system"|"assistant", "content": "..."}.
        api_base: Optional base URL for OpenAI-compatible endpoints.
        api_key: Optional API key.
        timeout: Request timeout in seconds.

    Returns:
        Dict with content, model, finish_reason and usage (None when the
        server did not report token counts).

    Raises:
        ValueError: The response contained no choices.
    """
    import litellm

    kwargs = _build_kwargs(model, messages, api_base, api_key, timeout, temperature, max_tokens)
    response = await litellm.acompletion(**kwargs)
    if not response.choices:
        raise ValueError("No response choices returned")
    choice = response.choices[0]

    usage = getattr(response, "usage", None)
    usage_dict = None
    if usage and getattr(usage, "total_tokens", 0):
        usage_dict = {
            "prompt_tokens": usage.prompt_tokens or 0,
            "completion_tokens": usage.completion_tokens or 0,
            "total_tokens": usage.total_tokens or 0,
        }
    return {
        "content": choice.message.content or "",
        "model": response.model,
        "finish_reason": choice.finish_reason or "stop",
        "usage": usage_dict,
    }


async def stream_completion(
    model: str,
    messages: List[Dict[str, Any]],
    *,
    api_base: Optional[str] = None,
    api_key: Optional[str] = None,
    timeout: float = 60,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
) -> AsyncIterator[str]:
    """Stream text deltas from LiteLLM acompletion(stream=True)."""
    import litellm

    kwargs = _build_kwargs(model, messages, api_base, api_key, timeout, temperature, max_tokens)
    response = await litellm.acompletion(stream=True, **kwargs)
    async for chunk in response:
        if not chunk.choices:
            continue
        delta = chunk.choices[0].delta
        content = getattr(delta, "content", None) if delta else None
        if content:
            yield content
