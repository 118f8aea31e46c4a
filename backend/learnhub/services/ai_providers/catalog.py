"""
Predefined model catalog inserted when a provider is configured.
The first model listed for a vendor becomes the provider's default model.
Prices are USD per 1K tokens.
"""

from typing import Any, Dict, List

PREDEFINED_MODELS: Dict[str, List[Dict[str, Any]]] = {
    "openai": [
        {
            "model_id": "gpt-4-turbo-preview",
            "model_name": "GPT-4 Turbo",
            "capabilities": {"function_calling": True, "vision": True, "json_mode": True},
            "pricing_info": {"input_per_1k": 0.01, "output_per_1k": 0.03},
            "max_tokens": 128000,
        },
        {
            "model_id": "gpt-4",
            "model_name": "GPT-4",
            "capabilities": {"function_calling": True, "vision": False, "json_mode": False},
            "pricing_info": {"input_per_1k": 0.03, "output_per_1k": 0.06},
            "max_tokens": 8192,
        },
        {
            "model_id": "gpt-3.5-turbo",
            "model_name": "GPT-3.5 Turbo",
            "capabilities": {"function_calling": True, "vision": False, "json_mode": True},
            "pricing_info": {"input_per_1k": 0.0005, "output_per_1k": 0.0015},
            "max_tokens": 16385,
        },
    ],
    "anthropic": [
        {
            "model_id": "claude-3-opus-20240229",
            "model_name": "Claude 3 Opus",
            "capabilities": {"function_calling": True, "vision": True, "json_mode": False},
            "pricing_info": {"input_per_1k": 0.015, "output_per_1k": 0.075},
            "max_tokens": 200000,
        },
        {
            "model_id": "claude-3-sonnet-20240229",
            "model_name": "Claude 3 Sonnet",
            "capabilities": {"function_calling": True, "vision": True, "json_mode": False},
            "pricing_info": {"input_per_1k": 0.003, "output_per_1k": 0.015},
            "max_tokens": 200000,
        },
        {
            "model_id": "claude-3-haiku-20240307",
            "model_name": "Claude 3 Haiku",
            "capabilities": {"function_calling": True, "vision": True, "json_mode": False},
            "pricing_info": {"input_per_1k": 0.00025, "output_per_1k": 0.00125},
            "max_tokens": 200000,
        },
    ],
    # Local models have no per-token pricing
    "ollama": [
        {"model_id": "llama2", "model_name": "Llama 2", "capabilities": {}, "pricing_info": {}, "max_tokens": 4096},
        {"model_id": "mistral", "model_name": "Mistral", "capabilities": {}, "pricing_info": {}, "max_tokens": 8192},
        {"model_id": "codellama", "model_name": "Code Llama", "capabilities": {}, "pricing_info": {}, "max_tokens": 16384},
    ],
    "lmstudio": [
        {"model_id": "local-model", "model_name": "Local Model", "capabilities": {}, "pricing_info": {}, "max_tokens": 4096},
    ],
}


def get_predefined_models(provider_type: str) -> List[Dict[str, Any]]:
    """Return a copy of the catalog entries for a vendor (empty for unknown vendors)."""
    return [dict(m) for m in PREDEFINED_MODELS.get(provider_type, [])]
