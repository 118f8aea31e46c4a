"""
AI vendor adapters. Callers obtain an adapter through create_adapter(config)
and use the ProviderAdapter interface only.
"""

from .interface import ProviderAdapter
from .base import BaseProviderAdapter
from .factory import create_adapter, list_provider_types, test_provider, get_provider_models
from .catalog import PREDEFINED_MODELS, get_predefined_models

__all__ = [
    "ProviderAdapter",
    "BaseProviderAdapter",
    "create_adapter",
    "list_provider_types",
    "test_provider",
    "get_provider_models",
    "PREDEFINED_MODELS",
    "get_predefined_models",
]
