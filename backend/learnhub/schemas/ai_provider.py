"""
Pydantic schemas for the AI provider configuration API.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from learnhub.models.ai_provider import ProviderType, ModelType


class ProviderCreate(BaseModel):
    """Request to configure a new AI provider."""

    provider_type: ProviderType
    provider_name: str = Field(..., min_length=1, max_length=100)
    api_key: Optional[str] = None
    api_endpoint: Optional[str] = None
    is_default: bool = False
    config_metadata: Dict[str, Any] = Field(default_factory=dict)


class ProviderUpdate(BaseModel):
    """Partial update. Omitted fields are left unchanged; api_key="" clears the key."""

    provider_name: Optional[str] = Field(None, min_length=1, max_length=100)
    api_key: Optional[str] = None
    api_endpoint: Optional[str] = None
    is_active: Optional[bool] = None
    is_default: Optional[bool] = None
    config_metadata: Optional[Dict[str, Any]] = None


class ProviderResponse(BaseModel):
    """Provider config as returned to clients. The API key is never returned."""

    id: str
    provider_type: str
    provider_name: str
    api_endpoint: Optional[str] = None
    has_api_key: bool
    is_active: bool
    is_default: bool
    config_metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: str
    updated_at: str


class ModelCreate(BaseModel):
    model_id: str = Field(..., min_length=1, max_length=100)
    model_name: str = Field(..., min_length=1, max_length=100)
    model_type: ModelType = ModelType.CHAT
    capabilities: Dict[str, bool] = Field(default_factory=dict)
    pricing_info: Dict[str, float] = Field(default_factory=dict)
    max_tokens: Optional[int] = None
    is_default: bool = False


class ModelResponse(BaseModel):
    id: str
    provider_id: str
    model_id: str
    model_name: str
    model_type: str
    capabilities: Dict[str, Any] = Field(default_factory=dict)
    pricing_info: Dict[str, Any] = Field(default_factory=dict)
    max_tokens: Optional[int] = None
    is_available: bool
    is_default: bool

    class Config:
        from_attributes = True


class ConnectionTestResponse(BaseModel):
    success: bool
    message: str


class VendorModelsResponse(BaseModel):
    """Model identifiers reported by the vendor itself."""

    models: List[str]
    count: int


class UsageStatsResponse(BaseModel):
    total_requests: int
    total_tokens: int
    total_cost: Optional[float] = None
    avg_latency: Optional[float] = None
    failed_requests: int = 0
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
