"""
AI provider API routes: provider configs, their models, connection tests and
usage statistics.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from learnhub.core.database import get_db
from learnhub.core.errors import ProviderNotFound, UnsupportedVendor
from learnhub.core.logging import get_logger
from learnhub.core.security import get_current_user_id
from learnhub.models import AIProviderConfig
from learnhub.schemas.ai_provider import (
    ConnectionTestResponse,
    ModelCreate,
    ModelResponse,
    ProviderCreate,
    ProviderResponse,
    ProviderUpdate,
    UsageStatsResponse,
    VendorModelsResponse,
)
from learnhub.services.ai_providers import factory
from learnhub.services.ai_providers.catalog import get_predefined_models
from learnhub.services.provider_repository import AIProviderRepository, get_provider_repository

logger = get_logger()

router = APIRouter(prefix="/ai-providers", tags=["AI Providers"])


def to_provider_response(provider: AIProviderConfig) -> ProviderResponse:
    return ProviderResponse(
        id=provider.id,
        provider_type=provider.provider_type,
        provider_name=provider.provider_name,
        api_endpoint=provider.api_endpoint,
        has_api_key=bool(provider.api_key_encrypted),
        is_active=provider.is_active,
        is_default=provider.is_default,
        config_metadata=provider.config_metadata or {},
        created_at=provider.created_at,
        updated_at=provider.updated_at,
    )


def _get_owned_provider(repo: AIProviderRepository, provider_id: str, user_id: str) -> AIProviderConfig:
    provider = repo.get_provider(provider_id, user_id)
    if provider is None:
        raise ProviderNotFound(provider_id)
    return provider


@router.get("/types", response_model=List[str])
async def get_provider_types():
    """List the supported provider types."""
    return factory.list_provider_types()


@router.get("/usage/stats", response_model=UsageStatsResponse)
async def get_usage_stats(
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Aggregate token, cost and latency figures for the current user."""
    stats = get_provider_repository(db).get_usage_stats(user_id, start_date, end_date)
    return UsageStatsResponse(**stats)


@router.get("", response_model=List[ProviderResponse])
async def list_providers(
    active_only: bool = Query(False),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    providers = get_provider_repository(db).list_providers(user_id, active_only=active_only)
    return [to_provider_response(p) for p in providers]


@router.post("", response_model=ProviderResponse, status_code=201)
async def create_provider(
    data: ProviderCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """
    Configure a new provider. Its predefined models are added with it and
    the user's first provider becomes the default.
    """
    provider = get_provider_repository(db).create_provider(user_id, data)
    return to_provider_response(provider)


@router.get("/{provider_id}", response_model=ProviderResponse)
async def get_provider(
    provider_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    provider = _get_owned_provider(get_provider_repository(db), provider_id, user_id)
    return to_provider_response(provider)


@router.patch("/{provider_id}", response_model=ProviderResponse)
async def update_provider(
    provider_id: str,
    data: ProviderUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    provider = get_provider_repository(db).update_provider(provider_id, user_id, data)
    if provider is None:
        raise ProviderNotFound(provider_id)
    logger.info("Updated AI provider %s for user %s", provider_id, user_id)
    return to_provider_response(provider)


@router.delete("/{provider_id}", status_code=204)
async def delete_provider(
    provider_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    if not get_provider_repository(db).delete_provider(provider_id, user_id):
        raise ProviderNotFound(provider_id)


@router.post("/{provider_id}/test", response_model=ConnectionTestResponse)
async def test_provider_connection(
    provider_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Probe the vendor with the stored credentials."""
    provider = _get_owned_provider(get_provider_repository(db), provider_id, user_id)
    ok = await factory.test_provider(provider)
    if ok:
        return ConnectionTestResponse(success=True, message=f"Successfully connected to {provider.provider_name}")
    return ConnectionTestResponse(success=False, message=f"Could not connect to {provider.provider_name}")


@router.get("/{provider_id}/models", response_model=VendorModelsResponse)
async def get_vendor_models(
    provider_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Model identifiers reported live by the vendor."""
    provider = _get_owned_provider(get_provider_repository(db), provider_id, user_id)
    models = await factory.get_provider_models(provider)
    return VendorModelsResponse(models=models, count=len(models))


@router.get("/{provider_id}/catalog", response_model=List[ModelResponse])
async def list_stored_models(
    provider_id: str,
    available_only: bool = Query(True),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    repo = get_provider_repository(db)
    _get_owned_provider(repo, provider_id, user_id)
    return repo.list_models(provider_id, available_only=available_only)


@router.post("/{provider_id}/catalog", response_model=ModelResponse, status_code=201)
async def add_provider_model(
    provider_id: str,
    data: ModelCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    repo = get_provider_repository(db)
    _get_owned_provider(repo, provider_id, user_id)
    return repo.create_model(provider_id, data)


@router.put("/{provider_id}/models/{model_pk}/default", response_model=ModelResponse)
async def set_default_model(
    provider_id: str,
    model_pk: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    repo = get_provider_repository(db)
    _get_owned_provider(repo, provider_id, user_id)
    if not repo.set_default_model(provider_id, model_pk):
        raise HTTPException(status_code=404, detail=f"Model {model_pk} not found")
    return repo.get_default_model(provider_id)


@router.get("/types/{provider_type}/models", response_model=List[ModelCreate])
async def get_model_catalog(provider_type: str):
    """Predefined models (with pricing) added to new providers of this type."""
    if provider_type not in factory.list_provider_types():
        raise UnsupportedVendor(provider_type)
    return get_predefined_models(provider_type)
