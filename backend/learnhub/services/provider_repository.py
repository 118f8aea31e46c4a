"""
Persistence for AI provider configs, model descriptors and usage logs.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from learnhub.core.database import transaction
from learnhub.core.logging import get_logger
from learnhub.core.security import encrypt_api_key
from learnhub.models import AIModel, AIProviderConfig, AIUsageLog, User
from learnhub.schemas.ai_provider import ModelCreate, ProviderCreate, ProviderUpdate
from learnhub.services.ai_providers.catalog import get_predefined_models

logger = get_logger()


class AIProviderRepository:
    """
    Data access for ai_providers, ai_models and ai_usage_logs.

    Every provider lookup is scoped to the owning user: a provider id that
    belongs to someone else behaves exactly like a missing one.
    """

    def __init__(self, db: Session):
        self.db = db

    # Users
    def ensure_user(self, user_id: str) -> User:
        """Return the user row, creating a placeholder for externally authenticated users."""
        user = self.db.query(User).filter(User.id == user_id).first()
        if user is None:
            user = User(id=user_id, email=f"{user_id}@users.learnhub.local", name="User")
            self.db.add(user)
            self.db.flush()
        return user

    # Providers
    def create_provider(self, user_id: str, data: ProviderCreate) -> AIProviderConfig:
        """
        Create a provider config and its predefined model catalog.

        The user's first provider becomes the default even when not requested.
        """
        with transaction(self.db):
            self.ensure_user(user_id)
            has_providers = (
                self.db.query(AIProviderConfig.id).filter(AIProviderConfig.user_id == user_id).first()
                is not None
            )
            is_default = data.is_default or not has_providers
            if is_default:
                self._unset_default_providers(user_id)

            provider = AIProviderConfig(
                user_id=user_id,
                provider_type=data.provider_type.value,
                provider_name=data.provider_name,
                api_key_encrypted=encrypt_api_key(data.api_key) if data.api_key else None,
                api_endpoint=data.api_endpoint or None,
                is_active=True,
                is_default=is_default,
                config_metadata=data.config_metadata or {},
            )
            self.db.add(provider)
            self.db.flush()

            for i, model_data in enumerate(get_predefined_models(provider.provider_type)):
                self.db.add(AIModel(provider_id=provider.id, is_default=(i == 0), **model_data))

        self.db.refresh(provider)
        logger.info(
            "Created AI provider %s (%s) for user %s, default=%s",
            provider.id,
            provider.provider_type,
            user_id,
            provider.is_default,
        )
        return provider

    def get_provider(self, provider_id: str, user_id: str) -> Optional[AIProviderConfig]:
        return (
            self.db.query(AIProviderConfig)
            .filter(AIProviderConfig.id == provider_id, AIProviderConfig.user_id == user_id)
            .first()
        )

    def list_providers(self, user_id: str, active_only: bool = False) -> List[AIProviderConfig]:
        query = self.db.query(AIProviderConfig).filter(AIProviderConfig.user_id == user_id)
        if active_only:
            query = query.filter(AIProviderConfig.is_active.is_(True))
        return query.order_by(AIProviderConfig.is_default.desc(), AIProviderConfig.created_at.asc()).all()

    def get_default_provider(self, user_id: str) -> Optional[AIProviderConfig]:
        """The user's default provider, active or not (the caller checks is_active)."""
        return (
            self.db.query(AIProviderConfig)
            .filter(AIProviderConfig.user_id == user_id, AIProviderConfig.is_default.is_(True))
            .first()
        )

    def update_provider(
        self, provider_id: str, user_id: str, data: ProviderUpdate
    ) -> Optional[AIProviderConfig]:
        """Apply a partial update. Returns None if the provider is not found for this user."""
        provider = self.get_provider(provider_id, user_id)
        if provider is None:
            return None

        fields = data.model_dump(exclude_unset=True)
        with transaction(self.db):
            if "provider_name" in fields and data.provider_name:
                provider.provider_name = data.provider_name
            if "api_key" in fields:
                provider.api_key_encrypted = encrypt_api_key(data.api_key) if data.api_key else None
            if "api_endpoint" in fields:
                provider.api_endpoint = data.api_endpoint or None
            if "is_active" in fields and data.is_active is not None:
                provider.is_active = data.is_active
            if "config_metadata" in fields and data.config_metadata is not None:
                provider.config_metadata = data.config_metadata
            if "is_default" in fields and data.is_default is not None:
                if data.is_default:
                    self._unset_default_providers(user_id, except_id=provider.id)
                provider.is_default = data.is_default

        self.db.refresh(provider)
        return provider

    def delete_provider(self, provider_id: str, user_id: str) -> bool:
        provider = self.get_provider(provider_id, user_id)
        if provider is None:
            return False
        with transaction(self.db):
            # Usage logs reference the provider; drop them with it
            self.db.query(AIUsageLog).filter(AIUsageLog.provider_id == provider.id).delete(
                synchronize_session=False
            )
            self.db.delete(provider)
        logger.info("Deleted AI provider %s for user %s", provider_id, user_id)
        return True

    def _unset_default_providers(self, user_id: str, except_id: Optional[str] = None) -> None:
        # Runs as an immediate UPDATE so the partial unique index never sees two defaults
        query = self.db.query(AIProviderConfig).filter(
            AIProviderConfig.user_id == user_id, AIProviderConfig.is_default.is_(True)
        )
        if except_id:
            query = query.filter(AIProviderConfig.id != except_id)
        query.update({AIProviderConfig.is_default: False}, synchronize_session="fetch")

    # Models
    def create_model(self, provider_id: str, data: ModelCreate) -> AIModel:
        with transaction(self.db):
            if data.is_default:
                self._unset_default_models(provider_id)
            model = AIModel(
                provider_id=provider_id,
                model_id=data.model_id,
                model_name=data.model_name,
                model_type=data.model_type.value,
                capabilities=data.capabilities,
                pricing_info=data.pricing_info,
                max_tokens=data.max_tokens,
                is_default=data.is_default,
            )
            self.db.add(model)
        self.db.refresh(model)
        return model

    def list_models(self, provider_id: str, available_only: bool = True) -> List[AIModel]:
        query = self.db.query(AIModel).filter(AIModel.provider_id == provider_id)
        if available_only:
            query = query.filter(AIModel.is_available.is_(True))
        return query.order_by(AIModel.is_default.desc(), AIModel.created_at.asc()).all()

    def get_default_model(self, provider_id: str) -> Optional[AIModel]:
        return (
            self.db.query(AIModel)
            .filter(
                AIModel.provider_id == provider_id,
                AIModel.is_default.is_(True),
                AIModel.is_available.is_(True),
            )
            .first()
        )

    def find_model(self, provider_id: str, model_id: str) -> Optional[AIModel]:
        """Look up a descriptor by the vendor's model identifier."""
        return (
            self.db.query(AIModel)
            .filter(AIModel.provider_id == provider_id, AIModel.model_id == model_id)
            .first()
        )

    def set_default_model(self, provider_id: str, model_pk: str) -> bool:
        """Make the descriptor with primary key model_pk the provider's default."""
        model = (
            self.db.query(AIModel)
            .filter(AIModel.id == model_pk, AIModel.provider_id == provider_id)
            .first()
        )
        if model is None:
            return False
        with transaction(self.db):
            self._unset_default_models(provider_id, except_id=model.id)
            model.is_default = True
        return True

    def _unset_default_models(self, provider_id: str, except_id: Optional[str] = None) -> None:
        query = self.db.query(AIModel).filter(AIModel.provider_id == provider_id, AIModel.is_default.is_(True))
        if except_id:
            query = query.filter(AIModel.id != except_id)
        query.update({AIModel.is_default: False}, synchronize_session="fetch")

    # Usage logs
    def log_usage(
        self,
        user_id: str,
        provider_id: str,
        model_id: Optional[str],
        request_tokens: int = 0,
        response_tokens: int = 0,
        total_tokens: int = 0,
        latency_ms: Optional[int] = None,
        cost_usd: Optional[float] = None,
        error_message: Optional[str] = None,
    ) -> AIUsageLog:
        entry = AIUsageLog(
            user_id=user_id,
            provider_id=provider_id,
            model_id=model_id,
            request_tokens=request_tokens,
            response_tokens=response_tokens,
            total_tokens=total_tokens,
            latency_ms=latency_ms,
            cost_usd=cost_usd,
            error_message=error_message,
        )
        with transaction(self.db):
            self.db.add(entry)
        return entry

    def get_usage_stats(
        self,
        user_id: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        filters = [AIUsageLog.user_id == user_id]
        # created_at is an ISO 8601 UTC string, so string comparison orders correctly
        if start_date:
            filters.append(AIUsageLog.created_at >= start_date.isoformat())
        if end_date:
            filters.append(AIUsageLog.created_at <= end_date.isoformat())

        row = (
            self.db.query(
                func.count(AIUsageLog.id),
                func.coalesce(func.sum(AIUsageLog.total_tokens), 0),
                func.sum(AIUsageLog.cost_usd),
                func.avg(AIUsageLog.latency_ms),
                func.count(AIUsageLog.error_message),
            )
            .filter(*filters)
            .one()
        )
        return {
            "total_requests": row[0] or 0,
            "total_tokens": int(row[1] or 0),
            "total_cost": float(row[2]) if row[2] is not None else None,
            "avg_latency": float(row[3]) if row[3] is not None else None,
            "failed_requests": row[4] or 0,
            "start_date": start_date,
            "end_date": end_date,
        }


def get_provider_repository(db: Session) -> AIProviderRepository:
    """Get a repository bound to the given session."""
    return AIProviderRepository(db)
