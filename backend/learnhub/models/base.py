"""
Shared column helpers for ORM models.
"""

import uuid

from sqlalchemy import Column, String

from learnhub.core.datetime_utils import now_iso


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


def uuid_pk() -> Column:
    return Column(String(36), primary_key=True, default=generate_uuid)


def created_at_column() -> Column:
    return Column(String, default=now_iso, nullable=False)


def updated_at_column() -> Column:
    return Column(String, default=now_iso, onupdate=now_iso, nullable=False)
