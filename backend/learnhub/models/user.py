"""
User model. Accounts and credentials are managed by the external auth service;
this table only anchors ownership of provider configs and generated content.
"""

from enum import Enum

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from learnhub.core.database import Base
from learnhub.models.base import uuid_pk, created_at_column, updated_at_column


class UserRole(str, Enum):
    LEARNER = "learner"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"


class User(Base):
    __tablename__ = "users"

    id = uuid_pk()
    email = Column(String(255), nullable=False, unique=True)
    name = Column(String(100), nullable=False, default="User")
    role = Column(String(20), nullable=False, default=UserRole.INSTRUCTOR.value)
    created_at = created_at_column()
    updated_at = updated_at_column()

    ai_providers = relationship(
        "AIProviderConfig", back_populates="user", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
