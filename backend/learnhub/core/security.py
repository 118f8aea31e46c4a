"""
Security utilities: API key encryption at rest and request user identity.
"""

import base64
import os
from functools import lru_cache
from typing import Optional

from cryptography.fernet import Fernet
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from fastapi import Header

# Default salt for key derivation (in production, this should be stored securely)
DEFAULT_SALT = b"learnhub_provider_salt_2024"

# Default user ID for development (used when no X-User-Id header is sent)
DEFAULT_USER_ID = "00000000-0000-0000-0000-000000000001"


def get_current_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """
    Resolve the acting user for a request.

    Authentication is handled upstream; the gateway forwards the authenticated
    user in the X-User-Id header. Falls back to LEARNHUB_USER_ID or the
    development default.
    """
    if x_user_id:
        return x_user_id.strip()
    return os.environ.get("LEARNHUB_USER_ID", DEFAULT_USER_ID)


@lru_cache(maxsize=8)
def _derive_key(password: str) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=DEFAULT_SALT,
        iterations=480000,
    )
    return base64.urlsafe_b64encode(kdf.derive(password.encode()))


def get_encryption_key(password: Optional[str] = None) -> bytes:
    """
    Generate an encryption key from a password or environment variable.

    Args:
        password: Optional password to derive key from. If None, uses LEARNHUB_ENCRYPTION_KEY.

    Returns:
        Fernet key bytes.
    """
    if password is None:
        password = os.environ.get(
            "LEARNHUB_ENCRYPTION_KEY", "default_key_for_local_use"
        )
    return _derive_key(password)


def encrypt_api_key(api_key: str, password: Optional[str] = None) -> str:
    """
    Encrypt an API key for secure storage.

    Args:
        api_key: The API key to encrypt.
        password: Optional password for encryption.

    Returns:
        Encrypted API key as a base64-encoded string.
    """
    fernet = Fernet(get_encryption_key(password))
    encrypted = fernet.encrypt(api_key.encode())
    return base64.urlsafe_b64encode(encrypted).decode()


def decrypt_api_key(encrypted_key: str, password: Optional[str] = None) -> str:
    """
    Decrypt an encrypted API key.

    Args:
        encrypted_key: The encrypted API key (base64-encoded).
        password: Optional password for decryption.

    Returns:
        Decrypted API key.
    """
    fernet = Fernet(get_encryption_key(password))
    encrypted_bytes = base64.urlsafe_b64decode(encrypted_key.encode())
    return fernet.decrypt(encrypted_bytes).decode()
