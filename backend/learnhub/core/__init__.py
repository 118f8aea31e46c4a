"""
Core module initialization.
"""

from learnhub.core.config import get_config, load_config
from learnhub.core.database import get_db, init_db, drop_db, transaction, Base
from learnhub.core.logging import get_logger, setup_logging
from learnhub.core.security import encrypt_api_key, decrypt_api_key

__all__ = [
    "get_config",
    "load_config",
    "get_db",
    "init_db",
    "drop_db",
    "transaction",
    "Base",
    "get_logger",
    "setup_logging",
    "encrypt_api_key",
    "decrypt_api_key",
]
