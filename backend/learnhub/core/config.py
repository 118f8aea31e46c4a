"""
Core configuration module for the LearnHub backend.
Loads configuration from YAML file and environment variables.
"""

import os
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = "0.0.0.0"
    port: int = 8090
    debug: bool = False
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]


class DatabaseConfig(BaseModel):
    """Database configuration."""

    path: str = "data/learnhub.db"
    # Full SQLAlchemy URL; takes precedence over path when set (e.g. PostgreSQL)
    url: Optional[str] = None


class LoggingConfig(BaseModel):
    """Logging configuration."""

    file: str = "learnhub.log"
    level: str = os.getenv("LOG_LEVEL", "INFO")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    max_size: int = 10  # MB
    backup_count: int = 5


class AIConfig(BaseModel):
    """AI provider defaults. Timeouts are in seconds and apply per vendor client."""

    openai_timeout: int = 60
    anthropic_timeout: int = 120
    local_timeout: int = 120
    default_max_tokens: int = 4096
    # Number of characters of raw AI output kept in logs and error previews
    preview_chars: int = 200


class AppConfig(BaseModel):
    """Main application configuration."""

    server: ServerConfig = ServerConfig()
    database: DatabaseConfig = DatabaseConfig()
    logging: LoggingConfig = LoggingConfig()
    ai: AIConfig = AIConfig()


def get_project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent.parent.parent


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to the configuration file. If None, uses LEARNHUB_CONFIG
            or config.yaml in the project root.

    Returns:
        AppConfig instance with loaded configuration.
    """
    if config_path is None:
        config_path = os.environ.get("LEARNHUB_CONFIG")
        if config_path is None:
            config_path = get_project_root() / "config.yaml"

    config_path = Path(config_path)

    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}
            return AppConfig(**config_data)

    return AppConfig()


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def _resolve_data_dir() -> Path:
    """
    Resolve the data directory path.

    Container mode uses the DATA_DIR environment variable (e.g. /app/data);
    local development uses project root/data.
    """
    data_dir_env = os.environ.get("DATA_DIR")

    if data_dir_env:
        return Path(data_dir_env).resolve()
    return (get_project_root() / "data").resolve()


def get_database_url() -> str:
    """
    Get the SQLAlchemy database URL.

    Uses database.url from config when present, otherwise a SQLite file
    named after database.path inside the data directory.
    """
    config = get_config()
    if config.database.url:
        return config.database.url

    db_filename = Path(config.database.path).name
    db_path = (_resolve_data_dir() / db_filename).resolve()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{db_path}"


def get_log_path() -> Path:
    """
    Get the absolute path to the log file.

    - Container: $LOGS_DIR/learnhub.log
    - Local: project_root/logs/learnhub.log
    """
    config = get_config()

    logs_dir_env = os.environ.get("LOGS_DIR")
    if logs_dir_env:
        log_dir = Path(logs_dir_env)
    else:
        log_dir = get_project_root() / "logs"

    log_dir.mkdir(parents=True, exist_ok=True)

    # Use only the filename from config so logs never go outside logs/
    name = Path(config.logging.file).name or "learnhub.log"
    return log_dir / name
