"""
Configuration

Loads runtime settings from the environment (and a local .env file).
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

REQUIRED_VARS = ['DATABASE_URL', 'ANTHROPIC_API_KEY']


class Settings(BaseModel):
    """Validated runtime configuration."""
    database_url: str = Field(..., description="SQLAlchemy database URL")
    anthropic_api_key: str = Field(..., description="Anthropic API key")
    anthropic_model: str = Field("claude-sonnet-4-20250514", description="Claude model identifier")
    max_tokens: int = Field(2048, gt=0, description="Output length ceiling for replies")
    max_context_items: int = Field(50, gt=0, description="Bid items rendered into the brief")
    db_echo: bool = Field(False, description="Echo SQL statements to the log")
    log_level: str = Field("INFO", description="Root logging level")


def normalize_database_url(url: str) -> str:
    """
    Normalize provider-style database URLs for SQLAlchemy.

    Hosted Postgres providers hand out ``postgres://`` URLs, which SQLAlchemy
    no longer accepts.

    Args:
        url: Database URL as found in the environment

    Returns:
        URL usable by ``create_engine``
    """
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Load and validate environment configuration.

    Args:
        env_file: Optional path to a .env file (defaults to ./.env lookup)

    Returns:
        Settings instance

    Raises:
        ConfigurationError: If required environment variables are missing
            or hold invalid values
    """
    load_dotenv(env_file)

    missing = [var for var in REQUIRED_VARS if not os.getenv(var)]
    if missing:
        logger.error(f"Missing required environment variables: {', '.join(missing)}")
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    try:
        settings = Settings(
            database_url=normalize_database_url(os.environ['DATABASE_URL']),
            anthropic_api_key=os.environ['ANTHROPIC_API_KEY'],
            anthropic_model=os.getenv('ANTHROPIC_MODEL', 'claude-sonnet-4-20250514'),
            max_tokens=int(os.getenv('ANTHROPIC_MAX_TOKENS', '2048')),
            max_context_items=int(os.getenv('CONTEXT_MAX_BID_ITEMS', '50')),
            db_echo=os.getenv('DB_ECHO', 'false').lower() == 'true',
            log_level=os.getenv('LOG_LEVEL', 'INFO'),
        )
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")

    logger.info(f"Configuration loaded (model: {settings.anthropic_model})")
    return settings
