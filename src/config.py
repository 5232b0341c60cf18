"""Configuration module for the advisory ingestion system."""
import os
from dataclasses import dataclass, field
from typing import List
from dotenv import load_dotenv

from src.errors import ConfigError

# Load environment variables
load_dotenv()

DEFAULT_ADVISORY_API_URL = 'https://www.cadenaois.org/public_svcdynamic/?key=public_getadvisories'
DEFAULT_OPERATOR_KEYWORDS = 'Starship,SpaceX,Starlink'


def _split_keywords(raw: str) -> List[str]:
    return [k.strip() for k in raw.split(',') if k.strip()]


@dataclass
class Config:
    """Application configuration."""

    # Store location (required, no default)
    DATABASE_PATH: str = ''

    # Logging level
    LOG_LEVEL: str = 'INFO'

    # Software Version
    VERSION: str = 'v0.0.0'

    # Upstream advisory API
    ADVISORY_API_URL: str = DEFAULT_ADVISORY_API_URL
    REQUEST_TIMEOUT: float = 30.0

    # Operator / program names that make an advisory relevant
    OPERATOR_KEYWORDS: List[str] = field(
        default_factory=lambda: _split_keywords(DEFAULT_OPERATOR_KEYWORDS)
    )

    # Update interval for continuous mode
    UPDATE_INTERVAL_SECONDS: int = 3600

    @classmethod
    def from_env(cls) -> 'Config':
        """Build a configuration from environment variables."""
        try:
            return cls(
                DATABASE_PATH=os.getenv('DATABASE_PATH', ''),
                LOG_LEVEL=os.getenv('LOG_LEVEL', 'INFO'),
                VERSION=os.getenv('VERSION', 'v0.0.0'),
                ADVISORY_API_URL=os.getenv('ADVISORY_API_URL', DEFAULT_ADVISORY_API_URL),
                REQUEST_TIMEOUT=float(os.getenv('REQUEST_TIMEOUT', '30')),
                OPERATOR_KEYWORDS=_split_keywords(
                    os.getenv('OPERATOR_KEYWORDS', DEFAULT_OPERATOR_KEYWORDS)
                ),
                UPDATE_INTERVAL_SECONDS=int(os.getenv('UPDATE_INTERVAL_SECONDS', '3600')),
            )
        except ValueError as e:
            raise ConfigError(f"Invalid numeric configuration value: {e}") from e

    def validate(self) -> bool:
        """Validate required configuration."""
        if not self.DATABASE_PATH:
            raise ConfigError("DATABASE_PATH configuration is required")
        if not self.ADVISORY_API_URL:
            raise ConfigError("ADVISORY_API_URL configuration is required")
        if not self.OPERATOR_KEYWORDS:
            raise ConfigError("OPERATOR_KEYWORDS must name at least one keyword")
        if self.REQUEST_TIMEOUT <= 0:
            raise ConfigError("REQUEST_TIMEOUT must be positive")
        return True
