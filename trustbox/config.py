"""Application configuration loaded from environment variables."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""


@dataclass(frozen=True)
class Config:
    """Service configuration.

    Scoring weights and thresholds are not configured here; they live in
    ``trustbox.core.thresholds.ScoringConfig``.
    """

    # Server settings
    host: str
    port: int
    log_level: str

    # Catalog snapshot used by the ranking job
    catalog_path: str | None

    # Ranking / safety defaults
    rank_default_limit: int
    strict_mode_default: bool

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        host = os.getenv("HOST", "0.0.0.0")
        port_str = os.getenv("PORT", "8000")
        try:
            port = int(port_str)
        except ValueError:
            raise ConfigurationError(f"PORT must be an integer, got: {port_str}")

        log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        if log_level not in LOG_LEVELS:
            raise ConfigurationError(
                f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got: {log_level}"
            )

        catalog_path = os.getenv("CATALOG_PATH") or None

        rank_limit_str = os.getenv("RANK_DEFAULT_LIMIT", "10")
        try:
            rank_default_limit = int(rank_limit_str)
        except ValueError:
            rank_default_limit = 10
        if rank_default_limit < 1:
            rank_default_limit = 10

        strict_mode_default = os.getenv("STRICT_MODE_DEFAULT", "false").lower() in (
            "true",
            "1",
            "yes",
        )

        return cls(
            host=host,
            port=port,
            log_level=log_level,
            catalog_path=catalog_path,
            rank_default_limit=rank_default_limit,
            strict_mode_default=strict_mode_default,
        )


config = Config.from_env()
