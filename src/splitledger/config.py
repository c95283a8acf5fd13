"""Configuration management for splitledger.

Only the CLI and MCP server read settings; the balance engine and settlement
planner take none.
"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SPLITLEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Planner used by the service ("greedy" or "extremes")
    settlement_strategy: Literal["greedy", "extremes"] = "greedy"

    # Display
    currency_symbol: str = "$"

    # Logging level when --verbose is not given
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Load application settings from environment variables."""
    try:
        return Settings()
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load settings. Check the SPLITLEDGER_* environment "
            f"variables and your .env file.\n"
            f"Error: {e}"
        ) from e
