"""Configuration management - settings from env, catalog from YAML."""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment and .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    host: str = Field(default="127.0.0.1", description="Bind host")
    port: int = Field(default=8000, description="Bind port")

    # LLM (OpenAI-compatible)
    llm_base_url: str | None = Field(default=None, description="OpenAI-compatible API base URL")
    llm_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("llm_api_key", "api_key"),
        description="API key for LLM provider. Empty puts the app in review mode.",
    )
    llm_model: str = Field(default="gpt-4o-mini", description="Model name")
    llm_timeout_seconds: float | None = Field(
        default=None,
        description="Optional timeout for nutrition calls; none by default",
    )

    # Data
    data_dir: Path = Field(default=Path("data"), description="Directory for JSON persistence")
    redis_url: str | None = Field(default=None, description="Redis URL for shared persistence")
    key_prefix: str = Field(default="daily_dose", description="Prefix for persisted slot keys")

    # Presentation policy
    max_pets: int = Field(default=4, ge=1, description="Dashboard pet slots")
    signup_prompt_delay_seconds: float = Field(
        default=2.0,
        ge=0,
        description="Delay before nudging anonymous users to create an account",
    )
    admin_passphrase: str = Field(default="Mia", description="Passphrase for the admin feed")

    @property
    def review_mode(self) -> bool:
        """True when no LLM credential is configured."""
        return not self.llm_api_key


def load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load YAML config file."""
    if not config_path.exists():
        return {}
    with config_path.open() as f:
        return yaml.safe_load(f) or {}


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()


@lru_cache
def get_catalog(config_dir_str: str = "") -> dict[str, Any]:
    """Load form suggestions and seed feed items from config/catalog.yaml."""
    if not config_dir_str:
        config_dir = Path(__file__).parent.parent.parent / "config"
    else:
        config_dir = Path(config_dir_str)
    return load_yaml_config(config_dir / "catalog.yaml")
