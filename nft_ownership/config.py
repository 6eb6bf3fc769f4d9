"""
Centralized Configuration Management

This module loads and validates configuration for the NFT ownership service
from environment variables and .env files, organized into nested sections.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ChainConfig(BaseSettings):
    """On-chain access configuration."""

    model_config = SettingsConfigDict(env_prefix="CHAIN_")

    rpc_url: Optional[str] = None  # e.g., from Alchemy or Infura
    nft_contract_address: Optional[str] = None


class MetadataConfig(BaseSettings):
    """Off-chain metadata retrieval configuration."""

    model_config = SettingsConfigDict(env_prefix="METADATA_")

    request_timeout: float = 10.0


class AppConfig(BaseSettings):
    """
    Centralized application configuration with nested sections.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    log_level: str = "INFO"
    log_format: str = "text"  # "text" or "json"
    log_file: Optional[str] = None

    # Nested configuration sections
    chain: ChainConfig = Field(default_factory=ChainConfig)
    metadata: MetadataConfig = Field(default_factory=MetadataConfig)


def create_settings() -> AppConfig:
    """Create settings instance from environment variables and .env files only."""
    return AppConfig()


settings = create_settings()


def get_settings() -> AppConfig:
    """Get the global settings instance."""
    return settings
