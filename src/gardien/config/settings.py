"""
Application settings with environment-based configuration.

Priority (highest to lowest):
1. Environment variables (from .env or system)
2. Environment-specific YAML config file (development.yaml, production.yaml)
3. Default YAML config file (default.yaml)
4. Pydantic defaults
"""

import os
from pathlib import Path
from typing import List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gardien.domain.value_objects.sign_in_config import AppIdentity, SignInConfig


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Sensitive values (Redis password) should come from environment
    variables, not from YAML files.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",
    )

    # Application
    APP_NAME: str = "Gardien"
    APP_VERSION: str = "0.1.0"
    ENV: str = Field(default="development", description="Environment name")
    DEBUG: bool = Field(default=False, description="Debug mode")

    # API Server
    API_HOST: str = Field(default="0.0.0.0")
    API_PORT: int = Field(default=8000, ge=1024, le=65535)
    API_RELOAD: bool = Field(default=False)

    # CORS Configuration
    CORS_ORIGINS: List[str] = Field(
        default=["http://localhost:8081", "https://bits.app"],
        description="Allowed CORS origins",
    )

    # Sign-in message
    SIGN_IN_DOMAIN: str = Field(default="bits.app", description="Requesting domain")
    SIGN_IN_STATEMENT: str = Field(
        default="Sign in to Bits with your Solana account",
        description="Human-readable statement shown in the wallet",
    )
    SIGN_IN_URI: str = Field(default="https://bits.app", description="Resource URI")
    CHAIN_ID: str = Field(default="solana:devnet", description="Chain identifier")

    # App identity presented to wallets
    APP_IDENTITY_NAME: str = Field(default="Bits")
    APP_IDENTITY_URI: str = Field(default="https://bits.app")
    APP_IDENTITY_ICON: str = Field(default="favicon.ico")

    # Nonce lifecycle
    NONCE_TTL_SECONDS: int = Field(
        default=300,
        ge=10,
        le=3600,
        description="Nonce lifetime in seconds",
    )
    NONCE_BYTES: int = Field(
        default=16,
        ge=16,
        le=64,
        description="Random bytes per nonce",
    )
    NONCE_SWEEP_INTERVAL_SECONDS: float = Field(
        default=60.0,
        gt=0,
        description="Interval between expired-nonce sweeps",
    )

    # Wallet collaborator
    WALLET_TIMEOUT_SECONDS: float = Field(
        default=120.0,
        gt=0,
        description="How long to wait for the holder to approve",
    )

    # Return precise rejection reasons to clients (development only)
    EXPOSE_FAILURE_REASONS: bool = Field(default=False)

    # Redis
    REDIS_ENABLED: bool = Field(default=False)
    REDIS_HOST: str = Field(default="localhost")
    REDIS_PORT: int = Field(default=6379, ge=1024, le=65535)
    REDIS_DB: int = Field(default=0, ge=0, le=15)
    REDIS_PASSWORD: Optional[str] = Field(default=None)
    REDIS_KEY_PREFIX: str = Field(default="gardien:")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")

    # Observability - Metrics
    METRICS_ENABLED: bool = Field(
        default=True,
        description="Expose Prometheus metrics on /metrics",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"Invalid LOG_LEVEL. Must be one of: {allowed}")
        return v_upper

    @field_validator("CHAIN_ID")
    @classmethod
    def validate_chain_id(cls, v: str) -> str:
        """Validate Solana chain identifier."""
        allowed = ["solana:mainnet", "solana:devnet", "solana:testnet"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"Invalid CHAIN_ID. Must be one of: {allowed}")
        return v_lower

    def sign_in_config(self) -> SignInConfig:
        """Build static sign-in configuration."""
        return SignInConfig(
            domain=self.SIGN_IN_DOMAIN,
            statement=self.SIGN_IN_STATEMENT,
            uri=self.SIGN_IN_URI,
            chain_identifier=self.CHAIN_ID,
            app_identity=AppIdentity(
                name=self.APP_IDENTITY_NAME,
                uri=self.APP_IDENTITY_URI,
                icon=self.APP_IDENTITY_ICON,
            ),
        )


def load_config(
    config_file: Optional[str] = None,
    env_file: Optional[str] = None,
    env: Optional[str] = None,
) -> Settings:
    """
    Load configuration from YAML files and environment variables.

    Priority: ENV vars > environment-specific YAML > default YAML > defaults

    Args:
        config_file: Optional YAML config filename override
        env_file: Optional .env filename (e.g., ".env.development")
        env: Optional environment name override (e.g., "development", "test")

    Returns:
        Settings instance

    Raises:
        ValidationError: If a value fails validation
    """
    current_file = Path(__file__).resolve()
    project_root = current_file.parent.parent.parent.parent
    config_dir = project_root / "config"

    environment = env or os.getenv("ENV", "development")

    env_map = {
        "production": (".env.production", "production.yaml"),
        "development": (".env.development", "development.yaml"),
        "test": (".env.test", "test.yaml"),
    }

    if env_file is None:
        default_env_file, default_config_file = env_map.get(
            environment, (".env.development", "development.yaml")
        )
        env_file = default_env_file
        if config_file is None:
            config_file = default_config_file

    env_file_path = project_root / env_file
    if env_file_path.exists():
        load_dotenv(env_file_path, override=True)

    default_config_path = config_dir / "default.yaml"
    merged_config = {}

    if default_config_path.exists():
        with open(default_config_path, "r") as f:
            loaded = yaml.safe_load(f)
            if loaded:
                merged_config = loaded

    if config_file:
        env_config_path = config_dir / config_file
        if env_config_path.exists():
            with open(env_config_path, "r") as f:
                loaded = yaml.safe_load(f)
                if loaded:
                    merged_config.update(loaded)

    # Environment variables win over YAML
    for key in list(merged_config):
        if key in os.environ:
            merged_config.pop(key)

    return Settings(**merged_config)


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or initialize global settings singleton."""
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def override_settings(new_settings: Settings) -> None:
    """Override global settings (for testing)."""
    global _settings
    _settings = new_settings


def reset_settings() -> None:
    """Reset settings to force re-initialization (for testing)."""
    global _settings
    _settings = None
