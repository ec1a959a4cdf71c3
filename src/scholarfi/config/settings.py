"""
Scholar-Fi settings.

Values are layered: field defaults, then config/default.yaml, then
config/<env>.yaml, then the process environment (after .env.<env> has
been loaded into it). Secrets belong in the environment only.
"""

import os
from pathlib import Path
from typing import List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from web3 import Web3

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """
    Scholar-Fi configuration.

    PRIVY_APP_SECRET, PRIVY_WEBHOOK_SECRET and the *_PRIVATE_KEY signer
    keys are read from the environment; the YAML files never hold them.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",
    )

    # Application
    APP_NAME: str = "Scholar-Fi"
    APP_VERSION: str = "1.0.0"
    ENV: str = Field(default="development", description="Environment name")
    DEBUG: bool = Field(default=False, description="Debug mode")

    # API Server
    API_HOST: str = Field(default="0.0.0.0")
    API_PORT: int = Field(default=3000, ge=1024, le=65535)
    API_RELOAD: bool = Field(default=False)

    # CORS Configuration
    CORS_ORIGINS: List[str] = Field(
        default=["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins",
    )

    # Database (optional - in-memory stores are used when unset)
    DATABASE_URL: Optional[str] = Field(
        default=None,
        description="Database URL for cursor and idempotency persistence",
    )
    DATABASE_ECHO: bool = Field(default=False)

    # Privy wallet provider
    PRIVY_APP_ID: str = Field(default="", description="Privy application ID")
    PRIVY_APP_SECRET: str = Field(default="", description="Privy app secret")
    PRIVY_API_URL: str = Field(
        default="https://api.privy.io/v1",
        description="Privy REST API base URL",
    )
    PRIVY_WEBHOOK_SECRET: Optional[str] = Field(
        default=None,
        description="HMAC secret for Privy webhook signatures",
    )
    PRIVY_TIMEOUT: float = Field(
        default=30.0,
        description="Privy API timeout in seconds",
    )
    GAS_SPONSORSHIP_CHAIN_ID: int = Field(
        default=84532,
        description="Chain checked for gas sponsorship (Base Sepolia)",
    )

    # Base Sepolia - ParentDepositSplitter
    BASE_RPC_URL: str = Field(default="https://sepolia.base.org")
    BASE_PRIVATE_KEY: Optional[str] = Field(default=None)
    BASE_SPLITTER_ADDRESS: Optional[str] = Field(default=None)

    # Celo Sepolia - ScholarFiAgeVerifier
    CELO_RPC_URL: str = Field(
        default="https://forno.celo-sepolia.celo-testnet.org"
    )
    CELO_PRIVATE_KEY: Optional[str] = Field(default=None)
    CELO_VERIFIER_ADDRESS: Optional[str] = Field(default=None)

    # Oasis Sapphire - ChildDataStore
    OASIS_RPC_URL: str = Field(default="https://testnet.sapphire.oasis.io")
    OASIS_PRIVATE_KEY: Optional[str] = Field(default=None)
    OASIS_DATASTORE_ADDRESS: Optional[str] = Field(default=None)

    TX_RECEIPT_TIMEOUT: float = Field(
        default=120.0,
        description="Seconds to wait for a transaction receipt",
    )

    # Verification reconciliation
    VERIFICATION_LOOKBACK_BLOCKS: int = Field(
        default=1000,
        ge=0,
        description="Blocks scanned on first run when no cursor is stored",
    )
    RECONCILE_INTERVAL_SECONDS: float = Field(
        default=0.0,
        ge=0.0,
        description="Background reconciliation interval (0 disables)",
    )

    # Idempotency
    IDEMPOTENCY_ENABLED: bool = Field(
        default=True,
        description="Enable idempotency for child account creation",
    )
    IDEMPOTENCY_TTL_SECONDS: int = Field(
        default=86400,
        description="Idempotency key TTL (24 hours default)",
    )

    # Notifications
    NOTIFICATION_WEBHOOK_URL: Optional[str] = Field(
        default=None,
        description="Outbound webhook for vault-unlocked notifications",
    )

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
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(
                f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {v!r}"
            )
        return level

    @field_validator(
        "BASE_SPLITTER_ADDRESS",
        "CELO_VERIFIER_ADDRESS",
        "OASIS_DATASTORE_ADDRESS",
    )
    @classmethod
    def validate_contract_address(cls, v: Optional[str]) -> Optional[str]:
        """Validate and checksum contract addresses."""
        if not v:
            return None
        if not Web3.is_address(v):
            raise ValueError(f"Invalid contract address: {v}")
        return Web3.to_checksum_address(v)


PROJECT_ROOT = Path(__file__).resolve().parents[3]
CONFIG_DIR = PROJECT_ROOT / "config"

KNOWN_ENVIRONMENTS = ("production", "development", "test")


def _read_yaml(path: Path) -> dict:
    if not path.is_file():
        return {}
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_config(
    config_file: Optional[str] = None,
    env_file: Optional[str] = None,
    env: Optional[str] = None,
) -> Settings:
    """
    Build Settings from YAML layers and the environment.

    Args:
        config_file: YAML file under config/ to layer over default.yaml
            (defaults to "<env>.yaml")
        env_file: dotenv file under the project root (defaults to
            ".env.<env>")
        env: Environment name; falls back to $ENV, then "production".
            Unknown names use the production files.

    Returns:
        Settings instance

    Raises:
        pydantic.ValidationError: If a configured value is invalid
    """
    environment = env or os.getenv("ENV", "production")
    profile = environment if environment in KNOWN_ENVIRONMENTS else "production"

    dotenv_path = PROJECT_ROOT / (env_file or f".env.{profile}")
    if dotenv_path.is_file():
        load_dotenv(dotenv_path, override=True)

    values = _read_yaml(CONFIG_DIR / "default.yaml")
    values.update(_read_yaml(CONFIG_DIR / (config_file or f"{profile}.yaml")))

    # Constructor kwargs beat env vars in pydantic-settings, so drop the
    # YAML value for anything the environment already sets
    overrides = {key: value for key, value in values.items() if key not in os.environ}
    return Settings(**overrides)


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
