"""
Configuration management for the Lightning adapter.

Supports configuration via environment variables and .env files.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AdapterConfig(BaseSettings):
    """
    Configuration settings for the Lightning node adapter.

    All settings can be configured via environment variables with the LNADAPTER_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="LNADAPTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Eclair REST settings
    eclair_password: str = Field(
        default="eclairpw",
        description="Password for the Eclair REST API (basic auth, empty user)"
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout for a single HTTP request to a node or backend"
    )

    # Bitcoind backend settings
    bitcoind_rpc_user: str = Field(
        default="polaruser",
        description="Default bitcoind RPC user when the backend does not carry one"
    )
    bitcoind_rpc_password: str = Field(
        default="polarpass",
        description="Default bitcoind RPC password when the backend does not carry one"
    )

    # Payment polling
    payment_poll_interval_seconds: float = Field(
        default=1.0,
        gt=0,
        description="Delay between sent-payment status polls"
    )
    payment_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Maximum time to wait for a payment to settle"
    )

    # Readiness polling
    online_interval_seconds: float = Field(
        default=3.0,
        gt=0,
        description="Delay between node status checks while waiting for startup"
    )
    online_timeout_seconds: float = Field(
        default=30.0,
        ge=0,
        description="Maximum time to wait for a node to come online"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format"
    )


# Global config instance
_config: Optional[AdapterConfig] = None


def get_config() -> AdapterConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = AdapterConfig()
    return _config


def set_config(config: AdapterConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
