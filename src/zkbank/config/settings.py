"""Application settings loaded from environment variables and config files.

Configuration is loaded from (highest priority first):
1. Environment variables (prefix: ``ZKBANK_``, nested via ``__``)
2. YAML config file (``ZKBANK_CONFIG_PATH`` env var or ``config_path``)
3. Defaults defined here
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Any, Self

import yaml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Fixed placeholders used when a create request omits the proof / payload.
DEFAULT_ZKP_PROOF = "0x1234567890abcdef1234567890abcdef1234567890abcdef1234567890abcdef"
DEFAULT_TX_DATA = "0xabcdef1234567890abcdef1234567890abcdef1234567890abcdef1234567890"


class LogLevel(enum.StrEnum):
    """Log levels accepted by uvicorn."""

    CRITICAL = "critical"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    DEBUG = "debug"


# ---------------------------------------------------------------------------
# Sub-config models
# ---------------------------------------------------------------------------


class ServerConfig(BaseSettings):
    """HTTP server settings."""

    model_config = SettingsConfigDict(
        env_prefix="ZKBANK_SERVER__",
        case_sensitive=False,
    )

    host: str = "0.0.0.0"  # noqa: S104
    port: int = 3001
    log_level: LogLevel = LogLevel.INFO
    reload: bool = False


class LedgerConfig(BaseSettings):
    """Transaction ledger defaults."""

    model_config = SettingsConfigDict(
        env_prefix="ZKBANK_LEDGER__",
        case_sensitive=False,
    )

    default_required_signatures: int = Field(default=2, ge=1)
    default_notary_required: bool = True
    default_zkp_proof: str = DEFAULT_ZKP_PROOF
    default_tx_data: str = DEFAULT_TX_DATA
    id_hex_length: int = Field(
        default=26,
        ge=8,
        description="Number of hex characters after the 0x prefix of generated ids",
    )
    id_attempts: int = Field(
        default=5,
        ge=1,
        description="Identifier regenerations tolerated on collision before failing",
    )
    network: str = "testnet"


class MetricsConfig(BaseSettings):
    """Prometheus metrics settings."""

    model_config = SettingsConfigDict(
        env_prefix="ZKBANK_METRICS__",
        case_sensitive=False,
    )

    enabled: bool = True


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------


def _load_yaml(path: str | Path) -> dict[str, Any]:
    """Load a YAML configuration file and return its contents as a dict.

    Returns an empty dict if the file doesn't exist or is empty.
    """
    p = Path(path)
    if not p.exists():
        return {}
    text = p.read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    return data if isinstance(data, dict) else {}


class AppConfig(BaseSettings):
    """Top-level application configuration.

    Loads settings from environment variables (``ZKBANK_`` prefix),
    an optional YAML file, and built-in defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="ZKBANK_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    debug: bool = False
    version: str = "0.1.0"
    config_path: str = ""

    server: ServerConfig = Field(default_factory=ServerConfig)
    ledger: LedgerConfig = Field(default_factory=LedgerConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)

    @model_validator(mode="before")
    @classmethod
    def _merge_yaml(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Merge YAML config file contents under the env var overrides."""
        config_path = values.get("config_path", "")
        if not config_path:
            return values
        yaml_data = _load_yaml(config_path)
        # YAML values serve as defaults; env vars (already in *values*) win.
        for key, val in yaml_data.items():
            if key not in values or values[key] is None:
                values[key] = val
            elif isinstance(val, dict) and isinstance(values.get(key), dict):
                values[key] = {**val, **values[key]}
        return values

    @classmethod
    def from_yaml(cls, path: str | Path) -> Self:
        """Construct ``AppConfig`` loading defaults from a YAML file.

        Environment variables still override YAML values.
        """
        return cls(config_path=str(path))
