"""Session ticket configuration."""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from session_tickets.errors import ConfigError

logger = logging.getLogger(__name__)


def _default_storage_path() -> Path:
    return Path(tempfile.gettempdir()) / "sessionstorage"


class TicketConfig(BaseModel):
    """Settings for ticket lifetime, nonce checking and storage location.

    Fields accept either their snake_case names or the camelCase option
    names used by existing deployments (``sessionTicketValidForMinutes`` ...).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    storage_path: Path = Field(
        default_factory=_default_storage_path, alias="sessionStorageBasePath"
    )
    valid_for_minutes: int = Field(default=1, ge=1, alias="sessionTicketValidForMinutes")
    sliding_validity: bool = Field(default=True, alias="sessionTicketSlidingValidity")
    sliding_increment_minutes: int = Field(
        default=1, ge=0, alias="sessionTicketSlidingIncrementMinutes"
    )
    use_nonce: bool = Field(default=True, alias="useNonceValueWithTicket")
    nonce_acceptable_deviation: int = Field(default=2, ge=0, alias="nonceValueAcceptableDeviation")
    store_timeout_seconds: float | None = Field(default=None, gt=0, alias="storeTimeoutSeconds")


def load_config(config_path: Path) -> TicketConfig:
    """Load a ``TicketConfig`` from a JSON file.

    A missing file yields the defaults. Unreadable files and invalid
    values raise ``ConfigError``.
    """
    if not config_path.exists():
        logger.info("Config file %s not found, using defaults", config_path)
        return TicketConfig()

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        msg = f"Cannot read config file {config_path}: {exc}"
        raise ConfigError(msg) from exc

    if not isinstance(data, dict):
        msg = f"Config file {config_path} must contain a JSON object"
        raise ConfigError(msg)

    try:
        config = TicketConfig.model_validate(data)
    except ValidationError as exc:
        msg = f"Invalid config in {config_path}: {exc}"
        raise ConfigError(msg) from exc

    logger.info(
        "Config loaded: storage=%s valid_for=%dm sliding=%s nonce=%s",
        config.storage_path,
        config.valid_for_minutes,
        config.sliding_validity,
        config.use_nonce,
    )
    return config
