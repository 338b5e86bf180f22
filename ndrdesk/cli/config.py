"""YAML configuration loader with env var resolution and Pydantic validation.

Loads config from (priority order):
1. --config <path> CLI flag
2. ./ndrdesk.yaml (working directory)
3. ~/.ndrdesk/config.yaml (user home)

Environment variables override YAML: NDRDESK_<SECTION>_<KEY>.
${VAR} references in YAML values resolve from environment at load time.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pydantic
import yaml
from pydantic import BaseModel, field_validator

from ndrdesk.errors.domain import ConfigurationError
from ndrdesk.services.delhivery_client import STAGING_BASE_URL
from ndrdesk.services.nsl_policy import (
    DEFAULT_MAX_PRIOR_ATTEMPTS,
    DEFAULT_REATTEMPT_CODES,
    DEFAULT_RESCHEDULE_CODES,
    NSLPolicy,
)
from ndrdesk.services.time_window import DEFAULT_CUTOFF_HOUR, TimeWindowAdvisor

logger = logging.getLogger(__name__)

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


def resolve_env_vars(value: str) -> str:
    """Resolve ${VAR} references in a string from environment variables.

    Args:
        value: String potentially containing ${VAR} references.

    Returns:
        String with all ${VAR} references replaced by their env values.
        Missing env vars resolve to empty string.
    """
    def _replace(match: re.Match) -> str:
        return os.environ.get(match.group(1), "")

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _resolve_env_vars_recursive(data: Any) -> Any:
    """Recursively resolve ${VAR} references in a nested data structure."""
    if isinstance(data, str):
        return resolve_env_vars(data)
    elif isinstance(data, dict):
        return {k: _resolve_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_env_vars_recursive(item) for item in data]
    return data


class PolicyConfig(BaseModel):
    """NSL allow-lists and the attempt ceiling."""

    reattempt_codes: list[str] = sorted(DEFAULT_REATTEMPT_CODES)
    reschedule_codes: list[str] = sorted(DEFAULT_RESCHEDULE_CODES)
    max_prior_attempts: int = DEFAULT_MAX_PRIOR_ATTEMPTS

    @field_validator("reattempt_codes", "reschedule_codes", mode="before")
    @classmethod
    def split_code_string(cls, value: Any) -> Any:
        """Accept 'EOD-74,EOD-15' strings from env overrides."""
        if isinstance(value, str):
            return [code.strip() for code in value.split(",") if code.strip()]
        return value

    @field_validator("max_prior_attempts")
    @classmethod
    def non_negative(cls, value: int) -> int:
        """Reject negative attempt ceilings."""
        if value < 0:
            raise ValueError("max_prior_attempts must be zero or more")
        return value

    def to_policy(self) -> NSLPolicy:
        """Build the immutable policy table."""
        return NSLPolicy(
            reattempt_codes=frozenset(self.reattempt_codes),
            reschedule_codes=frozenset(self.reschedule_codes),
            max_prior_attempts=self.max_prior_attempts,
        )


class AdvisoryConfig(BaseModel):
    """Time-of-day advisory settings."""

    cutoff_hour: int = DEFAULT_CUTOFF_HOUR
    timezone: str | None = None

    @field_validator("cutoff_hour")
    @classmethod
    def valid_hour(cls, value: int) -> int:
        """Ensure the cutoff is a 24h clock hour."""
        if not 0 <= value <= 23:
            raise ValueError("cutoff_hour must be between 0 and 23")
        return value

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, value: str | None) -> str | None:
        """Ensure the timezone is a known IANA name."""
        if not value:
            return None
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"unknown timezone: {value}") from None
        return value

    def to_advisor(self) -> TimeWindowAdvisor:
        """Build the advisor for this configuration."""
        return TimeWindowAdvisor(cutoff_hour=self.cutoff_hour, timezone=self.timezone)


class GatewayConfig(BaseModel):
    """Courier API connection settings."""

    base_url: str = STAGING_BASE_URL
    api_token: str = ""
    timeout_seconds: float = 30.0


class LoggingConfig(BaseModel):
    """Log output settings for CLI and API processes."""

    level: str = "info"
    format: str = "%(levelname)s:%(name)s:%(message)s"

    @field_validator("level")
    @classmethod
    def known_level(cls, value: str) -> str:
        """Ensure the level is a standard logging level name."""
        if value.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {value}")
        return value.lower()


class NDRDeskConfig(BaseModel):
    """Top-level configuration for NDRDesk."""

    policy: PolicyConfig = PolicyConfig()
    advisory: AdvisoryConfig = AdvisoryConfig()
    gateway: GatewayConfig = GatewayConfig()
    logging: LoggingConfig = LoggingConfig()


def _find_config_file() -> Path | None:
    """Search for config file in standard locations.

    Returns:
        Path to config file if found, None otherwise.
    """
    candidates = [
        Path.cwd() / "ndrdesk.yaml",
        Path.cwd() / "ndrdesk.yml",
        Path.home() / ".ndrdesk" / "config.yaml",
        Path.home() / ".ndrdesk" / "config.yml",
    ]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply NDRDESK_<SECTION>_<KEY> env var overrides to config data.

    For example, ``NDRDESK_GATEWAY_API_TOKEN`` maps to section ``gateway``,
    field ``api_token``. Values stay strings; Pydantic coerces them to the
    field type during validation.

    Args:
        data: Parsed YAML config dict.

    Returns:
        Config dict with env var overrides applied.
    """
    prefix = "NDRDESK_"
    known_sections = sorted(NDRDeskConfig.model_fields.keys(), key=len, reverse=True)
    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue
        suffix = key[len(prefix):].lower()  # e.g. "gateway_api_token"
        for section in known_sections:
            section_prefix = section + "_"
            if suffix.startswith(section_prefix):
                field = suffix[len(section_prefix):]
                if not field:
                    break
                section_data = data.setdefault(section, {})
                if isinstance(section_data, dict):
                    section_data[field] = value
                break
    return data


def load_config(config_path: str | None = None) -> NDRDeskConfig:
    """Load NDRDesk configuration from YAML file with env var resolution.

    Args:
        config_path: Explicit path to config file. If None, searches
            standard locations (cwd, then ~/.ndrdesk/).

    Returns:
        Parsed and validated NDRDeskConfig. Defaults (plus env overrides)
        when no config file exists.

    Raises:
        ConfigurationError: If the file is missing, unparsable, or invalid.
    """
    if config_path:
        path: Path | None = Path(config_path)
        if not path.exists():
            raise ConfigurationError.from_code(
                "E-4001", reason=f"config file not found: {config_path}"
            )
    else:
        path = _find_config_file()

    raw_data: Any = {}
    if path is not None:
        logger.info("Loading config from %s", path)
        try:
            with open(path) as f:
                raw_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError.from_code("E-4001", reason=f"{path}: {e}") from e
        if not isinstance(raw_data, dict):
            raise ConfigurationError.from_code(
                "E-4001", reason=f"{path}: top level must be a mapping"
            )

    data = _resolve_env_vars_recursive(raw_data)
    data = _apply_env_overrides(data)

    try:
        return NDRDeskConfig(**data)
    except pydantic.ValidationError as e:
        raise ConfigurationError.from_code("E-4001", reason=str(e)) from e
