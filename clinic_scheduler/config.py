"""
Centralized configuration with environment variable overrides.

Clinic name, device pool size, form duration limits, and display
formats are configurable here. Scheduling logic reads them from
the ``settings`` singleton instead of hardcoding them.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class ClinicConfig:
    """Clinic-specific settings loaded from environment or defaults."""

    name: str = os.getenv("CLINIC_NAME", "Gestione Appuntamenti")


@dataclass(frozen=True)
class DeviceConfig:
    """Size of the shared diagnostic device pool."""

    total_holter_devices: int = _safe_int("TOTAL_HOLTER_DEVICES", "2")


@dataclass(frozen=True)
class FormConfig:
    """Duration limits applied by the scheduling form."""

    default_duration: int = _safe_int("DEFAULT_DURATION_MINUTES", "30")
    min_duration: int = _safe_int("MIN_DURATION_MINUTES", "5")
    max_duration: int = _safe_int("MAX_DURATION_MINUTES", "120")
    duration_step: int = _safe_int("DURATION_STEP_MINUTES", "5")


@dataclass(frozen=True)
class DisplayConfig:
    """Formats used when rendering dates into user-facing messages."""

    datetime_format: str = os.getenv("DISPLAY_DATETIME_FORMAT", "%d/%m/%Y alle %H:%M")
    unavailable_label: str = os.getenv("UNAVAILABLE_DATE_LABEL", "data non disponibile")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    clinic: ClinicConfig = field(default_factory=ClinicConfig)
    devices: DeviceConfig = field(default_factory=DeviceConfig)
    form: FormConfig = field(default_factory=FormConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.devices.total_holter_devices < 1:
        raise ValueError(
            f"TOTAL_HOLTER_DEVICES must be >= 1, got {config.devices.total_holter_devices}"
        )

    form = config.form
    if form.duration_step < 1:
        raise ValueError(f"DURATION_STEP_MINUTES must be >= 1, got {form.duration_step}")
    if form.min_duration < 1:
        raise ValueError(f"MIN_DURATION_MINUTES must be >= 1, got {form.min_duration}")
    if form.max_duration < form.min_duration:
        raise ValueError(
            "MAX_DURATION_MINUTES must be >= MIN_DURATION_MINUTES, "
            f"got {form.max_duration} < {form.min_duration}"
        )
    if not form.min_duration <= form.default_duration <= form.max_duration:
        raise ValueError(
            f"DEFAULT_DURATION_MINUTES must be between {form.min_duration} and "
            f"{form.max_duration}, got {form.default_duration}"
        )

    for name, value in [
        ("MIN_DURATION_MINUTES", form.min_duration),
        ("MAX_DURATION_MINUTES", form.max_duration),
        ("DEFAULT_DURATION_MINUTES", form.default_duration),
    ]:
        if value % form.duration_step:
            raise ValueError(
                f"{name} must be a multiple of DURATION_STEP_MINUTES ({form.duration_step}), "
                f"got {value}"
            )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info(
        "Configuration loaded for '%s' (%d Holter devices)",
        config.clinic.name, config.devices.total_holter_devices,
    )
    return config


# Singleton instance
settings = load_config()
