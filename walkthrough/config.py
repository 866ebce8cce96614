"""Configuration loading from settings.yaml and .env."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

WATER_MODES = ("manual", "autonomous")
NETWORK_MODES = ("timed", "static")

DEFAULT_BOOT_MESSAGE = "System Initialized. Scanning..."
DEFAULT_RESET_MESSAGE = "System Initialized. Re-scanning..."


class ConfigError(ValueError):
    """Raised when settings contain an invalid value."""


def load_config(
    config_dir: str | Path | None = None,
) -> dict:
    """Load settings.yaml and .env, return merged config dict."""
    if config_dir is None:
        config_dir = Path(__file__).resolve().parent.parent / "config"
    config_dir = Path(config_dir)

    # Load .env (silently skip if missing)
    env_path = config_dir / ".env"
    load_dotenv(env_path)

    settings_path = config_dir / "settings.yaml"
    if not settings_path.exists():
        raise FileNotFoundError(f"Config not found: {settings_path}")

    with open(settings_path, encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}

    # Environment wins over the YAML file
    water_mode = os.getenv("WALKTHROUGH_WATER_MODE")
    if water_mode:
        cfg.setdefault("water", {})["mode"] = water_mode.strip().lower()
    network_mode = os.getenv("WALKTHROUGH_NETWORK_MODE")
    if network_mode:
        cfg.setdefault("network", {})["mode"] = network_mode.strip().lower()
    time_unit = os.getenv("WALKTHROUGH_TIME_UNIT")
    if time_unit:
        cfg.setdefault("walkthrough", {})["time_unit_seconds"] = time_unit.strip()

    return cfg


def _number(section: dict[str, Any], key: str, default: float, cast=float) -> Any:
    raw = section.get(key, default)
    try:
        return cast(raw)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} must be a number, got {raw!r}") from e


@dataclass(frozen=True)
class WalkthroughSettings:
    """Typed view over the config dict, with the narrative's defaults."""

    time_unit_seconds: float = 1.0

    water_mode: str = "manual"
    initial_water_level: int = 20
    rain_step: int = 20
    rain_ceiling: int = 95
    rise_step: int = 5
    rise_ceiling: int = 85
    rise_interval_units: float = 0.8

    network_mode: str = "timed"
    fail_after_units: float = 3
    recover_after_units: float = 4

    boot_message: str = DEFAULT_BOOT_MESSAGE
    reset_message: str = DEFAULT_RESET_MESSAGE
    log_messages: dict[str, str] = field(default_factory=dict)  # view name -> message

    def __post_init__(self):
        if self.water_mode not in WATER_MODES:
            raise ConfigError(f"water mode must be one of {WATER_MODES}, got {self.water_mode!r}")
        if self.network_mode not in NETWORK_MODES:
            raise ConfigError(f"network mode must be one of {NETWORK_MODES}, got {self.network_mode!r}")
        if self.time_unit_seconds <= 0:
            raise ConfigError(f"time_unit_seconds must be positive, got {self.time_unit_seconds}")
        if not 0 <= self.initial_water_level <= 100:
            raise ConfigError(f"initial water level must be within 0..100, got {self.initial_water_level}")
        for name in ("rain_ceiling", "rise_ceiling"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ConfigError(f"{name} must be within 0..100, got {value}")
        for name in ("rain_step", "rise_step", "rise_interval_units"):
            value = getattr(self, name)
            if value <= 0:
                raise ConfigError(f"{name} must be positive, got {value}")
        for name in ("fail_after_units", "recover_after_units"):
            value = getattr(self, name)
            if value < 0:
                raise ConfigError(f"{name} cannot be negative, got {value}")

    @classmethod
    def from_config(cls, cfg: dict | None) -> WalkthroughSettings:
        cfg = cfg or {}
        walk = cfg.get("walkthrough", {}) or {}
        water = cfg.get("water", {}) or {}
        network = cfg.get("network", {}) or {}
        narrative = cfg.get("narrative", {}) or {}

        return cls(
            time_unit_seconds=_number(walk, "time_unit_seconds", 1.0),
            water_mode=str(water.get("mode", "manual")).lower(),
            initial_water_level=_number(water, "initial_level", 20, int),
            rain_step=_number(water, "rain_step", 20, int),
            rain_ceiling=_number(water, "rain_ceiling", 95, int),
            rise_step=_number(water, "rise_step", 5, int),
            rise_ceiling=_number(water, "rise_ceiling", 85, int),
            rise_interval_units=_number(water, "rise_interval_units", 0.8),
            network_mode=str(network.get("mode", "timed")).lower(),
            fail_after_units=_number(network, "fail_after_units", 3),
            recover_after_units=_number(network, "recover_after_units", 4),
            boot_message=narrative.get("boot_message") or DEFAULT_BOOT_MESSAGE,
            reset_message=narrative.get("reset_message") or DEFAULT_RESET_MESSAGE,
            log_messages=dict(narrative.get("log_messages") or {}),
        )
