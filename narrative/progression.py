"""Pure progression rules for stage and water-level updates."""

from __future__ import annotations

from .stages import (
    FINAL_STAGE,
    IDLE_STAGE,
    AlertStatus,
    RiskBand,
)


_WARNING_LEVEL = 40
_CRITICAL_LEVEL = 70
_PERCENT_PER_METER = 20


def next_stage(current: int) -> int:
    """Advance by exactly one stage, holding at the final stage."""
    return min(current + 1, FINAL_STAGE)


def can_advance(stage: int) -> bool:
    return stage < FINAL_STAGE


def risk_band(level: int) -> RiskBand:
    """Band a water level percentage: <40 normal, 40..69 warning, >=70 critical."""
    if level < _WARNING_LEVEL:
        return RiskBand.NORMAL
    if level < _CRITICAL_LEVEL:
        return RiskBand.WARNING
    return RiskBand.CRITICAL


def water_height_m(level: int) -> float:
    """Physical gauge height for a level percentage (100% is 5.0 m)."""
    return level / _PERCENT_PER_METER


def apply_rain(level: int, step: int = 20, ceiling: int = 95) -> int:
    """One manual rain stimulus."""
    return min(level + step, ceiling)


def apply_rise(level: int, step: int = 5, ceiling: int = 85) -> int:
    """One tick of the autonomous rise."""
    return min(level + step, ceiling)


def alert_status(stage: int) -> AlertStatus:
    if stage == IDLE_STAGE:
        return AlertStatus.READY
    if stage >= FINAL_STAGE:
        return AlertStatus.RECOVERED
    return AlertStatus.CRITICAL
