"""Narrative system: stage table, progression rules, derived bands."""

from .progression import (
    alert_status,
    apply_rain,
    apply_rise,
    can_advance,
    next_stage,
    risk_band,
    water_height_m,
)
from .stages import (
    DETECTION_STAGE,
    FINAL_STAGE,
    IDLE_STAGE,
    MONITORING_STAGE,
    STAGES,
    AlertStatus,
    MonitorStatus,
    RiskBand,
    StageInfo,
    StageView,
    Stimulus,
    stage_info,
    view_for,
)

__all__ = [
    "DETECTION_STAGE",
    "FINAL_STAGE",
    "IDLE_STAGE",
    "MONITORING_STAGE",
    "STAGES",
    "AlertStatus",
    "MonitorStatus",
    "RiskBand",
    "StageInfo",
    "StageView",
    "Stimulus",
    "alert_status",
    "apply_rain",
    "apply_rise",
    "can_advance",
    "next_stage",
    "risk_band",
    "stage_info",
    "view_for",
    "water_height_m",
]
