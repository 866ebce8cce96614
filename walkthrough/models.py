"""Read-only snapshot handed to the rendering layer."""

from __future__ import annotations

from dataclasses import dataclass

from narrative import (
    AlertStatus,
    MonitorStatus,
    RiskBand,
    StageView,
    alert_status,
    can_advance,
    risk_band,
    stage_info,
    water_height_m,
)

from .history import LogEntry


@dataclass(frozen=True)
class Snapshot:
    """Immutable projection of controller state.

    Only the raw values are stored; band, height and badge are derived on
    access so they can never disagree with the level or stage.
    """

    stage: int
    view: StageView
    water_level_percent: int
    monitor_status: MonitorStatus | None
    log: tuple[LogEntry, ...]

    @property
    def water_height_meters(self) -> float:
        return water_height_m(self.water_level_percent)

    @property
    def risk_band(self) -> RiskBand:
        return risk_band(self.water_level_percent)

    @property
    def alert_status(self) -> AlertStatus:
        return alert_status(self.stage)

    @property
    def can_advance(self) -> bool:
        return can_advance(self.stage)

    @property
    def title(self) -> str:
        info = stage_info(self.stage)
        return info.title if info else ""
