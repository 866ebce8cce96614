"""Narrative controller - the state machine behind the walkthrough.

Each command: cancel the outgoing stage's timers -> move the stage ->
log -> arm the incoming stage's simulation -> notify listeners.
Timer callbacks re-enter here to mutate the active stage's sub-state.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable

from narrative import (
    DETECTION_STAGE,
    FINAL_STAGE,
    IDLE_STAGE,
    MONITORING_STAGE,
    MonitorStatus,
    Stimulus,
    apply_rain,
    apply_rise,
    next_stage,
    risk_band,
    stage_info,
    view_for,
)

from .config import WalkthroughSettings
from .history import EventLog
from .models import Snapshot
from .scheduler import MONITOR_FAIL, MONITOR_RECOVER, WATER_RISE, Clock, TimerScheduler

logger = logging.getLogger(__name__)

Listener = Callable[[Snapshot], None]


def _local_now() -> datetime:
    return datetime.now(timezone.utc).astimezone()


class NarrativeController:
    """Owns the stage, the per-stage sub-state and the event log."""

    def __init__(
        self,
        scheduler: TimerScheduler,
        settings: WalkthroughSettings | None = None,
        now: Callable[[], datetime] | None = None,
    ):
        self._settings = settings or WalkthroughSettings()
        self._scheduler = scheduler
        self._now = now or _local_now
        self._listeners: list[Listener] = []
        self._disposed = False

        self._stage = IDLE_STAGE
        self._water_level = self._settings.initial_water_level
        self._monitor_status: MonitorStatus | None = None
        self._log = EventLog(self._settings.boot_message, self._now())

    @classmethod
    def create(
        cls,
        settings: WalkthroughSettings | None = None,
        clock: Clock | None = None,
        now: Callable[[], datetime] | None = None,
    ) -> NarrativeController:
        """Build a controller and its scheduler.

        Without an explicit clock this must be called from inside a running
        asyncio loop, which then drives the timers.
        """
        settings = settings or WalkthroughSettings()
        if clock is None:
            clock = asyncio.get_running_loop()
        scheduler = TimerScheduler(clock, time_unit=settings.time_unit_seconds)
        return cls(scheduler, settings=settings, now=now)

    @property
    def settings(self) -> WalkthroughSettings:
        return self._settings

    @property
    def scheduler(self) -> TimerScheduler:
        return self._scheduler

    # ── Commands ────────────────────────────────────────────────

    def advance(self) -> Snapshot:
        """Move to the next stage. A no-op on the final stage."""
        self._check_alive()
        if self._stage >= FINAL_STAGE:
            logger.debug("Advance ignored: already at stage %d", self._stage)
            return self.snapshot()

        self._leave_stage()
        self._stage = next_stage(self._stage)
        self._log.append(self._log_message(self._stage), self._now())
        logger.info("Stage %d: %s", self._stage, stage_info(self._stage).title)
        self._enter_stage()
        return self._changed()

    def reset(self) -> Snapshot:
        """Back to the idle stage with a fresh log. Safe to call repeatedly."""
        self._check_alive()
        cancelled = self._scheduler.cancel_all()
        self._stage = IDLE_STAGE
        self._water_level = self._settings.initial_water_level
        self._monitor_status = None
        self._log.reset(self._settings.reset_message, self._now())
        logger.info("Walkthrough reset (%d timer(s) cancelled)", cancelled)
        return self._changed()

    def apply_stimulus(self, kind: str) -> Snapshot:
        """Apply a user-triggered input. Out-of-stage or unknown input is ignored."""
        self._check_alive()
        if (
            kind != Stimulus.RAIN.value
            or self._stage != DETECTION_STAGE
            or self._settings.water_mode != "manual"
        ):
            logger.debug("Stimulus %r ignored at stage %d", kind, self._stage)
            return self.snapshot()

        level = apply_rain(self._water_level, self._settings.rain_step, self._settings.rain_ceiling)
        if level == self._water_level:
            return self.snapshot()
        self._set_water_level(level)
        return self._changed()

    def snapshot(self) -> Snapshot:
        return Snapshot(
            stage=self._stage,
            view=view_for(self._stage),
            water_level_percent=self._water_level,
            monitor_status=self._monitor_status,
            log=self._log.entries(),
        )

    # ── Subscription and lifecycle ──────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with a fresh snapshot after every change.

        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def dispose(self) -> None:
        """Cancel every timer and drop listeners. The controller is unusable afterwards."""
        if self._disposed:
            return
        self._scheduler.cancel_all()
        self._listeners.clear()
        self._disposed = True
        logger.debug("Controller disposed")

    @property
    def disposed(self) -> bool:
        return self._disposed

    # ── Stage simulations ───────────────────────────────────────

    def _leave_stage(self) -> None:
        # Timers of the outgoing stage go first, before anything new is armed.
        self._scheduler.cancel_all()
        if self._stage == MONITORING_STAGE:
            self._monitor_status = None

    def _enter_stage(self) -> None:
        s = self._settings
        if self._stage == DETECTION_STAGE and s.water_mode == "autonomous":
            self._scheduler.arm_repeating(WATER_RISE, s.rise_interval_units, self._on_water_tick)
        elif self._stage == MONITORING_STAGE:
            if s.network_mode == "timed":
                self._monitor_status = MonitorStatus.CONNECTING
                self._scheduler.arm(MONITOR_FAIL, s.fail_after_units, self._on_monitor_fail)
            else:
                self._monitor_status = MonitorStatus.FAILED

    def _on_water_tick(self) -> None:
        ceiling = self._settings.rise_ceiling
        level = apply_rise(self._water_level, self._settings.rise_step, ceiling)
        if level <= self._water_level:
            self._scheduler.cancel(WATER_RISE)
            return
        self._set_water_level(level)
        if level >= ceiling:
            self._scheduler.cancel(WATER_RISE)
            logger.debug("Water rise reached its ceiling of %d%%", ceiling)
        self._changed()

    def _on_monitor_fail(self) -> None:
        self._monitor_status = MonitorStatus.FAILED
        logger.info("Monitor link FAILED")
        self._scheduler.arm(MONITOR_RECOVER, self._settings.recover_after_units, self._on_monitor_recover)
        self._changed()

    def _on_monitor_recover(self) -> None:
        self._monitor_status = MonitorStatus.RESTORED
        logger.info("Monitor link RESTORED")
        self._changed()

    # ── Helpers ─────────────────────────────────────────────────

    def _set_water_level(self, level: int) -> None:
        previous = risk_band(self._water_level)
        self._water_level = level
        band = risk_band(level)
        if band != previous:
            logger.info("Water level %d%% - band %s", level, band.value.upper())
        else:
            logger.debug("Water level %d%%", level)

    def _log_message(self, stage: int) -> str:
        info = stage_info(stage)
        return self._settings.log_messages.get(info.view.value, info.log_message)

    def _changed(self) -> Snapshot:
        snap = self.snapshot()
        for listener in list(self._listeners):
            listener(snap)
        return snap

    def _check_alive(self) -> None:
        if self._disposed:
            raise RuntimeError("NarrativeController has been disposed")
