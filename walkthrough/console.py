"""Text presentation and scripted playback for the CLI.

The renderer dispatches on ``StageView``; the controller never knows how
any stage is drawn.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from narrative import MonitorStatus, RiskBand, StageView

from .controller import NarrativeController
from .models import Snapshot

logger = logging.getLogger(__name__)

DEFAULT_SCRIPT = "advance,rain,rain,rain,rain,advance,wait:3,wait:4,advance,advance,advance"

_STEP_ACTIONS = ("advance", "reset", "wait")


@dataclass(frozen=True)
class Step:
    action: str  # "advance" | "reset" | "wait" | "stimulus"
    value: str = ""
    amount: float = 0.0


def parse_script(text: str) -> list[Step]:
    """Parse ``advance,rain,wait:3`` style scripts.

    Anything that is not ``advance``, ``reset`` or ``wait:N`` is taken as a
    stimulus name and left for the controller to accept or ignore.
    """
    steps: list[Step] = []
    for raw in text.split(","):
        token = raw.strip().lower()
        if not token:
            continue
        if token.startswith("wait"):
            _, _, amount = token.partition(":")
            try:
                units = float(amount)
            except ValueError as e:
                raise ValueError(f"wait needs a number of time units, got {raw.strip()!r}") from e
            if units < 0:
                raise ValueError(f"wait cannot be negative: {raw.strip()!r}")
            steps.append(Step(action="wait", amount=units))
        elif token in _STEP_ACTIONS:
            steps.append(Step(action=token))
        else:
            steps.append(Step(action="stimulus", value=token))
    return steps


async def play(
    controller: NarrativeController,
    steps: list[Step],
    wait: Callable[[float], Awaitable[None]],
) -> Snapshot:
    """Run a script against the controller. ``wait`` sleeps for N time units."""
    for step in steps:
        logger.debug("Script step: %s", step)
        if step.action == "advance":
            controller.advance()
        elif step.action == "reset":
            controller.reset()
        elif step.action == "wait":
            await wait(step.amount)
        else:
            controller.apply_stimulus(step.value)
    return controller.snapshot()


def realtime_wait(time_unit: float) -> Callable[[float], Awaitable[None]]:
    async def _wait(units: float) -> None:
        await asyncio.sleep(units * time_unit)

    return _wait


# ── Rendering ───────────────────────────────────────────────────

_BAND_STATUS = {
    RiskBand.NORMAL: "STABLE",
    RiskBand.WARNING: "RISING",
    RiskBand.CRITICAL: "CRITICAL ALERT",
}

_LINK_DISPLAY = {
    MonitorStatus.CONNECTING: "CAM --- ISP_HUB --- SPLUNK   (connecting)",
    MonitorStatus.FAILED: "CAM -x- ISP_HUB -x- SPLUNK   PACKET LOSS 98%",
    MonitorStatus.RESTORED: "CAM === ISP_HUB === SPLUNK   link restored",
}


def _render_intro(snap: Snapshot) -> list[str]:
    return ["Flood Response Protocol", "Monitoring Stations Active"]


def _render_detection(snap: Snapshot) -> list[str]:
    return [
        f"Water level: {snap.water_level_percent}% ({snap.water_height_meters:.1f}m)",
        f"Status: {_BAND_STATUS[snap.risk_band]}",
    ]


def _render_monitoring(snap: Snapshot) -> list[str]:
    if snap.monitor_status is None:
        return []
    return [_LINK_DISPLAY[snap.monitor_status]]


def _render_analysis(snap: Snapshot) -> list[str]:
    return [
        "API WEATHER: HEAVY RAIN",
        f"SENSOR DATA: {snap.water_height_meters:.1f}m",
        "AI RECOMMENDATION: REROUTE TRAFFIC",
    ]


def _render_execution(snap: Snapshot) -> list[str]:
    return ["STARLINK ACTIVE", "Legacy Path: FAILED", "SD-WAN Policy: UPDATED"]


def _render_resolution(snap: Snapshot) -> list[str]:
    return ["HUMAN DETECTED", "COORDINATES SENT"]


_RENDERERS: dict[StageView, Callable[[Snapshot], list[str]]] = {
    StageView.INTRO: _render_intro,
    StageView.DETECTION: _render_detection,
    StageView.MONITORING: _render_monitoring,
    StageView.ANALYSIS: _render_analysis,
    StageView.EXECUTION: _render_execution,
    StageView.RESOLUTION: _render_resolution,
}


def render_snapshot(snap: Snapshot, log_tail: int = 3) -> str:
    header = f"[{snap.alert_status.value}] stage {snap.stage}"
    if snap.title:
        header += f" - {snap.title}"
    lines = [header]
    lines.extend(f"  {line}" for line in _RENDERERS[snap.view](snap))
    if log_tail > 0:
        lines.extend(f"  > {entry.line}" for entry in snap.log[-log_tail:])
    return "\n".join(lines)
