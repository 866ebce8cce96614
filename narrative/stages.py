"""Stage table and the enums shared by the walkthrough core.

Stage 0 is the idle intro screen. Stages 1..5 each own one entry in
``STAGES``; the renderer picks what to draw from ``StageView``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


IDLE_STAGE = 0
DETECTION_STAGE = 1
MONITORING_STAGE = 2
FINAL_STAGE = 5


class StageView(str, Enum):
    """Which rendering state is active. One variant per stage number."""

    INTRO = "intro"
    DETECTION = "detection"
    MONITORING = "monitoring"
    ANALYSIS = "analysis"
    EXECUTION = "execution"
    RESOLUTION = "resolution"


class RiskBand(str, Enum):
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


class MonitorStatus(str, Enum):
    CONNECTING = "connecting"
    FAILED = "failed"
    RESTORED = "restored"


class AlertStatus(str, Enum):
    """Header badge text."""

    READY = "SYSTEM READY"
    CRITICAL = "CRITICAL EVENT"
    RECOVERED = "RECOVERY COMPLETE"


class Stimulus(str, Enum):
    RAIN = "rain"


@dataclass(frozen=True)
class StageInfo:
    number: int
    view: StageView
    title: str
    description: str
    log_message: str


STAGES: tuple[StageInfo, ...] = (
    StageInfo(
        number=1,
        view=StageView.DETECTION,
        title="1. Detection (Meraki MV72)",
        description="AI-powered Virtual Gauge detects rising water levels.",
        log_message="Meraki MV72: Initializing Virtual Gauge... Monitoring Pixel delta...",
    ),
    StageInfo(
        number=2,
        view=StageView.MONITORING,
        title="2. Monitoring (ThousandEyes)",
        description="Real-time network path analysis detects infrastructure failure.",
        log_message="ThousandEyes: Scanning Digital Highway... Latency spike detected on Node B.",
    ),
    StageInfo(
        number=3,
        view=StageView.ANALYSIS,
        title="3. Analysis (Splunk)",
        description="Correlation of sensor data and weather APIs for risk prediction.",
        log_message="Splunk: Received Data. Rising Rate > 30% vs History. CRITICAL ALERT.",
    ),
    StageInfo(
        number=4,
        view=StageView.EXECUTION,
        title="4. Execution (Agentic AI)",
        description="Autonomous SD-WAN rerouting to Starlink satellite network.",
        log_message="Agentic AI: Primary WAN Unstable. Switching context... Rerouting via Starlink.",
    ),
    StageInfo(
        number=5,
        view=StageView.RESOLUTION,
        title="5. Rescue (Solution)",
        description="Person detection coordinates sent to rescue teams.",
        log_message="System: Connection Restored. Person Detected at Sector 4. Coordinates sent.",
    ),
)


def stage_info(stage: int) -> StageInfo | None:
    """Return the table entry for ``stage``, or None for the idle stage."""
    if stage <= IDLE_STAGE or stage > FINAL_STAGE:
        return None
    return STAGES[stage - 1]


def view_for(stage: int) -> StageView:
    info = stage_info(stage)
    return info.view if info else StageView.INTRO
