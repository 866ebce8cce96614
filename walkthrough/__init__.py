"""Walkthrough core - controller, timer scheduler, event log."""

from .clock import ManualClock
from .config import ConfigError, WalkthroughSettings, load_config
from .controller import NarrativeController
from .history import EventLog, LogEntry
from .models import Snapshot
from .scheduler import TimerScheduler

__all__ = [
    "ConfigError",
    "EventLog",
    "LogEntry",
    "ManualClock",
    "NarrativeController",
    "Snapshot",
    "TimerScheduler",
    "WalkthroughSettings",
    "load_config",
]
