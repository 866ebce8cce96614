"""Tests for script parsing, playback and the text renderer."""

from __future__ import annotations

import asyncio

import pytest

from narrative import MonitorStatus
from walkthrough.clock import ManualClock
from walkthrough.config import WalkthroughSettings
from walkthrough.console import DEFAULT_SCRIPT, Step, parse_script, play, render_snapshot
from walkthrough.controller import NarrativeController


def _simulated(settings: WalkthroughSettings | None = None) -> tuple[ManualClock, NarrativeController]:
    clock = ManualClock()
    return clock, NarrativeController.create(settings, clock=clock)


class TestParseScript:
    def test_parses_every_step_kind(self):
        steps = parse_script(" advance, rain ,wait:2.5,reset,,")
        assert steps == [
            Step(action="advance"),
            Step(action="stimulus", value="rain"),
            Step(action="wait", amount=2.5),
            Step(action="reset"),
        ]

    @pytest.mark.parametrize("text", ["wait", "wait:soon", "wait:-1"])
    def test_bad_wait_is_rejected(self, text):
        with pytest.raises(ValueError):
            parse_script(text)


class TestPlay:
    def test_default_script_reaches_resolution(self):
        clock, ctrl = _simulated()
        seen = []
        ctrl.subscribe(lambda snap: seen.append(snap.monitor_status))

        async def _wait(units: float) -> None:
            clock.advance(units)

        final = asyncio.run(play(ctrl, parse_script(DEFAULT_SCRIPT), _wait))
        assert final.stage == 5
        assert final.water_level_percent == 95
        assert len(final.log) == 6
        assert MonitorStatus.FAILED in seen
        assert MonitorStatus.RESTORED in seen

    def test_script_reset_replays_from_idle(self):
        clock, ctrl = _simulated()

        async def _wait(units: float) -> None:
            clock.advance(units)

        final = asyncio.run(play(ctrl, parse_script("advance,advance,wait:1,reset,advance"), _wait))
        assert final.stage == 1
        assert [e.message for e in final.log][0] == "System Initialized. Re-scanning..."
        assert len(final.log) == 2


class TestRender:
    def test_intro(self):
        _, ctrl = _simulated()
        text = render_snapshot(ctrl.snapshot())
        assert text.startswith("[SYSTEM READY] stage 0")
        assert "Flood Response Protocol" in text

    def test_detection_shows_level_and_band_status(self):
        _, ctrl = _simulated()
        ctrl.advance()
        ctrl.apply_stimulus("rain")
        text = render_snapshot(ctrl.snapshot())
        assert "[CRITICAL EVENT] stage 1 - 1. Detection (Meraki MV72)" in text
        assert "Water level: 40% (2.0m)" in text
        assert "Status: RISING" in text

    def test_monitoring_shows_link_state(self):
        clock, ctrl = _simulated()
        ctrl.advance()
        ctrl.advance()
        clock.advance(3)
        assert "PACKET LOSS 98%" in render_snapshot(ctrl.snapshot())

    def test_log_tail_is_limited(self):
        _, ctrl = _simulated()
        for _ in range(5):
            ctrl.advance()
        text = render_snapshot(ctrl.snapshot(), log_tail=2)
        assert text.count("  > [") == 2
        assert "RECOVERY COMPLETE" in text
