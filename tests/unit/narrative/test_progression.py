"""Tests for narrative progression rules."""

from narrative import (
    AlertStatus,
    RiskBand,
    StageView,
    alert_status,
    apply_rain,
    apply_rise,
    can_advance,
    next_stage,
    risk_band,
    stage_info,
    view_for,
    water_height_m,
)


def test_next_stage_moves_by_one_and_holds_at_final():
    assert next_stage(0) == 1
    assert next_stage(4) == 5
    assert next_stage(5) == 5


def test_can_advance_only_before_final_stage():
    assert can_advance(0)
    assert can_advance(4)
    assert not can_advance(5)


def test_risk_band_boundaries():
    assert risk_band(39) == RiskBand.NORMAL
    assert risk_band(40) == RiskBand.WARNING
    assert risk_band(69) == RiskBand.WARNING
    assert risk_band(70) == RiskBand.CRITICAL
    assert risk_band(0) == RiskBand.NORMAL
    assert risk_band(100) == RiskBand.CRITICAL


def test_water_height_is_level_over_twenty():
    assert water_height_m(20) == 1.0
    assert water_height_m(50) == 2.5
    assert water_height_m(95) == 4.75


def test_apply_rain_clamps_at_95():
    levels = [20]
    for _ in range(4):
        levels.append(apply_rain(levels[-1]))
    assert levels == [20, 40, 60, 80, 95]
    assert apply_rain(95) == 95


def test_apply_rise_clamps_at_85():
    assert apply_rise(20) == 25
    assert apply_rise(83) == 85
    assert apply_rise(85) == 85


def test_alert_status_follows_stage():
    assert alert_status(0) == AlertStatus.READY
    assert alert_status(1) == AlertStatus.CRITICAL
    assert alert_status(4) == AlertStatus.CRITICAL
    assert alert_status(5) == AlertStatus.RECOVERED


def test_stage_table_maps_each_stage_to_a_view():
    assert stage_info(0) is None
    assert view_for(0) == StageView.INTRO
    assert [view_for(n) for n in range(1, 6)] == [
        StageView.DETECTION,
        StageView.MONITORING,
        StageView.ANALYSIS,
        StageView.EXECUTION,
        StageView.RESOLUTION,
    ]
    assert stage_info(2).title == "2. Monitoring (ThousandEyes)"
    assert stage_info(5).log_message.startswith("System: Connection Restored")
