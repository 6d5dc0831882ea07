"""Engine model and simulation step."""

import math

import numpy as np
import pytest

from engine import (
    Aspiration,
    EcuLimits,
    EngineConfig,
    EngineSimulation,
    Layout,
    PistonSpec,
    piston_positions,
    torque_estimate,
)


def running_engine(cfg=None, throttle=0.0):
    eng = EngineSimulation(cfg or EngineConfig())
    eng.start()
    eng.set_throttle(throttle)
    return eng


def test_construction_is_all_zero():
    eng = EngineSimulation(EngineConfig(cylinders=6))
    assert eng.rpm == 0.0 and eng.throttle == 0.0
    assert not eng.running
    assert eng.cycle_position == 0.0
    assert len(eng.piston_positions) == 6
    assert eng.torque == 0.0 and eng.horsepower == 0.0


def test_start_sets_idle_and_is_idempotent():
    eng = running_engine(throttle=1.0)
    assert eng.rpm == 800.0
    eng.update(0.5)
    rpm = eng.rpm
    eng.start()
    assert eng.rpm == rpm


def test_stop_clears_state_and_update_is_noop():
    eng = running_engine(throttle=0.6)
    eng.update(0.2)
    eng.stop()
    assert (eng.running, eng.rpm, eng.throttle) == (False, 0.0, 0.0)

    before = eng.get_state()
    for dt in (0.0, 0.016, 1.0, 100.0):
        eng.update(dt)
    assert eng.get_state() == before


def test_throttle_while_stopped_has_no_visible_effect():
    eng = EngineSimulation()
    eng.set_throttle(0.5)
    eng.update(1.0)
    assert eng.rpm == 0.0
    assert eng.throttle == pytest.approx(0.5)


def test_reference_scenario_one_second_full_throttle():
    cfg = EngineConfig(
        displacement_cc=2000,
        piston=PistonSpec(stroke_mm=86),
        aspiration=Aspiration.NATURAL,
        ecu=EcuLimits(idle_rpm=800, redline_rpm=7000, rev_limit_rpm=7500),
    )
    eng = running_engine(cfg, throttle=1.0)
    eng.update(1.0)

    # 800 + (1000 - 800 * 0.05) * 1
    assert eng.rpm == pytest.approx(1760.0)
    assert eng.torque == pytest.approx(110.0)
    assert eng.horsepower == pytest.approx(110.0 * 1760.0 / 5252.0)


def test_rev_limiter_and_idle_floor():
    eng = running_engine(throttle=1.0)
    eng.update(1000.0)
    assert eng.rpm == 7500.0

    idle = running_engine(throttle=0.0)
    idle.update(1.0)
    assert idle.rpm == 800.0


def test_rpm_and_cycle_stay_in_range_for_random_steps():
    rng = np.random.default_rng(7)
    eng = running_engine()
    for _ in range(500):
        eng.throttle = float(rng.uniform(0.0, 1.0))
        eng.update(float(rng.uniform(0.0, 0.5)))
        assert 800.0 <= eng.rpm <= 7500.0
        assert 0.0 <= eng.cycle_position < 1.0
        assert np.all((eng.piston_positions >= 0.0) & (eng.piston_positions <= 1.0))
        assert eng.horsepower == eng.torque * eng.rpm / 5252.0


def test_negative_dt_is_ignored():
    eng = running_engine(throttle=1.0)
    eng.update(-1.0)
    assert eng.rpm == 800.0
    assert eng.cycle_position == 0.0


def test_cycle_position_advances_with_rpm():
    eng = running_engine()
    eng.update(0.01)
    assert eng.cycle_position == pytest.approx(800.0 / 60.0 * 0.01)


def test_piston_positions_four_cylinders_at_zero():
    pos = piston_positions(0.0, 4).tolist()
    expected = [abs(math.sin(i / 4 * 2 * math.pi)) for i in range(4)]
    assert pos == pytest.approx(expected)
    assert pos == pytest.approx([0.0, 1.0, 0.0, 1.0], abs=1e-12)


def test_piston_positions_follow_cycle_position():
    pos = piston_positions(0.125, 3).tolist()
    expected = [abs(math.sin((0.125 + i / 3) * 2 * math.pi)) for i in range(3)]
    assert pos == pytest.approx(expected)


def test_throttle_clamps_at_one():
    eng = running_engine()
    eng.set_throttle(0.95)
    for _ in range(9):
        eng.set_throttle(0.1)
    assert eng.throttle == 1.0

    for _ in range(15):
        eng.set_throttle(-0.1)
    assert eng.throttle == 0.0


def test_torque_idle_floor_and_monotonic_in_throttle():
    cfg = EngineConfig()
    assert torque_estimate(cfg, 0.0) == 10.0
    values = [torque_estimate(cfg, t) for t in np.linspace(0.0, 1.0, 21)]
    assert all(b >= a for a, b in zip(values, values[1:]))


@pytest.mark.parametrize("aspiration, expected", [
    (Aspiration.NATURAL, 110.0),
    (Aspiration.SUPERCHARGED, 130.0),
    (Aspiration.TURBO, 140.0),
])
def test_aspiration_factor(aspiration, expected):
    assert torque_estimate(EngineConfig(aspiration=aspiration), 1.0) == pytest.approx(expected)


@pytest.mark.parametrize("kwargs", [
    {"stroke_type": 3},
    {"cylinders": 0},
    {"displacement_cc": 0},
    {"ecu": EcuLimits(idle_rpm=900, redline_rpm=800, rev_limit_rpm=7500)},
    {"ecu": EcuLimits(idle_rpm=800, redline_rpm=7600, rev_limit_rpm=7500)},
    {"ecu": EcuLimits(idle_rpm=0, redline_rpm=0, rev_limit_rpm=0)},
    {"aspiration": "diesel"},
    {"layout": "w12"},
])
def test_invalid_config_rejected(kwargs):
    with pytest.raises(ValueError):
        EngineConfig(**kwargs)


def test_with_overrides_skips_none():
    cfg = EngineConfig().with_overrides(cylinders=8, layout=None)
    assert cfg.cylinders == 8
    assert cfg.layout == EngineConfig().layout


def test_string_aspiration_and_layout_are_coerced():
    cfg = EngineConfig(aspiration="turbo", layout="v")
    assert cfg.aspiration is Aspiration.TURBO
    assert cfg.layout is Layout.V

    eng = running_engine(cfg, throttle=1.0)
    eng.update(1.0)
    assert eng.torque == pytest.approx(140.0)
