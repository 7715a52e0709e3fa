"""Tests for the acceleration-limited motion state."""

import dataclasses
import math

import numpy as np
import pytest

from drive_sim.core import (
    Footprint,
    KinematicLimits,
    MotionState,
    Pose,
    ramp_toward,
)

DT = 1.0 / 60.0


@pytest.fixture
def limits():
    return KinematicLimits(
        max_linear_speed=60.0,
        max_linear_accel=60.0,
        max_linear_brake_accel=300.0,
        max_yaw_speed=math.pi,
        max_yaw_accel=math.pi,
        max_yaw_brake_accel=math.pi,
    )


@pytest.fixture
def motion(limits):
    return MotionState(limits, pose=Pose(0.0, 0.0, 0.0))


def _cruise(motion, axial=0.0, lateral=0.0, yaw=0.0):
    """Put the robot at a steady velocity without ramping."""
    motion.axial_vel = motion.target_axial_vel = axial
    motion.lateral_vel = motion.target_lateral_vel = lateral
    motion.yaw_vel = motion.target_yaw_vel = yaw


def test_negative_cap_rejected():
    with pytest.raises(ValueError, match="max_yaw_accel"):
        KinematicLimits(60.0, 60.0, 300.0, math.pi, -1.0, math.pi)


def test_brake_below_accel_allowed():
    lim = KinematicLimits(60.0, 100.0, 10.0, 1.0, 1.0, 0.5)
    assert lim.max_linear_brake_accel < lim.max_linear_accel


def test_set_target_linear_clamps(motion):
    motion.set_target_linear(100.0, -250.0)
    assert motion.target_axial_vel == 60.0
    assert motion.target_lateral_vel == -60.0

    motion.set_target_linear(12.5, -3.0)
    assert motion.target_axial_vel == 12.5
    assert motion.target_lateral_vel == -3.0


def test_set_target_yaw_clamps(motion):
    motion.set_target_yaw(10.0)
    assert motion.target_yaw_vel == pytest.approx(math.pi)
    motion.set_target_yaw(-10.0)
    assert motion.target_yaw_vel == pytest.approx(-math.pi)


def test_targets_do_not_move_robot_until_update(motion):
    motion.set_target_linear(60.0, 0.0)
    assert motion.axial_vel == 0.0
    assert motion.pose.x == 0.0


def test_ramp_monotonic_approach(motion):
    """Velocity grows toward the target without overshoot."""
    motion.set_target_linear(60.0, 0.0)
    previous = 0.0
    for _ in range(90):
        motion.update(DT)
        assert motion.axial_vel >= previous
        assert motion.axial_vel <= 60.0
        previous = motion.axial_vel
    assert motion.axial_vel == pytest.approx(60.0)


def test_ramp_first_step_uses_accel_cap(motion):
    motion.set_target_linear(60.0, -60.0)
    motion.update(DT)
    assert motion.axial_vel == pytest.approx(60.0 * DT)
    assert motion.lateral_vel == pytest.approx(-60.0 * DT)


def test_zero_target_uses_brake_cap(motion):
    _cruise(motion, axial=60.0)
    motion.set_target_linear(0.0, 0.0)
    motion.update(DT)
    assert motion.axial_vel == pytest.approx(60.0 - 300.0 * DT)


def test_slowing_to_smaller_target_uses_brake_cap(motion):
    _cruise(motion, axial=60.0)
    motion.set_target_linear(30.0, 0.0)
    motion.update(DT)
    assert motion.axial_vel == pytest.approx(60.0 - 300.0 * DT)


def test_brake_never_overshoots_zero(motion):
    _cruise(motion, axial=2.0)
    motion.set_target_linear(0.0, 0.0)
    motion.update(DT)
    assert motion.axial_vel == 0.0


def test_yaw_ramp_uses_yaw_caps(motion):
    motion.set_target_yaw(math.pi)
    motion.update(DT)
    assert motion.yaw_vel == pytest.approx(math.pi * DT)


def test_ramp_toward_equal_caps():
    assert ramp_toward(10.0, 0.0, 5.0, 5.0, 1.0) == pytest.approx(5.0)
    assert ramp_toward(-10.0, 0.0, 5.0, 5.0, 1.0) == pytest.approx(-5.0)
    assert ramp_toward(0.0, -3.0, 5.0, 1.0, 1.0) == pytest.approx(-3.0)


def test_speed_stays_within_caps(limits):
    """Ramping toward clamped targets never exceeds the speed caps."""
    rng = np.random.default_rng(7)
    motion = MotionState(limits)
    for _ in range(500):
        a, l, y = rng.uniform(-3.0, 3.0, size=3)
        motion.set_target_linear(a * 60.0, l * 60.0)
        motion.set_target_yaw(y * math.pi)
        motion.update(DT)
        assert abs(motion.axial_vel) <= 60.0 + 1e-9
        assert abs(motion.lateral_vel) <= 60.0 + 1e-9
        assert abs(motion.yaw_vel) <= math.pi + 1e-9


def test_pose_integration_zero_heading(motion):
    _cruise(motion, axial=30.0)
    motion.update(DT)
    assert motion.pose.x == pytest.approx(30.0 * DT)
    assert motion.pose.y == pytest.approx(0.0)
    assert motion.pose.heading == 0.0


def test_pose_integration_quarter_turn(motion):
    motion.set_pose(0.0, 0.0, math.pi / 2)
    _cruise(motion, axial=30.0)
    motion.update(DT)
    assert motion.pose.x == pytest.approx(0.0, abs=1e-12)
    assert motion.pose.y == pytest.approx(30.0 * DT)


def test_lateral_is_ccw_of_forward(motion):
    _cruise(motion, lateral=30.0)
    motion.update(DT)
    assert motion.pose.x == pytest.approx(0.0, abs=1e-12)
    assert motion.pose.y == pytest.approx(30.0 * DT)


def test_integration_uses_pre_update_heading(motion):
    _cruise(motion, axial=30.0, yaw=math.pi)
    motion.update(DT)
    assert motion.pose.x == pytest.approx(30.0 * DT)
    assert motion.pose.y == pytest.approx(0.0)
    assert motion.pose.heading == pytest.approx(math.pi * DT)


def test_heading_not_wrapped(motion):
    _cruise(motion, yaw=math.pi)
    for _ in range(180):
        motion.update(DT)
    assert motion.pose.heading == pytest.approx(3 * math.pi)


def test_stop_resets_instantly(motion):
    motion.set_target_linear(60.0, 20.0)
    motion.set_target_yaw(1.0)
    for _ in range(30):
        motion.update(DT)
    motion.stop()
    before = motion.pose.to_array()
    motion.update(DT)
    assert np.array_equal(motion.pose.to_array(), before)
    assert (motion.axial_vel, motion.lateral_vel, motion.yaw_vel) == (0.0, 0.0, 0.0)
    assert motion.target_axial_vel == 0.0
    assert motion.target_yaw_vel == 0.0


def test_set_pose_keeps_velocity(motion):
    _cruise(motion, axial=20.0, yaw=0.5)
    motion.set_pose(10.0, -5.0, 1.0)
    assert motion.pose == Pose(10.0, -5.0, 1.0)
    assert motion.axial_vel == 20.0
    assert motion.yaw_vel == 0.5


def test_initial_pose_is_copied(limits):
    start = Pose(1.0, 2.0, 0.3)
    motion = MotionState(limits, pose=start)
    motion.set_pose(5.0, 5.0, 0.0)
    assert start == Pose(1.0, 2.0, 0.3)


def test_nan_target_propagates(motion):
    motion.set_target_linear(float('nan'), 0.0)
    motion.update(DT)
    assert math.isnan(motion.axial_vel)
    assert math.isnan(motion.pose.x)
    assert motion.lateral_vel == 0.0


def test_nan_is_deterministic(limits):
    results = []
    for _ in range(2):
        motion = MotionState(limits)
        motion.set_target_linear(float('nan'), 10.0)
        motion.set_target_yaw(float('nan'))
        for _ in range(3):
            motion.update(DT)
        results.append(np.isnan(motion.pose.to_array()))
    assert np.array_equal(results[0], results[1])


def test_infinite_dt_does_not_raise(motion):
    with np.errstate(invalid='ignore'):
        motion.update(float('inf'))
        motion.update(DT)
    assert math.isnan(motion.pose.x)


def test_snapshot_is_independent_copy(motion):
    _cruise(motion, axial=30.0)
    snap = motion.snapshot(tick=3, time=0.05)
    motion.update(DT)
    assert snap.pose.x == 0.0
    assert snap.axial_vel == 30.0
    assert snap.tick == 3
    assert snap.footprint == Footprint()
    with pytest.raises(dataclasses.FrozenInstanceError):
        snap.tick = 4


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
