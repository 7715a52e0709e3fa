"""Tests for configuration loading and validation."""

import math
from pathlib import Path

import pytest
from loguru import logger

from drive_sim.config import (
    ConfigValidationError,
    SimulatorConfig,
    build_limits,
    build_motion_state,
    load_config,
    parse_drive_mode,
    parse_drive_type,
    validate_config,
)
from drive_sim.core import DriveMode, DriveType, Pose

SCENARIOS = Path(__file__).parent.parent / 'scenarios'


@pytest.fixture
def config():
    return SimulatorConfig()


def test_defaults_are_valid(config):
    validate_config(config)
    assert config.tick_period == 0.016
    assert config.start_pose == [0.0, 0.0, math.pi / 2]


def test_negative_cap_rejected(config):
    config.max_linear_accel = -1.0
    with pytest.raises(ConfigValidationError, match="max_linear_accel"):
        validate_config(config)


def test_all_errors_reported(config):
    config.tick_period = 0.0
    config.robot_width = 0.0
    config.drive_mode = 'sideways'
    with pytest.raises(ConfigValidationError) as excinfo:
        validate_config(config)
    message = str(excinfo.value)
    assert "tick_period" in message
    assert "robot_width" in message
    assert "drive_mode" in message


def test_start_pose_shape(config):
    config.start_pose = [0.0, 0.0]
    with pytest.raises(ConfigValidationError, match="start_pose"):
        validate_config(config)

    config.start_pose = [0.0, float('nan'), 0.0]
    with pytest.raises(ConfigValidationError, match="finite"):
        validate_config(config)


def test_brake_below_accel_only_warns(config):
    config.max_linear_brake_accel = 10.0
    messages = []
    handler_id = logger.add(messages.append, level="WARNING")
    try:
        validate_config(config)
    finally:
        logger.remove(handler_id)
    assert any("max_linear_brake_accel" in m for m in messages)


def test_load_config(tmp_path):
    path = tmp_path / "robot.yaml"
    path.write_text(
        "tick_period: 0.02\n"
        "start_pose: [12.0, -6.0, 0.0]\n"
        "drive_mode: field_centric\n"
        "drive_type: tank\n"
    )
    config = load_config(str(path))
    assert config.tick_period == 0.02
    assert config.start_pose == [12.0, -6.0, 0.0]
    assert config.config_path == str(path)
    assert parse_drive_mode(config.drive_mode) == DriveMode.FIELD_CENTRIC
    assert parse_drive_type(config.drive_type) == DriveType.TANK


def test_load_bundled_scenarios():
    for path in sorted(SCENARIOS.glob('*.yaml')):
        load_config(str(path))


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.yaml"))


def test_load_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    with pytest.raises(ValueError, match="empty"):
        load_config(str(path))


def test_load_unknown_key(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("warp_drive: true\n")
    with pytest.raises(ValueError, match="Invalid configuration structure"):
        load_config(str(path))


def test_load_invalid_values(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("max_yaw_speed: -2.0\n")
    with pytest.raises(ConfigValidationError):
        load_config(str(path))


def test_non_numeric_values_reported(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text(
        "max_linear_speed: fast\n"
        "trail_length: many\n"
        "start_pose: [0.0, north, 0.0]\n"
    )
    with pytest.raises(ConfigValidationError) as excinfo:
        load_config(str(path))
    message = str(excinfo.value)
    assert "max_linear_speed must be a number" in message
    assert "trail_length must be an integer" in message
    assert "start_pose must contain numbers" in message


def test_parse_unknown_names():
    with pytest.raises(ValueError):
        parse_drive_mode('diagonal')
    with pytest.raises(ValueError):
        parse_drive_type('swerve')


def test_build_motion_state(config):
    motion = build_motion_state(config)
    assert motion.pose == Pose(0.0, 0.0, math.pi / 2)
    assert motion.limits == build_limits(config)
    assert motion.limits.max_linear_brake_accel == 300.0
    assert motion.footprint.width == 17.25
    assert motion.axial_vel == 0.0


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
