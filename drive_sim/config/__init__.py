"""Configuration management module."""

import math
import yaml
from pathlib import Path
from typing import List, Optional
from dataclasses import dataclass, field
from loguru import logger

from ..core.data_structures import (
    DriveMode,
    DriveType,
    Footprint,
    KinematicLimits,
    Pose,
)
from ..core.motion_state import MotionState


DRIVE_MODES = {
    'robot_centric': DriveMode.ROBOT_CENTRIC,
    'field_centric': DriveMode.FIELD_CENTRIC,
}
DRIVE_TYPES = {
    'mecanum': DriveType.MECANUM,
    'tank': DriveType.TANK,
}
ALLIANCES = ('red', 'blue')


@dataclass
class SimulatorConfig:
    """Construction-time configuration of the simulator.

    Attributes:
        # Timing
        tick_period: Fixed tick period, also used as dt [s]

        # Robot
        start_pose: Initial pose [x, y, heading] in [in, in, rad]
        max_linear_speed: Linear speed cap [in/s]
        max_linear_accel: Linear acceleration cap [in/s²]
        max_linear_brake_accel: Linear braking cap [in/s²]
        max_yaw_speed: Yaw speed cap [rad/s]
        max_yaw_accel: Yaw acceleration cap [rad/s²]
        max_yaw_brake_accel: Yaw braking cap [rad/s²]
        robot_width: Footprint width [in]
        robot_length: Footprint length [in]

        # Driving
        drive_mode: 'robot_centric' or 'field_centric'
        drive_type: 'mecanum' or 'tank'

        # Display
        alliance: 'red' or 'blue'
        trail_length: Number of recent positions drawn behind the robot
    """
    # Timing
    tick_period: float = 0.016  # ~60 Hz

    # Robot
    start_pose: list = field(default_factory=lambda: [0.0, 0.0, math.pi / 2])
    max_linear_speed: float = 60.0
    max_linear_accel: float = 60.0
    max_linear_brake_accel: float = 300.0
    max_yaw_speed: float = math.pi
    max_yaw_accel: float = math.pi
    max_yaw_brake_accel: float = math.pi
    robot_width: float = 17.25
    robot_length: float = 17.25

    # Driving
    drive_mode: str = 'robot_centric'
    drive_type: str = 'mecanum'

    # Display
    alliance: str = 'red'
    trail_length: int = 120

    # Internal: loaded from
    config_path: Optional[str] = None


class ConfigValidationError(ValueError):
    """Raised when configuration validation fails."""
    pass


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_config(config: SimulatorConfig) -> None:
    """Validate configuration values for consistency and correctness.

    Args:
        config: Configuration to validate

    Raises:
        ConfigValidationError: If validation fails
    """
    errors: List[str] = []

    # Timing
    if not _is_number(config.tick_period):
        errors.append(f"tick_period must be a number, got {config.tick_period!r}")
    elif not config.tick_period > 0:
        errors.append(f"tick_period must be positive, got {config.tick_period}")

    # Start pose
    if not isinstance(config.start_pose, (list, tuple)) or len(config.start_pose) != 3:
        errors.append(f"start_pose must be a list [x, y, heading], got {config.start_pose!r}")
    elif not all(_is_number(v) for v in config.start_pose):
        errors.append(f"start_pose must contain numbers, got {config.start_pose!r}")
    elif not all(math.isfinite(v) for v in config.start_pose):
        errors.append(f"start_pose must be finite, got {config.start_pose}")

    # Kinematic caps
    caps = {
        'max_linear_speed': config.max_linear_speed,
        'max_linear_accel': config.max_linear_accel,
        'max_linear_brake_accel': config.max_linear_brake_accel,
        'max_yaw_speed': config.max_yaw_speed,
        'max_yaw_accel': config.max_yaw_accel,
        'max_yaw_brake_accel': config.max_yaw_brake_accel,
    }
    for name, value in caps.items():
        if not _is_number(value):
            errors.append(f"{name} must be a number, got {value!r}")
        elif not value >= 0:
            errors.append(f"{name} must be non-negative, got {value}")

    # Allowed, but the robot will not stop faster than it speeds up
    for axis in ('linear', 'yaw'):
        accel = caps[f'max_{axis}_accel']
        brake = caps[f'max_{axis}_brake_accel']
        if _is_number(accel) and _is_number(brake) and brake < accel:
            logger.warning(
                f"max_{axis}_brake_accel ({brake}) is below max_{axis}_accel ({accel})"
            )

    # Footprint
    for name in ('robot_width', 'robot_length'):
        value = getattr(config, name)
        if not _is_number(value):
            errors.append(f"{name} must be a number, got {value!r}")
        elif not value > 0:
            errors.append(f"{name} must be positive, got {value}")

    # Enumerations
    if str(config.drive_mode).lower() not in DRIVE_MODES:
        errors.append(f"drive_mode must be one of {list(DRIVE_MODES)}, got '{config.drive_mode}'")
    if str(config.drive_type).lower() not in DRIVE_TYPES:
        errors.append(f"drive_type must be one of {list(DRIVE_TYPES)}, got '{config.drive_type}'")
    if str(config.alliance).lower() not in ALLIANCES:
        errors.append(f"alliance must be one of {list(ALLIANCES)}, got '{config.alliance}'")

    if not isinstance(config.trail_length, int) or isinstance(config.trail_length, bool):
        errors.append(f"trail_length must be an integer, got {config.trail_length!r}")
    elif config.trail_length < 0:
        errors.append(f"trail_length must be non-negative, got {config.trail_length}")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigValidationError(error_msg)


def load_config(config_path: str) -> SimulatorConfig:
    """Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Loaded configuration
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            config_dict = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML file {config_path}: {e}") from e

    if config_dict is None:
        raise ValueError(f"YAML file {config_path} is empty or contains no valid content")
    if not isinstance(config_dict, dict):
        raise ValueError(f"YAML file {config_path} must contain a mapping, got {type(config_dict).__name__}")

    try:
        config = SimulatorConfig(**config_dict)
    except TypeError as e:
        raise ValueError(f"Invalid configuration structure in {config_path}: {e}") from e

    config.config_path = str(config_path)

    try:
        validate_config(config)
    except ConfigValidationError:
        logger.error(f"Configuration validation failed for {config_path}")
        raise

    logger.info(f"Configuration loaded and validated from {config_path}")

    return config


def parse_drive_mode(name: str) -> DriveMode:
    try:
        return DRIVE_MODES[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown drive mode '{name}', expected one of {list(DRIVE_MODES)}") from None


def parse_drive_type(name: str) -> DriveType:
    try:
        return DRIVE_TYPES[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown drive type '{name}', expected one of {list(DRIVE_TYPES)}") from None


def build_limits(config: SimulatorConfig) -> KinematicLimits:
    """Create the kinematic caps described by the configuration."""
    return KinematicLimits(
        max_linear_speed=config.max_linear_speed,
        max_linear_accel=config.max_linear_accel,
        max_linear_brake_accel=config.max_linear_brake_accel,
        max_yaw_speed=config.max_yaw_speed,
        max_yaw_accel=config.max_yaw_accel,
        max_yaw_brake_accel=config.max_yaw_brake_accel,
    )


def build_footprint(config: SimulatorConfig) -> Footprint:
    return Footprint(width=config.robot_width, length=config.robot_length)


def build_motion_state(config: SimulatorConfig) -> MotionState:
    """Create a motion state at the configured start pose."""
    return MotionState(
        limits=build_limits(config),
        pose=Pose.from_array(config.start_pose),
        footprint=build_footprint(config),
    )
