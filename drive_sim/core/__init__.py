"""Core module: value types, motion state and drive-frame mapping."""

from .data_structures import (
    DriveMode,
    DriveType,
    Pose,
    KinematicLimits,
    Footprint,
    RobotSnapshot,
)
from .frame_transforms import (
    robot_to_field,
    field_to_robot,
    wrap_to_two_pi,
)
from .motion_state import MotionState, ramp_toward
from .drive_frame import DriveFrameMapper

__all__ = [
    'DriveMode',
    'DriveType',
    'Pose',
    'KinematicLimits',
    'Footprint',
    'RobotSnapshot',
    'robot_to_field',
    'field_to_robot',
    'wrap_to_two_pi',
    'MotionState',
    'ramp_toward',
    'DriveFrameMapper',
]
