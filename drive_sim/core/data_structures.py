"""Core data structures for the holonomic drive simulator.

This module defines the value types shared by the motion core, the input
collaborators and the render collaborator. All distances are in inches and
all angles in radians.
"""

import math
from dataclasses import dataclass
from enum import Enum, auto
import numpy as np


class DriveMode(Enum):
    """How controller axes are interpreted."""
    ROBOT_CENTRIC = auto()
    FIELD_CENTRIC = auto()


class DriveType(Enum):
    """Drive train of the simulated robot.

    MECANUM is holonomic. TANK is a differential drive and cannot strafe.
    """
    MECANUM = auto()
    TANK = auto()


@dataclass
class Pose:
    """Robot pose in field coordinates.

    Attributes:
        x: X position [in]
        y: Y position [in]
        heading: Heading [rad], 0 along field +X, counter-clockwise positive
    """
    x: float = 0.0
    y: float = 0.0
    heading: float = 0.0

    def to_array(self) -> np.ndarray:
        """Convert to numpy array [x, y, heading]."""
        return np.array([self.x, self.y, self.heading])

    @classmethod
    def from_array(cls, arr) -> 'Pose':
        """Create from array-like [x, y, heading]."""
        return cls(x=float(arr[0]), y=float(arr[1]), heading=float(arr[2]))


@dataclass(frozen=True)
class KinematicLimits:
    """Per-axis speed, acceleration and braking caps.

    Attributes:
        max_linear_speed: Linear speed cap [in/s]
        max_linear_accel: Linear acceleration cap [in/s²]
        max_linear_brake_accel: Linear braking cap [in/s²]
        max_yaw_speed: Yaw speed cap [rad/s]
        max_yaw_accel: Yaw acceleration cap [rad/s²]
        max_yaw_brake_accel: Yaw braking cap [rad/s²]

    Brake caps are usually at least the matching accel caps so the robot
    stops sharply, but that ordering is not required.
    """
    max_linear_speed: float
    max_linear_accel: float
    max_linear_brake_accel: float
    max_yaw_speed: float
    max_yaw_accel: float
    max_yaw_brake_accel: float

    def __post_init__(self):
        """Reject negative or NaN caps."""
        for name, value in self.as_dict().items():
            if math.isnan(value) or value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")

    def as_dict(self) -> dict:
        return {
            'max_linear_speed': self.max_linear_speed,
            'max_linear_accel': self.max_linear_accel,
            'max_linear_brake_accel': self.max_linear_brake_accel,
            'max_yaw_speed': self.max_yaw_speed,
            'max_yaw_accel': self.max_yaw_accel,
            'max_yaw_brake_accel': self.max_yaw_brake_accel,
        }


@dataclass(frozen=True)
class Footprint:
    """Static robot footprint, used only for drawing.

    Attributes:
        width: Side-to-side size [in]
        length: Front-to-back size [in]
    """
    width: float = 17.25
    length: float = 17.25


@dataclass(frozen=True)
class RobotSnapshot:
    """Read-only view of the robot handed to the render collaborator.

    Attributes:
        pose: Pose after this tick's update (a private copy)
        footprint: Robot footprint
        axial_vel: Robot-frame forward velocity [in/s]
        lateral_vel: Robot-frame strafe velocity [in/s]
        yaw_vel: Yaw velocity [rad/s]
        tick: Number of ticks completed
        time: Simulated time [s]
    """
    pose: Pose
    footprint: Footprint
    axial_vel: float = 0.0
    lateral_vel: float = 0.0
    yaw_vel: float = 0.0
    tick: int = 0
    time: float = 0.0

    @property
    def speed(self) -> float:
        """Linear speed magnitude [in/s]."""
        return math.hypot(self.axial_vel, self.lateral_vel)
