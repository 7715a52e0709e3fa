"""Rotation helpers between the robot frame and the field frame.

Robot frame: +axial is the robot's forward direction, +lateral is 90° counter-
clockwise from it. Field frame: heading 0 points along +X, increasing heading
turns counter-clockwise.
"""

import math
import numpy as np
from typing import Tuple


def robot_to_field(axial: float, lateral: float, heading: float) -> Tuple[float, float]:
    """Rotate a robot-frame vector into the field frame.

    Args:
        axial: Forward component
        lateral: Sideways component
        heading: Robot heading [rad]

    Returns:
        (x, y) components in the field frame
    """
    cos_h = float(np.cos(heading))
    sin_h = float(np.sin(heading))
    return axial * cos_h - lateral * sin_h, axial * sin_h + lateral * cos_h


def field_to_robot(field_x: float, field_y: float, heading: float) -> Tuple[float, float]:
    """Rotate a field-frame vector into the robot frame (inverse of robot_to_field).

    Args:
        field_x: Component along field +X
        field_y: Component along field +Y
        heading: Robot heading [rad]

    Returns:
        (axial, lateral) components in the robot frame
    """
    cos_h = float(np.cos(heading))
    sin_h = float(np.sin(heading))
    return field_x * cos_h + field_y * sin_h, field_y * cos_h - field_x * sin_h


def wrap_to_two_pi(angle: float) -> float:
    """Wrap angle to [0, 2*pi) for display."""
    wrapped = float(np.mod(angle, 2.0 * math.pi))
    # A tiny negative angle rounds up to exactly 2*pi
    if wrapped >= 2.0 * math.pi:
        wrapped = 0.0
    return wrapped
