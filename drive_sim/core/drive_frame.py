"""Mapping of normalized controller axes to robot-frame velocity targets."""

from typing import Tuple

from .data_structures import DriveMode, DriveType, KinematicLimits
from .frame_transforms import field_to_robot


class DriveFrameMapper:
    """Stateless converter from controller axes to target velocities.

    Robot-centric input is passed straight through. Field-centric input is
    read as a velocity along the field axes (axial along field +X at heading
    0, lateral 90° counter-clockwise from it) and rotated into the robot
    frame by the inverse of the current heading, so the robot moves the same
    way over the field whatever its heading. Yaw never depends on the frame.

    Axes are not clamped here; MotionState clamps targets on assignment.

    Args:
        drive_type: TANK drops the lateral component, MECANUM keeps it
    """

    def __init__(self, drive_type: DriveType = DriveType.MECANUM):
        self.drive_type = drive_type

    def map(
        self,
        axial_in: float,
        lateral_in: float,
        yaw_in: float,
        heading: float,
        mode: DriveMode,
        limits: KinematicLimits
    ) -> Tuple[float, float, float]:
        """Compute (target_axial, target_lateral, target_yaw) in the robot frame.

        Args:
            axial_in: Forward axis, nominally in [-1, 1]
            lateral_in: Strafe axis, nominally in [-1, 1]
            yaw_in: Rotation axis, nominally in [-1, 1], +CCW
            heading: Current robot heading [rad]
            mode: Robot- or field-centric interpretation
            limits: Speed caps used to scale the axes

        Returns:
            Target axial [in/s], lateral [in/s] and yaw [rad/s] velocities
        """
        target_yaw = yaw_in * limits.max_yaw_speed

        fwd = axial_in * limits.max_linear_speed
        right = lateral_in * limits.max_linear_speed

        if mode == DriveMode.FIELD_CENTRIC:
            target_axial, target_lateral = field_to_robot(fwd, right, heading)
        else:
            target_axial, target_lateral = fwd, right

        if self.drive_type == DriveType.TANK:
            target_lateral = 0.0

        return target_axial, target_lateral, target_yaw
