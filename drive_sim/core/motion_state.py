"""Acceleration-limited motion state of the simulated robot.

Velocities are kept in the robot frame on three independent axes (axial,
lateral, yaw). Each tick every axis ramps toward its target under either the
acceleration cap or the braking cap, then the pose is integrated:

    dx = (axial·cosθ − lateral·sinθ) · dt
    dy = (axial·sinθ + lateral·cosθ) · dt
    dθ = yaw · dt

θ is the heading before the update; heading is never wrapped.
"""

from typing import Optional
import numpy as np

from .data_structures import Pose, KinematicLimits, Footprint, RobotSnapshot
from .frame_transforms import robot_to_field


def _clamp(value: float, limit: float) -> float:
    # np.clip keeps NaN instead of picking a bound
    return float(np.clip(value, -limit, limit))


def ramp_toward(current: float, target: float,
                accel_limit: float, brake_limit: float, dt: float) -> float:
    """Move one velocity toward its target by at most one tick of acceleration.

    The step is accelerating only when the target is non-zero and the change
    points the same way as the target; every other case, including a zero
    target, uses the braking cap.

    Args:
        current: Current velocity
        target: Target velocity
        accel_limit: Acceleration cap for this axis
        brake_limit: Braking cap for this axis
        dt: Time step [s]

    Returns:
        New velocity, never past the target
    """
    delta = target - current
    accelerating = target != 0 and np.sign(delta) == np.sign(target)
    cap = (accel_limit if accelerating else brake_limit) * dt
    return current + float(np.clip(delta, -cap, cap))


class MotionState:
    """Pose and velocity state of one robot.

    Args:
        limits: Kinematic caps, shared read-only
        pose: Initial pose (copied); defaults to the origin facing +X
        footprint: Robot footprint, carried for the renderer
    """

    def __init__(self, limits: KinematicLimits,
                 pose: Optional[Pose] = None,
                 footprint: Optional[Footprint] = None):
        self.limits = limits
        self.footprint = footprint if footprint is not None else Footprint()
        start = pose if pose is not None else Pose()
        self.pose = Pose(start.x, start.y, start.heading)

        # Current velocities (robot frame)
        self.axial_vel = 0.0
        self.lateral_vel = 0.0
        self.yaw_vel = 0.0

        # Targets, already clamped to the speed caps
        self.target_axial_vel = 0.0
        self.target_lateral_vel = 0.0
        self.target_yaw_vel = 0.0

    @property
    def heading(self) -> float:
        return self.pose.heading

    def set_target_linear(self, axial: float, lateral: float):
        """Set desired linear velocities [in/s], each clamped to the speed cap."""
        self.target_axial_vel = _clamp(axial, self.limits.max_linear_speed)
        self.target_lateral_vel = _clamp(lateral, self.limits.max_linear_speed)

    def set_target_yaw(self, yaw: float):
        """Set desired yaw velocity [rad/s], clamped to the yaw speed cap."""
        self.target_yaw_vel = _clamp(yaw, self.limits.max_yaw_speed)

    def stop(self):
        """Zero all current and target velocities at once."""
        self.axial_vel = 0.0
        self.lateral_vel = 0.0
        self.yaw_vel = 0.0
        self.target_axial_vel = 0.0
        self.target_lateral_vel = 0.0
        self.target_yaw_vel = 0.0

    def update(self, dt: float):
        """Ramp velocities toward their targets and integrate the pose.

        Args:
            dt: Time step [s]
        """
        lim = self.limits
        self.axial_vel = ramp_toward(
            self.axial_vel, self.target_axial_vel,
            lim.max_linear_accel, lim.max_linear_brake_accel, dt)
        self.lateral_vel = ramp_toward(
            self.lateral_vel, self.target_lateral_vel,
            lim.max_linear_accel, lim.max_linear_brake_accel, dt)
        self.yaw_vel = ramp_toward(
            self.yaw_vel, self.target_yaw_vel,
            lim.max_yaw_accel, lim.max_yaw_brake_accel, dt)

        dx, dy = robot_to_field(self.axial_vel * dt, self.lateral_vel * dt,
                                self.pose.heading)
        self.pose.x += dx
        self.pose.y += dy
        self.pose.heading += self.yaw_vel * dt

    def set_pose(self, x: float, y: float, heading: float):
        """Teleport the robot. Velocities are left unchanged."""
        self.pose.x = x
        self.pose.y = y
        self.pose.heading = heading

    def snapshot(self, tick: int = 0, time: float = 0.0) -> RobotSnapshot:
        """Immutable copy of the current pose and velocities."""
        return RobotSnapshot(
            pose=Pose(self.pose.x, self.pose.y, self.pose.heading),
            footprint=self.footprint,
            axial_vel=self.axial_vel,
            lateral_vel=self.lateral_vel,
            yaw_vel=self.yaw_vel,
            tick=tick,
            time=time,
        )
