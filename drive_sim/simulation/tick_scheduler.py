"""Fixed-timestep loop driving the motion core.

Each tick polls the input source, maps its axes to velocity targets, ramps
and integrates the motion state, and publishes a snapshot to the renderer.
The loop can be ticked by hand (headless, deterministic) or run in real time
on a background thread.
"""

import threading
import time
from enum import Enum, auto
from typing import Callable, List, Optional, Protocol
from loguru import logger

from ..core.data_structures import DriveMode, RobotSnapshot
from ..core.drive_frame import DriveFrameMapper
from ..core.motion_state import MotionState
from ..config import (
    SimulatorConfig,
    build_motion_state,
    parse_drive_mode,
    parse_drive_type,
)
from ..input.controllers import DriveController


class RenderTarget(Protocol):
    """Anything that accepts one snapshot per tick."""

    def publish(self, snapshot: RobotSnapshot) -> None:
        ...


class SchedulerState(Enum):
    """Scheduler lifecycle states."""
    IDLE = auto()
    RUNNING = auto()
    STOPPED = auto()


class TickScheduler:
    """Drives poll → map → update → publish at a fixed period.

    ``dt`` handed to the motion state is always ``period``; wall-clock jitter
    and missed deadlines are not compensated, so simulated time is
    ``tick_count * period``.

    Args:
        motion: Motion state to advance
        controller: Input source polled once per tick
        mode: Robot- or field-centric driving
        mapper: Axis-to-target mapper (default: mecanum)
        renderer: Optional object with ``publish(snapshot)``
        period: Tick period [s] (default: 0.016, ~60 Hz)
        log_every: Emit a debug summary every N ticks (0 disables)
    """

    def __init__(
        self,
        motion: MotionState,
        controller: DriveController,
        mode: DriveMode = DriveMode.ROBOT_CENTRIC,
        mapper: Optional[DriveFrameMapper] = None,
        renderer: Optional[RenderTarget] = None,
        period: float = 0.016,
        log_every: int = 60
    ):
        if not period > 0:
            raise ValueError(f"period must be positive, got {period}")

        self.motion = motion
        self.controller = controller
        self.mode = mode
        self.mapper = mapper if mapper is not None else DriveFrameMapper()
        self.renderer = renderer
        self.period = period
        self.log_every = log_every

        self.state = SchedulerState.IDLE
        self.tick_count = 0
        self._listeners: List[Callable[[RobotSnapshot], None]] = []

        # Guards the tick body and the published snapshot
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._error: Optional[BaseException] = None
        self._latest = motion.snapshot()

        logger.info(
            f"Tick scheduler initialized: period={period * 1000:.1f}ms, "
            f"mode={mode.name}, drive={self.mapper.drive_type.name}"
        )

    @classmethod
    def from_config(
        cls,
        config: SimulatorConfig,
        controller: DriveController,
        renderer: Optional[RenderTarget] = None,
        log_every: int = 60
    ) -> "TickScheduler":
        """Build a motion state, mapper and scheduler from a configuration."""
        return cls(
            motion=build_motion_state(config),
            controller=controller,
            mode=parse_drive_mode(config.drive_mode),
            mapper=DriveFrameMapper(parse_drive_type(config.drive_type)),
            renderer=renderer,
            period=config.tick_period,
            log_every=log_every,
        )

    @property
    def time(self) -> float:
        """Simulated time [s]."""
        return self.tick_count * self.period

    @property
    def latest_snapshot(self) -> RobotSnapshot:
        """Snapshot published by the last completed tick."""
        with self._lock:
            return self._latest

    @property
    def is_running(self) -> bool:
        return self.state == SchedulerState.RUNNING

    def add_listener(self, callback: Callable[[RobotSnapshot], None]):
        """Register an extra callback that receives every published snapshot."""
        self._listeners.append(callback)

    def tick(self) -> RobotSnapshot:
        """Run one update cycle and publish the resulting snapshot.

        Returns:
            The snapshot published this tick
        """
        with self._lock:
            c = self.controller
            c.poll()
            motion = self.motion
            target_axial, target_lateral, target_yaw = self.mapper.map(
                c.get_axial(), c.get_lateral(), c.get_yaw(),
                motion.heading, self.mode, motion.limits
            )
            motion.set_target_linear(target_axial, target_lateral)
            motion.set_target_yaw(target_yaw)
            motion.update(self.period)

            self.tick_count += 1
            snapshot = motion.snapshot(tick=self.tick_count, time=self.time)
            self._latest = snapshot

        if self.renderer is not None:
            self.renderer.publish(snapshot)
        for callback in self._listeners:
            callback(snapshot)

        if self.log_every and self.tick_count % self.log_every == 0:
            p = snapshot.pose
            logger.debug(
                f"Tick {self.tick_count}, t={snapshot.time:.2f}s, "
                f"pose=({p.x:.1f}, {p.y:.1f}, {p.heading:.2f}), "
                f"v=({snapshot.axial_vel:.1f}, {snapshot.lateral_vel:.1f}, {snapshot.yaw_vel:.2f})"
            )

        return snapshot

    def run(self, n_ticks: Optional[int] = None, duration: Optional[float] = None) -> RobotSnapshot:
        """Tick synchronously without waiting on a clock.

        Args:
            n_ticks: Number of ticks to run
            duration: Simulated duration [s], used when n_ticks is None

        Returns:
            The last published snapshot
        """
        if n_ticks is None:
            if duration is None:
                raise ValueError("Either n_ticks or duration must be given")
            n_ticks = int(round(duration / self.period))

        logger.info(f"Running {n_ticks} ticks (T={n_ticks * self.period:.2f}s)")
        snapshot = self.latest_snapshot
        for _ in range(n_ticks):
            snapshot = self.tick()
        return snapshot

    def start(self):
        """Start ticking in real time on a background thread.

        Raises:
            RuntimeError: If a loop thread is still alive, including one
                whose ``stop()`` timed out
        """
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("Tick scheduler is already running")

        self._stop_event.clear()
        self._error = None
        self.state = SchedulerState.RUNNING
        self._thread = threading.Thread(
            target=self._loop, name="tick-scheduler", daemon=True
        )
        self._thread.start()
        logger.info(f"Tick scheduler started at {1.0 / self.period:.1f} Hz")

    def stop(self, timeout: Optional[float] = None):
        """Stop the real-time loop and wait for it to finish.

        If the loop thread does not finish within ``timeout`` the scheduler
        stays RUNNING; call ``stop()`` again to wait for it.

        Raises:
            Exception: Re-raises an error that ended the loop early
        """
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
            if thread.is_alive():
                logger.warning(f"Tick loop still running {timeout}s after stop was requested")
                return
            self._thread = None
        if self.state == SchedulerState.RUNNING:
            self.state = SchedulerState.STOPPED
            logger.info(f"Tick scheduler stopped after {self.tick_count} ticks")

        if self._error is not None:
            error, self._error = self._error, None
            raise error

    def _loop(self):
        next_deadline = time.monotonic()
        try:
            while not self._stop_event.is_set():
                self.tick()
                next_deadline += self.period
                delay = next_deadline - time.monotonic()
                if delay > 0:
                    self._stop_event.wait(delay)
                else:
                    # Behind schedule: drop the missed ticks instead of bursting
                    next_deadline = time.monotonic()
        except Exception as e:
            logger.exception(f"Tick loop failed at tick {self.tick_count}: {e}")
            self._error = e
            self.state = SchedulerState.STOPPED
