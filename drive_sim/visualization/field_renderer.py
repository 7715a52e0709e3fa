"""Field view of the simulated robot.

Draws the 144" square field centred on the origin and the robot footprint
with wheel pads and a heading marker. Blue alliance sees the field rotated
by 180°.
"""

import os
from collections import deque
from enum import Enum, auto
from pathlib import Path
from typing import Dict, Optional, Tuple

import numpy as np
import matplotlib

# Fall back to a non-GUI backend unless the user picked one
if os.environ.get("MPLBACKEND") is None:
    matplotlib.use("Agg")

import matplotlib.pyplot as plt
from matplotlib.patches import Polygon
from loguru import logger

from ..core.data_structures import RobotSnapshot
from ..core.frame_transforms import wrap_to_two_pi

FIELD_SIZE = 144.0  # inches
TILE_SIZE = 24.0
WHEEL_LENGTH = 4.0
WHEEL_WIDTH = 2.0
WHEEL_INSET = 1.0


class Alliance(Enum):
    """Match alliance; sets the view rotation and robot colours."""
    RED = auto()
    BLUE = auto()


ALLIANCE_COLORS: Dict[Alliance, Dict[str, Tuple[int, int, int, int]]] = {
    Alliance.RED: {'body': (237, 28, 36, 200), 'wheel': (119, 13, 18, 200)},
    Alliance.BLUE: {'body': (46, 49, 146, 200), 'wheel': (23, 25, 73, 200)},
}


def parse_alliance(name: str) -> Alliance:
    try:
        return Alliance[name.upper()]
    except KeyError:
        raise ValueError(f"Unknown alliance '{name}', expected 'red' or 'blue'") from None


def _rgba(color: Tuple[int, int, int, int]) -> Tuple[float, float, float, float]:
    return tuple(c / 255.0 for c in color)


def _rect(x0: float, y0: float, dx: float, dy: float) -> np.ndarray:
    """Corners of an axis-aligned rectangle, counter-clockwise."""
    return np.array([
        [x0, y0],
        [x0 + dx, y0],
        [x0 + dx, y0 + dy],
        [x0, y0 + dy],
    ])


def robot_shapes(snapshot: RobotSnapshot) -> Dict[str, np.ndarray]:
    """Robot outline, wheel pads and heading marker in field coordinates.

    In the robot frame +x is forward (along the length) and +y is to the
    left (along the width).

    Returns:
        Dict with 'body', 'marker' and 'wheels' ([4, 4, 2]) corner arrays
    """
    length = snapshot.footprint.length
    width = snapshot.footprint.width
    half_l, half_w = length / 2.0, width / 2.0

    body = _rect(-half_l, -half_w, length, width)

    front = half_l - WHEEL_LENGTH - WHEEL_INSET
    rear = -half_l + WHEEL_INSET
    left = half_w - WHEEL_WIDTH - WHEEL_INSET
    right = -half_w + WHEEL_INSET
    wheels = np.stack([
        _rect(front, left, WHEEL_LENGTH, WHEEL_WIDTH),   # front left
        _rect(front, right, WHEEL_LENGTH, WHEEL_WIDTH),  # front right
        _rect(rear, left, WHEEL_LENGTH, WHEEL_WIDTH),    # rear left
        _rect(rear, right, WHEEL_LENGTH, WHEEL_WIDTH),   # rear right
    ])

    marker_len = length / 3.0
    marker_w = width * 0.05
    marker = _rect(marker_len / 2.0, -marker_w / 2.0, marker_len, marker_w)

    pose = snapshot.pose
    c, s = np.cos(pose.heading), np.sin(pose.heading)
    rot = np.array([[c, -s], [s, c]])
    offset = np.array([pose.x, pose.y])

    def to_field(points: np.ndarray) -> np.ndarray:
        return points @ rot.T + offset

    return {
        'body': to_field(body),
        'wheels': to_field(wheels),
        'marker': to_field(marker),
    }


class FieldRenderer:
    """Render collaborator drawing the robot on a matplotlib figure.

    Args:
        alliance: Alliance colours and view orientation
        trail_length: Number of recent positions kept for the trail
        figsize: Figure size (width, height) in inches
        dpi: Dots per inch for saved frames
        ax: Existing axes to draw into (a new figure is created if None)
    """

    def __init__(
        self,
        alliance: Alliance = Alliance.RED,
        trail_length: int = 120,
        figsize: Tuple[float, float] = (8, 8),
        dpi: int = 100,
        ax: Optional[plt.Axes] = None
    ):
        self.alliance = alliance
        self.dpi = dpi
        self.trail = deque(maxlen=trail_length)
        self.snapshot: Optional[RobotSnapshot] = None
        self.frames_published = 0

        if ax is None:
            self.fig, self.ax = plt.subplots(figsize=figsize, dpi=dpi)
        else:
            self.ax = ax
            self.fig = ax.figure

        self._setup_field()
        self._create_artists()

        logger.info(f"Field renderer initialized ({alliance.name} alliance)")

    def _setup_field(self):
        ax = self.ax
        half = FIELD_SIZE / 2.0
        ax.set_aspect('equal', adjustable='box')
        ax.set_facecolor((0.5, 0.5, 0.5))
        ax.set_xlabel('X [in]')
        ax.set_ylabel('Y [in]')
        ax.set_title('Field', fontsize=12, fontweight='bold')

        ticks = np.arange(-half, half + TILE_SIZE, TILE_SIZE)
        for t in ticks:
            ax.plot([t, t], [-half, half], color='black', linewidth=0.5, alpha=0.3, zorder=1)
            ax.plot([-half, half], [t, t], color='black', linewidth=0.5, alpha=0.3, zorder=1)
        ax.plot([-half, half, half, -half, -half], [-half, -half, half, half, -half],
                color='black', linewidth=2.0, zorder=2)

        if self.alliance == Alliance.BLUE:
            ax.set_xlim(half, -half)
            ax.set_ylim(half, -half)
        else:
            ax.set_xlim(-half, half)
            ax.set_ylim(-half, half)

    def _create_artists(self):
        colors = ALLIANCE_COLORS[self.alliance]
        body_color = _rgba(colors['body'])
        wheel_color = _rgba(colors['wheel'])
        empty = np.zeros((4, 2))

        self.body_patch = Polygon(empty, closed=True, facecolor=body_color,
                                  edgecolor='black', linewidth=1.0, zorder=10)
        self.ax.add_patch(self.body_patch)

        self.wheel_patches = []
        for _ in range(4):
            patch = Polygon(empty, closed=True, facecolor=wheel_color,
                            edgecolor='none', zorder=11)
            self.ax.add_patch(patch)
            self.wheel_patches.append(patch)

        self.marker_patch = Polygon(empty, closed=True, facecolor=wheel_color,
                                    edgecolor='none', zorder=12)
        self.ax.add_patch(self.marker_patch)

        self.trail_line, = self.ax.plot([], [], '-', color=body_color[:3],
                                        alpha=0.4, linewidth=1.0, zorder=5)
        self.info_text = self.ax.text(
            0.02, 0.98, '', transform=self.ax.transAxes, fontsize=9,
            verticalalignment='top',
            bbox=dict(boxstyle='round', facecolor='white', alpha=0.8)
        )

    def publish(self, snapshot: RobotSnapshot):
        """Update the drawing from one tick's snapshot."""
        self.snapshot = snapshot
        self.frames_published += 1
        self.trail.append((snapshot.pose.x, snapshot.pose.y))

        shapes = robot_shapes(snapshot)
        self.body_patch.set_xy(shapes['body'])
        for patch, corners in zip(self.wheel_patches, shapes['wheels']):
            patch.set_xy(corners)
        self.marker_patch.set_xy(shapes['marker'])

        if self.trail:
            trail = np.array(self.trail)
            self.trail_line.set_data(trail[:, 0], trail[:, 1])
        else:
            self.trail_line.set_data([], [])

        pose = snapshot.pose
        self.info_text.set_text(
            f"t = {snapshot.time:.2f} s\n"
            f"x = {pose.x:.1f} in, y = {pose.y:.1f} in\n"
            f"heading = {np.degrees(wrap_to_two_pi(pose.heading)):.0f}°\n"
            f"speed = {snapshot.speed:.1f} in/s"
        )

    def save_frame(self, output_path):
        """Save the current view as an image."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.fig.savefig(output_path, dpi=self.dpi)
        logger.info(f"Saved frame to {output_path}")

    def close(self):
        plt.close(self.fig)
