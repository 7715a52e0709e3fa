"""Visualization module for the drive simulator."""

from .field_renderer import (
    Alliance,
    FieldRenderer,
    parse_alliance,
    robot_shapes,
)
from .interactive import attach_keyboard, run_interactive

__all__ = [
    'Alliance',
    'FieldRenderer',
    'parse_alliance',
    'robot_shapes',
    'attach_keyboard',
    'run_interactive',
]
