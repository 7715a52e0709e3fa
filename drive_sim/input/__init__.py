"""Drive input sources (keyboard, scripted, constant)."""

from .controllers import (
    DriveController,
    Key,
    DEFAULT_KEY_BINDINGS,
    KeyboardController,
    ConstantController,
    ScriptedController,
)

__all__ = [
    'DriveController',
    'Key',
    'DEFAULT_KEY_BINDINGS',
    'KeyboardController',
    'ConstantController',
    'ScriptedController',
]
