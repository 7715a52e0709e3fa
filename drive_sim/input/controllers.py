"""Drive input sources.

Any object with ``poll()`` and the three axis accessors can drive the
simulator. Axes are normalized to [-1, 1]:

- axial: +1 full forward, -1 full reverse
- lateral: +1 full right, -1 full left
- yaw: +1 full counter-clockwise, -1 full clockwise

``poll()`` is called once per tick before the accessors are read.
"""

from enum import Enum, auto
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Tuple, runtime_checkable
from loguru import logger


@runtime_checkable
class DriveController(Protocol):
    """Capability interface for drive inputs."""

    def poll(self) -> None:
        ...

    def get_axial(self) -> float:
        ...

    def get_lateral(self) -> float:
        ...

    def get_yaw(self) -> float:
        ...


class Key(Enum):
    """Logical drive keys."""
    FORWARD = auto()
    BACKWARD = auto()
    LEFT = auto()
    RIGHT = auto()
    CLOCKWISE = auto()
    COUNTERCLOCKWISE = auto()


DEFAULT_KEY_BINDINGS: Dict[str, Key] = {
    'w': Key.FORWARD,
    's': Key.BACKWARD,
    'a': Key.LEFT,
    'd': Key.RIGHT,
    'q': Key.COUNTERCLOCKWISE,
    'e': Key.CLOCKWISE,
}


class KeyboardController:
    """Keyboard input mapping WASD to translation and QE to rotation.

    Key events may arrive at any time; the axes only change on ``poll()``.

    Args:
        bindings: Map from key name to logical key (case-insensitive)
    """

    def __init__(self, bindings: Optional[Dict[str, Key]] = None):
        source = bindings if bindings is not None else DEFAULT_KEY_BINDINGS
        self.bindings = {name.lower(): key for name, key in source.items()}
        self.keys: Dict[Key, bool] = {k: False for k in Key}
        self._axial = 0.0
        self._lateral = 0.0
        self._yaw = 0.0

    def press(self, key_name: str):
        self._set(key_name, True)

    def release(self, key_name: str):
        self._set(key_name, False)

    def release_all(self):
        for k in self.keys:
            self.keys[k] = False

    def _set(self, key_name: Optional[str], pressed: bool):
        if not key_name:
            return
        key = self.bindings.get(key_name.lower())
        if key is None:
            return
        self.keys[key] = pressed

    def poll(self):
        k = self.keys
        self._axial = float(k[Key.FORWARD]) - float(k[Key.BACKWARD])
        self._lateral = float(k[Key.RIGHT]) - float(k[Key.LEFT])
        self._yaw = float(k[Key.COUNTERCLOCKWISE]) - float(k[Key.CLOCKWISE])

    def get_axial(self) -> float:
        return self._axial

    def get_lateral(self) -> float:
        return self._lateral

    def get_yaw(self) -> float:
        return self._yaw


class ConstantController:
    """Holds the same axes on every tick."""

    def __init__(self, axial: float = 0.0, lateral: float = 0.0, yaw: float = 0.0):
        self.axial = axial
        self.lateral = lateral
        self.yaw = yaw

    def poll(self):
        pass

    def get_axial(self) -> float:
        return self.axial

    def get_lateral(self) -> float:
        return self.lateral

    def get_yaw(self) -> float:
        return self.yaw


class ScriptedController:
    """Replays a fixed sequence of (axial, lateral, yaw) inputs, one per poll.

    Args:
        steps: Input triples in tick order
        hold_last: After the script ends, keep the last triple (True) or
            return zeros (False)
    """

    def __init__(self, steps: Iterable[Sequence[float]], hold_last: bool = True):
        self.steps: List[Tuple[float, float, float]] = []
        for i, step in enumerate(steps):
            if len(step) != 3:
                raise ValueError(
                    f"Script step {i} must have 3 elements [axial, lateral, yaw], got {len(step)}"
                )
            self.steps.append((float(step[0]), float(step[1]), float(step[2])))
        self.hold_last = hold_last
        self.index = 0
        self._current = (0.0, 0.0, 0.0)
        logger.debug(f"Scripted controller loaded with {len(self.steps)} steps")

    @property
    def finished(self) -> bool:
        return self.index >= len(self.steps)

    def poll(self):
        if self.index < len(self.steps):
            self._current = self.steps[self.index]
            self.index += 1
        elif not self.hold_last:
            self._current = (0.0, 0.0, 0.0)

    def get_axial(self) -> float:
        return self._current[0]

    def get_lateral(self) -> float:
        return self._current[1]

    def get_yaw(self) -> float:
        return self._current[2]
