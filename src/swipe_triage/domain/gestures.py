"""Domain models for swipe gestures."""

from dataclasses import dataclass
from enum import StrEnum


class Direction(StrEnum):
    """Discrete outcome of a completed gesture."""

    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    NONE = "none"


SWIPE_DIRECTIONS = frozenset(
    {Direction.LEFT, Direction.RIGHT, Direction.UP, Direction.DOWN}
)


@dataclass(frozen=True)
class GestureSample:
    """Displacement and velocity of a single completed gesture."""

    dx: float
    dy: float
    velocity_x: float = 0.0
    velocity_y: float = 0.0
    timestamp: float | None = None


@dataclass(frozen=True)
class GestureThresholds:
    """Distance (dp) and speed (dp/s) a gesture must reach to count."""

    distance: float = 100.0
    velocity: float = 500.0
