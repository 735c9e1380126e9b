"""Gesture classification for swipe triage."""

import math
from dataclasses import dataclass, field

from swipe_triage.domain.gestures import Direction, GestureSample, GestureThresholds


@dataclass
class GestureClassifier:
    """Turns a completed gesture into a discrete swipe direction."""

    thresholds: GestureThresholds = field(default_factory=GestureThresholds)

    def classify(self, sample: GestureSample) -> Direction:
        """Return the swipe direction, or ``Direction.NONE`` below thresholds.

        Either threshold is enough to make a decision. The direction follows the
        dominant displacement axis; equal magnitudes resolve to the vertical axis.
        """
        if not self.is_gesture_significant(speed_of(sample), distance_of(sample)):
            return Direction.NONE
        if abs(sample.dx) > abs(sample.dy):
            return Direction.RIGHT if sample.dx > 0 else Direction.LEFT
        return Direction.DOWN if sample.dy > 0 else Direction.UP

    def is_gesture_significant(self, speed: float, distance: float) -> bool:
        """Return True when either speed or distance reaches its threshold."""
        return (
            speed >= self.thresholds.velocity or distance >= self.thresholds.distance
        )

    def confidence(self, speed: float, distance: float) -> float:
        """Blend normalized speed and distance into a score in [0, 1]."""
        speed_score = _ratio(speed, 2 * self.thresholds.velocity)
        distance_score = _ratio(distance, 2 * self.thresholds.distance)
        return min(1.0, max(0.0, (speed_score + distance_score) / 2))


def speed_of(sample: GestureSample) -> float:
    """Return the magnitude of the sample's velocity vector."""
    return math.hypot(sample.velocity_x, sample.velocity_y)


def distance_of(sample: GestureSample) -> float:
    """Return the magnitude of the sample's displacement vector."""
    return math.hypot(sample.dx, sample.dy)


def _ratio(value: float, limit: float) -> float:
    if limit <= 0:
        return 1.0
    return min(1.0, value / limit)
