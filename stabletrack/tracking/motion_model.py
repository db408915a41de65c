"""
Constant-velocity motion model for bounding box tracking.

Provides the predict/correct cycle that carries a track's box across
frames where the detector misses it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from stabletrack.core.contracts import BoundingBox


DEFAULT_DT = 1.0 / 30.0  # one frame at 30 fps


@dataclass
class MotionState:
    """Box center and its velocity, in normalized units per second."""
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0


class MotionPredictor:
    """
    Constant-velocity predictor for a single track.

    State: [x_center, y_center, vx, vy]
    Size is taken verbatim from the latest measurement.

    Velocity stays at zero unless estimate_velocity is set, in which case
    each correction sets it to the displacement since the previous
    correction over the time predicted in between.
    """

    def __init__(self, bbox: BoundingBox, estimate_velocity: bool = False):
        """
        Initialize predictor with the first observed box.

        Args:
            bbox: Initial box
            estimate_velocity: Derive velocity from successive corrections
        """
        center_x, center_y = bbox.center
        self.state = MotionState(center_x, center_y)
        self.size: Tuple[float, float] = (bbox.width, bbox.height)
        self.estimate_velocity = estimate_velocity

        self._last_corrected: Tuple[float, float] = (center_x, center_y)
        self._elapsed: float = 0.0

    def predict(self, dt: Optional[float] = None) -> BoundingBox:
        """
        Advance the center by velocity * dt.

        Returns:
            Predicted bounding box
        """
        if dt is None:
            dt = DEFAULT_DT

        self.state.x += self.state.vx * dt
        self.state.y += self.state.vy * dt
        self._elapsed += dt

        return self.predicted_box

    def correct(self, measurement: BoundingBox):
        """
        Reset center and size from a measured box.

        Args:
            measurement: Box of the detection matched to this track
        """
        center_x, center_y = measurement.center

        if self.estimate_velocity and self._elapsed > 0:
            last_x, last_y = self._last_corrected
            self.state.vx = (center_x - last_x) / self._elapsed
            self.state.vy = (center_y - last_y) / self._elapsed

        self.state.x = center_x
        self.state.y = center_y
        self.size = (measurement.width, measurement.height)

        self._last_corrected = (center_x, center_y)
        self._elapsed = 0.0

    @property
    def predicted_box(self) -> BoundingBox:
        """Box of the current size centered on the current state."""
        width, height = self.size
        return BoundingBox.from_center(self.state.x, self.state.y, width, height)

    def get_velocity(self) -> Tuple[float, float]:
        """Get current velocity estimate (vx, vy)."""
        return self.state.vx, self.state.vy
