"""
Core data contracts for the tracking engine.

All components exchange these types:
- Detector output comes in as DetectedObject
- Tracker output goes out as TrackSnapshot
- Geometry is always a normalized BoundingBox in [0, 1] image space
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


# ============================================================
# ENUMERATIONS
# ============================================================

class TrackState(Enum):
    """Lifecycle stage of a track."""
    TENTATIVE = "tentative"
    CONFIRMED = "confirmed"
    LOST = "lost"


# ============================================================
# CORE DATA STRUCTURES
# ============================================================

@dataclass(frozen=True)
class BoundingBox:
    """
    Axis-aligned box in normalized image coordinates.

    (x, y) is the minimum corner. Coordinates are kept exactly as the
    detector reports them; nothing here clamps or validates them.
    """
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_center(
        cls,
        center_x: float,
        center_y: float,
        width: float,
        height: float,
    ) -> BoundingBox:
        return cls(center_x - width / 2, center_y - height / 2, width, height)

    @property
    def x_max(self) -> float:
        return self.x + self.width

    @property
    def y_max(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    @property
    def area(self) -> float:
        return self.width * self.height

    def iou(self, other: BoundingBox) -> float:
        """Calculate Intersection over Union with another box."""
        x_left = max(self.x, other.x)
        y_top = max(self.y, other.y)
        x_right = min(self.x_max, other.x_max)
        y_bottom = min(self.y_max, other.y_max)

        intersection = max(0.0, x_right - x_left) * max(0.0, y_bottom - y_top)
        union = self.area + other.area - intersection

        return intersection / union if union > 0 else 0.0


@dataclass(frozen=True)
class DetectedObject:
    """
    A single detector result for one frame.

    Attributes:
        label: Class label reported by the detector
        confidence: Detector score in [0, 1]
        bounding_box: Normalized box
    """
    label: str
    confidence: float
    bounding_box: BoundingBox


@dataclass(frozen=True)
class TrackSnapshot:
    """
    Read-only view of a live track, published once per frame.

    Safe to hand to other threads (UI, speech); it shares no state with
    the tracker that produced it.
    """
    track_id: int
    bounding_box: BoundingBox
    state: TrackState
    age: int
    missed_count: int

    # Last matched detection
    label: Optional[str] = None
    confidence: float = 0.0

    @property
    def is_confirmed(self) -> bool:
        return self.state is TrackState.CONFIRMED
