"""
Track entity and its lifecycle state machine.

    TENTATIVE --(age >= min_hits)--> CONFIRMED
        |                                |
        +----(missed >= max_missed)------+--> LOST (terminal)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from stabletrack.core.contracts import (
    BoundingBox,
    DetectedObject,
    TrackSnapshot,
    TrackState,
)
from .motion_model import MotionPredictor


@dataclass
class Track:
    """Internal representation of a tracked object. Owned by the tracker."""
    track_id: int
    bounding_box: BoundingBox
    predictor: MotionPredictor

    age: int = 1
    missed_count: int = 0
    state: TrackState = TrackState.TENTATIVE

    label: Optional[str] = None
    confidence: float = 0.0

    @classmethod
    def from_detection(
        cls,
        track_id: int,
        detection: DetectedObject,
        estimate_velocity: bool = False,
    ) -> Track:
        bbox = detection.bounding_box
        return cls(
            track_id=track_id,
            bounding_box=bbox,
            predictor=MotionPredictor(bbox, estimate_velocity=estimate_velocity),
            label=detection.label,
            confidence=detection.confidence,
        )

    @property
    def is_lost(self) -> bool:
        return self.state is TrackState.LOST

    def predict(self, dt: Optional[float] = None):
        """Move the displayed box to the motion prediction."""
        self.bounding_box = self.predictor.predict(dt)

    def mark_matched(self, detection: DetectedObject, min_hits_to_confirm: int):
        """Apply a successful match to this track."""
        self.predictor.correct(detection.bounding_box)
        self.bounding_box = detection.bounding_box
        self.label = detection.label
        self.confidence = detection.confidence

        self.missed_count = 0
        self.age += 1
        if self.state is TrackState.TENTATIVE and self.age >= min_hits_to_confirm:
            self.state = TrackState.CONFIRMED

    def mark_missed(self, max_missed_frames: int):
        """Record a frame without a matching detection."""
        self.missed_count += 1
        if self.missed_count >= max_missed_frames:
            self.state = TrackState.LOST

    def snapshot(self) -> TrackSnapshot:
        return TrackSnapshot(
            track_id=self.track_id,
            bounding_box=self.bounding_box,
            state=self.state,
            age=self.age,
            missed_count=self.missed_count,
            label=self.label,
            confidence=self.confidence,
        )
