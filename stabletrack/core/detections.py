"""
Helpers for the detector side of the tracker.

The capture pipeline drops weak and tiny detections before they reach the
tracker, and overlay/speech consumers look detections back up by position
since the tracker does not expose which detection fed which track.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from .contracts import DetectedObject, TrackSnapshot


def filter_detections(
    detections: Iterable[DetectedObject],
    min_confidence: float = 0.9,
    min_area: float = 0.01,
) -> List[DetectedObject]:
    """
    Keep detections that clear both the confidence and area floors.

    Args:
        detections: Raw detector output for one frame
        min_confidence: Minimum detector score
        min_area: Minimum normalized box area (0.01 = 1% of the frame)

    Returns:
        Filtered detections in their original order
    """
    return [
        det for det in detections
        if det.confidence >= min_confidence and det.bounding_box.area >= min_area
    ]


def find_detection_for_track(
    track: TrackSnapshot,
    detections: Sequence[DetectedObject],
    tolerance: float = 0.01,
) -> Optional[DetectedObject]:
    """Get the first detection centered within tolerance of the track."""
    track_x, track_y = track.bounding_box.center
    for det in detections:
        det_x, det_y = det.bounding_box.center
        if abs(det_x - track_x) < tolerance and abs(det_y - track_y) < tolerance:
            return det
    return None
