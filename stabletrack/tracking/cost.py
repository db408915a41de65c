"""Geometric cost between live tracks and current detections."""

from __future__ import annotations

from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from stabletrack.core.contracts import BoundingBox, DetectedObject
from .track import Track


def iou_matrix(
    track_boxes: Sequence[BoundingBox],
    detection_boxes: Sequence[BoundingBox],
) -> NDArray[np.float64]:
    """IoU of every track box (rows) against every detection box (columns)."""
    ious = np.zeros((len(track_boxes), len(detection_boxes)), dtype=np.float64)
    for t_idx, track_box in enumerate(track_boxes):
        for d_idx, det_box in enumerate(detection_boxes):
            ious[t_idx, d_idx] = track_box.iou(det_box)
    return ious


def cost_matrix(
    tracks: Sequence[Track],
    detections: Sequence[DetectedObject],
) -> NDArray[np.float64]:
    """
    Build the track x detection cost matrix.

    cost = 1 - IoU, so values lie in [0, 1] and lower is better.
    """
    ious = iou_matrix(
        [track.bounding_box for track in tracks],
        [det.bounding_box for det in detections],
    )
    return 1.0 - ious
