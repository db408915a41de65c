"""
Matching strategies: turn (tracks, detections) into assignment pairs.

To add a new strategy:
1. Subclass TrackMatcher and implement match()
2. Register it in the MATCHERS dict below

Every strategy returns (track_index, detection_index) pairs with each
index used at most once. Indices refer to the sequences passed in.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Sequence, Tuple, Type

import numpy as np

from stabletrack.core.config import TrackerConfig
from stabletrack.core.contracts import DetectedObject
from . import hungarian
from .cost import cost_matrix
from .track import Track


Pairs = List[Tuple[int, int]]


class TrackMatcher(ABC):
    """Abstract base class for track/detection association policies."""

    @abstractmethod
    def match(
        self,
        tracks: Sequence[Track],
        detections: Sequence[DetectedObject],
        config: TrackerConfig,
    ) -> Pairs:
        """
        Associate live tracks with the current frame's detections.

        Args:
            tracks: Live tracks, already moved to their predicted boxes
            detections: Detections for the current frame
            config: Tracker configuration

        Returns:
            (track_index, detection_index) pairs
        """


class HungarianMatcher(TrackMatcher):
    """
    Optimal assignment on 1 - IoU cost.

    No gating: every track is paired with some detection whenever there
    are enough detections, even with zero overlap. match_threshold and
    low_confidence_threshold are not consulted.
    """

    def match(
        self,
        tracks: Sequence[Track],
        detections: Sequence[DetectedObject],
        config: TrackerConfig,
    ) -> Pairs:
        if not tracks or not detections:
            return []
        return hungarian.solve(cost_matrix(tracks, detections))


class GreedyMatcher(TrackMatcher):
    """Repeatedly take the lowest-cost pair while cost <= match_threshold."""

    def match(
        self,
        tracks: Sequence[Track],
        detections: Sequence[DetectedObject],
        config: TrackerConfig,
    ) -> Pairs:
        if not tracks or not detections:
            return []

        cost = cost_matrix(tracks, detections)
        pairs: Pairs = []

        while True:
            t_idx, d_idx = np.unravel_index(np.argmin(cost), cost.shape)
            if cost[t_idx, d_idx] > config.match_threshold:
                break
            pairs.append((int(t_idx), int(d_idx)))

            # Retire matched row and column
            cost[t_idx, :] = np.inf
            cost[:, d_idx] = np.inf

        return pairs


class ByteTrackMatcher(TrackMatcher):
    """
    Two-stage cascade in the style of ByteTrack.

    Stage 1: all tracks against high-confidence detections, pairs gated
    at match_threshold.
    Stage 2: tracks left over against low-confidence detections
    (low_confidence_threshold <= score < high_confidence_threshold),
    gated at SECOND_STAGE_MAX_COST. Detections below the low threshold
    are ignored.

    Low-confidence detections can keep a track alive through a weak
    frame but never create one, since the tracker only spawns from
    high-confidence leftovers.
    """

    SECOND_STAGE_MAX_COST = 0.5

    def match(
        self,
        tracks: Sequence[Track],
        detections: Sequence[DetectedObject],
        config: TrackerConfig,
    ) -> Pairs:
        if not tracks or not detections:
            return []

        high = [
            i for i, det in enumerate(detections)
            if det.confidence >= config.high_confidence_threshold
        ]
        low = [
            i for i, det in enumerate(detections)
            if config.low_confidence_threshold <= det.confidence < config.high_confidence_threshold
        ]

        pairs = self._gated_stage(
            tracks, detections, list(range(len(tracks))), high, config.match_threshold
        )

        matched_tracks = {t_idx for t_idx, _ in pairs}
        remaining = [i for i in range(len(tracks)) if i not in matched_tracks]
        pairs += self._gated_stage(
            tracks, detections, remaining, low, self.SECOND_STAGE_MAX_COST
        )
        return pairs

    @staticmethod
    def _gated_stage(
        tracks: Sequence[Track],
        detections: Sequence[DetectedObject],
        track_indices: List[int],
        detection_indices: List[int],
        max_cost: float,
    ) -> Pairs:
        if not track_indices or not detection_indices:
            return []

        cost = cost_matrix(
            [tracks[i] for i in track_indices],
            [detections[j] for j in detection_indices],
        )
        return [
            (track_indices[r], detection_indices[c])
            for r, c in hungarian.solve(cost)
            if cost[r, c] <= max_cost
        ]


# Registry of available matchers
MATCHERS: Dict[str, Type[TrackMatcher]] = {
    "hungarian": HungarianMatcher,
    "greedy": GreedyMatcher,
    "bytetrack": ByteTrackMatcher,
}


def get_matcher(name: str) -> TrackMatcher:
    """Get a matcher instance by name.

    Raises:
        ValueError: If matcher name is not registered
    """
    if name not in MATCHERS:
        available = ", ".join(MATCHERS.keys())
        raise ValueError(f"Unknown matcher '{name}'. Available: {available}")

    return MATCHERS[name]()


def list_matchers() -> List[str]:
    """List available matcher names."""
    return list(MATCHERS.keys())
