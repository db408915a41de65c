"""
Object Tracker with Persistent Identity.

Guarantees:
- Track IDs are unique for the lifetime of the tracker and never reused
- A track survives up to max_missed_frames consecutive misses
- Published snapshots are immutable and ordered by track ID
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from loguru import logger

from stabletrack.core.config import TrackerConfig
from stabletrack.core.contracts import DetectedObject, TrackSnapshot
from .matching import TrackMatcher, get_matcher
from .track import Track


class ObjectTracker:
    """
    Multi-object tracker: motion prediction, optimal matching and a
    tentative/confirmed/lost lifecycle.

    Not thread-safe. Call update() once per frame from a single producer
    and share the returned snapshots with any readers.
    """

    def __init__(
        self,
        config: Optional[TrackerConfig] = None,
        matcher: Optional[TrackMatcher] = None,
    ):
        """
        Initialize object tracker.

        Args:
            config: Tracker configuration (defaults if omitted)
            matcher: Matching strategy; looked up from config.matcher if omitted
        """
        self.config = config or TrackerConfig()
        self.matcher = matcher or get_matcher(self.config.matcher)

        # Live tracks in creation order, which is also ID order
        self._tracks: Dict[int, Track] = {}

        # ID generation
        self._next_id: int = 0

        self._frame_count: int = 0

    def update(
        self,
        detections: Sequence[DetectedObject],
        dt: Optional[float] = None,
    ) -> List[TrackSnapshot]:
        """
        Update tracks with one frame of detections.

        Args:
            detections: Detector output for the frame
            dt: Seconds since the previous frame (config.frame_interval if omitted)

        Returns:
            Snapshots of all live tracks
        """
        self._frame_count += 1
        if dt is None:
            dt = self.config.frame_interval

        # Predict new positions for existing tracks
        for track in self._tracks.values():
            track.predict(dt)

        # Match detections to existing tracks
        current = list(self._tracks.values())
        pairs = self.matcher.match(current, detections, self.config)

        # Update matched tracks
        matched_ids = set()
        used_detections = set()
        for track_idx, det_idx in pairs:
            track = current[track_idx]
            previous_state = track.state
            track.mark_matched(detections[det_idx], self.config.min_hits_to_confirm)
            if track.state is not previous_state:
                logger.debug(f"Track confirmed: {track.track_id} (age {track.age})")
            matched_ids.add(track.track_id)
            used_detections.add(det_idx)

        # Handle unmatched tracks
        for track in current:
            if track.track_id in matched_ids:
                continue
            track.mark_missed(self.config.max_missed_frames)
            if track.is_lost:
                del self._tracks[track.track_id]
                logger.debug(
                    f"Track lost: {track.track_id} (missed {track.missed_count} frames)"
                )

        # Create new tracks for unmatched strong detections
        for det_idx, detection in enumerate(detections):
            if det_idx in used_detections:
                continue
            if detection.confidence < self.config.high_confidence_threshold:
                continue
            self._spawn(detection)

        return self.tracks

    def _spawn(self, detection: DetectedObject) -> Track:
        track = Track.from_detection(
            self._generate_id(),
            detection,
            estimate_velocity=self.config.estimate_velocity,
        )
        self._tracks[track.track_id] = track
        logger.debug(f"New track created: {track.track_id} ({detection.label})")
        return track

    def _generate_id(self) -> int:
        """Allocate the next track ID."""
        track_id = self._next_id
        self._next_id += 1
        return track_id

    @property
    def tracks(self) -> List[TrackSnapshot]:
        """Snapshots of all live tracks, ordered by ID."""
        return [track.snapshot() for track in self._tracks.values()]

    def get_track(self, track_id: int) -> Optional[TrackSnapshot]:
        """Get the latest state of a track by its ID."""
        track = self._tracks.get(track_id)
        if track:
            return track.snapshot()
        return None

    def reset(self):
        """Drop all tracks. IDs keep counting up so none is ever reused."""
        self._tracks.clear()
        self._frame_count = 0
        logger.info("Object tracker reset")

    @property
    def active_track_count(self) -> int:
        """Number of currently live tracks."""
        return len(self._tracks)

    @property
    def frame_count(self) -> int:
        """Frames processed since construction or the last reset."""
        return self._frame_count
