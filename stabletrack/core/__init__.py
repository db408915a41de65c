"""
Core contracts and configuration for the tracking engine.

Per-frame flow (NEVER REORDER):
1. Predict every live track forward
2. Match tracks to detections
3. Correct matched tracks
4. Age and evict unmatched tracks
5. Spawn tracks for strong unmatched detections
6. Publish snapshots
"""

from .contracts import (
    BoundingBox,
    DetectedObject,
    TrackSnapshot,
    TrackState,
)
from .config import TrackerConfig, load_config
from .detections import filter_detections, find_detection_for_track
