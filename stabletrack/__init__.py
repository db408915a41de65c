"""
stabletrack

Stable identities for objects detected frame-by-frame in a video stream,
so label recognition, speech feedback and overlays can refer to "the same
object" across detector noise, occlusion and brief disappearance.

Inputs and outputs are plain data:
- DetectedObject per detection per frame in
- TrackSnapshot per live track per frame out
"""

from stabletrack.core.config import TrackerConfig, load_config
from stabletrack.core.contracts import (
    BoundingBox,
    DetectedObject,
    TrackSnapshot,
    TrackState,
)
from stabletrack.tracking.object_tracker import ObjectTracker

__version__ = "0.1.0"

__all__ = [
    "BoundingBox",
    "DetectedObject",
    "ObjectTracker",
    "TrackSnapshot",
    "TrackState",
    "TrackerConfig",
    "load_config",
]
