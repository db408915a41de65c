"""
Object Tracking Module.

Responsibilities:
- Persistent object ID assignment
- Constant-velocity motion prediction
- Optimal (Munkres) track/detection assignment
- Tentative/confirmed/lost lifecycle
"""

from .object_tracker import ObjectTracker
from .motion_model import MotionPredictor, MotionState
from .matching import (
    ByteTrackMatcher,
    GreedyMatcher,
    HungarianMatcher,
    TrackMatcher,
    get_matcher,
    list_matchers,
)
from .track import Track
