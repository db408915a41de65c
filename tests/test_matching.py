import pytest

from stabletrack.core.config import TrackerConfig
from stabletrack.core.contracts import BoundingBox, DetectedObject
from stabletrack.tracking.matching import (
    ByteTrackMatcher,
    GreedyMatcher,
    HungarianMatcher,
    TrackMatcher,
    get_matcher,
    list_matchers,
)
from stabletrack.tracking.track import Track


CONFIG = TrackerConfig()


def make_track(track_id: int, x: float, y: float, size: float = 0.2) -> Track:
    det = DetectedObject("obj", 0.9, BoundingBox(x, y, size, size))
    return Track.from_detection(track_id, det)


def make_detection(x: float, y: float, confidence: float = 0.9, size: float = 0.2) -> DetectedObject:
    return DetectedObject("obj", confidence, BoundingBox(x, y, size, size))


def test_hungarian_pairs_by_overlap():
    tracks = [make_track(0, 0.1, 0.1), make_track(1, 0.6, 0.6)]
    detections = [make_detection(0.61, 0.6), make_detection(0.1, 0.12)]

    pairs = HungarianMatcher().match(tracks, detections, CONFIG)
    assert sorted(pairs) == [(0, 1), (1, 0)]


def test_hungarian_is_not_gated():
    tracks = [make_track(0, 0.0, 0.0)]
    detections = [make_detection(0.7, 0.7)]

    # Zero overlap still yields a pair with the default matcher
    assert HungarianMatcher().match(tracks, detections, CONFIG) == [(0, 0)]


@pytest.mark.parametrize("matcher", [HungarianMatcher(), GreedyMatcher(), ByteTrackMatcher()])
def test_empty_inputs_give_no_pairs(matcher):
    tracks = [make_track(0, 0.1, 0.1)]
    detections = [make_detection(0.1, 0.1)]
    assert matcher.match([], detections, CONFIG) == []
    assert matcher.match(tracks, [], CONFIG) == []
    assert matcher.match([], [], CONFIG) == []


def test_greedy_takes_best_overlap_first_and_gates():
    tracks = [make_track(0, 0.1, 0.1), make_track(1, 0.5, 0.5)]
    detections = [make_detection(0.12, 0.1), make_detection(0.9, 0.0, size=0.1)]

    pairs = GreedyMatcher().match(tracks, detections, CONFIG)
    assert pairs == [(0, 0)]


def test_greedy_respects_match_threshold():
    tracks = [make_track(0, 0.1, 0.1)]
    # IoU = 1/3 -> cost 2/3
    detections = [make_detection(0.2, 0.1)]

    assert GreedyMatcher().match(tracks, detections, TrackerConfig(match_threshold=0.7)) == [(0, 0)]
    assert GreedyMatcher().match(tracks, detections, TrackerConfig(match_threshold=0.5)) == []


def test_bytetrack_prefers_high_confidence_detections():
    tracks = [make_track(0, 0.1, 0.1)]
    detections = [
        make_detection(0.1, 0.1, confidence=0.3),
        make_detection(0.11, 0.1, confidence=0.9),
    ]
    assert ByteTrackMatcher().match(tracks, detections, CONFIG) == [(0, 1)]


def test_bytetrack_second_stage_uses_low_confidence_detections():
    tracks = [make_track(0, 0.1, 0.1), make_track(1, 0.6, 0.6)]
    detections = [
        make_detection(0.1, 0.1, confidence=0.9),
        make_detection(0.6, 0.61, confidence=0.2),
        make_detection(0.6, 0.6, confidence=0.05),
    ]

    pairs = ByteTrackMatcher().match(tracks, detections, CONFIG)
    assert sorted(pairs) == [(0, 0), (1, 1)]


def test_bytetrack_second_stage_is_gated_tighter():
    tracks = [make_track(0, 0.1, 0.1)]
    # IoU = 1/3 -> cost 2/3, above the 0.5 second-stage gate
    detections = [make_detection(0.2, 0.1, confidence=0.3)]
    assert ByteTrackMatcher().match(tracks, detections, CONFIG) == []


def test_registry():
    assert list_matchers() == ["hungarian", "greedy", "bytetrack"]
    assert isinstance(get_matcher("hungarian"), HungarianMatcher)
    assert isinstance(get_matcher("bytetrack"), TrackMatcher)
    with pytest.raises(ValueError, match="Unknown matcher"):
        get_matcher("nearest")
