"""
Replay recorded detections through a tracker.

Input is JSON lines, one frame per line, each a list of detections:

    [{"label": "bottle", "confidence": 0.92, "box": [0.40, 0.40, 0.20, 0.20]}]

Boxes are [x, y, width, height] in normalized image coordinates.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from loguru import logger

from stabletrack.core.contracts import BoundingBox, DetectedObject, TrackSnapshot
from stabletrack.core.detections import filter_detections, find_detection_for_track
from stabletrack.tracking.object_tracker import ObjectTracker


def parse_detection(payload: Dict[str, Any]) -> DetectedObject:
    """Build a DetectedObject from its JSON form."""
    try:
        x, y, width, height = (float(v) for v in payload["box"])
        return DetectedObject(
            label=str(payload.get("label", "")),
            confidence=float(payload["confidence"]),
            bounding_box=BoundingBox(x, y, width, height),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Malformed detection {payload!r}: {exc}") from exc


def read_detection_frames(path: Union[str, Path]) -> Iterator[List[DetectedObject]]:
    """
    Yield one list of detections per non-empty line of a JSON-lines file.

    Raises:
        ValueError: If a line is not a JSON list of detections
    """
    with open(path, encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                payload = json.loads(line)
            except json.JSONDecodeError as exc:
                raise ValueError(f"{path}:{line_no}: invalid JSON ({exc.msg})") from exc
            if not isinstance(payload, list):
                raise ValueError(f"{path}:{line_no}: expected a list of detections")
            try:
                yield [parse_detection(item) for item in payload]
            except ValueError as exc:
                raise ValueError(f"{path}:{line_no}: {exc}") from exc


def snapshot_to_dict(snapshot: TrackSnapshot) -> Dict[str, Any]:
    """JSON-ready form of a track snapshot."""
    box = snapshot.bounding_box
    return {
        "id": snapshot.track_id,
        "state": snapshot.state.value,
        "box": [box.x, box.y, box.width, box.height],
        "age": snapshot.age,
        "missed": snapshot.missed_count,
        "label": snapshot.label,
        "confidence": snapshot.confidence,
    }


def replay(
    frames: Iterable[List[DetectedObject]],
    tracker: ObjectTracker,
    min_confidence: Optional[float] = None,
    min_area: float = 0.0,
) -> Iterator[Dict[str, Any]]:
    """
    Run frames through the tracker.

    Args:
        frames: Detections per frame
        tracker: Tracker to feed
        min_confidence: If set, drop detections below this score or min_area first
        min_area: Normalized area floor, applied together with min_confidence

    Yields:
        {"frame": index, "tracks": [snapshot dicts]} per frame, index from 0.
        Each track carries "visible": whether a detection this frame sits on it.
    """
    frame_index = -1
    for frame_index, detections in enumerate(frames):
        if min_confidence is not None:
            detections = filter_detections(detections, min_confidence, min_area)
        snapshots = tracker.update(detections)

        tracks = []
        for snapshot in snapshots:
            record = snapshot_to_dict(snapshot)
            record["visible"] = find_detection_for_track(snapshot, detections) is not None
            tracks.append(record)

        yield {"frame": frame_index, "tracks": tracks}

    logger.info(
        f"Replayed {frame_index + 1} frames, {tracker.active_track_count} tracks live at end"
    )
