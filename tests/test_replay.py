import json
from pathlib import Path

import pytest

from main import main
from stabletrack import ObjectTracker
from stabletrack.replay import parse_detection, read_detection_frames, replay


def write_frames(path: Path, frames) -> Path:
    path.write_text("\n".join(json.dumps(frame) for frame in frames), encoding="utf-8")
    return path


BOTTLE = {"label": "bottle", "confidence": 0.9, "box": [0.4, 0.4, 0.2, 0.2]}


def test_parse_detection():
    det = parse_detection(BOTTLE)
    assert det.label == "bottle"
    assert det.confidence == 0.9
    assert det.bounding_box.width == 0.2


@pytest.mark.parametrize(
    "payload",
    [
        {"label": "x", "box": [0, 0, 1, 1]},
        {"label": "x", "confidence": 0.5, "box": [0, 0, 1]},
        {"label": "x", "confidence": "high", "box": [0, 0, 1, 1]},
    ],
)
def test_parse_detection_rejects_malformed(payload):
    with pytest.raises(ValueError):
        parse_detection(payload)


def test_read_detection_frames_skips_blank_lines(tmp_path):
    path = tmp_path / "frames.jsonl"
    path.write_text(json.dumps([BOTTLE]) + "\n\n" + json.dumps([]) + "\n", encoding="utf-8")
    frames = list(read_detection_frames(path))
    assert [len(f) for f in frames] == [1, 0]


def test_read_detection_frames_reports_line_number(tmp_path):
    path = tmp_path / "frames.jsonl"
    path.write_text(json.dumps([BOTTLE]) + "\n{not json}\n", encoding="utf-8")
    with pytest.raises(ValueError, match=":2:"):
        list(read_detection_frames(path))


def test_replay_yields_one_record_per_frame(tmp_path):
    path = write_frames(tmp_path / "frames.jsonl", [[BOTTLE]] * 3)
    records = list(replay(read_detection_frames(path), ObjectTracker()))

    assert [r["frame"] for r in records] == [0, 1, 2]
    last = records[-1]["tracks"]
    assert len(last) == 1
    assert last[0]["id"] == 0
    assert last[0]["state"] == "confirmed"
    assert last[0]["age"] == 3
    assert last[0]["box"] == [0.4, 0.4, 0.2, 0.2]


def test_main_writes_tracks(tmp_path):
    detections = write_frames(tmp_path / "frames.jsonl", [[BOTTLE], [BOTTLE], []])
    output = tmp_path / "out" / "tracks.jsonl"
    output.parent.mkdir()

    code = main([
        "--detections", str(detections),
        "--output", str(output),
        "--matcher", "bytetrack",
        "--log-level", "WARNING",
    ])

    assert code == 0
    lines = output.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 3
    assert json.loads(lines[2])["tracks"][0]["missed"] == 1


def test_main_reports_bad_input(tmp_path):
    detections = tmp_path / "frames.jsonl"
    detections.write_text('{"not": "a list"}\n', encoding="utf-8")

    code = main(["--detections", str(detections), "--log-level", "CRITICAL"])
    assert code == 1


def test_replay_marks_tracks_with_a_detection_visible(tmp_path):
    path = write_frames(tmp_path / "frames.jsonl", [[BOTTLE], []])
    records = list(replay(read_detection_frames(path), ObjectTracker()))

    assert records[0]["tracks"][0]["visible"] is True
    assert records[1]["tracks"][0]["visible"] is False
    assert records[1]["tracks"][0]["missed"] == 1


def test_replay_prefilter_drops_weak_and_small_detections(tmp_path):
    weak = dict(BOTTLE, confidence=0.6)
    tiny = dict(BOTTLE, box=[0.1, 0.1, 0.05, 0.05])
    path = write_frames(tmp_path / "frames.jsonl", [[weak, tiny, BOTTLE]])

    unfiltered = list(replay(read_detection_frames(path), ObjectTracker()))
    assert len(unfiltered[0]["tracks"]) == 3

    filtered = list(replay(
        read_detection_frames(path), ObjectTracker(), min_confidence=0.9, min_area=0.01
    ))
    tracks = filtered[0]["tracks"]
    assert len(tracks) == 1
    assert tracks[0]["box"] == [0.4, 0.4, 0.2, 0.2]


def test_main_min_confidence_flag(tmp_path):
    weak = dict(BOTTLE, confidence=0.6)
    detections = write_frames(tmp_path / "frames.jsonl", [[weak], [weak]])
    output = tmp_path / "tracks.jsonl"

    code = main([
        "--detections", str(detections),
        "--output", str(output),
        "--min-confidence", "0.9",
        "--log-level", "WARNING",
    ])

    assert code == 0
    records = [json.loads(line) for line in output.read_text(encoding="utf-8").splitlines()]
    assert [r["tracks"] for r in records] == [[], []]


def test_main_reports_wrong_typed_config(tmp_path):
    detections = write_frames(tmp_path / "frames.jsonl", [[BOTTLE]])
    config = tmp_path / "settings.yaml"
    config.write_text("tracker:\n  max_missed_frames: '30'\n", encoding="utf-8")

    code = main([
        "--detections", str(detections),
        "--config", str(config),
        "--log-level", "CRITICAL",
    ])
    assert code == 1
