#!/usr/bin/env python3
"""
stabletrack replay tool

Feeds recorded per-frame detections through the tracker and writes the
published tracks, one JSON line per frame.

Usage:
    python main.py --detections FRAMES.jsonl [--config CONFIG_PATH] [--matcher NAME]
                   [--min-confidence SCORE [--min-area AREA]]

Example:
    python main.py --detections recordings/shelf.jsonl --matcher bytetrack --output tracks.jsonl
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from stabletrack.core.config import load_config
from stabletrack.replay import read_detection_frames, replay
from stabletrack.tracking.matching import list_matchers
from stabletrack.tracking.object_tracker import ObjectTracker


# ============================================================
# LOGGING CONFIGURATION
# ============================================================

def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None):
    """Configure logging."""
    logger.remove()  # Remove default handler

    # Console output with colors
    logger.add(
        sys.stderr,
        level=log_level,
        format="<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{module}</cyan>:<cyan>{line}</cyan> | <level>{message}</level>",
        colorize=True,
    )

    # File output
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {module}:{line} | {message}",
            rotation="10 MB",
            retention="7 days",
        )


# ============================================================
# ENTRY POINT
# ============================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Replay recorded detections through the object tracker"
    )
    parser.add_argument("--detections", required=True, help="JSON-lines file, one frame per line")
    parser.add_argument("--config", default=None, help="YAML config path")
    parser.add_argument("--matcher", choices=list_matchers(), default=None,
                        help="Matching strategy (overrides config)")
    parser.add_argument("--min-confidence", type=float, default=None,
                        help="Drop detections below this score before tracking")
    parser.add_argument("--min-area", type=float, default=0.0,
                        help="Drop smaller boxes (normalized area); needs --min-confidence")
    parser.add_argument("--output", default=None, help="Write tracks here instead of stdout")
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--log-file", default=None)
    return parser


def run(args: argparse.Namespace) -> int:
    config = load_config(args.config).with_overrides(matcher=args.matcher)
    tracker = ObjectTracker(config)
    logger.info(f"Replaying {args.detections} with matcher '{config.matcher}'")

    frames = read_detection_frames(args.detections)
    out = open(args.output, "w", encoding="utf-8") if args.output else sys.stdout
    try:
        for record in replay(frames, tracker, args.min_confidence, args.min_area):
            out.write(json.dumps(record) + "\n")
    finally:
        if out is not sys.stdout:
            out.close()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    try:
        return run(args)
    except (ValueError, OSError) as exc:
        logger.error(f"Replay failed: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
