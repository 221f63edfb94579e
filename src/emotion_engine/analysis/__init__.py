"""Analysis CLI: run the face and emotion services on an existing image."""

import argparse
import asyncio
import json
from dataclasses import asdict
from pathlib import Path


def main() -> None:
    """CLI entry point for analyzing an image file."""
    parser = argparse.ArgumentParser(description="Detect faces and emotions in an image")
    parser.add_argument("image", type=Path, help="Path to a JPEG or PNG file")
    parser.add_argument(
        "--service",
        choices=["both", "face", "emotion"],
        default="both",
        help="Which service to call (default: both, merged per face)",
    )
    parser.add_argument("--json", action="store_true", help="Print JSON instead of a report")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()

    from emotion_engine.logs import setup_logging

    setup_logging(args.verbose)

    if not args.image.exists():
        print(f"Error: {args.image} does not exist")
        return

    if args.service == "face":
        _cmd_face(args)
    elif args.service == "emotion":
        _cmd_emotion(args)
    else:
        _cmd_both(args)


def _cmd_face(args: argparse.Namespace) -> None:
    """Face attributes only."""
    import httpx

    from emotion_engine.analysis.face_client import FaceClient
    from emotion_engine.report import format_face_results

    try:
        faces = asyncio.run(FaceClient().detect_file(args.image))
    except httpx.HTTPError as e:
        print(f"Error: face detection failed: {e}")
        return
    if args.json:
        print(json.dumps([asdict(face) for face in faces], indent=2))
    else:
        print(format_face_results(faces), end="")


def _cmd_emotion(args: argparse.Namespace) -> None:
    """Emotion scores only."""
    import httpx

    from emotion_engine.analysis.emotion_client import EmotionClient
    from emotion_engine.report import format_emotion_results

    try:
        emotions = asyncio.run(EmotionClient().recognize_file(args.image))
    except httpx.HTTPError as e:
        print(f"Error: emotion recognition failed: {e}")
        return
    if args.json:
        print(json.dumps([asdict(emotion) for emotion in emotions], indent=2))
    else:
        print(format_emotion_results(emotions), end="")


def _cmd_both(args: argparse.Namespace) -> None:
    """Both services, merged per face."""
    from emotion_engine.analysis.emotion_client import EmotionClient
    from emotion_engine.analysis.face_client import FaceClient
    from emotion_engine.capture.camera import Camera
    from emotion_engine.pipeline import EmotionPipeline

    pipeline = EmotionPipeline(
        camera=Camera(),
        face_client=FaceClient(),
        emotion_client=EmotionClient(),
    )
    result = asyncio.run(pipeline.analyze_file(args.image))
    if args.json:
        print(json.dumps([record.to_dict() for record in result.records], indent=2))
    else:
        print(result.report, end="")
