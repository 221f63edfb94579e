"""Capture CLI: one headless capture, analyze and publish cycle."""

import argparse
import asyncio


def main() -> None:
    """CLI entry point for a single capture cycle."""
    parser = argparse.ArgumentParser(description="Take a picture and report the emotions in it")
    parser.add_argument("--camera-index", type=int, help="OpenCV camera index (or CAMERA_INDEX)")
    parser.add_argument(
        "--no-remote-logging",
        action="store_true",
        help="Do not upload the picture or send the event to IoT Hub",
    )
    parser.add_argument(
        "--local-logging",
        action="store_true",
        help="Also write the event JSON to EVENT_LOG_DIR",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()

    from emotion_engine.config import CAMERA_INDEX
    from emotion_engine.logs import setup_logging
    from emotion_engine.pipeline import build_pipeline
    from emotion_engine.report import format_report_with_location

    setup_logging(args.verbose)

    camera_index = CAMERA_INDEX if args.camera_index is None else args.camera_index
    pipeline = build_pipeline(camera_index=camera_index)

    async def _cycle():
        await pipeline.start()
        return await pipeline.run(
            remote_logging=not args.no_remote_logging,
            local_logging=args.local_logging,
        )

    try:
        result = asyncio.run(_cycle())
    finally:
        pipeline.close()

    if result.picture is None:
        print(f"Error: {result.status}")
        return
    print(format_report_with_location(result.records, pipeline.location), end="")
