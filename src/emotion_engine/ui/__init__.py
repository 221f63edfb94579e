"""Desktop UI with Gradio."""

import argparse


def main() -> None:
    """CLI entry point for the Gradio capture UI."""
    import asyncio
    import threading

    from emotion_engine.config import CAMERA_INDEX
    from emotion_engine.logs import setup_logging
    from emotion_engine.pipeline import build_pipeline
    from emotion_engine.ui.app import create_app

    parser = argparse.ArgumentParser(description="Emotion Engine capture UI")
    parser.add_argument(
        "--camera-index", type=int, default=CAMERA_INDEX, help="OpenCV camera index"
    )
    parser.add_argument("--port", type=int, default=None, help="Server port (default: gradio's)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    setup_logging(args.verbose)

    pipeline = build_pipeline(camera_index=args.camera_index)
    statuses = asyncio.run(pipeline.start())

    shutdown = threading.Event()
    app = create_app(pipeline, shutdown, initial_status="\n".join(statuses))
    app.launch(server_port=args.port, prevent_thread_lock=True, inbrowser=True)
    try:
        while not shutdown.wait(0.5):
            pass
    except KeyboardInterrupt:
        pass
    finally:
        app.close()
        pipeline.close()
