"""Gradio application: capture button, logging toggles and result panes."""

import threading

import gradio as gr

from emotion_engine.pipeline import EmotionPipeline


async def run_capture(
    pipeline: EmotionPipeline, remote_logging: bool, local_logging: bool
) -> tuple:
    """Run one cycle and return (picture, status text, report) for the UI."""
    result = await pipeline.run(remote_logging=remote_logging, local_logging=local_logging)
    status = "\n".join(result.statuses)
    if result.picture is None:
        return None, status, ""
    return result.image, status, result.report


def request_exit(shutdown: threading.Event) -> str:
    shutdown.set()
    return "Shutting down..."


def create_app(
    pipeline: EmotionPipeline,
    shutdown: threading.Event,
    initial_status: str = "",
) -> gr.Blocks:
    """Create and return the Gradio Blocks app.

    Args:
        pipeline: Started pipeline shared by every capture.
        shutdown: Set when the user presses Exit.
        initial_status: Text shown in the status box before the first capture.
    """

    async def do_capture(remote_logging: bool, local_logging: bool) -> tuple:
        return await run_capture(pipeline, remote_logging, local_logging)

    def do_exit() -> str:
        return request_exit(shutdown)

    with gr.Blocks(title="Emotion Engine") as app:
        gr.Markdown("# Emotion Engine")

        with gr.Row():
            capture_btn = gr.Button("Capture", variant="primary")
            exit_btn = gr.Button("Exit", variant="stop")
            azure_logging = gr.Checkbox(value=True, label="Azure logging")
            local_logging = gr.Checkbox(value=False, label="Local logging")

        status_box = gr.Textbox(label="Status", value=initial_status, lines=3, interactive=False)

        with gr.Row():
            capture_image = gr.Image(label="Picture", type="pil", interactive=False)
            log_output = gr.Textbox(label="Results", lines=20, interactive=False)

        capture_btn.click(
            fn=do_capture,
            inputs=[azure_logging, local_logging],
            outputs=[capture_image, status_box, log_output],
        )
        exit_btn.click(fn=do_exit, outputs=[status_box])

    return app
