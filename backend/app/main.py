"""Gradio web interface for SplitFrame."""

from __future__ import annotations

import atexit
import contextlib
import functools
import logging
import os
import sys
import tempfile
import traceback

from .config import Config
from .constants import LAYOUTS, OUTPUT_FORMATS
from .exceptions import SplitFrameError
from .export import export_zip
from .logging_config import setup_logging
from .session import CompositionSession

logger = logging.getLogger("splitframe.main")

# Optional Gradio import
try:
    import gradio as gr

    HAS_GRADIO = True
except ImportError:
    HAS_GRADIO = False
    logger.error("Gradio not installed. Run: pip install 'splitframe[ui]'")

MAX_SLOTS = max(layout.panel_count for layout in LAYOUTS)

# Temp file management
_temp_files: list[str] = []


def _cleanup_temp_files() -> None:
    """Clean up temporary files."""
    for f in _temp_files:
        with contextlib.suppress(OSError):
            os.unlink(f)
    _temp_files.clear()


atexit.register(_cleanup_temp_files)


def create_interface() -> object:
    """Create Gradio interface for SplitFrame."""
    session = CompositionSession()

    with gr.Blocks(title="SplitFrame - Split Photo Composer", theme=gr.themes.Soft()) as interface:
        gr.Markdown(
            """
        # SplitFrame - Split Photo Composer

        1. **Pick** a split
        2. **Upload** one photo per panel
        3. **Compose**: every format is framed around faces automatically
        4. **Fine-tune** each format independently, then **download**
        """
        )

        with gr.Row():
            with gr.Column(scale=1):
                layout_radio = gr.Radio(
                    choices=[(f"{l.name} ({l.panel_count} photos)", l.id) for l in LAYOUTS],
                    label="Split",
                )
                uploads = [
                    gr.File(
                        label=f"Photo {i + 1}",
                        file_types=["image"],
                        type="filepath",
                        visible=False,
                    )
                    for i in range(MAX_SLOTS)
                ]
                slots_json = gr.JSON(label="Photos")
                with gr.Row():
                    compose_btn = gr.Button("Compose", variant="primary")
                    reset_btn = gr.Button("Start over", variant="secondary")
                status = gr.Markdown("**Status:** Select a split first")

            with gr.Column(scale=2):
                canvases = []
                panel_pickers = []
                zoom_sliders = []
                pan_sliders = []
                reset_panel_btns = []
                for fmt in OUTPUT_FORMATS:
                    gr.Markdown(f"### {fmt.label} · {fmt.width} × {fmt.height} px")
                    canvases.append(gr.Image(type="pil", interactive=False, height=300))
                    with gr.Row():
                        panel_pickers.append(
                            gr.Radio(choices=[], label="Panel (or click the image)")
                        )
                        zoom_sliders.append(
                            gr.Slider(
                                Config.MIN_ZOOM, Config.MAX_ZOOM, value=1.0,
                                step=Config.ZOOM_STEP, label="Zoom",
                            )
                        )
                    with gr.Row():
                        pan_sliders.append(
                            (
                                gr.Slider(-fmt.width, fmt.width, value=0, step=1, label="Pan X"),
                                gr.Slider(-fmt.height, fmt.height, value=0, step=1, label="Pan Y"),
                            )
                        )
                        reset_panel_btns.append(gr.Button("Reset panel", size="sm"))
                download_btn = gr.Button("Download both (ZIP)")
                download_zip = gr.File(label="Download")

        def slot_updates() -> list:
            updates = []
            for i in range(MAX_SLOTS):
                visible = i < session.panel_count
                if i in session.slots:
                    updates.append(gr.update(visible=visible))
                else:
                    updates.append(gr.update(visible=visible, value=None))
            return updates

        def cleared_canvases() -> list:
            return [None for _ in OUTPUT_FORMATS]

        def select_layout(layout_id: str | None) -> list:
            if layout_id is None:
                return [*slot_updates(), session.slot_summary(), *cleared_canvases(), gr.update()]
            try:
                layout = session.select_layout(layout_id)
                message = f"Upload {layout.panel_count} photos"
            except SplitFrameError as e:
                message = f"Error: {e}"
            return [*slot_updates(), session.slot_summary(), *cleared_canvases(), message]

        layout_radio.change(
            select_layout,
            inputs=[layout_radio],
            outputs=[*uploads, slots_json, *canvases, status],
        )

        def upload(index: int, path: str | None) -> list:
            try:
                if session.layout is None or index >= session.panel_count:
                    return [session.slot_summary(), *cleared_canvases(), "Select a split first"]
                if path is None:
                    session.remove_photo(index)
                    message = f"Removed photo {index + 1}"
                else:
                    slot = session.load_photo(index, path)
                    badges = []
                    if slot.face_found:
                        badges.append("face detected")
                    if slot.warning:
                        badges.append(f"⚠ {slot.warning.value}")
                    message = f"Loaded photo {index + 1}" + (f" ({', '.join(badges)})" if badges else "")
            except SplitFrameError as e:
                message = f"Error: {e}"
            except Exception as e:
                traceback.print_exc()
                message = f"Unexpected error: {e}"
            return [session.slot_summary(), *cleared_canvases(), message]

        for i, upload_input in enumerate(uploads):
            upload_input.change(
                functools.partial(upload, i),
                inputs=[upload_input],
                outputs=[slots_json, *canvases, status],
            )

        def panel_choices() -> list:
            choices = [(f"Photo {i + 1}", i) for i in range(session.panel_count)]
            return [gr.update(choices=choices, value=0) for _ in OUTPUT_FORMATS]

        def compose() -> list:
            try:
                images = session.compose()
                message = f"Composed {len(images)} formats (target line {session.state.target_y:.2f})"
                return [*images, *panel_choices(), message]
            except SplitFrameError as e:
                return [*cleared_canvases(), *[gr.update() for _ in OUTPUT_FORMATS], f"Error: {e}"]

        compose_btn.click(compose, outputs=[*canvases, *panel_pickers, status])

        def reset_all() -> list:
            session.reset_all()
            return [
                None,
                *slot_updates(),
                session.slot_summary(),
                *cleared_canvases(),
                "**Status:** Select a split first",
            ]

        reset_btn.click(
            reset_all, outputs=[layout_radio, *uploads, slots_json, *canvases, status]
        )

        for fi in range(len(OUTPUT_FORMATS)):
            pan_x, pan_y = pan_sliders[fi]

            def show_panel(panel_index: int | None, fi: int = fi) -> list:
                if panel_index is None or not session.composed:
                    return [gr.update(), gr.update(), gr.update()]
                adj = session.adjustment(fi, panel_index)
                return [adj.scale, adj.pan_x, adj.pan_y]

            panel_pickers[fi].change(
                show_panel, inputs=[panel_pickers[fi]], outputs=[zoom_sliders[fi], pan_x, pan_y]
            )

            def pick_panel(evt: gr.SelectData, fi: int = fi):
                if not session.composed:
                    return gr.update()
                panel_index = session.state.panel_index_at(fi, evt.index[0])
                return gr.update() if panel_index is None else panel_index

            canvases[fi].select(pick_panel, outputs=[panel_pickers[fi]])

            def zoom(panel_index: int | None, scale: float, fi: int = fi) -> list:
                if panel_index is None or not session.composed:
                    return [gr.update(), gr.update(), gr.update(), gr.update()]
                try:
                    return [session.set_zoom(fi, panel_index, scale), 0, 0, gr.update()]
                except SplitFrameError as e:
                    return [gr.update(), gr.update(), gr.update(), f"Error: {e}"]

            zoom_sliders[fi].release(
                zoom,
                inputs=[panel_pickers[fi], zoom_sliders[fi]],
                outputs=[canvases[fi], pan_x, pan_y, status],
            )

            def pan(panel_index: int | None, x: float, y: float, fi: int = fi):
                if panel_index is None or not session.composed:
                    return gr.update()
                return session.set_pan(fi, panel_index, x, y)

            for slider in (pan_x, pan_y):
                slider.release(
                    pan, inputs=[panel_pickers[fi], pan_x, pan_y], outputs=[canvases[fi]]
                )

            def reset_panel(panel_index: int | None, fi: int = fi) -> list:
                if panel_index is None or not session.composed:
                    return [gr.update(), gr.update(), gr.update(), gr.update()]
                return [session.reset_panel(fi, panel_index), 1.0, 0, 0]

            reset_panel_btns[fi].click(
                reset_panel,
                inputs=[panel_pickers[fi]],
                outputs=[canvases[fi], zoom_sliders[fi], pan_x, pan_y],
            )

        def download() -> tuple:
            try:
                _cleanup_temp_files()
                data = export_zip(session)
                with tempfile.NamedTemporaryFile(delete=False, suffix=".zip") as tmp:
                    tmp.write(data)
                    _temp_files.append(tmp.name)
                return tmp.name, "Exported both formats"
            except SplitFrameError as e:
                return None, f"Error: {e}"

        download_btn.click(download, outputs=[download_zip, status])

    return interface


def main() -> None:
    """Main entry point."""
    setup_logging()

    logger.info("=" * 70)
    logger.info("SPLITFRAME - Split Photo Composer")
    logger.info("=" * 70)

    if not HAS_GRADIO:
        logger.error("Gradio is required. Run: pip install 'splitframe[ui]'")
        sys.exit(1)

    logger.info("Starting web interface...")

    try:
        interface = create_interface()
        interface.launch(
            server_name=os.environ.get("SPLITFRAME_HOST", "127.0.0.1"),
            server_port=int(os.environ.get("SPLITFRAME_PORT", "7860")),
            share=False,
            inbrowser=True,
            show_error=True,
        )
    except Exception as e:
        logger.error("Failed to start: %s", e)
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
