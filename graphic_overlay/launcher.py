from __future__ import annotations

import argparse
import logging
import math
import os
import sys
import threading
from pathlib import Path
from typing import List, Optional, Tuple

from PyQt6.QtWidgets import QApplication

from graphic_overlay.client_config import OverlaySettings, load_overlay_settings
from graphic_overlay.debug_config import DEBUG_CONFIG_ENABLED, DEV_MODE_ENV_VAR, load_debug_config
from graphic_overlay.graphic import Graphic
from graphic_overlay.graphics import BoxGraphic, ContourGraphic, LandmarkGraphic
from graphic_overlay.logging_utils import build_rotating_file_handler, resolve_logs_dir
from graphic_overlay.overlay_widget import _CLIENT_LOGGER, GraphicOverlayWidget


def parse_source_size(value: str) -> Tuple[int, int]:
    """Parse a WIDTHxHEIGHT string into positive integers."""
    token = value.strip().lower().replace(" ", "")
    parts = token.split("x")
    if len(parts) != 2:
        raise argparse.ArgumentTypeError(f"expected WIDTHxHEIGHT, got {value!r}")
    try:
        width, height = int(parts[0]), int(parts[1])
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected integer dimensions, got {value!r}") from exc
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError("source dimensions must be positive")
    return width, height


def build_demo_frame(
    frame_index: int,
    source_width: int,
    source_height: int,
    settings: OverlaySettings,
) -> List[Graphic]:
    """Synthetic detections for one frame: a drifting face box, landmarks and a contour."""
    phase = frame_index / 20.0
    box_w = source_width * 0.3
    box_h = source_height * 0.4
    center_x = source_width / 2.0 + math.sin(phase) * source_width * 0.2
    center_y = source_height / 2.0 + math.cos(phase) * source_height * 0.1
    left = center_x - box_w / 2.0
    top = center_y - box_h / 2.0
    right = left + box_w
    bottom = top + box_h

    eye_y = top + box_h * 0.4
    landmarks = [
        (left + box_w * 0.3, eye_y),
        (left + box_w * 0.7, eye_y),
        (center_x, top + box_h * 0.6),
        (center_x, top + box_h * 0.8),
    ]
    contour = [
        (center_x + math.cos(step / 12.0 * math.tau) * box_w * 0.45,
         center_y + math.sin(step / 12.0 * math.tau) * box_h * 0.45)
        for step in range(12)
    ]
    return [
        BoxGraphic(
            left,
            top,
            right,
            bottom,
            color="#00FF7F",
            line_width=settings.annotation_line_width,
            label=f"face #{frame_index}",
            label_color=settings.label_color,
        ),
        LandmarkGraphic(points=landmarks, color="#FFD700", radius=3.0),
        ContourGraphic(points=contour, color="#1E90FF", line_width=settings.annotation_line_width),
    ]


class DemoProducer:
    """Worker thread that publishes synthetic detections to the overlay."""

    def __init__(
        self,
        widget: GraphicOverlayWidget,
        source_size: Tuple[int, int],
        mirrored: bool,
        interval: float,
        settings: OverlaySettings,
    ) -> None:
        self._widget = widget
        self._source_size = source_size
        self._mirrored = mirrored
        self._interval = max(0.01, interval)
        self._settings = settings
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="GraphicOverlay-Producer", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=5.0)
        self._thread = None

    def _run(self) -> None:
        width, height = self._source_size
        self._widget.set_source_info(width, height, self._mirrored)
        frame_index = 0
        while not self._stop_event.is_set():
            self._widget.replace(build_demo_frame(frame_index, width, height, self._settings))
            frame_index += 1
            self._stop_event.wait(self._interval)


def _attach_file_logging(retention: int) -> None:
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        handler = build_rotating_file_handler(
            resolve_logs_dir(),
            "graphic-overlay.log",
            retention=retention,
            formatter=formatter,
        )
    except OSError as exc:
        _CLIENT_LOGGER.warning("File logging unavailable: %s", exc)
        return
    _CLIENT_LOGGER.addHandler(handler)


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Graphic overlay demo surface")
    parser.add_argument("--settings", type=Path, help="Path to an overlay settings JSON file")
    parser.add_argument("--debug-config", type=Path, help="Path to debug.json (dev mode only)")
    parser.add_argument(
        "--source-size",
        type=parse_source_size,
        default=(640, 480),
        help="Detector input size as WIDTHxHEIGHT (default: 640x480)",
    )
    parser.add_argument("--mirrored", action="store_true", help="Mirror horizontally (front camera)")
    parser.add_argument("--interval", type=float, default=1.0 / 30.0, help="Seconds between synthetic frames")
    parser.add_argument("--width", type=int, default=1080)
    parser.add_argument("--height", type=int, default=1920)
    args = parser.parse_args(argv)

    settings = load_overlay_settings(args.settings)
    debug_config = load_debug_config(args.debug_config or Path("debug.json"))
    _attach_file_logging(settings.client_log_retention)
    if not DEBUG_CONFIG_ENABLED:
        _CLIENT_LOGGER.debug("debug.json ignored (release mode). Export %s=1 to enable tracing.", DEV_MODE_ENV_VAR)

    _CLIENT_LOGGER.info("Starting overlay demo (pid=%s)", os.getpid())
    _CLIENT_LOGGER.debug(
        "Loaded settings: guide=%s line_width=%d retention=%d source=%dx%d mirrored=%s",
        settings.guide_oval_enabled,
        settings.annotation_line_width,
        settings.client_log_retention,
        args.source_size[0],
        args.source_size[1],
        args.mirrored,
    )

    app = QApplication(sys.argv)
    widget = GraphicOverlayWidget(settings, debug_config)
    widget.setWindowTitle("Graphic overlay demo")
    widget.resize(max(1, args.width), max(1, args.height))
    widget.show()

    producer = DemoProducer(widget, args.source_size, args.mirrored, args.interval, settings)
    producer.start()
    exit_code = app.exec()
    producer.stop()
    _CLIENT_LOGGER.info("Overlay demo exiting with code %s", exit_code)
    return int(exit_code)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
