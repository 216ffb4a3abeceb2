from __future__ import annotations
import os
import time

import cv2
import numpy as np

from .config import AppConfig
from .effects import EFFECTS, create_effect
from .logging import get_logger
from .profiler import get_profiler
from .trails import TrailBuffer
from .utils import snapshot_path

LOADING_MESSAGE = "Loading AI model..."
SEG_WARNING_INTERVAL_S = 1.0


class Sketch:
    """
    The per-frame render callback and the state it carries between frames.

    The host loop calls `draw` once per display refresh with the newest camera
    frame and shows the returned canvas. `message`, when set, is text the host
    should draw on top (model loading status).
    """

    def __init__(self, cfg: AppConfig, loader=None):
        self.cfg = cfg
        self.loader = loader
        self.logger = get_logger(__name__)
        self.profiler = get_profiler()

        self.trail = TrailBuffer(cfg.width, cfg.height)
        self.effect = create_effect(cfg.effect, cfg)

        self.frame_count = 0
        self.hue_offset = 0.0
        self.segmentation: np.ndarray | None = None
        self.last_frame: np.ndarray | None = None
        self.last_output = self.trail.canvas.copy()
        self.message: str | None = None

        self._seg_failures = 0  # since the last warning
        self._last_seg_warning: float | None = None

    # --- model ---
    @property
    def segmenter(self):
        return self.loader.poll() if self.loader is not None else None

    def model_status(self) -> str:
        if self.loader is None:
            return "none"
        if self.loader.error is not None:
            return "failed"
        return "ready" if self.loader.ready else "loading"

    def segment(self, frame: np.ndarray) -> np.ndarray | None:
        """Segment `frame`; on a model error the previous mask is kept."""
        segmenter = self.segmenter
        if segmenter is None:
            return self.segmentation
        try:
            with self.profiler.record("segmentation"):
                self.segmentation = segmenter.segment(frame)
        except Exception as e:
            self._warn_segmentation_failed(e)
        return self.segmentation

    def _warn_segmentation_failed(self, error: Exception):
        # first failure, then at most one warning per interval
        self._seg_failures += 1
        now = time.monotonic()
        if (
            self._last_seg_warning is not None
            and now - self._last_seg_warning < SEG_WARNING_INTERVAL_S
        ):
            return
        suppressed = self._seg_failures - 1
        more = f" ({suppressed} more since last warning)" if suppressed else ""
        self.logger.warning(
            f"Segmentation failed, keeping previous mask: {error}{more}"
        )
        self._seg_failures = 0
        self._last_seg_warning = now

    # --- per frame ---
    def draw(self, frame: np.ndarray | None) -> np.ndarray:
        self.frame_count += 1
        self.hue_offset = (self.hue_offset + self.cfg.hue_step) % 360.0

        if frame is not None:
            self.last_frame = frame
        frame = self.last_frame

        if self.effect.needs_segmentation and self.segmenter is None:
            if self.loader is not None and self.loader.error is not None:
                self.message = f"Failed to load model: {self.loader.error}"
            else:
                self.message = LOADING_MESSAGE
            self.last_output = np.zeros_like(self.trail.canvas)
            return self.last_output

        self.message = None
        if frame is None:
            self.last_output = self.trail.canvas.copy()
        else:
            with self.profiler.record("composite"):
                self.last_output = self.effect.render(self, frame)
        return self.last_output

    # --- controls ---
    def set_effect(self, name: str):
        self.effect = create_effect(name, self.cfg)
        self.cfg.effect = name
        self.trail.clear()
        self.logger.info(f"Effect: {self.effect.label}")

    def next_effect(self):
        names = list(EFFECTS)
        i = names.index(self.effect.name)
        self.set_effect(names[(i + 1) % len(names)])

    def clear(self):
        self.trail.clear()

    def resize(self, width: int, height: int):
        if (width, height) == (self.trail.width, self.trail.height):
            return
        self.logger.info(f"Canvas resized to {width}x{height}")
        self.cfg.width, self.cfg.height = width, height
        self.trail.resize(width, height)
        self.last_output = self.trail.canvas.copy()

    def save_snapshot(self) -> str:
        os.makedirs(self.cfg.snapshot_dir, exist_ok=True)
        path = snapshot_path(self.cfg.snapshot_dir, self.cfg.snapshot_prefix)
        bgr = cv2.cvtColor(self.last_output, cv2.COLOR_RGB2BGR)
        if not cv2.imwrite(path, bgr):
            raise OSError(f"Failed to write snapshot to {path}")
        self.logger.info(f"Saved snapshot: {path}")
        return path
