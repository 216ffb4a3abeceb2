from __future__ import annotations
import numpy as np

from .compositing import lighten, source_over


class TrailBuffer:
    """
    Persistent off-screen surface that accumulates earlier frames.

    Frames are only ever added; nothing fades. The buffer goes back to black
    on `clear()` and whenever it is resized.
    """

    def __init__(self, width: int, height: int):
        self.canvas = np.zeros((height, width, 3), dtype=np.uint8)

    @property
    def width(self) -> int:
        return self.canvas.shape[1]

    @property
    def height(self) -> int:
        return self.canvas.shape[0]

    def clear(self):
        self.canvas.fill(0)

    def resize(self, width: int, height: int):
        self.canvas = np.zeros((height, width, 3), dtype=np.uint8)

    def draw_over(self, rgba: np.ndarray):
        source_over(self.canvas, rgba, out=self.canvas)

    def draw_lighten(self, rgb: np.ndarray):
        lighten(self.canvas, rgb, out=self.canvas)
