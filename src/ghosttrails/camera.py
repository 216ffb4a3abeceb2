from __future__ import annotations
import cv2
import numpy as np

from .profiler import get_profiler


class Camera:
    """Webcam capture delivering RGB frames of a fixed size."""

    def __init__(self, camera_index: int, width: int, height: int):
        self.profiler = get_profiler()
        self.width = width
        self.height = height
        self.cap = cv2.VideoCapture(camera_index)
        if not self.cap.isOpened():
            raise RuntimeError("Cannot open webcam")
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)

    def read(self) -> np.ndarray | None:
        with self.profiler.record("cam_read"):
            ok, frame = self.cap.read()
        if not ok:
            return None

        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        # Some drivers ignore the requested capture size
        if rgb.shape[1] != self.width or rgb.shape[0] != self.height:
            rgb = cv2.resize(
                rgb, (self.width, self.height), interpolation=cv2.INTER_AREA
            )
        return rgb

    def release(self):
        self.cap.release()
