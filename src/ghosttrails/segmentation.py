from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor

import cv2
import numpy as np
import mediapipe as mp
import torch
from ultralytics import YOLO

from .logging import get_logger
from .profiler import get_profiler

logger = get_logger(__name__)

# YOLO tensor inputs must have sides divisible by the network stride
YOLO_STRIDE = 32


def align_to_stride(n: int, stride: int = YOLO_STRIDE) -> int:
    return max(stride, -(-int(n) // stride) * stride)


class MediaPipeSegmenter:
    def __init__(self, threshold: float = 0.7, model_selection: int = 0):
        self.profiler = get_profiler()
        self.threshold = threshold
        mp_seg = mp.solutions.selfie_segmentation
        self.segmenter = mp_seg.SelfieSegmentation(model_selection=model_selection)

    def segment(self, frame_rgb: np.ndarray) -> np.ndarray:
        """Returns a (h, w) uint8 mask, 1 where a person is, for an RGB frame."""
        with self.profiler.record("mediapipe_process"):
            res = self.segmenter.process(frame_rgb)
        mask = res.segmentation_mask
        h, w = frame_rgb.shape[:2]
        if mask is None:
            return np.zeros((h, w), dtype=np.uint8)
        if mask.shape[:2] != (h, w):
            mask = cv2.resize(
                mask.astype(np.float32), (w, h), interpolation=cv2.INTER_LINEAR
            )
        return (mask > self.threshold).astype(np.uint8)

    def close(self):
        self.segmenter.close()


class YOLOSegmenter:
    def __init__(
        self,
        model_name: str,
        seg_w: int,
        seg_h: int,
        threshold: float = 0.7,
        device: str | None = None,
    ):
        self.profiler = get_profiler()
        self.model = YOLO(model_name)
        self.seg_w = align_to_stride(seg_w)
        self.seg_h = align_to_stride(seg_h)
        if (self.seg_w, self.seg_h) != (seg_w, seg_h):
            logger.warning(
                f"YOLO input {seg_w}x{seg_h} rounded up to {self.seg_w}x{self.seg_h}"
            )
        self.threshold = threshold
        if device is None:
            device = "cuda" if torch.cuda.is_available() else "cpu"
        self.device = device

    def _preprocess_image(self, img: np.ndarray) -> torch.Tensor:
        """Converts an RGB uint8 image to a normalized NCHW torch tensor."""
        tensor = torch.from_numpy(np.ascontiguousarray(img)).to(self.device)
        if self.device == "cuda":
            tensor = tensor.half()
        tensor = tensor.permute(2, 0, 1).unsqueeze(0)
        return tensor / 255.0

    def segment(self, frame_rgb: np.ndarray) -> np.ndarray:
        """Returns a (h, w) uint8 mask, 1 where any person instance is."""
        h, w = frame_rgb.shape[:2]
        empty = np.zeros((h, w), dtype=np.uint8)

        with self.profiler.record("yolo_preprocess"):
            model_input = cv2.resize(
                frame_rgb, (self.seg_w, self.seg_h), interpolation=cv2.INTER_LINEAR
            )
            input_tensor = self._preprocess_image(model_input)

        with self.profiler.record("yolo_inference"):
            results = self.model(
                input_tensor,
                classes=[0],  # person
                verbose=False,
                imgsz=(self.seg_h, self.seg_w),
            )

        with self.profiler.record("yolo_postprocess"):
            if not results or results[0].masks is None:
                return empty
            masks = results[0].masks.data
            if len(masks) == 0:
                return empty

            combined = masks[0].cpu().numpy()
            for m in masks[1:]:
                combined = np.maximum(combined, m.cpu().numpy())

            combined = cv2.resize(
                combined.astype(np.float32), (w, h), interpolation=cv2.INTER_LINEAR
            )
            return (combined > self.threshold).astype(np.uint8)

    def close(self):
        # The model holds no OS resources; just drop it.
        self.model = None


def create_segmenter(cfg):
    if cfg.segmenter == "yolo":
        logger.info(f"Loading YOLO segmenter ({cfg.yolo_model})")
        return YOLOSegmenter(
            cfg.yolo_model, cfg.seg_width, cfg.seg_height, cfg.seg_threshold
        )
    if cfg.segmenter == "mediapipe":
        logger.info("Loading MediaPipe segmenter")
        return MediaPipeSegmenter(cfg.seg_threshold)
    raise ValueError(f"Unknown segmenter: {cfg.segmenter}")


def _release_loaded(future):
    if future.cancelled() or future.exception() is not None:
        return
    future.result().close()


class SegmenterLoader:
    """
    Builds a segmenter on a single worker thread.

    Model start-up can take seconds (weights download, graph init); the host
    loop keeps drawing and calls `poll()` every frame until the model is ready.
    """

    def __init__(self, factory):
        self.segmenter = None
        self.error: Exception | None = None
        self._pool = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="segmenter-load"
        )
        self._future = self._pool.submit(factory)

    @property
    def ready(self) -> bool:
        return self.segmenter is not None

    def poll(self):
        if self._future is not None and self._future.done():
            future, self._future = self._future, None
            try:
                self.segmenter = future.result()
                logger.info("Segmentation model loaded")
            except Exception as e:
                self.error = e
                logger.error(f"Failed to load segmentation model: {e}")
            self._pool.shutdown(wait=False)
        return self.segmenter

    def close(self):
        """Release the model without waiting for a load still in progress."""
        future, self._future = self._future, None
        if future is not None:
            # a model that finishes loading after close is released right away
            future.add_done_callback(_release_loaded)
            self._pool.shutdown(wait=False, cancel_futures=True)
        if self.segmenter is not None:
            self.segmenter.close()
            self.segmenter = None
