"""
Pixel-buffer operations behind every effect.

All images are numpy ``uint8`` arrays in row-major ``(height, width, channels)``
layout, RGB or RGBA. Functions never keep state between calls.
"""

from __future__ import annotations
import cv2
import numpy as np


def _check_same_size(a: np.ndarray, b: np.ndarray, what: str):
    if a.shape[:2] != b.shape[:2]:
        raise ValueError(
            f"{what}: size mismatch {a.shape[1]}x{a.shape[0]} vs {b.shape[1]}x{b.shape[0]}"
        )


def mask_frame(frame_rgb: np.ndarray, mask: np.ndarray) -> np.ndarray:
    """
    Cut the person out of a camera frame.

    Pixels where ``mask == 1`` keep their colour and get alpha 255; every other
    pixel becomes transparent black.

    Args:
        frame_rgb: (h, w, 3) uint8 camera frame.
        mask: (h, w) segmentation mask, 1 = person.

    Returns:
        (h, w, 4) uint8 RGBA image.
    """
    if frame_rgb.ndim != 3 or frame_rgb.shape[2] != 3:
        raise ValueError(f"expected an RGB frame, got shape {frame_rgb.shape}")
    _check_same_size(frame_rgb, mask, "mask_frame")

    body = mask == 1
    rgba = np.zeros(frame_rgb.shape[:2] + (4,), dtype=np.uint8)
    rgba[body, :3] = frame_rgb[body]
    rgba[body, 3] = 255
    return rgba


def fit_to_canvas(
    image: np.ndarray, width: int, height: int, mirror: bool = True
) -> np.ndarray:
    """Scale to the canvas with nearest-neighbour sampling, optionally mirrored."""
    if image.shape[1] != width or image.shape[0] != height:
        image = cv2.resize(image, (width, height), interpolation=cv2.INTER_NEAREST)
    if mirror:
        image = cv2.flip(image, 1)
    return image


def source_over(
    dst_rgb: np.ndarray, src_rgba: np.ndarray, out: np.ndarray | None = None
) -> np.ndarray:
    """Alpha-composite `src_rgba` over `dst_rgb`; write into `out` when given."""
    _check_same_size(dst_rgb, src_rgba, "source_over")
    if out is None:
        out = dst_rgb.copy()
    elif out is not dst_rgb:
        out[...] = dst_rgb

    alpha = src_rgba[..., 3]
    opaque = alpha == 255
    out[opaque] = src_rgba[opaque, :3]

    partial = (alpha > 0) & ~opaque
    if partial.any():
        a = alpha[partial, None].astype(np.float32) / 255.0
        blended = src_rgba[partial, :3] * a + out[partial] * (1.0 - a)
        out[partial] = np.clip(np.rint(blended), 0, 255).astype(np.uint8)
    return out


def lighten(
    dst_rgb: np.ndarray, src_rgb: np.ndarray, out: np.ndarray | None = None
) -> np.ndarray:
    """Per-channel maximum of source and destination."""
    if dst_rgb.shape != src_rgb.shape:
        raise ValueError(f"lighten: shape mismatch {dst_rgb.shape} vs {src_rgb.shape}")
    return np.maximum(dst_rgb, src_rgb, out=out)


def hsb_to_rgb(
    hue: float, saturation: float, brightness: float
) -> tuple[float, float, float]:
    """HSB (hue in degrees, saturation/brightness 0-100) to RGB on a 0-255 scale."""
    hsv = np.array(
        [[[hue % 360.0, saturation / 100.0, brightness / 100.0]]], dtype=np.float32
    )
    r, g, b = cv2.cvtColor(hsv, cv2.COLOR_HSV2RGB)[0, 0] * 255.0
    return float(r), float(g), float(b)


def tint(frame_rgb: np.ndarray, color) -> np.ndarray:
    """Multiply every pixel by `color` / 255."""
    scale = np.asarray(color, dtype=np.float32) / 255.0
    tinted = frame_rgb.astype(np.float32) * scale
    return np.clip(np.rint(tinted), 0, 255).astype(np.uint8)
