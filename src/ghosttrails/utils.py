import os
import time

import numpy as np


def ellipse_mask(
    w: int,
    h: int,
    rx: float = 0.2,
    ry: float = 0.4,
    cx: float = 0.5,
    cy: float = 0.5,
) -> np.ndarray:
    """Binary uint8 ellipse centered at (cx, cy) in UV space; a stand-in silhouette."""
    ys, xs = np.mgrid[0:h, 0:w].astype(np.float32)
    u = (xs + 0.5) / float(w)
    v = (ys + 0.5) / float(h)
    d = ((u - cx) / max(rx, 1e-6)) ** 2 + ((v - cy) / max(ry, 1e-6)) ** 2
    return (d <= 1.0).astype(np.uint8)


def snapshot_path(directory: str, prefix: str, ext: str = "png") -> str:
    """Timestamped, not-yet-existing file path such as trails-artwork-20240101-120000.png."""
    stamp = time.strftime("%Y%m%d-%H%M%S")
    path = os.path.join(directory, f"{prefix}-{stamp}.{ext}")
    n = 1
    while os.path.exists(path):
        path = os.path.join(directory, f"{prefix}-{stamp}-{n}.{ext}")
        n += 1
    return path
