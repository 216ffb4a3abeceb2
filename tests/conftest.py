import numpy as np
import pytest, moderngl
from ghosttrails.config import AppConfig


@pytest.fixture(scope="module")
def ctx():
    try:
        return moderngl.create_standalone_context()
    except Exception as e:
        pytest.skip(f"Could not create headless GL context: {e}")


@pytest.fixture
def small_cfg(tmp_path):
    # tiny canvas, short skips, snapshots into a temp dir
    return AppConfig(
        width=64,
        height=48,
        cam_width=32,
        cam_height=24,
        trails2_frame_skip=3,
        natural_frame_skip=2,
        snapshot_dir=str(tmp_path),
    )


@pytest.fixture
def cam_frame(small_cfg):
    # left half red, right half green, at camera resolution
    f = np.zeros((small_cfg.cam_height, small_cfg.cam_width, 3), dtype=np.uint8)
    f[:, : small_cfg.cam_width // 2] = (200, 0, 0)
    f[:, small_cfg.cam_width // 2 :] = (0, 150, 0)
    return f
