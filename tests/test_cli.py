from unittest.mock import patch, MagicMock

import pytest

from ghosttrails.app import build_parser, config_from_args, main
from ghosttrails.config import AppConfig


def test_no_args_keeps_defaults():
    cfg = config_from_args(build_parser().parse_args([]))
    assert cfg == AppConfig()


def test_all_flags_override_config(tmp_path):
    args = build_parser().parse_args(
        [
            "--effect", "natural",
            "--segmenter", "yolo",
            "--yolo-model", "yolov8n-seg.pt",
            "--seg-width", "256",
            "--seg-height", "192",
            "--seg-threshold", "0.4",
            "--camera", "2",
            "--no-mirror",
            "--fullscreen",
            "--snapshot-dir", str(tmp_path),
            "--log-level", "DEBUG",
            "--log-file", "test.log",
            "--debug",
        ]
    )
    cfg = config_from_args(args)
    assert cfg.effect == "natural"
    assert cfg.segmenter == "yolo"
    assert cfg.yolo_model == "yolov8n-seg.pt"
    assert (cfg.seg_width, cfg.seg_height) == (256, 192)
    assert cfg.seg_threshold == 0.4
    assert cfg.camera_index == 2
    assert cfg.mirror is False
    assert cfg.fullscreen is True
    assert cfg.snapshot_dir == str(tmp_path)
    assert cfg.log_level == "DEBUG"
    assert cfg.log_file == "test.log"
    assert cfg.debug is True


def test_seg_threshold_is_clamped():
    cfg = config_from_args(build_parser().parse_args(["--seg-threshold", "3"]))
    assert cfg.seg_threshold == 1.0


def test_unknown_effect_rejected():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--effect", "sepia"])


@patch("ghosttrails.app.CanvasRenderer")
@patch("ghosttrails.app.SegmenterLoader")
@patch("ghosttrails.app.Camera")
@patch("ghosttrails.app.moderngl")
@patch("ghosttrails.app.glfw")
def test_cli_args_smoke_test(
    mock_glfw, mock_moderngl, mock_camera, mock_loader, mock_renderer, tmp_path
):
    """Test that CLI arguments flow from sys.argv into the running config."""
    mock_glfw.init.return_value = True
    mock_glfw.get_framebuffer_size.return_value = (64, 48)
    # Prevent the main loop from running
    mock_glfw.window_should_close.return_value = True

    log_file = tmp_path / "test.log"
    test_args = [
        "ghosttrails",
        "--segmenter",
        "yolo",
        "--seg-height",
        "240",
        "--yolo-model",
        "yolov8n-seg.pt",
        "--effect",
        "colortrip",
        "--log-file",
        str(log_file),
    ]

    with patch("sys.argv", test_args):
        main()

    mock_loader.assert_called_once()
    config = mock_loader.call_args[0][0].args[0]
    assert isinstance(config, AppConfig)
    assert config.seg_height == 240
    assert config.segmenter == "yolo"
    assert config.yolo_model == "yolov8n-seg.pt"
    assert config.effect == "colortrip"
    assert config.log_file == str(log_file)
    assert (config.width, config.height) == (64, 48)
    assert log_file.exists()
