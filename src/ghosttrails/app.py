from __future__ import annotations
import argparse
import functools
import shutil
import sys
import time

import glfw, moderngl

from .camera import Camera
from .config import AppConfig
from .effects import EFFECTS
from .logging import get_logger, setup_logging
from .overlay import TextOverlay
from .profiler import get_profiler
from .renderer import CanvasRenderer
from .segmentation import SegmenterLoader, create_segmenter
from .sketch import Sketch

DEBOUNCE_S = 0.12


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Ghost Trails: webcam trail effects")
    p.add_argument(
        "--effect",
        type=str,
        choices=list(EFFECTS),
        default=None,
        help="Initial effect mode. Default: from config.",
    )
    p.add_argument(
        "--segmenter",
        type=str,
        choices=["mediapipe", "yolo"],
        default=None,
        help="Segmentation backend (mediapipe, yolo). Default: from config.",
    )
    p.add_argument(
        "--yolo-model",
        type=str,
        default=None,
        help="YOLO segmentation weights. Default: from config.",
    )
    p.add_argument(
        "--seg-width",
        type=int,
        default=None,
        help="YOLO input width, rounded up to a multiple of 32. Default: from config.",
    )
    p.add_argument(
        "--seg-height",
        type=int,
        default=None,
        help="YOLO input height, rounded up to a multiple of 32. Default: from config.",
    )
    p.add_argument(
        "--seg-threshold",
        type=float,
        default=None,
        help="Person probability threshold (0-1). Default: from config.",
    )
    p.add_argument(
        "--camera",
        type=int,
        default=None,
        help="Camera index. Default: from config.",
    )
    p.add_argument(
        "--no-mirror",
        action="store_true",
        help="Do not mirror the camera image.",
    )
    p.add_argument(
        "--fullscreen",
        action="store_true",
        help="Open in fullscreen on the primary monitor.",
    )
    p.add_argument(
        "--snapshot-dir",
        type=str,
        default=None,
        help="Directory for snapshots saved with S. Default: from config.",
    )
    p.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Minimum log level (DEBUG, INFO, ...). Default: from config.",
    )
    p.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Log to a file instead of the console.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Show debug overlay.",
    )
    return p


def config_from_args(args) -> AppConfig:
    cfg = AppConfig()
    if args.effect is not None:
        cfg.effect = args.effect
    if args.segmenter is not None:
        cfg.segmenter = args.segmenter
    if args.yolo_model is not None:
        cfg.yolo_model = args.yolo_model
    if args.seg_width is not None:
        cfg.seg_width = args.seg_width
    if args.seg_height is not None:
        cfg.seg_height = args.seg_height
    if args.seg_threshold is not None:
        cfg.seg_threshold = max(0.0, min(1.0, args.seg_threshold))
    if args.camera is not None:
        cfg.camera_index = args.camera
    if args.no_mirror:
        cfg.mirror = False
    if args.fullscreen:
        cfg.fullscreen = True
    if args.snapshot_dir is not None:
        cfg.snapshot_dir = args.snapshot_dir
    if args.log_level is not None:
        cfg.log_level = args.log_level
    if args.log_file is not None:
        cfg.log_file = args.log_file
    if args.debug:
        cfg.debug = True
    return cfg


def _linux_gl_hint():
    if sys.platform.startswith("linux"):
        if shutil.which("glxinfo") is None:
            return (
                "Linux OpenGL loaders not found.\n"
                "Install the dev libraries:\n"
                "  sudo apt install -y libgl1-mesa-dev libegl1-mesa-dev libglvnd-dev mesa-utils\n"
            )


def main(argv=None):
    args = build_parser().parse_args(argv)
    cfg = config_from_args(args)

    setup_logging(cfg.log_level, cfg.log_file)
    logger = get_logger(__name__)

    # --- window / context ---
    if not glfw.init():
        raise RuntimeError("GLFW init failed")
    glfw.window_hint(glfw.CONTEXT_VERSION_MAJOR, 3)
    glfw.window_hint(glfw.CONTEXT_VERSION_MINOR, 3)
    glfw.window_hint(glfw.OPENGL_PROFILE, glfw.OPENGL_CORE_PROFILE)
    glfw.window_hint(glfw.OPENGL_FORWARD_COMPAT, True)

    monitor = None
    if cfg.fullscreen:
        monitor = glfw.get_primary_monitor()
        mode = glfw.get_video_mode(monitor)
        cfg.width, cfg.height = mode.size.width, mode.size.height

    camera = None
    loader = None
    renderer = None
    text = None
    try:
        win = glfw.create_window(cfg.width, cfg.height, "Ghost Trails", monitor, None)
        if not win:
            raise RuntimeError("Could not create GLFW window")
        glfw.make_context_current(win)
        glfw.swap_interval(1)

        try:
            ctx = moderngl.create_context()
        except Exception:
            logger.error(_linux_gl_hint() or "Failed to create ModernGL context.")
            raise

        # The canvas follows the framebuffer (differs from window size on HiDPI)
        cfg.width, cfg.height = glfw.get_framebuffer_size(win)

        camera = Camera(cfg.camera_index, cfg.cam_width, cfg.cam_height)
        loader = SegmenterLoader(functools.partial(create_segmenter, cfg))
        sketch = Sketch(cfg, loader)
        renderer = CanvasRenderer(ctx)

        logger.info(
            "1/2/3 effect  E next effect  C clear  S save  D toggle debug  ESC quit"
        )
        logger.info(f"Effect: {sketch.effect.label}")

        profiler = get_profiler()
        prev_t = time.time()
        frame_count = 0
        log_interval = 1.0  # seconds
        time_since_log = 0.0

        effect_keys = dict(zip((glfw.KEY_1, glfw.KEY_2, glfw.KEY_3), EFFECTS))

        while not glfw.window_should_close(win):
            with profiler.record("frame"):
                # --- Event handling ---
                glfw.poll_events()
                if glfw.get_key(win, glfw.KEY_ESCAPE) == glfw.PRESS:
                    break
                for key, name in effect_keys.items():
                    if glfw.get_key(win, key) == glfw.PRESS:
                        if name != sketch.effect.name:
                            sketch.set_effect(name)
                        time.sleep(DEBOUNCE_S)
                if glfw.get_key(win, glfw.KEY_E) == glfw.PRESS:
                    sketch.next_effect()
                    time.sleep(DEBOUNCE_S)
                if glfw.get_key(win, glfw.KEY_C) == glfw.PRESS:
                    sketch.clear()
                    time.sleep(DEBOUNCE_S)
                if glfw.get_key(win, glfw.KEY_S) == glfw.PRESS:
                    try:
                        sketch.save_snapshot()
                    except OSError as e:
                        logger.error(f"Could not save snapshot: {e}")
                    time.sleep(DEBOUNCE_S)
                if glfw.get_key(win, glfw.KEY_D) == glfw.PRESS:
                    cfg.debug = not cfg.debug
                    time.sleep(DEBOUNCE_S)

                # --- Window size ---
                fb_w, fb_h = glfw.get_framebuffer_size(win)
                if fb_w > 0 and fb_h > 0:
                    sketch.resize(fb_w, fb_h)

                # --- Time delta ---
                now = time.time()
                actual_dt = max(now - prev_t, 1e-6)
                prev_t = now

                # --- Frame ---
                frame = camera.read()
                canvas = sketch.draw(frame)

                # --- Render to screen ---
                with profiler.record("render"):
                    ctx.screen.use()
                    ctx.clear(0.0, 0.0, 0.0, 1.0)
                    renderer.upload(canvas)
                    renderer.render(cfg.width, cfg.height)

                    if sketch.message or cfg.debug:
                        # lazy init
                        if text is None:
                            text = TextOverlay(ctx, cfg)

                    if sketch.message:
                        text.render_centered([sketch.message])

                    if cfg.debug:
                        lines = [
                            f"FPS: {1.0 / actual_dt:.2f} | frame_t: {actual_dt * 1000.0:.2f}ms"
                            f" | peak: {profiler.peak('frame') * 1000.0:.2f}ms",
                            "--------------------",
                        ]
                        lines.extend(profiler.lines())
                        lines.append("--------------------")
                        lines.append(f"Effect: {sketch.effect.label}")
                        lines.append(f"Frame: {sketch.frame_count}")
                        lines.append(f"Canvas: {cfg.width}x{cfg.height}")
                        lines.append(
                            f"Segmenter: {cfg.segmenter} ({sketch.model_status()})"
                        )
                        text.render(lines, 10, cfg.height - 20)

            # --- Performance logging ---
            frame_count += 1
            time_since_log += actual_dt
            if time_since_log >= log_interval:
                fps = frame_count / time_since_log
                frame_t_ms = (time_since_log / frame_count) * 1000.0
                logger.info(f"FPS: {fps:.2f} | frame_t: {frame_t_ms:.2f}ms")
                profiler.log_stats()
                frame_count = 0
                time_since_log = 0.0

            with profiler.record("swap"):
                glfw.swap_buffers(win)

    finally:
        if text is not None:
            text.release()
        if renderer is not None:
            renderer.release()
        if camera is not None:
            camera.release()
        if loader is not None:
            loader.close()
        glfw.terminate()


if __name__ == "__main__":
    main()
