from dataclasses import dataclass


@dataclass
class AppConfig:
    # --- Debugging ---
    debug: bool = False  # Show debug overlay

    # --- Logging ---
    log_level: str = "INFO"  # Minimum log level to output
    log_file: str | None = None  # Redirect logs to a file instead of the console

    # --- Window / Canvas ---
    width: int = 1280  # Initial window (and canvas) width
    height: int = 720  # Initial window (and canvas) height
    fullscreen: bool = False  # Open fullscreen on the primary monitor
    font_path: str | None = None  # TTF used for on-screen text; None searches defaults

    # --- Camera ---
    camera_index: int = 0  # Index of the camera to use (e.g., 0 for /dev/video0)
    cam_width: int = 640  # Camera frame width; all frame buffers use this size
    cam_height: int = 480  # Camera frame height
    mirror: bool = True  # Mirror frames horizontally when drawing them

    # --- Segmentation ---
    segmenter: str = "mediapipe"  # Segmentation backend ('mediapipe' or 'yolo')
    yolo_model: str = "yolo11n-seg.pt"  # Path to the YOLO model file
    seg_width: int = 320  # YOLO input width (multiple of 32)
    seg_height: int = 256  # YOLO input height (multiple of 32)
    seg_threshold: float = 0.7  # Probability above which a pixel counts as person

    # --- Effects ---
    effect: str = "trails2"  # Initial effect ('trails2', 'colortrip' or 'natural')
    trails2_frame_skip: int = 15  # Capture the body into the trail every N frames
    colortrip_frame_skip: int = 1  # Lighten a tinted frame every N frames
    natural_frame_skip: int = 12  # Lighten a plain frame every N frames

    # --- Tint (HSB, saturation/brightness on a 0-100 scale) ---
    hue_step: float = 0.5  # Degrees the tint hue advances per drawn frame
    tint_saturation: float = 70.0
    tint_brightness: float = 100.0

    # --- Snapshots ---
    snapshot_dir: str = "."  # Directory where 'S' writes PNG snapshots
    snapshot_prefix: str = "trails-artwork"  # Snapshot file-name prefix
