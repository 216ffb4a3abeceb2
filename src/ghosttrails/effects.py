from __future__ import annotations
import numpy as np

from .compositing import fit_to_canvas, hsb_to_rgb, mask_frame, source_over, tint


class Effect:
    """
    One switchable effect mode.

    `render` is called once per drawn frame with the owning sketch (for the
    trail buffer, counters and segmentation) and the current camera frame,
    and returns the canvas to show.
    """

    name = ""
    label = ""
    needs_segmentation = False
    skip_field = ""

    def __init__(self, cfg):
        self.cfg = cfg

    @property
    def frame_skip(self) -> int:
        return max(1, int(getattr(self.cfg, self.skip_field)))

    def due(self, frame_count: int) -> bool:
        return frame_count % self.frame_skip == 0

    def render(self, sketch, frame: np.ndarray) -> np.ndarray:
        raise NotImplementedError


class BodyTrails(Effect):
    # Live masked body on top of body snapshots taken every `frame_skip` frames.
    name = "trails2"
    label = "Body Trails"
    needs_segmentation = True
    skip_field = "trails2_frame_skip"

    def render(self, sketch, frame):
        trail = sketch.trail
        mask = sketch.segment(frame)
        if mask is None:
            return trail.canvas.copy()

        body = fit_to_canvas(
            mask_frame(frame, mask), trail.width, trail.height, self.cfg.mirror
        )
        if self.due(sketch.frame_count):
            trail.draw_over(body)
        return source_over(trail.canvas, body)


class ColorTrip(Effect):
    name = "colortrip"
    label = "Color Trip"
    skip_field = "colortrip_frame_skip"

    def render(self, sketch, frame):
        trail = sketch.trail
        if self.due(sketch.frame_count):
            color = hsb_to_rgb(
                sketch.hue_offset, self.cfg.tint_saturation, self.cfg.tint_brightness
            )
            trail.draw_lighten(
                fit_to_canvas(
                    tint(frame, color), trail.width, trail.height, self.cfg.mirror
                )
            )
        return trail.canvas.copy()


class NaturalLayers(Effect):
    name = "natural"
    label = "Natural Layers"
    skip_field = "natural_frame_skip"

    def render(self, sketch, frame):
        trail = sketch.trail
        if self.due(sketch.frame_count):
            trail.draw_lighten(
                fit_to_canvas(frame, trail.width, trail.height, self.cfg.mirror)
            )
        return trail.canvas.copy()


EFFECTS = {cls.name: cls for cls in (BodyTrails, ColorTrip, NaturalLayers)}


def create_effect(name: str, cfg) -> Effect:
    try:
        cls = EFFECTS[name]
    except KeyError:
        raise ValueError(
            f"Unknown effect: {name!r} (choose from {', '.join(EFFECTS)})"
        ) from None
    return cls(cfg)
