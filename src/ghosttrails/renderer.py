from __future__ import annotations
import cv2
import moderngl
import numpy as np

from . import shaders as S
from .logging import get_logger


def make_tex(ctx, size, comps, dtype="f1", filt=moderngl.NEAREST):
    tex = ctx.texture(size, comps, dtype=dtype)
    tex.filter = (filt, filt)
    tex.repeat_x = False
    tex.repeat_y = False
    return tex


def fullscreen_quad(ctx):
    v = np.array([-1, -1, 1, -1, -1, 1, 1, 1], dtype="f4")
    return ctx.buffer(v.tobytes())


class CanvasRenderer:
    """Puts the composited canvas on screen as a full-screen textured quad."""

    def __init__(self, ctx: moderngl.Context):
        self.ctx = ctx
        self.logger = get_logger(__name__)
        self.prog = ctx.program(vertex_shader=S.VS, fragment_shader=S.FS_CANVAS)
        self.vbo = fullscreen_quad(ctx)
        self.vao = ctx.simple_vertex_array(self.prog, self.vbo, "in_vert")
        self.texture = None

    def upload(self, canvas: np.ndarray):
        h, w = canvas.shape[:2]
        if self.texture is None or self.texture.size != (w, h):
            if self.texture is not None:
                self.texture.release()
            self.logger.debug(f"Allocating canvas texture {w}x{h}")
            self.texture = make_tex(self.ctx, (w, h), 3)
        # GL's first row is the bottom of the image
        self.texture.write(np.ascontiguousarray(cv2.flip(canvas, 0)).tobytes())

    def render(self, width: int, height: int):
        if self.texture is None:
            return
        self.ctx.viewport = (0, 0, width, height)
        self.texture.use(location=0)
        self.prog["canvas"].value = 0
        self.vao.render(moderngl.TRIANGLE_STRIP)

    def release(self):
        for obj in (self.texture, self.vao, self.vbo, self.prog):
            if obj is not None:
                obj.release()
        self.texture = None
