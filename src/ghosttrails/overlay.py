from __future__ import annotations
import os
from typing import NamedTuple

import freetype
import moderngl
import numpy as np

from . import shaders as S
from .config import AppConfig
from .logging import get_logger

FONT_CANDIDATES = (
    "fonts/FiraCode-SemiBold.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
    "/usr/share/fonts/TTF/DejaVuSansMono.ttf",
    "/System/Library/Fonts/Menlo.ttc",
    "C:/Windows/Fonts/consola.ttf",
)

CHARSET = "".join(chr(c) for c in range(32, 127))  # printable ASCII
GLYPH_PAD = 1  # px between atlas cells


class Glyph(NamedTuple):
    width: int
    height: int
    left: int  # bitmap offset from the pen position
    top: int
    advance: int
    u0: float  # atlas texture coordinates
    u1: float
    v1: float


class TextOverlay:
    """ASCII text drawn over the canvas from a FreeType glyph atlas."""

    def __init__(self, ctx: moderngl.Context, cfg: AppConfig, size: int = 16):
        self.ctx = ctx
        self.cfg = cfg
        self.logger = get_logger(__name__)
        self.line_height = size + 2
        self.prog = self.ctx.program(vertex_shader=S.VS_TEXT, fragment_shader=S.FS_TEXT)

        self.sampler = self.ctx.sampler(
            filter=(moderngl.LINEAR, moderngl.LINEAR),
            repeat_x=False,
            repeat_y=False,
        )

        self.max_chars = 1024
        # 6 vertices per char, 4 floats per vertex (x, y, u, v)
        self.vertices = np.zeros((self.max_chars * 6, 4), dtype="f4")
        self.vbo = self.ctx.buffer(self.vertices.tobytes(), dynamic=True)
        self.vao = self.ctx.vertex_array(
            self.prog, [(self.vbo, "2f 2f", "in_vert", "in_uv")]
        )
        self.char_count = 0

        self.font_map: dict[str, Glyph] = {}
        self.font_texture = None
        font_path = self._find_font_path()

        if font_path:
            try:
                self._load_font(font_path, size)
                self.logger.info(f"Loaded font: {font_path}")
            except Exception as e:
                self.logger.warning(f"Failed to load font '{font_path}': {e}")
        else:
            self.logger.warning("Could not find a font for on-screen text.")

    @property
    def font_loaded(self) -> bool:
        return self.font_texture is not None

    def _find_font_path(self) -> str | None:
        paths = ((self.cfg.font_path,) if self.cfg.font_path else ()) + FONT_CANDIDATES
        for path in paths:
            if os.path.exists(path):
                self.logger.debug(f"Found font at: {path}")
                return path
        return None

    def _load_font(self, font_path: str, size: int):
        face = freetype.Face(font_path)
        face.set_pixel_sizes(0, size)

        # Render every glyph once, then lay the bitmaps out left to right
        rendered = []
        for char in CHARSET:
            face.load_char(char, freetype.FT_LOAD_RENDER)
            g = face.glyph
            bmp = g.bitmap
            pixels = np.array(bmp.buffer, dtype="u1").reshape((bmp.rows, bmp.width))
            rendered.append((char, pixels, g.bitmap_left, g.bitmap_top, g.advance.x >> 6))

        atlas_w = sum(p.shape[1] + GLYPH_PAD for _, p, *_ in rendered)
        atlas_h = max(p.shape[0] for _, p, *_ in rendered)
        if atlas_h == 0:
            self.logger.warning("Font atlas is empty, no text will be drawn.")
            return

        atlas = np.zeros((atlas_h, atlas_w), dtype="u1")
        x = 0
        for char, pixels, left, top, advance in rendered:
            h, w = pixels.shape
            atlas[:h, x : x + w] = pixels
            self.font_map[char] = Glyph(
                w, h, left, top, advance, x / atlas_w, (x + w) / atlas_w, h / atlas_h
            )
            x += w + GLYPH_PAD

        self.ctx.pack_alignment = 1
        self.font_texture = self.ctx.texture(
            (atlas_w, atlas_h), 1, atlas.tobytes(), dtype="f1"
        )
        self.ctx.pack_alignment = 4

    def text_width(self, line: str) -> int:
        return sum(self.font_map[c].advance for c in line if c in self.font_map)

    def render(self, lines: list[str], x: int, y: int, color=(1.0, 1.0, 1.0)):
        """Draw `lines` top-down starting with the baseline of the first at (x, y)."""
        if not self.font_loaded:
            return
        self.char_count = 0

        for row, line in enumerate(lines):
            pen_x = x
            baseline = y - row * self.line_height
            for char in line:
                glyph = self.font_map.get(char)
                if glyph is None or self.char_count >= self.max_chars:
                    continue
                if glyph.width and glyph.height:
                    self._add_glyph_quad(glyph, pen_x, baseline)
                pen_x += glyph.advance

        if self.char_count > 0:
            self.vbo.write(self.vertices[: self.char_count * 6].tobytes())
            self.prog["textColor"].value = color
            self.font_texture.use(location=0)
            self.sampler.use(location=0)
            self.ctx.enable(moderngl.BLEND)
            self.ctx.blend_func = moderngl.SRC_ALPHA, moderngl.ONE_MINUS_SRC_ALPHA
            self.vao.render(moderngl.TRIANGLES, vertices=self.char_count * 6)
            self.ctx.disable(moderngl.BLEND)

    def render_centered(self, lines: list[str], color=(1.0, 1.0, 1.0)):
        """Draw each line horizontally centred, the block centred vertically."""
        if not self.font_loaded:
            return
        block = self.line_height * len(lines)
        y = (self.cfg.height + block) // 2 - self.line_height
        for line in lines:
            x = (self.cfg.width - self.text_width(line)) // 2
            self.render([line], x, y, color)
            y -= self.line_height

    def _add_glyph_quad(self, glyph: Glyph, pen_x: int, baseline: int):
        # pixel rect, origin bottom-left
        x0 = pen_x + glyph.left
        y1 = baseline + glyph.top
        x1, y0 = x0 + glyph.width, y1 - glyph.height

        sx, sy = 2.0 / self.cfg.width, 2.0 / self.cfg.height
        l, r = x0 * sx - 1.0, x1 * sx - 1.0
        b, t = y0 * sy - 1.0, y1 * sy - 1.0

        # atlas rows run top-down, so the quad's top edge samples v=0
        quad = (
            (l, t, glyph.u0, 0.0),
            (l, b, glyph.u0, glyph.v1),
            (r, b, glyph.u1, glyph.v1),
            (l, t, glyph.u0, 0.0),
            (r, b, glyph.u1, glyph.v1),
            (r, t, glyph.u1, 0.0),
        )
        i = self.char_count * 6
        self.vertices[i : i + 6] = quad
        self.char_count += 1

    def release(self):
        for res in (self.vao, self.vbo, self.font_texture, self.sampler, self.prog):
            if res is not None:
                res.release()
        self.font_texture = None
