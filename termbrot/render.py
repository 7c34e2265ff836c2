"""Iteration count to glyph and color.

Interior points (count == max_iter) are always a black full block. Escaped
points are shaded by ``iter / max_iter`` through the glyph ramp and the
selected palette.
"""

import numpy as np

from termbrot.config import COLOR_SCHEMES

INTERIOR_GLYPH = "█"
INTERIOR_COLOR = (0, 0, 0)

# (upper ratio bound, glyph)
GLYPH_RAMP = [
    (0.1, " "),
    (0.2, "░"),
    (0.4, "▒"),
    (0.6, "▓"),
    (0.8, "█"),
]
GLYPH_TOP = "▓"

# Banded palettes: (upper ratio bounds, colors); the last color covers the rest.
BANDED_PALETTES = {
    0: ([0.1, 0.3, 0.6, 0.8],
        [(0, 0, 0), (64, 64, 64), (128, 128, 128), (192, 192, 192), (255, 255, 255)]),
    1: ([0.2, 0.4, 0.6, 0.8],
        [(0, 0, 0), (128, 0, 0), (255, 0, 0), (255, 128, 0), (255, 255, 0)]),
    2: ([0.2, 0.4, 0.6, 0.8],
        [(0, 0, 0), (0, 0, 128), (0, 0, 255), (0, 255, 255), (128, 0, 255)]),
}
RAINBOW = 3
GRAYSCALE = 4


def hsv_to_rgb(h, s, v):
    """HSV with hue in degrees to an 8-bit RGB tuple."""
    h = h % 360
    c = v * s
    x = c * (1 - abs((h / 60) % 2 - 1))
    m = v - c
    if h < 60:
        r, g, b = c, x, 0
    elif h < 120:
        r, g, b = x, c, 0
    elif h < 180:
        r, g, b = 0, c, x
    elif h < 240:
        r, g, b = 0, x, c
    elif h < 300:
        r, g, b = x, 0, c
    else:
        r, g, b = c, 0, x
    return int((r + m) * 255), int((g + m) * 255), int((b + m) * 255)


class RenderOptions:
    """Glyph and color mapping for one color scheme."""

    def __init__(self, color_scheme=0):
        self.color_scheme = color_scheme % len(COLOR_SCHEMES)

    @property
    def scheme_name(self):
        return COLOR_SCHEMES[self.color_scheme]

    def glyph_for(self, iteration, max_iter):
        if iteration >= max_iter:
            return INTERIOR_GLYPH
        ratio = iteration / max_iter
        for bound, glyph in GLYPH_RAMP:
            if ratio < bound:
                return glyph
        return GLYPH_TOP

    def color_for(self, iteration, max_iter):
        if iteration >= max_iter:
            return INTERIOR_COLOR
        ratio = iteration / max_iter
        if self.color_scheme == RAINBOW:
            return hsv_to_rgb(ratio * 360.0, 1.0, 1.0)
        if self.color_scheme == GRAYSCALE:
            level = int(ratio * 255)
            return level, level, level
        bounds, colors = BANDED_PALETTES[self.color_scheme]
        for bound, color in zip(bounds, colors):
            if ratio < bound:
                return color
        return colors[-1]

    # ── Whole-grid passes ─────────────────────────────────────

    def glyph_indices(self, grid, max_iter):
        """Index into ``glyph_table()`` for every cell."""
        ratio = grid / float(max_iter)
        bounds = [b for b, _ in GLYPH_RAMP]
        idx = np.searchsorted(bounds, ratio, side="right")
        idx[grid >= max_iter] = len(GLYPH_RAMP) + 1
        return idx

    @staticmethod
    def glyph_table():
        return [g for _, g in GLYPH_RAMP] + [GLYPH_TOP, INTERIOR_GLYPH]

    def colorize(self, grid, max_iter):
        """RGB uint8 array of shape (rows, cols, 3) for the whole grid."""
        grid = np.asarray(grid)
        ratio = grid / float(max_iter)
        out = np.zeros(grid.shape + (3,), dtype=np.uint8)

        if self.color_scheme == RAINBOW:
            # one lookup per distinct count keeps this cheap
            values, inverse = np.unique(grid, return_inverse=True)
            lut = np.array([hsv_to_rgb(v / max_iter * 360.0, 1.0, 1.0) for v in values],
                           dtype=np.uint8).reshape(-1, 3)
            out[:] = lut[inverse.reshape(grid.shape)]
        elif self.color_scheme == GRAYSCALE:
            level = (ratio * 255).astype(np.int64).clip(0, 255).astype(np.uint8)
            out[..., 0] = out[..., 1] = out[..., 2] = level
        else:
            bounds, colors = BANDED_PALETTES[self.color_scheme]
            lut = np.array(colors, dtype=np.uint8)
            out[:] = lut[np.searchsorted(bounds, ratio, side="right")]

        out[grid >= max_iter] = INTERIOR_COLOR
        return out

    def to_text(self, grid, max_iter):
        """Plain text rendition of the grid, one line per row."""
        table = self.glyph_table()
        idx = self.glyph_indices(np.asarray(grid), max_iter)
        return "\n".join("".join(table[i] for i in row) for row in idx)
