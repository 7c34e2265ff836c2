"""The visible rectangle of the complex plane and its cell mapping."""

import math
from dataclasses import dataclass, replace

import numpy as np

from termbrot.config import (
    CELL_ASPECT,
    DEFAULT_CENTER_X,
    DEFAULT_CENTER_Y,
    DEFAULT_COLS,
    DEFAULT_ROWS,
    DEFAULT_ZOOM,
    MAX_CENTER,
    MAX_ZOOM,
    MIN_ZOOM,
    PAN_STEP,
    VIEW_WIDTH,
)
from termbrot.errors import InvalidParameter


def _check_finite(name, *values):
    for v in values:
        if not math.isfinite(v):
            raise InvalidParameter(f"{name} must be finite, got {v!r}")


def _check_resolution(rows, cols):
    if rows <= 0 or cols <= 0:
        raise InvalidParameter(f"resolution must be positive, got {rows}x{cols}")


def clamp_zoom(zoom):
    return min(max(zoom, MIN_ZOOM), MAX_ZOOM)


def clamp_center(v):
    return min(max(v, -MAX_CENTER), MAX_CENTER)


@dataclass(frozen=True)
class Viewport:
    """Center, zoom and grid resolution.

    Every operation returns a new Viewport; invalid input raises
    InvalidParameter before anything is built, so a rejected call never
    changes the caller's value.
    """

    center_x: float = DEFAULT_CENTER_X
    center_y: float = DEFAULT_CENTER_Y
    zoom: float = DEFAULT_ZOOM
    rows: int = DEFAULT_ROWS
    cols: int = DEFAULT_COLS

    def __post_init__(self):
        _check_finite("center", self.center_x, self.center_y)
        _check_finite("zoom", self.zoom)
        if self.zoom <= 0:
            raise InvalidParameter(f"zoom must be positive, got {self.zoom!r}")
        _check_resolution(self.rows, self.cols)

    @property
    def center(self):
        return self.center_x, self.center_y

    # ── Cell mapping ──────────────────────────────────────────

    @property
    def step_real(self):
        return VIEW_WIDTH / (self.zoom * self.cols)

    @property
    def step_imag(self):
        return self.step_real * CELL_ASPECT

    def cell_to_plane(self, row, col):
        re = self.center_x + (col - self.cols / 2) * self.step_real
        im = self.center_y + (row - self.rows / 2) * self.step_imag
        return complex(re, im)

    def axes(self, row_start=0, row_stop=None):
        """Real parts per column and imaginary parts per row, as 1-D arrays."""
        if row_stop is None:
            row_stop = self.rows
        cols = np.arange(self.cols, dtype=np.float64)
        rows = np.arange(row_start, row_stop, dtype=np.float64)
        re = self.center_x + (cols - self.cols / 2) * self.step_real
        im = self.center_y + (rows - self.rows / 2) * self.step_imag
        return re, im

    def bounds(self):
        """Plane coordinates of the top-left and bottom-right cells."""
        return self.cell_to_plane(0, 0), self.cell_to_plane(self.rows - 1, self.cols - 1)

    # ── Transitions ───────────────────────────────────────────

    def panned(self, dx_cells, dy_cells):
        shift = PAN_STEP / self.zoom
        return replace(
            self,
            center_x=clamp_center(self.center_x + dx_cells * shift),
            center_y=clamp_center(self.center_y + dy_cells * shift),
        )

    def zoomed_in(self, factor):
        self._check_factor(factor)
        return replace(self, zoom=clamp_zoom(self.zoom * factor))

    def zoomed_out(self, factor):
        self._check_factor(factor)
        return replace(self, zoom=clamp_zoom(self.zoom / factor))

    def with_center(self, x, y):
        _check_finite("center", x, y)
        return replace(self, center_x=float(x), center_y=float(y))

    def with_zoom(self, zoom):
        _check_finite("zoom", zoom)
        if zoom <= 0:
            raise InvalidParameter(f"zoom must be positive, got {zoom!r}")
        return replace(self, zoom=clamp_zoom(float(zoom)))

    def resized(self, rows, cols):
        _check_resolution(rows, cols)
        return replace(self, rows=int(rows), cols=int(cols))

    @classmethod
    def default(cls, rows=DEFAULT_ROWS, cols=DEFAULT_COLS):
        _check_resolution(rows, cols)
        return cls(rows=int(rows), cols=int(cols))

    @staticmethod
    def _check_factor(factor):
        _check_finite("zoom factor", factor)
        if factor <= 0:
            raise InvalidParameter(f"zoom factor must be positive, got {factor!r}")
