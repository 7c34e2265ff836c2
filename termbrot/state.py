"""View state and the commands that transform it.

``reduce(state, command)`` is a pure function: it returns a new ViewState
and never touches the one it was given. A command that fails validation
raises InvalidParameter and the caller keeps its previous state.
"""

import cmath
from dataclasses import dataclass, field, replace

from termbrot.config import (
    COLOR_SCHEMES,
    DEFAULT_COLOR_SCHEME,
    DEFAULT_JULIA_SEED,
    DEFAULT_MAX_ITERATIONS,
    MAX_MAX_ITERATIONS,
    MIN_MAX_ITERATIONS,
)
from termbrot.errors import InvalidParameter
from termbrot.kernel import Mode
from termbrot.presets import PresetCatalog
from termbrot.viewport import Viewport


def clamp_iterations(n):
    return min(max(int(n), MIN_MAX_ITERATIONS), MAX_MAX_ITERATIONS)


@dataclass(frozen=True)
class Parameters:
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    mode: Mode = Mode.STANDARD
    color_scheme: int = DEFAULT_COLOR_SCHEME
    julia_c: complex = DEFAULT_JULIA_SEED


@dataclass(frozen=True)
class ViewState:
    viewport: Viewport = field(default_factory=Viewport)
    params: Parameters = field(default_factory=Parameters)
    preset_index: int = 0

    def grid_key(self):
        """Everything the grid depends on; equal keys mean equal grids."""
        p = self.params
        seed = p.julia_c if p.mode is Mode.JULIA else None
        return self.viewport, p.max_iterations, p.mode, seed


# ── Commands ──────────────────────────────────────────────


@dataclass(frozen=True)
class Pan:
    dx: float
    dy: float


@dataclass(frozen=True)
class ZoomIn:
    factor: float


@dataclass(frozen=True)
class ZoomOut:
    factor: float


@dataclass(frozen=True)
class SetCenter:
    x: float
    y: float


@dataclass(frozen=True)
class SetZoom:
    zoom: float


@dataclass(frozen=True)
class Reset:
    rows: int
    cols: int


@dataclass(frozen=True)
class Resize:
    rows: int
    cols: int


@dataclass(frozen=True)
class ToggleMode:
    pass


@dataclass(frozen=True)
class SetMode:
    mode: Mode


@dataclass(frozen=True)
class SetColorScheme:
    index: int


@dataclass(frozen=True)
class SetMaxIterations:
    value: int


@dataclass(frozen=True)
class SetJuliaParameter:
    c: complex


@dataclass(frozen=True)
class NextPreset:
    pass


def reduce(state, command, catalog=None):
    """Apply one command and return the resulting state."""
    vp = state.viewport
    params = state.params

    if isinstance(command, Pan):
        return replace(state, viewport=vp.panned(command.dx, command.dy))
    elif isinstance(command, ZoomIn):
        return replace(state, viewport=vp.zoomed_in(command.factor))
    elif isinstance(command, ZoomOut):
        return replace(state, viewport=vp.zoomed_out(command.factor))
    elif isinstance(command, SetCenter):
        return replace(state, viewport=vp.with_center(command.x, command.y))
    elif isinstance(command, SetZoom):
        return replace(state, viewport=vp.with_zoom(command.zoom))
    elif isinstance(command, Reset):
        # max_iterations, mode and color scheme are user preferences
        return replace(state, viewport=Viewport.default(command.rows, command.cols),
                       preset_index=0)
    elif isinstance(command, Resize):
        return replace(state, viewport=vp.resized(command.rows, command.cols))
    elif isinstance(command, ToggleMode):
        return replace(state, params=replace(params, mode=params.mode.toggled()))
    elif isinstance(command, SetMode):
        return replace(state, params=replace(params, mode=Mode(command.mode)))
    elif isinstance(command, SetColorScheme):
        scheme = int(command.index) % len(COLOR_SCHEMES)
        return replace(state, params=replace(params, color_scheme=scheme))
    elif isinstance(command, SetMaxIterations):
        n = clamp_iterations(command.value)
        return replace(state, params=replace(params, max_iterations=n))
    elif isinstance(command, SetJuliaParameter):
        c = complex(command.c)
        if not cmath.isfinite(c):
            raise InvalidParameter(f"julia parameter must be finite, got {c!r}")
        return replace(state, params=replace(params, julia_c=c))
    elif isinstance(command, NextPreset):
        if catalog is None:
            catalog = PresetCatalog()
        preset, index = catalog.next(state.preset_index)
        if preset is None:
            return state
        vp = vp.with_center(preset.x, preset.y).with_zoom(preset.zoom)
        return replace(state, viewport=vp, preset_index=index)
    raise TypeError(f"unknown command: {command!r}")
