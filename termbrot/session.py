"""One viewing session: current state, grid cache and preset catalog."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

from termbrot import state as st
from termbrot.config import Config
from termbrot.grid import GridCache
from termbrot.kernel import Mode
from termbrot.presets import PresetCatalog
from termbrot.viewport import Viewport

log = logging.getLogger(__name__)


class FractalSession:
    """Mutable front for the pure reducer in ``termbrot.state``.

    Each mutator builds a command, runs it through ``reduce`` and keeps the
    result. Mutators never recompute on their own; call ``recompute`` (or
    ``recompute_async``) after a batch of changes.
    """

    def __init__(self, initial=None, catalog=None, cache=None):
        self.state = initial or st.ViewState()
        self.catalog = catalog if catalog is not None else PresetCatalog()
        self.cache = cache or GridCache()
        self._lock = threading.Lock()
        self._executor = None

    @classmethod
    def from_config(cls, config, **kwargs):
        config = config or Config()
        viewport = Viewport(
            center_x=config.center_x,
            center_y=config.center_y,
            zoom=config.zoom,
            rows=config.rows,
            cols=config.cols,
        )
        params = st.Parameters(
            max_iterations=st.clamp_iterations(config.max_iter),
            mode=Mode.JULIA if config.julia else Mode.STANDARD,
            color_scheme=config.color_scheme,
            julia_c=config.julia_seed(),
        )
        return cls(st.ViewState(viewport=viewport, params=params), **kwargs)

    def dispatch(self, command):
        with self._lock:
            self.state = st.reduce(self.state, command, self.catalog)
            return self.state

    def dispatch_all(self, commands):
        """Apply a command list as one step; if any command is rejected none are."""
        with self._lock:
            state = self.state
            for command in commands:
                state = st.reduce(state, command, self.catalog)
            self.state = state
            return state

    # ── Mutators ──────────────────────────────────────────────

    def pan(self, dx_cells, dy_cells):
        return self.dispatch(st.Pan(dx_cells, dy_cells))

    def zoom_in(self, factor):
        return self.dispatch(st.ZoomIn(factor))

    def zoom_out(self, factor):
        return self.dispatch(st.ZoomOut(factor))

    def set_center(self, x, y):
        return self.dispatch(st.SetCenter(x, y))

    def set_zoom(self, zoom):
        return self.dispatch(st.SetZoom(zoom))

    def reset(self, rows, cols):
        return self.dispatch(st.Reset(rows, cols))

    def resize(self, rows, cols):
        return self.dispatch(st.Resize(rows, cols))

    def toggle_mode(self):
        return self.dispatch(st.ToggleMode())

    def set_color_scheme(self, index):
        return self.dispatch(st.SetColorScheme(index))

    def set_max_iterations(self, n):
        return self.dispatch(st.SetMaxIterations(n))

    def set_julia_parameter(self, c):
        return self.dispatch(st.SetJuliaParameter(c))

    def next_preset(self):
        """Move to the next preset; returns it, or None for an empty catalog."""
        before = self.state
        after = self.dispatch(st.NextPreset())
        if after is before:
            log.debug("preset catalog is empty, view unchanged")
            return None
        return self.catalog[after.preset_index]

    # ── Accessors ─────────────────────────────────────────────

    def get_grid(self):
        """Last complete grid, computing it first if none exists yet."""
        grid = self.cache.get()
        if grid is None:
            grid = self.recompute()
        return grid

    def get_max_iterations(self):
        return self.state.params.max_iterations

    def get_color_scheme(self):
        return self.state.params.color_scheme

    def get_mode(self):
        return self.state.params.mode

    def get_julia_parameter(self):
        return self.state.params.julia_c

    def get_zoom(self):
        return self.state.viewport.zoom

    def get_center(self):
        return self.state.viewport.center

    def get_interesting_points(self):
        return list(self.catalog)

    def current_preset(self):
        return self.catalog.get(self.state.preset_index)

    @property
    def is_calculating(self):
        return self.cache.is_calculating

    @property
    def grid_is_current(self):
        return not self.cache.is_stale(self.state.grid_key())

    # ── Recompute ─────────────────────────────────────────────

    def recompute(self, force=False):
        return self.cache.rebuild(self.state, force=force)

    def recompute_async(self):
        """Rebuild the grid on a background worker; returns its Future.

        The grid visible through ``get_grid`` stays the previous complete one
        until the build finishes.
        """
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="termbrot-grid")
        snapshot = self.state
        return self._executor.submit(self.cache.rebuild, snapshot)

    def close(self):
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
