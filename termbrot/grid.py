"""Grid construction and the double-buffered grid cache."""

import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from termbrot.kernel import iterate_points

log = logging.getLogger(__name__)


def _default_workers():
    return min(8, os.cpu_count() or 1)


class GridBuilder:
    """Fills a rows x cols iteration grid for a viewport and parameters.

    Rows are split into bands and each band is computed on the thread pool.
    numpy releases the GIL inside its element-wise loops, so bands run in
    parallel. Every band writes only its own slice of a buffer that belongs
    to this call until it is returned.
    """

    def __init__(self, workers=None, min_band_rows=4):
        self.workers = workers or _default_workers()
        self.min_band_rows = min_band_rows

    def _bands(self, rows):
        n = max(1, min(self.workers, rows // self.min_band_rows or 1))
        edges = np.linspace(0, rows, n + 1).astype(int)
        return [(int(a), int(b)) for a, b in zip(edges[:-1], edges[1:]) if b > a]

    def build(self, viewport, params):
        buf = np.empty((viewport.rows, viewport.cols), dtype=np.int32)

        def fill(band):
            start, stop = band
            re, im = viewport.axes(start, stop)
            re_grid, im_grid = np.meshgrid(re, im)
            buf[start:stop] = iterate_points(
                re_grid, im_grid, params.max_iterations, params.mode, params.julia_c
            )

        bands = self._bands(viewport.rows)
        if len(bands) == 1:
            fill(bands[0])
        else:
            with ThreadPoolExecutor(max_workers=len(bands)) as executor:
                # list() re-raises the first worker exception, if any
                list(executor.map(fill, bands))
        return buf


class GridCache:
    """Holds the last complete grid and swaps in new ones atomically.

    Readers always get a complete grid: either the previous one while a
    rebuild is running, or the new one once it has finished.
    """

    def __init__(self, builder=None):
        self.builder = builder or GridBuilder()
        self._lock = threading.Lock()
        self._grid = None
        self._key = None
        self._pending = 0
        self._builds = 0
        self._last_build_ms = 0.0

    @property
    def is_calculating(self):
        with self._lock:
            return self._pending > 0

    @property
    def key(self):
        with self._lock:
            return self._key

    def stats(self):
        """(builds finished, duration of the last one in ms)."""
        with self._lock:
            return self._builds, self._last_build_ms

    def get(self):
        with self._lock:
            return self._grid

    def is_stale(self, key):
        with self._lock:
            return self._grid is None or self._key != key

    def rebuild(self, state, force=False):
        """Compute the grid for ``state`` unless the cached one already matches."""
        key = state.grid_key()
        if not force and not self.is_stale(key):
            return self.get()

        with self._lock:
            self._pending += 1
        try:
            t0 = time.perf_counter()
            grid = self.builder.build(state.viewport, state.params)
            grid.setflags(write=False)
            elapsed = time.perf_counter() - t0
            log.debug("computed %dx%d grid in %.1f ms (max_iter=%d, mode=%s)",
                      grid.shape[0], grid.shape[1], elapsed * 1000,
                      state.params.max_iterations, state.params.mode.value)
            with self._lock:
                self._grid = grid
                self._key = key
                self._builds += 1
                self._last_build_ms = elapsed * 1000
            return grid
        finally:
            with self._lock:
                self._pending -= 1
