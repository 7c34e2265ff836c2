import threading

import numpy as np

from termbrot.grid import GridBuilder, GridCache
from termbrot.kernel import Mode, iterate
from termbrot.state import Parameters, ViewState
from termbrot.viewport import Viewport


def test_grid_matches_scalar_kernel():
    vp = Viewport(center_x=-0.75, center_y=0.1, zoom=5.0, rows=9, cols=13)
    params = Parameters(max_iterations=60)
    grid = GridBuilder(workers=3, min_band_rows=1).build(vp, params)
    expected = [[iterate(vp.cell_to_plane(r, c), 60) for c in range(vp.cols)]
                for r in range(vp.rows)]
    assert grid.tolist() == expected


def test_band_split_does_not_change_result():
    vp = Viewport(rows=37, cols=50)
    params = Parameters(max_iterations=100, mode=Mode.JULIA)
    single = GridBuilder(workers=1).build(vp, params)
    many = GridBuilder(workers=8, min_band_rows=1).build(vp, params)
    assert np.array_equal(single, many)


def test_bands_cover_every_row_once():
    builder = GridBuilder(workers=4, min_band_rows=2)
    for rows in [1, 2, 3, 7, 8, 31, 100]:
        bands = builder._bands(rows)
        covered = [r for start, stop in bands for r in range(start, stop)]
        assert covered == list(range(rows))


def test_single_row_grid():
    grid = GridBuilder().build(Viewport(rows=1, cols=5), Parameters())
    assert grid.shape == (1, 5)


class BlockingBuilder(GridBuilder):
    """Builds normally but waits for a signal before returning."""

    def __init__(self):
        super().__init__(workers=1)
        self.started = threading.Event()
        self.release = threading.Event()

    def build(self, viewport, params):
        grid = super().build(viewport, params)
        self.started.set()
        self.release.wait(timeout=30)
        return grid


def test_readers_see_previous_grid_while_calculating():
    cache = GridCache(GridBuilder(workers=1))
    state = ViewState(viewport=Viewport(rows=6, cols=10))
    old = cache.rebuild(state)

    blocking = BlockingBuilder()
    cache.builder = blocking
    new_state = ViewState(viewport=Viewport(rows=4, cols=8), params=state.params)
    worker = threading.Thread(target=cache.rebuild, args=(new_state,))
    worker.start()
    assert blocking.started.wait(timeout=30)

    assert cache.is_calculating
    assert cache.get() is old
    assert cache.is_stale(new_state.grid_key())

    blocking.release.set()
    worker.join(timeout=30)

    assert not cache.is_calculating
    assert cache.get().shape == (4, 8)
    assert not cache.is_stale(new_state.grid_key())


def test_empty_cache_is_stale():
    cache = GridCache()
    assert cache.get() is None
    assert cache.is_stale(ViewState().grid_key())


def test_cache_counts_finished_builds():
    cache = GridCache(GridBuilder(workers=1))
    assert cache.stats() == (0, 0.0)
    state = ViewState(viewport=Viewport(rows=4, cols=6))
    cache.rebuild(state)
    cache.rebuild(state)
    builds, last_ms = cache.stats()
    assert builds == 1
    assert last_ms >= 0.0
    cache.rebuild(state, force=True)
    assert cache.stats()[0] == 2
