import logging
import time
import tracemalloc

import pytest

from termbrot.grid import GridBuilder, GridCache
from termbrot.profiling import Watchdog
from termbrot.state import ViewState
from termbrot.viewport import Viewport


@pytest.fixture
def cache():
    c = GridCache(GridBuilder(workers=1))
    c.rebuild(ViewState(viewport=Viewport(rows=4, cols=6)))
    return c


def test_stats_report_builds_and_threads(cache):
    stats = Watchdog(cache).stats()
    assert stats["grid_builds"] == 1
    assert stats["threads"] >= 1
    assert stats["alloc_mb"] >= 0
    assert stats["peak_mb"] >= stats["alloc_mb"]


def test_watchdog_logs_periodically_and_stops(cache, caplog):
    assert not tracemalloc.is_tracing()
    with caplog.at_level(logging.INFO, logger="termbrot"):
        watchdog = Watchdog(cache, interval=0.01).start()
        assert watchdog.running
        assert tracemalloc.is_tracing()
        for _ in range(500):
            if "runtime stats" in caplog.text:
                break
            time.sleep(0.01)
        watchdog.stop()

    assert not watchdog.running
    assert not tracemalloc.is_tracing()
    assert "runtime stats" in caplog.text
    assert "grid_builds=1" in caplog.text
    assert "stopping watchdog" in caplog.text


def test_stop_without_start_is_harmless(cache):
    Watchdog(cache).stop()


@pytest.mark.parametrize("interval", [0, -1])
def test_interval_must_be_positive(cache, interval):
    with pytest.raises(ValueError):
        Watchdog(cache, interval)
