"""Runtime statistics watchdog enabled by ``--profile``."""

import logging
import threading
import tracemalloc

log = logging.getLogger(__name__)

DEFAULT_PROFILE_INTERVAL = 5.0


def _mb(n):
    return n / 1024 / 1024


class Watchdog:
    """Logs thread, memory and grid build statistics every ``interval`` seconds.

    Memory figures come from tracemalloc, which is started with the watchdog
    (unless something else is already tracing) and stopped with it.
    """

    def __init__(self, cache, interval=DEFAULT_PROFILE_INTERVAL):
        if interval <= 0:
            raise ValueError(f"profile interval must be positive, got {interval!r}")
        self.cache = cache
        self.interval = interval
        self._stop = threading.Event()
        self._thread = None
        self._owns_tracing = False

    def stats(self):
        current, peak = tracemalloc.get_traced_memory()
        builds, last_ms = self.cache.stats()
        return {
            "threads": threading.active_count(),
            "alloc_mb": round(_mb(current), 2),
            "peak_mb": round(_mb(peak), 2),
            "grid_builds": builds,
            "last_build_ms": round(last_ms, 1),
        }

    def log_stats(self):
        s = self.stats()
        log.info("runtime stats: threads=%d alloc_mb=%.2f peak_mb=%.2f "
                 "grid_builds=%d last_build_ms=%.1f",
                 s["threads"], s["alloc_mb"], s["peak_mb"],
                 s["grid_builds"], s["last_build_ms"])
        return s

    def _run(self):
        while not self._stop.wait(self.interval):
            self.log_stats()

    def start(self):
        if self._thread is not None:
            return self
        if not tracemalloc.is_tracing():
            tracemalloc.start()
            self._owns_tracing = True
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="termbrot-watchdog", daemon=True)
        self._thread.start()
        log.info("starting watchdog with interval %.1fs", self.interval)
        return self

    def stop(self):
        if self._thread is None:
            return
        self._stop.set()
        self._thread.join()
        self._thread = None
        if self._owns_tracing:
            tracemalloc.stop()
            self._owns_tracing = False
        log.info("stopping watchdog")

    @property
    def running(self):
        return self._thread is not None
