"""Named regions of the Mandelbrot set worth a look."""

from typing import NamedTuple


class Preset(NamedTuple):
    name: str
    x: float
    y: float
    zoom: float


# Format: (name, center_x, center_y, zoom)
INTERESTING_POINTS = (
    Preset("Classic View", -0.5, 0.0, 1.0),
    Preset("Seahorse Valley", -0.75, 0.1, 50.0),
    Preset("Lightning", -1.775, 0.0, 100.0),
    Preset("Elephant Valley", 0.25, 0.0, 10.0),
    Preset("Spiral", -0.1592, -1.0317, 100.0),
    Preset("Mini Mandelbrot", -1.25066, 0.02012, 2000.0),
    Preset("Feather", -0.7463, 0.1102, 200.0),
    Preset("Dragon", -0.7269, 0.1889, 300.0),
)


class PresetCatalog:
    """Immutable, ordered preset list navigated by index."""

    def __init__(self, presets=INTERESTING_POINTS):
        self._presets = tuple(presets)

    def __len__(self):
        return len(self._presets)

    def __iter__(self):
        return iter(self._presets)

    def __getitem__(self, index):
        return self._presets[index]

    def next(self, current):
        """Return ``(preset, index)`` for the entry after ``current``.

        An empty catalog returns ``(None, current)``.
        """
        if not self._presets:
            return None, current
        index = (current + 1) % len(self._presets)
        return self._presets[index], index

    def get(self, index):
        if not self._presets or not 0 <= index < len(self._presets):
            return None
        return self._presets[index]
