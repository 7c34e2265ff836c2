"""Interactive Mandelbrot set viewer on a grid of character cells.

The engine (viewport, escape-time kernel, grid cache, presets) lives in
``termbrot.session.FractalSession``; ``termbrot.viewer`` draws it.
"""

from termbrot.errors import ConfigError, InvalidParameter
from termbrot.kernel import Mode, iterate, iterate_points
from termbrot.presets import INTERESTING_POINTS, Preset, PresetCatalog
from termbrot.session import FractalSession
from termbrot.state import Parameters, ViewState, reduce
from termbrot.viewport import Viewport

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "FractalSession",
    "INTERESTING_POINTS",
    "InvalidParameter",
    "Mode",
    "Parameters",
    "Preset",
    "PresetCatalog",
    "ViewState",
    "Viewport",
    "iterate",
    "iterate_points",
    "reduce",
]
