"""Defaults, bounds, and start-up configuration."""

import logging
import math
import re
import sys
from dataclasses import dataclass

from termbrot.errors import ConfigError

log = logging.getLogger(__name__)

# Grid
DEFAULT_ROWS = 30
DEFAULT_COLS = 80
MIN_ROWS = 10
MIN_COLS = 20

# Iteration bounds
DEFAULT_MAX_ITERATIONS = 50
MIN_MAX_ITERATIONS = 10
MAX_MAX_ITERATIONS = 1000
ITERATION_STEP = 10

# View
DEFAULT_ZOOM = 1.0
DEFAULT_CENTER_X = -0.5
DEFAULT_CENTER_Y = 0.0
MIN_ZOOM = 1e-3
MAX_ZOOM = 1e15
MAX_CENTER = sys.float_info.max   # pans saturate here instead of overflowing
VIEW_WIDTH = 4.0       # plane width spanned by the grid at zoom 1
CELL_ASPECT = 2.0      # character cells are roughly twice as tall as wide
PAN_STEP = VIEW_WIDTH / DEFAULT_COLS
ZOOM_FACTOR = 2.0

# Alternate mode seed
DEFAULT_JULIA_C = "-0.7+0.27015i"

# Presentation
COLOR_SCHEMES = [
    "Classic",
    "Hot",
    "Cool",
    "Rainbow",
    "Grayscale",
]
DEFAULT_COLOR_SCHEME = 0
DEFAULT_CELL_SIZE = 14
DEFAULT_REFRESH_MS = 100

_NUMBER = r"(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?"
_COMPLEX_RE = re.compile(
    rf"^(?P<re>-?(?:{_NUMBER}))(?:(?P<sign>[+-])(?P<im>{_NUMBER})i)?$"
)


def parse_complex(text):
    """Parse ``a+bi``, ``a-bi``, ``-a-bi`` or a bare real ``a``.

    Whitespace is ignored. A leading ``+``, doubled or mixed signs and
    anything non-numeric raise ConfigError.
    """
    s = text.replace(" ", "")
    match = _COMPLEX_RE.match(s)
    if not match:
        raise ConfigError(f"invalid complex number format: {text!r}")
    real = float(match.group("re"))
    imag = 0.0
    if match.group("im") is not None:
        imag = float(match.group("im"))
        if match.group("sign") == "-":
            imag = -imag
    return complex(real, imag)


def format_complex(c):
    sign = "-" if c.imag < 0 else "+"
    return f"{c.real!r}{sign}{abs(c.imag)!r}i"


DEFAULT_JULIA_SEED = parse_complex(DEFAULT_JULIA_C)


@dataclass
class Config:
    """Start-up values, typically filled from the command line."""

    rows: int = DEFAULT_ROWS
    cols: int = DEFAULT_COLS
    max_iter: int = DEFAULT_MAX_ITERATIONS
    zoom: float = DEFAULT_ZOOM
    center_x: float = DEFAULT_CENTER_X
    center_y: float = DEFAULT_CENTER_Y
    color_scheme: int = DEFAULT_COLOR_SCHEME
    julia: bool = False
    julia_c: str = DEFAULT_JULIA_C
    cell_size: int = DEFAULT_CELL_SIZE
    log_file: str = ""
    log_level: str = "info"
    log_format: str = "text"

    def check(self):
        """Replace every invalid value with its default, logging each one."""
        if self.rows < MIN_ROWS:
            log.warning("invalid number of rows %d, must be at least %d, using default %d",
                        self.rows, MIN_ROWS, DEFAULT_ROWS)
            self.rows = DEFAULT_ROWS
        if self.cols < MIN_COLS:
            log.warning("invalid number of columns %d, must be at least %d, using default %d",
                        self.cols, MIN_COLS, DEFAULT_COLS)
            self.cols = DEFAULT_COLS
        if not MIN_MAX_ITERATIONS <= self.max_iter <= MAX_MAX_ITERATIONS:
            log.warning("invalid max iterations %d, must be between %d and %d, using default %d",
                        self.max_iter, MIN_MAX_ITERATIONS, MAX_MAX_ITERATIONS,
                        DEFAULT_MAX_ITERATIONS)
            self.max_iter = DEFAULT_MAX_ITERATIONS
        if not (self.zoom > 0 and math.isfinite(self.zoom)):
            log.warning("invalid zoom level %f, must be positive, using default %f",
                        self.zoom, DEFAULT_ZOOM)
            self.zoom = DEFAULT_ZOOM
        if not (math.isfinite(self.center_x) and math.isfinite(self.center_y)):
            log.warning("invalid center (%f, %f), using default (%f, %f)",
                        self.center_x, self.center_y, DEFAULT_CENTER_X, DEFAULT_CENTER_Y)
            self.center_x, self.center_y = DEFAULT_CENTER_X, DEFAULT_CENTER_Y
        if not 0 <= self.color_scheme < len(COLOR_SCHEMES):
            log.warning("invalid color scheme %d, must be between 0 and %d, using default %d",
                        self.color_scheme, len(COLOR_SCHEMES) - 1, DEFAULT_COLOR_SCHEME)
            self.color_scheme = DEFAULT_COLOR_SCHEME
        try:
            parse_complex(self.julia_c)
        except ConfigError:
            log.warning("invalid julia parameter %r, using default %s",
                        self.julia_c, DEFAULT_JULIA_C)
            self.julia_c = DEFAULT_JULIA_C
        if self.cell_size < 6:
            log.warning("invalid cell size %d, using default %d",
                        self.cell_size, DEFAULT_CELL_SIZE)
            self.cell_size = DEFAULT_CELL_SIZE
        return self

    def julia_seed(self):
        return parse_complex(self.julia_c)
