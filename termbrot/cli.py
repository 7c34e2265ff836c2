"""Command line entry point."""

import argparse
import logging
import sys

from termbrot.config import (
    DEFAULT_CELL_SIZE,
    DEFAULT_CENTER_X,
    DEFAULT_CENTER_Y,
    DEFAULT_COLOR_SCHEME,
    DEFAULT_COLS,
    DEFAULT_JULIA_C,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_ROWS,
    DEFAULT_ZOOM,
    Config,
)
from termbrot.locations import LOCATIONS_DIR
from termbrot.log import init_log
from termbrot.profiling import DEFAULT_PROFILE_INTERVAL, Watchdog
from termbrot.render import RenderOptions
from termbrot.session import FractalSession

log = logging.getLogger(__name__)

EPILOG = """\
examples:
  termbrot                                  run with default settings
  termbrot --zoom 2.0 --center-x -0.5       zoom into a specific area
  termbrot --max-iter 100 --color-scheme 2  high iteration with different colors
  termbrot --julia --julia-c '0.285+0.01i'  Julia set mode with custom parameter
  termbrot --dump --cols 100 --rows 40      print one frame and exit
  termbrot --profile --profile-interval 10  log runtime statistics every 10s
"""


def build_parser():
    parser = argparse.ArgumentParser(
        prog="termbrot",
        description="Mandelbrot Set - an interactive character-cell fractal viewer",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--rows", type=int, default=DEFAULT_ROWS, help="Grid rows")
    parser.add_argument("--cols", type=int, default=DEFAULT_COLS, help="Grid columns")
    parser.add_argument("--max-iter", type=int, default=DEFAULT_MAX_ITERATIONS,
                        help="Maximum number of iterations")
    parser.add_argument("--zoom", type=float, default=DEFAULT_ZOOM, help="Zoom level")
    parser.add_argument("--center-x", type=float, default=DEFAULT_CENTER_X,
                        help="Center X coordinate")
    parser.add_argument("--center-y", type=float, default=DEFAULT_CENTER_Y,
                        help="Center Y coordinate")
    parser.add_argument("--color-scheme", type=int, default=DEFAULT_COLOR_SCHEME,
                        help="Color scheme (0-4)")
    parser.add_argument("--julia", action="store_true", help="Enable Julia set mode")
    parser.add_argument("--julia-c", default=DEFAULT_JULIA_C,
                        help="Julia set parameter (complex number)")
    parser.add_argument("--cell-size", type=int, default=DEFAULT_CELL_SIZE,
                        help="Font size of one character cell in pixels")
    parser.add_argument("--locations-dir", default=LOCATIONS_DIR,
                        help="Directory for saved locations")
    parser.add_argument("--log-file", default="", help="Log file path (default stderr)")
    parser.add_argument("--log-level", default="info", help="debug, info, warn or error")
    parser.add_argument("--log-format", default="text", help="text or json")
    parser.add_argument("--dump", action="store_true",
                        help="Print one frame as text and exit")
    parser.add_argument("--profile", action="store_true",
                        help="Log runtime statistics while running")
    parser.add_argument("--profile-interval", type=float, default=DEFAULT_PROFILE_INTERVAL,
                        help="Seconds between runtime statistics lines")
    return parser


def config_from_args(args):
    return Config(
        rows=args.rows,
        cols=args.cols,
        max_iter=args.max_iter,
        zoom=args.zoom,
        center_x=args.center_x,
        center_y=args.center_y,
        color_scheme=args.color_scheme,
        julia=args.julia,
        julia_c=args.julia_c,
        cell_size=args.cell_size,
        log_file=args.log_file,
        log_level=args.log_level,
        log_format=args.log_format,
    )


def main(argv=None):
    args = build_parser().parse_args(argv)
    config = config_from_args(args)
    try:
        init_log(config.log_level, config.log_format, config.log_file)
    except OSError as e:
        print(f"failed to open log file: {e}", file=sys.stderr)
        return 1
    config.check()
    log.debug("termbrot starting")

    session = FractalSession.from_config(config)
    watchdog = None
    if args.profile:
        interval = args.profile_interval
        if not interval > 0:
            log.warning("invalid profile interval %s, using default %s",
                        interval, DEFAULT_PROFILE_INTERVAL)
            interval = DEFAULT_PROFILE_INTERVAL
        watchdog = Watchdog(session.cache, interval).start()
    try:
        if args.dump:
            grid = session.recompute()
            options = RenderOptions(session.get_color_scheme())
            print(options.to_text(grid, session.get_max_iterations()))
            return 0

        # imported here so --dump works without a display
        from termbrot.viewer import FractalViewer

        viewer = FractalViewer(session, cell_size=config.cell_size,
                               locations_dir=args.locations_dir)
        viewer.run()
    finally:
        session.close()
        if watchdog is not None:
            watchdog.log_stats()
            watchdog.stop()
    log.debug("termbrot finished")
    return 0


if __name__ == "__main__":
    sys.exit(main())
