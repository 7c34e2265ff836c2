"""Character-cell viewer window for a FractalSession, drawn with pygame.

The window is a grid of monospace cells. Each fractal cell shows a shade
glyph in the palette color for its iteration count; the rows above and
below the grid carry the status and help lines.

Grid builds run on the session's background worker. Until a build has
finished the previous grid is not shown; a "Calculating" message takes its
place and navigation keys are ignored.
"""

import logging
import time
from collections import deque

import pygame

from termbrot.config import (
    COLOR_SCHEMES,
    DEFAULT_REFRESH_MS,
    ITERATION_STEP,
    ZOOM_FACTOR,
)
from termbrot.errors import ConfigError, InvalidParameter
from termbrot.kernel import Mode
from termbrot.locations import (
    LOCATIONS_DIR,
    delete_location,
    list_locations,
    load_location,
    save_location,
)
from termbrot.render import RenderOptions

log = logging.getLogger(__name__)

CHROME_ROWS = 5   # header, status, julia line, help, preset line
PAN_CELLS = 5

COL_BG = (0, 0, 0)
COL_TEXT = (220, 220, 230)
COL_HEADING = (135, 75, 253)
COL_HELP = (98, 98, 98)
COL_ACCENT = (100, 180, 255)

HELP_LINE = ("WASD/Arrows Move  Shift Fine  +/- Zoom  M Mode  C Color  "
             "I/K Iter  P Preset  R Reset  F5 Save  F8 Delete  F9 Load  Q Quit")

# key -> action; shift+arrow keys are handled in command_for_key
KEY_ACTIONS = {
    pygame.K_UP: "pan_up",
    pygame.K_w: "pan_up",
    pygame.K_DOWN: "pan_down",
    pygame.K_s: "pan_down",
    pygame.K_LEFT: "pan_left",
    pygame.K_a: "pan_left",
    pygame.K_RIGHT: "pan_right",
    pygame.K_d: "pan_right",
    pygame.K_PLUS: "zoom_in",
    pygame.K_EQUALS: "zoom_in",
    pygame.K_KP_PLUS: "zoom_in",
    pygame.K_MINUS: "zoom_out",
    pygame.K_UNDERSCORE: "zoom_out",
    pygame.K_KP_MINUS: "zoom_out",
    pygame.K_m: "toggle_mode",
    pygame.K_c: "next_color",
    pygame.K_i: "iter_up",
    pygame.K_k: "iter_down",
    pygame.K_p: "next_preset",
    pygame.K_r: "reset",
    pygame.K_F5: "save",
    pygame.K_F8: "delete",
    pygame.K_F9: "load",
    pygame.K_q: "quit",
    pygame.K_ESCAPE: "quit",
}

FINE_PAN = {
    pygame.K_UP: "fine_up",
    pygame.K_DOWN: "fine_down",
    pygame.K_LEFT: "fine_left",
    pygame.K_RIGHT: "fine_right",
}

PAN_ACTIONS = {
    "pan_up": (0, -PAN_CELLS),
    "pan_down": (0, PAN_CELLS),
    "pan_left": (-PAN_CELLS, 0),
    "pan_right": (PAN_CELLS, 0),
    "fine_up": (0, -1),
    "fine_down": (0, 1),
    "fine_left": (-1, 0),
    "fine_right": (1, 0),
}

# Actions that leave the grid as it is
DISPLAY_ONLY = {"next_color", "save", "delete", "quit"}


def command_for_key(key, mod=0):
    """Map a pygame key (and modifier mask) to a viewer action name, or None."""
    if mod & pygame.KMOD_SHIFT and key in FINE_PAN:
        return FINE_PAN[key]
    return KEY_ACTIONS.get(key)


def grid_size_for_window(width, height, cell_w, cell_h):
    """(rows, cols) of fractal cells that fit a window, never below 1x1."""
    cols = max(1, width // cell_w)
    rows = max(1, height // cell_h - CHROME_ROWS)
    return rows, cols


class FractalViewer:
    """Interactive window around a FractalSession."""

    def __init__(self, session, cell_size=14, locations_dir=LOCATIONS_DIR):
        self.session = session
        self.cell_size = cell_size
        self.locations_dir = locations_dir
        self.render_options = RenderOptions(session.get_color_scheme())

        self.running = True
        self.future = None
        self.last_refresh = 0.0

        # FPS tracking
        self.frame_times = deque(maxlen=30)
        self.last_frame_time = time.perf_counter()
        self.fps = 0.0

        self._glyph_cache = {}
        self._init_pygame()
        self._recalculate()

    def _init_pygame(self):
        pygame.init()
        self.font = pygame.font.SysFont("dejavusansmono,monospace", self.cell_size)
        self.font_head = pygame.font.SysFont("dejavusansmono,monospace", self.cell_size, bold=True)
        self.cell_w, self.cell_h = self.font.size("M")
        vp = self.session.state.viewport
        self.width = vp.cols * self.cell_w
        self.height = (vp.rows + CHROME_ROWS) * self.cell_h
        self.screen = pygame.display.set_mode((self.width, self.height), pygame.RESIZABLE)
        pygame.display.set_caption("termbrot - Mandelbrot Set")
        self.clock = pygame.time.Clock()

    # ── Actions ───────────────────────────────────────────────

    @property
    def calculating(self):
        return self.future is not None and not self.future.done()

    def _recalculate(self):
        self.future = self.session.recompute_async()
        self.last_refresh = time.perf_counter()

    def _collect_build(self):
        """Take the result of a finished build once; a failed build is logged."""
        future = self.future
        if future is None or not future.done():
            return
        self.future = None
        try:
            future.result()
        except Exception:
            log.exception("grid build failed")

    def _do_action(self, action):
        s = self.session
        if action == "quit":
            self.running = False
        elif action in PAN_ACTIONS:
            s.pan(*PAN_ACTIONS[action])
        elif action == "zoom_in":
            s.zoom_in(ZOOM_FACTOR)
        elif action == "zoom_out":
            s.zoom_out(ZOOM_FACTOR)
        elif action == "toggle_mode":
            s.toggle_mode()
        elif action == "next_color":
            s.set_color_scheme(s.get_color_scheme() + 1)
            self.render_options = RenderOptions(s.get_color_scheme())
        elif action == "iter_up":
            s.set_max_iterations(s.get_max_iterations() + ITERATION_STEP)
        elif action == "iter_down":
            s.set_max_iterations(s.get_max_iterations() - ITERATION_STEP)
        elif action == "next_preset":
            preset = s.next_preset()
            if preset is not None:
                log.info("preset %s", preset.name)
        elif action == "reset":
            vp = s.state.viewport
            s.reset(vp.rows, vp.cols)
        elif action == "save":
            name = time.strftime("%Y%m%d-%H%M%S")
            save_location(name, s.state, self.locations_dir)
        elif action == "load":
            saved = list_locations(self.locations_dir)
            if not saved:
                log.info("no saved locations in %s", self.locations_dir)
                return
            _name, filename = saved[-1]
            s.dispatch_all(load_location(filename, self.locations_dir))
            self.render_options = RenderOptions(s.get_color_scheme())
        elif action == "delete":
            saved = list_locations(self.locations_dir)
            if saved:
                _name, filename = saved[-1]
                delete_location(filename, self.locations_dir)

        if action not in DISPLAY_ONLY and not s.grid_is_current:
            self._recalculate()

    # ── Event handling ────────────────────────────────────────

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                self._handle_keydown(event)
            elif event.type == pygame.VIDEORESIZE:
                self._handle_resize(event.w, event.h)

    def _handle_keydown(self, event):
        action = command_for_key(event.key, event.mod)
        if action is None:
            return
        if self.calculating and action != "quit":
            return
        try:
            self._do_action(action)
        except (InvalidParameter, ConfigError, OSError) as e:
            log.warning("ignored %s: %s", action, e)

    def _handle_resize(self, new_w, new_h):
        self.width = max(new_w, self.cell_w * 20)
        self.height = max(new_h, self.cell_h * (CHROME_ROWS + 1))
        self.screen = pygame.display.set_mode((self.width, self.height), pygame.RESIZABLE)
        rows, cols = grid_size_for_window(self.width, self.height, self.cell_w, self.cell_h)
        self.session.resize(rows, cols)
        self._recalculate()

    # ── Drawing ───────────────────────────────────────────────

    def _glyph(self, ch, color, font=None):
        key = (ch, color, font is not None)
        surf = self._glyph_cache.get(key)
        if surf is None:
            surf = (font or self.font).render(ch, True, color)
            self._glyph_cache[key] = surf
        return surf

    def _draw_text(self, row, text, color=COL_TEXT, font=None):
        surf = (font or self.font).render(text, True, color)
        self.screen.blit(surf, (0, row * self.cell_h))

    def status_line(self):
        s = self.session
        cx, cy = s.get_center()
        state = "Calculating" if self.calculating else "Ready"
        return (f"Mode: {s.get_mode().label}  Zoom: {s.get_zoom():.2f}  "
                f"Center: ({cx:.4f}, {cy:.4f})  Iter: {s.get_max_iterations()}  "
                f"Color: {COLOR_SCHEMES[s.get_color_scheme()]}  {state}  "
                f"{self.fps:.0f} fps")

    def draw_grid(self, top):
        grid = self.session.cache.get()
        if grid is None:
            return
        max_iter = self.session.get_max_iterations()
        colors = self.render_options.colorize(grid, max_iter)
        glyphs = self.render_options.glyph_indices(grid, max_iter)
        table = self.render_options.glyph_table()
        rows, cols = grid.shape
        for r in range(rows):
            y = (top + r) * self.cell_h
            for c in range(cols):
                ch = table[glyphs[r, c]]
                if ch == " ":
                    continue
                color = tuple(int(v) for v in colors[r, c])
                self.screen.blit(self._glyph(ch, color), (c * self.cell_w, y))

    def draw_calculating(self, top):
        rows, cols = self.session.state.viewport.rows, self.session.state.viewport.cols
        msg = "Calculating fractal pattern..."
        pad = max(0, (cols - len(msg)) // 2)
        self._draw_text(top + rows // 2, " " * pad + msg, COL_ACCENT)

    def draw(self):
        self.screen.fill(COL_BG)
        self._collect_build()
        self._draw_text(0, "Mandelbrot Set", COL_HEADING, self.font_head)
        self._draw_text(1, self.status_line())
        if self.session.get_mode() is Mode.JULIA:
            c = self.session.get_julia_parameter()
            self._draw_text(2, f"Julia c = {c.real:.4f}{c.imag:+.4f}i", COL_ACCENT)

        top = 3
        # keep the message up for at least one refresh interval
        shown_for = (time.perf_counter() - self.last_refresh) * 1000
        if self.calculating or shown_for < DEFAULT_REFRESH_MS:
            self.draw_calculating(top)
        else:
            self.draw_grid(top)

        rows = self.session.state.viewport.rows
        self._draw_text(top + rows, HELP_LINE, COL_HELP)
        preset = self.session.current_preset()
        if preset is not None:
            total = len(self.session.get_interesting_points())
            self._draw_text(top + rows + 1,
                            f"Current Preset: {preset.name} "
                            f"({self.session.state.preset_index + 1}/{total})", COL_HELP)

    def _update_fps(self):
        now = time.perf_counter()
        dt = now - self.last_frame_time
        self.last_frame_time = now
        self.frame_times.append(dt)
        if self.frame_times:
            avg_dt = sum(self.frame_times) / len(self.frame_times)
            self.fps = 1.0 / avg_dt if avg_dt > 0 else 0.0

    # ── Main loop ─────────────────────────────────────────────

    def run(self):
        try:
            while self.running:
                self.handle_events()
                self.draw()
                pygame.display.flip()
                self._update_fps()
                self.clock.tick(30)
        finally:
            self.session.close()
            pygame.quit()
