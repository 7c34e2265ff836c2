"""Saved locations: named JSON snapshots of the current view."""

import json
import logging
import os

from termbrot import state as st
from termbrot.config import format_complex, parse_complex
from termbrot.errors import ConfigError
from termbrot.kernel import Mode

log = logging.getLogger(__name__)

LOCATIONS_DIR = os.path.join(os.path.expanduser("~"), ".termbrot", "locations")


def _safe_name(name):
    safe = "".join(c if c.isalnum() or c in " _-" else "_" for c in name).strip()
    return safe or "unnamed"


def save_location(name, view, directory=LOCATIONS_DIR):
    """Write ``view`` to ``<directory>/<name>.json`` and return the path."""
    os.makedirs(directory, exist_ok=True)
    vp, params = view.viewport, view.params
    data = {
        "name": name,
        "center_x": vp.center_x,
        "center_y": vp.center_y,
        "zoom": vp.zoom,
        "max_iter": params.max_iterations,
        "mode": params.mode.value,
        "julia_c": format_complex(params.julia_c),
        "color_scheme": params.color_scheme,
    }
    filepath = os.path.join(directory, f"{_safe_name(name)}.json")
    with open(filepath, "w") as f:
        json.dump(data, f, indent=2)
    log.info("saved location %r to %s", name, filepath)
    return filepath


def list_locations(directory=LOCATIONS_DIR):
    """Return ``(display_name, filename)`` pairs sorted by file name."""
    if not os.path.isdir(directory):
        return []
    entries = []
    for f in sorted(os.listdir(directory)):
        if not f.endswith(".json"):
            continue
        try:
            with open(os.path.join(directory, f), "r") as fh:
                data = json.load(fh)
            name = data.get("name", f[:-len(".json")])
        except (json.JSONDecodeError, OSError, AttributeError):
            name = f[:-len(".json")]
        entries.append((name, f))
    return entries


def load_location(filename, directory=LOCATIONS_DIR):
    """Read a saved location and return the commands that restore it.

    Apply them with ``FractalSession.dispatch_all`` so a value the state
    rejects leaves the view as it was; the resolution of the current view is
    kept. A file that is not a valid location raises ConfigError.
    """
    with open(os.path.join(directory, filename), "r") as f:
        try:
            data = json.load(f)
        except ValueError as e:
            raise ConfigError(f"saved location {filename} is not valid JSON: {e}") from e
    try:
        commands = [
            st.SetCenter(float(data["center_x"]), float(data["center_y"])),
            st.SetZoom(float(data["zoom"])),
            st.SetMaxIterations(int(data.get("max_iter", 50))),
            st.SetColorScheme(int(data.get("color_scheme", 0))),
        ]
        if "julia_c" in data:
            commands.append(st.SetJuliaParameter(parse_complex(data["julia_c"])))
        commands.append(st.SetMode(Mode(data.get("mode", Mode.STANDARD.value))))
    except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as e:
        raise ConfigError(f"saved location {filename} is malformed: {e}") from e
    return commands


def delete_location(filename, directory=LOCATIONS_DIR):
    filepath = os.path.join(directory, filename)
    if os.path.exists(filepath):
        os.remove(filepath)
        log.info("deleted location %s", filepath)
