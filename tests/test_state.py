import pytest

from termbrot import state as st
from termbrot.config import MAX_MAX_ITERATIONS, MIN_MAX_ITERATIONS
from termbrot.errors import InvalidParameter
from termbrot.kernel import Mode
from termbrot.presets import Preset, PresetCatalog


def test_reduce_returns_new_state():
    before = st.ViewState()
    after = st.reduce(before, st.Pan(1, 1))
    assert after is not before
    assert before.viewport.center == (-0.5, 0.0)


@pytest.mark.parametrize("value, expected", [
    (MIN_MAX_ITERATIONS - 5, MIN_MAX_ITERATIONS),
    (-100, MIN_MAX_ITERATIONS),
    (MAX_MAX_ITERATIONS + 1, MAX_MAX_ITERATIONS),
    (10 ** 9, MAX_MAX_ITERATIONS),
    (250, 250),
])
def test_max_iterations_are_clamped(value, expected):
    s = st.reduce(st.ViewState(), st.SetMaxIterations(value))
    assert s.params.max_iterations == expected


@pytest.mark.parametrize("index, expected", [(0, 0), (4, 4), (5, 0), (7, 2), (-1, 4)])
def test_color_scheme_wraps_modulo_five(index, expected):
    s = st.reduce(st.ViewState(), st.SetColorScheme(index))
    assert s.params.color_scheme == expected


def test_toggle_and_set_mode():
    s = st.reduce(st.ViewState(), st.ToggleMode())
    assert s.params.mode is Mode.JULIA
    s = st.reduce(s, st.ToggleMode())
    assert s.params.mode is Mode.STANDARD
    s = st.reduce(s, st.SetMode(Mode.JULIA))
    assert s.params.mode is Mode.JULIA


def test_reset_restores_view_and_keeps_preferences():
    s = st.ViewState()
    for command in [st.Pan(10, -3), st.ZoomIn(8), st.NextPreset(), st.SetMaxIterations(300),
                    st.ToggleMode(), st.SetColorScheme(3)]:
        s = st.reduce(s, command)

    s = st.reduce(s, st.Reset(20, 60))

    assert s.viewport.center == (-0.5, 0.0)
    assert s.viewport.zoom == 1.0
    assert (s.viewport.rows, s.viewport.cols) == (20, 60)
    assert s.params.max_iterations == 300
    assert s.params.mode is Mode.JULIA
    assert s.params.color_scheme == 3
    assert s.preset_index == 0


def test_resize_keeps_center_and_zoom():
    s = st.reduce(st.ViewState(), st.SetCenter(0.25, 0.1))
    s = st.reduce(s, st.Resize(15, 33))
    assert s.viewport.center == (0.25, 0.1)
    assert (s.viewport.rows, s.viewport.cols) == (15, 33)


@pytest.mark.parametrize("command", [
    st.SetZoom(0),
    st.SetZoom(-3.0),
    st.SetZoom(float("nan")),
    st.SetCenter(float("nan"), 0.0),
    st.SetCenter(0.0, float("inf")),
    st.Reset(0, 80),
    st.Reset(30, -1),
    st.Resize(0, 0),
    st.ZoomIn(0),
    st.ZoomOut(-2),
    st.SetJuliaParameter(complex(float("nan"), 0)),
])
def test_invalid_commands_raise(command):
    with pytest.raises(InvalidParameter):
        st.reduce(st.ViewState(), command)


def test_next_preset_applies_center_and_zoom():
    catalog = PresetCatalog([Preset("a", 0.0, 0.0, 1.0), Preset("b", -0.75, 0.1, 50.0)])
    s = st.reduce(st.ViewState(), st.NextPreset(), catalog)
    assert s.preset_index == 1
    assert s.viewport.center == (-0.75, 0.1)
    assert s.viewport.zoom == 50.0


def test_next_preset_on_empty_catalog_is_noop():
    before = st.ViewState()
    after = st.reduce(before, st.NextPreset(), PresetCatalog([]))
    assert after is before


def test_grid_key_ignores_color_scheme():
    s = st.ViewState()
    assert st.reduce(s, st.SetColorScheme(2)).grid_key() == s.grid_key()
    assert st.reduce(s, st.SetMaxIterations(99)).grid_key() != s.grid_key()


def test_grid_key_tracks_julia_seed_only_in_julia_mode():
    s = st.ViewState()
    seeded = st.reduce(s, st.SetJuliaParameter(0.285 + 0.01j))
    assert seeded.grid_key() == s.grid_key()
    julia = st.reduce(s, st.ToggleMode())
    assert st.reduce(julia, st.SetJuliaParameter(0.285 + 0.01j)).grid_key() != julia.grid_key()


def test_unknown_command():
    with pytest.raises(TypeError):
        st.reduce(st.ViewState(), object())
