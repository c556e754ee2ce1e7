"""Tests for color vision deficiency simulation."""

import pytest

from tessera_colorengine import delta_e_ok, is_in_gamut, to_color
from tessera_vision import DEFICIENCY_TYPES, simulate_deficiency, simulate_ramp


@pytest.mark.parametrize("deficiency", DEFICIENCY_TYPES)
@pytest.mark.parametrize("css", ["#ffffff", "#000000", "#808080"])
def test_neutrals_are_preserved(deficiency, css):
    assert simulate_deficiency(to_color(css), deficiency).hex == css


@pytest.mark.parametrize("deficiency", ["protanopia", "deuteranopia"])
def test_red_green_confusion(deficiency):
    red, green = to_color("#ff0000"), to_color("#00aa00")
    sim_red = simulate_deficiency(red, deficiency)
    sim_green = simulate_deficiency(green, deficiency)
    assert sim_red.hex != red.hex
    assert delta_e_ok(sim_red, sim_green) < delta_e_ok(red, green)


@pytest.mark.parametrize("deficiency", DEFICIENCY_TYPES)
def test_simulated_gray_has_zero_hue(deficiency):
    assert simulate_deficiency(to_color("#808080"), deficiency).oklch.h == 0.0


def test_tritanopia_shifts_blue():
    blue = to_color("#0000ff")
    assert simulate_deficiency(blue, "tritanopia").hex != blue.hex


@pytest.mark.parametrize("deficiency", DEFICIENCY_TYPES)
def test_simulated_colors_are_displayable(deficiency):
    sim = simulate_deficiency(to_color("#ff00ff"), deficiency)
    assert is_in_gamut(sim.oklch)
    assert 0.0 <= sim.oklch.h < 360.0


def test_unknown_deficiency():
    with pytest.raises(ValueError, match="Unknown deficiency"):
        simulate_deficiency(to_color("#ff0000"), "achromatopsia")  # type: ignore[arg-type]


def test_simulate_ramp_keeps_stop_order(blue_ramp):
    simulated = simulate_ramp(blue_ramp, "deuteranopia")
    assert [stop_id for stop_id, _ in simulated] == list(blue_ramp.stop_ids)
    # A dichromat still sees the ramp as ordered from light to dark.
    ls = [color.oklch.l for _, color in simulated]
    assert all(a > b for a, b in zip(ls, ls[1:]))
