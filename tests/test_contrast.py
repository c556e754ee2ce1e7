"""Tests for WCAG ratio, APCA Lc and the AA check."""

import pytest

from tessera_colorengine import parse_color, to_color
from tessera_contrast import (
    AA_THRESHOLDS,
    apca_lc,
    check_contrast,
    passes_threshold,
    relative_luminance,
    wcag_ratio,
)
from tessera_structure import OklchColor

BLACK = to_color("#000000")
WHITE = to_color("#ffffff")

PAIRS = [
    ("#000000", "#ffffff"),
    ("#3366cc", "#ffffff"),
    ("#777777", "#eeeeee"),
    ("#1a1a2e", "#e94560"),
    ("#ffcc00", "#003366"),
]


def test_black_on_white_is_21():
    assert wcag_ratio(BLACK, WHITE) == pytest.approx(21.0, rel=1e-6)


def test_identical_colors_ratio_is_one():
    c = parse_color("#3366cc")
    assert wcag_ratio(c, c) == pytest.approx(1.0)


@pytest.mark.parametrize("a,b", PAIRS)
def test_wcag_ratio_is_symmetric_and_bounded(a, b):
    ca, cb = parse_color(a), parse_color(b)
    ratio = wcag_ratio(ca, cb)
    assert ratio == wcag_ratio(cb, ca)
    assert 1.0 <= ratio <= 21.0 + 1e-9


def test_known_wcag_ratio():
    # #777777 on white is the classic just-failing gray.
    assert wcag_ratio(to_color("#777777"), WHITE) == pytest.approx(4.48, abs=0.01)


def test_relative_luminance_extremes():
    assert relative_luminance(BLACK) == pytest.approx(0.0, abs=1e-9)
    assert relative_luminance(WHITE) == pytest.approx(1.0, abs=1e-6)


def test_apca_black_on_white():
    assert apca_lc(BLACK, WHITE) == pytest.approx(106.04, abs=0.01)


def test_apca_white_on_black():
    assert apca_lc(WHITE, BLACK) == pytest.approx(-107.88, abs=0.01)


@pytest.mark.parametrize("dark,light", [
    ("#000000", "#ffffff"),
    ("#333333", "#dddddd"),
    ("#1e3a8a", "#dbeafe"),
    ("#3366cc", "#ffffff"),
])
def test_apca_sign_invariant(dark, light):
    d, l = to_color(dark), to_color(light)
    assert apca_lc(d, l) > 0
    assert apca_lc(l, d) < 0


def test_apca_low_contrast_clips_to_zero():
    assert apca_lc(to_color("#777777"), to_color("#787878")) == 0.0
    assert apca_lc(WHITE, WHITE) == 0.0


def test_apca_accepts_oklch_and_color():
    a = apca_lc(parse_color("#000000"), parse_color("#ffffff"))
    assert a == apca_lc(BLACK, WHITE)


def test_check_contrast_bundles_metrics():
    result = check_contrast(BLACK, WHITE)
    assert result.wcag_ratio == pytest.approx(21.0, rel=1e-6)
    assert result.apca_lc > 100
    assert result.passes_aa.normal_text
    assert result.passes_aa.large_text
    assert result.passes_aa.ui_component
    state = result.get_state()
    assert set(state) == {"wcagRatio", "apcaLc", "passesAA"}
    assert state["passesAA"] == {"normalText": True, "largeText": True, "uiComponent": True}


def test_check_contrast_large_text_only():
    # Mid gray on white: between 3 and 4.5.
    result = check_contrast(to_color("#888888"), WHITE)
    assert 3.0 <= result.wcag_ratio < 4.5
    assert not result.passes_aa.normal_text
    assert result.passes_aa.large_text
    assert result.passes_aa.ui_component


def test_apca_never_gates():
    # Same WCAG ratio decides regardless of polarity.
    fg, bg = to_color("#3366cc"), WHITE
    assert check_contrast(fg, bg).passes_aa == check_contrast(bg, fg).passes_aa


def test_passes_threshold():
    result = check_contrast(to_color("#888888"), WHITE)
    assert passes_threshold(result, "large_text")
    assert not passes_threshold(result, "normal_text")
    with pytest.raises(ValueError, match="Unknown threshold class"):
        passes_threshold(result, "huge")  # type: ignore[arg-type]


def test_aa_thresholds():
    assert AA_THRESHOLDS == {"normal_text": 4.5, "large_text": 3.0, "ui_component": 3.0}


def test_out_of_gamut_input_is_clipped_for_wcag():
    vivid = OklchColor(0.7, 0.4, 150.0)
    assert 1.0 <= wcag_ratio(vivid, WHITE) <= 21.0
