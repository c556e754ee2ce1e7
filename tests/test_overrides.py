"""Tests for per-stop overrides and override replay."""

import pytest

from tessera_colorengine import is_in_gamut
from tessera_overrides import (
    apply_override,
    clear_all_overrides,
    clear_override,
    merge_overrides,
    regenerate_ramp,
)
from tessera_ramp import generate_ramp, generate_ramp_from_params
from tessera_structure import OklchOverride, RampParams, StopNotFoundError


def test_override_persistence(blue_ramp, stops):
    updated = apply_override(blue_ramp, 500, {"l": 0.55}, stops)
    stop = updated.stop(500)
    assert stop.color.oklch.l == pytest.approx(0.55)
    assert stop.overridden is True
    assert stop.overrides == OklchOverride(l=0.55)
    for before, after in zip(blue_ramp.stops, updated.stops):
        if before.id != 500:
            assert after == before


def test_override_keeps_unpinned_components_from_baseline(blue_ramp, stops):
    baseline = blue_ramp.stop(300).color.oklch
    updated = apply_override(blue_ramp, 300, OklchOverride(h=140.0), stops)
    color = updated.stop(300).color.oklch
    assert color.l == baseline.l
    assert color.h == 140.0
    assert is_in_gamut(color)


def test_override_is_gamut_clamped(blue_ramp, stops):
    updated = apply_override(blue_ramp, 100, {"c": 0.4}, stops)
    stop = updated.stop(100)
    assert stop.color.oklch.c < 0.4
    assert is_in_gamut(stop.color.oklch)
    # The caller's partial is stored, not the clamped result.
    assert stop.overrides == OklchOverride(c=0.4)


def test_override_does_not_reuse_stored_values(blue_ramp, stops):
    first = apply_override(blue_ramp, 500, {"c": 0.05}, stops)
    second = apply_override(first, 500, {"l": 0.5}, stops)
    fresh = apply_override(blue_ramp, 500, {"l": 0.5}, stops)
    # Each call replaces the stored partial.
    assert second.stop(500).overrides == OklchOverride(l=0.5)
    assert second.stop(500).color == fresh.stop(500).color


def test_merge_overrides_composes_components():
    merged = merge_overrides(OklchOverride(c=0.05), {"l": 0.5})
    assert merged == OklchOverride(l=0.5, c=0.05)
    assert merge_overrides(None, {"h": 10}) == OklchOverride(h=10.0)
    assert merge_overrides({"l": 0.4, "c": 0.1}, OklchOverride(l=0.6)) == OklchOverride(l=0.6, c=0.1)


def test_pre_merged_partials_keep_both_components(blue_ramp, stops):
    ramp = apply_override(blue_ramp, 500, {"c": 0.05}, stops)
    merged = merge_overrides(ramp.stop(500).overrides, {"l": 0.5})
    ramp = apply_override(ramp, 500, merged, stops)
    color = ramp.stop(500).color.oklch
    assert color.l == pytest.approx(0.5)
    assert color.c == pytest.approx(0.05)


def test_override_unknown_stop(blue_ramp, stops):
    with pytest.raises(StopNotFoundError, match='Stop 999 not found in ramp "blue"') as exc:
        apply_override(blue_ramp, 999, {"l": 0.5}, stops)
    assert exc.value.available == blue_ramp.stop_ids


def test_override_stop_missing_from_definitions(blue_ramp, stops):
    trimmed = tuple(sd for sd in stops if sd.id != 950)
    with pytest.raises(StopNotFoundError):
        apply_override(blue_ramp, 950, {"l": 0.2}, trimmed)


def test_override_rejects_bad_partial(blue_ramp, stops):
    with pytest.raises(ValueError, match="Unknown override component"):
        apply_override(blue_ramp, 500, {"alpha": 0.5}, stops)
    with pytest.raises(TypeError):
        apply_override(blue_ramp, 500, 0.5, stops)  # type: ignore[arg-type]


def test_clear_override_restores_baseline(blue_ramp, stops):
    ramp = apply_override(blue_ramp, 500, {"l": 0.55}, stops)
    ramp = apply_override(ramp, 700, {"c": 0.01}, stops)
    cleared = clear_override(ramp, 500, stops)
    assert cleared.stop(500) == blue_ramp.stop(500)
    assert cleared.stop(500).overrides is None
    assert cleared.stop(700).overridden is True


def test_clear_override_unknown_stop(blue_ramp, stops):
    with pytest.raises(StopNotFoundError):
        clear_override(blue_ramp, 42, stops)


def test_clear_all_overrides_equals_fresh_generation(blue_ramp, stops):
    ramp = apply_override(blue_ramp, 500, {"l": 0.55}, stops)
    ramp = apply_override(ramp, 50, {"h": 10.0}, stops)
    cleared = clear_all_overrides(ramp, stops)
    assert cleared == generate_ramp_from_params(ramp.name, ramp.params, stops)
    assert cleared.overridden_stops == ()


def test_regenerate_ramp_replays_overrides(blue_ramp, stops):
    ramp = apply_override(blue_ramp, 500, {"l": 0.55}, stops)
    ramp = apply_override(ramp, 200, {"c": 0.02, "h": 90.0}, stops)
    params = RampParams("#cc3366", "flat", hue_shift_enabled=True)

    regenerated = regenerate_ramp(ramp, params, stops)
    fresh = generate_ramp("blue", "#cc3366", stops, "flat", True)

    assert regenerated.name == "blue"
    assert regenerated.params == params
    assert regenerated.stop(500).color.oklch.l == pytest.approx(0.55)
    assert regenerated.stop(500).overrides == OklchOverride(l=0.55)
    assert regenerated.stop(200).overrides == OklchOverride(c=0.02, h=90.0)
    for stop in regenerated.stops:
        if stop.id not in (200, 500):
            assert stop == fresh.stop(stop.id)


def test_regenerate_ramp_drops_pins_on_removed_stops(blue_ramp, stops):
    ramp = apply_override(blue_ramp, 950, {"l": 0.2}, stops)
    trimmed = tuple(sd for sd in stops if sd.id != 950)
    regenerated = regenerate_ramp(ramp, ramp.params, trimmed)
    assert 950 not in regenerated.stop_ids
    assert regenerated.overridden_stops == ()
