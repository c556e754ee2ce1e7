# -*- coding: utf-8 -*-
"""
Tessera: Setting perceptual color into accessible systems
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Override Engine
===============
Per-stop manual pins on L, C and/or H.

Every operation regenerates the algorithmic baseline from ``ramp.params``
instead of reading values already stored on the ramp, so repeated edits
never compound drift.  A call replaces the stop's stored partial; callers
that want to layer a new component onto an existing pin pre-merge with
``merge_overrides``.
"""

from dataclasses import replace
from typing import Any, Mapping, Optional, Sequence, Union

from tessera_colorengine import oklch_to_color
from tessera_ramp import generate_ramp_from_params
from tessera_structure import (
    OklchOverride,
    Ramp,
    RampParams,
    RampStop,
    StopDefinition,
    StopNotFoundError,
)

__all__ = [
    "OverrideLike",
    "apply_override",
    "clear_override",
    "clear_all_overrides",
    "merge_overrides",
    "regenerate_ramp",
]

OverrideLike = Union[OklchOverride, Mapping[str, Any]]


def _as_override(partial: OverrideLike) -> OklchOverride:
    if isinstance(partial, OklchOverride):
        return partial
    if isinstance(partial, Mapping):
        return OklchOverride.from_mapping(partial)
    raise TypeError(f"Expected OklchOverride or mapping, got {type(partial).__name__}")


def _baseline_stop(ramp: Ramp, stop_id: int, stop_defs: Sequence[StopDefinition]) -> RampStop:
    # Present in the ramp and in the stop set it is regenerated from.
    if stop_id not in ramp.stop_ids:
        raise StopNotFoundError(stop_id, ramp.stop_ids, ramp_name=ramp.name)
    baseline = generate_ramp_from_params(ramp.name, ramp.params, stop_defs)
    if stop_id not in baseline.stop_ids:
        raise StopNotFoundError(stop_id, baseline.stop_ids, ramp_name=ramp.name)
    return baseline.stop(stop_id)


def _replace_stop(ramp: Ramp, new_stop: RampStop) -> Ramp:
    stops = tuple(new_stop if s.id == new_stop.id else s for s in ramp.stops)
    return replace(ramp, stops=stops)


def apply_override(
    ramp: Ramp,
    stop_id: int,
    partial: OverrideLike,
    stop_defs: Sequence[StopDefinition],
) -> Ramp:
    """
    Pin components of one stop.

    Each of l/c/h takes the override value when given, otherwise the freshly
    generated baseline value.  The merged color is gamut-clamped and the
    partial is stored exactly as supplied.  Other stops pass through
    unchanged.

    Raises:
        StopNotFoundError: If ``stop_id`` is not in the ramp or in the
            baseline regenerated from ``stop_defs``.
    """
    override = _as_override(partial)
    base = _baseline_stop(ramp, stop_id, stop_defs).color.oklch

    l = base.l if override.l is None else override.l
    c = base.c if override.c is None else override.c
    h = base.h if override.h is None else override.h

    stop = RampStop(
        id=stop_id,
        color=oklch_to_color(l, c, h),
        overridden=True,
        overrides=override,
    )
    return _replace_stop(ramp, stop)


def clear_override(ramp: Ramp, stop_id: int, stop_defs: Sequence[StopDefinition]) -> Ramp:
    """Restore one stop to its algorithmic value; other stops are kept."""
    return _replace_stop(ramp, _baseline_stop(ramp, stop_id, stop_defs))


def clear_all_overrides(ramp: Ramp, stop_defs: Sequence[StopDefinition]) -> Ramp:
    """Full regeneration with the ramp's own name and params."""
    return generate_ramp_from_params(ramp.name, ramp.params, stop_defs)


def merge_overrides(previous: Optional[OverrideLike], update: OverrideLike) -> OklchOverride:
    """Component-wise merge; components set in ``update`` win."""
    new = _as_override(update)
    if previous is None:
        return new
    old = _as_override(previous)
    return OklchOverride(
        l=old.l if new.l is None else new.l,
        c=old.c if new.c is None else new.c,
        h=old.h if new.h is None else new.h,
    )


def regenerate_ramp(
    ramp: Ramp,
    params: RampParams,
    stop_defs: Sequence[StopDefinition],
) -> Ramp:
    """
    Regenerate ``ramp`` with new params and replay its stored overrides.

    Overrides are replayed in ascending stop id order.  Pins on stop ids that
    the new stop set no longer has are dropped.
    """
    fresh = generate_ramp_from_params(ramp.name, params, stop_defs)
    available = set(fresh.stop_ids)
    for stop in sorted(ramp.overridden_stops, key=lambda s: s.id):
        if stop.id not in available or stop.overrides is None:
            continue
        fresh = apply_override(fresh, stop.id, stop.overrides, stop_defs)
    return fresh
