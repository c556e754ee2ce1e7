# -*- coding: utf-8 -*-
"""
Tessera: Setting perceptual color into accessible systems
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Ramp Generator
==============
Builds an ordered multi-stop OKLCH ramp from one base color.

Per stop ``i`` of ``n``:
    L = the stop's fixed lightness target (``base_lightness`` at the base stop)
    C = base chroma * curve[i]
    H = base hue + linear offset from -S/2 (i = 0) to +S/2 (i = n - 1)
followed by a chroma-only gamut clamp.

Fixed lightness targets give every ramp identical perceived brightness at
stop ``k``.  Below the curve peak the base stop itself carries less chroma
than the input.
"""

import warnings
from typing import Dict, Final, Optional, Sequence, Tuple

from tessera_colorengine import (
    ACHROMATIC_CHROMA,
    build_color,
    clamp_to_srgb,
    normalize_hue,
    oklch_to_color,
    parse_color,
)
from tessera_structure import (
    CHROMA_CURVES,
    ChromaCurve,
    InvalidColorError,
    OklchColor,
    Ramp,
    RampParams,
    RampStop,
    StopDefinition,
    TesseraWarning,
)

__all__ = [
    "HUE_SHIFT_DEGREES",
    "CHROMA_CURVE_TABLES",
    "chroma_scales",
    "hue_offsets",
    "find_base_stop",
    "generate_ramp",
    "generate_ramp_from_params",
    "compute_base_stop_hex",
]

# --- Constants ---
# Total hue rotation across a shifted ramp, lightest to darkest stop.
HUE_SHIFT_DEGREES: Final[float] = 20.0

# Empirically tuned 11-entry scale tables keyed by stop index.
CHROMA_CURVE_TABLES: Final[Dict[str, Tuple[float, ...]]] = {
    # Bell curve peaking at the midtone, muted at the extremes.
    "natural": (0.08, 0.20, 0.45, 0.75, 0.93, 1.00, 0.96, 0.85, 0.70, 0.50, 0.30),
    # Gentler taper on both sides of the midtone.
    "linear":  (0.10, 0.28, 0.46, 0.64, 0.82, 1.00, 0.91, 0.82, 0.73, 0.55, 0.36),
    # Uniform; gamut clamping alone produces the variation at the extremes.
    "flat":    (1.00, 1.00, 1.00, 1.00, 1.00, 1.00, 1.00, 1.00, 1.00, 1.00, 1.00),
}

# Upper bound on preview iterations.  Each pass scales chroma by the base
# stop's curve entry (0.96 at worst below the peak) until 8-bit rounding
# stalls it, which takes well under this many passes.
_MAX_PREVIEW_ITERATIONS: Final[int] = 512


# =============================================================================
# 1. CURVES & OFFSETS
# =============================================================================

def chroma_scales(curve: ChromaCurve, n: int) -> Tuple[float, ...]:
    """
    Per-index chroma scale factors for an ``n``-stop ramp.

    Stop sets longer than the table reuse its last entry for the surplus
    stops and emit a TesseraWarning.
    """
    try:
        table = CHROMA_CURVE_TABLES[curve]
    except KeyError:
        raise ValueError(
            f"Unknown chroma curve {curve!r}; expected one of {list(CHROMA_CURVES)}"
        ) from None
    if n < 0:
        raise ValueError(f"Stop count must be non-negative, got {n}")

    if n > len(table):
        warnings.warn(
            f"{n} stops exceed the {len(table)}-entry '{curve}' chroma curve; "
            f"reusing the last entry for stops {len(table)}..{n - 1}.",
            TesseraWarning,
            stacklevel=2,
        )
        return table + (table[-1],) * (n - len(table))
    return table[:n]


def hue_offsets(n: int, enabled: bool = True, span: float = HUE_SHIFT_DEGREES) -> Tuple[float, ...]:
    """Linear hue offsets from -span/2 at index 0 to +span/2 at index n-1."""
    if not enabled or n <= 1:
        return (0.0,) * n
    last = n - 1
    return tuple(-span / 2.0 + span * i / last for i in range(n))


def find_base_stop(lightness: float, stop_defs: Sequence[StopDefinition]) -> int:
    """Index of the first stop whose target is closest to ``lightness``."""
    best_idx = 0
    best_diff = abs(stop_defs[0].lightness - lightness)
    for idx in range(1, len(stop_defs)):
        diff = abs(stop_defs[idx].lightness - lightness)
        if diff < best_diff:
            best_idx, best_diff = idx, diff
    return best_idx


def _validate_stop_defs(stop_defs: Sequence[StopDefinition]) -> None:
    if not stop_defs:
        raise ValueError("At least one stop definition is required")
    seen = set()
    for sd in stop_defs:
        if sd.id in seen:
            raise ValueError(f"Duplicate stop id {sd.id} in stop definitions")
        seen.add(sd.id)


# =============================================================================
# 2. GENERATION
# =============================================================================

def generate_ramp_from_params(
    name: str,
    params: RampParams,
    stop_defs: Sequence[StopDefinition],
) -> Ramp:
    """
    Generate a ramp from a ``RampParams`` bundle.

    Args:
        name: Ramp identity; carried verbatim to the result.
        params: Base color, chroma curve, hue shift flag and the optional
            base-stop lightness.
        stop_defs: Stop definitions, lightest first.

    Returns:
        A new Ramp whose stops are all ``overridden=False``.

    Raises:
        InvalidColorError: If ``params.base_color`` cannot be parsed.
        ValueError: If ``stop_defs`` is empty or has duplicate ids.
    """
    _validate_stop_defs(stop_defs)
    base = parse_color(params.base_color)

    achromatic = base.c < ACHROMATIC_CHROMA
    base_hue = 0.0 if achromatic else base.h

    n = len(stop_defs)
    base_idx = find_base_stop(base.l, stop_defs)
    scales = chroma_scales(params.chroma_curve, n)
    offsets = hue_offsets(n, params.hue_shift_enabled and not achromatic)

    stops = []
    for i, sd in enumerate(stop_defs):
        if i == base_idx and params.base_lightness is not None:
            lightness = params.base_lightness
        else:
            lightness = sd.lightness
        chroma = base.c * scales[i]
        hue = 0.0 if achromatic else normalize_hue(base_hue + offsets[i])
        stops.append(RampStop(id=sd.id, color=oklch_to_color(lightness, chroma, hue)))

    return Ramp(
        name=name,
        params=params,
        stops=tuple(stops),
        base_stop_id=stop_defs[base_idx].id,
    )


def generate_ramp(
    name: str,
    base_color: str,
    stop_defs: Sequence[StopDefinition],
    chroma_curve: ChromaCurve = "natural",
    hue_shift_enabled: bool = False,
    *,
    base_lightness: Optional[float] = None,
) -> Ramp:
    """Generate a ramp from a base color string; see ``generate_ramp_from_params``."""
    params = RampParams(
        base_color=base_color,
        chroma_curve=chroma_curve,
        hue_shift_enabled=hue_shift_enabled,
        base_lightness=base_lightness,
    )
    return generate_ramp_from_params(name, params, stop_defs)


# =============================================================================
# 3. BASE-STOP PREVIEW
# =============================================================================

def _base_stop_hex_once(
    base_color: str,
    stop_defs: Sequence[StopDefinition],
    scales: Tuple[float, ...],
) -> str:
    base = parse_color(base_color)
    hue = 0.0 if base.c < ACHROMATIC_CHROMA else base.h
    idx = find_base_stop(base.l, stop_defs)
    color = OklchColor(stop_defs[idx].lightness, base.c * scales[idx], hue)
    return build_color(clamp_to_srgb(color)).hex


def compute_base_stop_hex(
    base_color: str,
    stop_defs: Sequence[StopDefinition],
    chroma_curve: ChromaCurve = "natural",
) -> Optional[str]:
    """
    Preview the hex the base color turns into at its base stop.

    Runs the base-stop math only: lightness snaps to the closest stop
    target, chroma is scaled by the curve entry of that stop and hue is
    unshifted.  The hex is fed back through the same pass until it repeats;
    for a cycle the lexicographically smallest member is returned.  The
    result is therefore a fixed point: ``f(f(x)) == f(x)``.  Below the curve
    peak every pass removes chroma, so such previews settle on a muted color.

    Returns:
        ``#rrggbb``, or None for an unparseable color or empty stop set.

    Raises:
        ValueError: If ``chroma_curve`` is unknown.
    """
    scales = chroma_scales(chroma_curve, len(stop_defs))
    if not stop_defs:
        return None
    try:
        current = _base_stop_hex_once(base_color, stop_defs, scales)
    except InvalidColorError:
        return None

    seen = [current]
    for _ in range(_MAX_PREVIEW_ITERATIONS):
        nxt = _base_stop_hex_once(current, stop_defs, scales)
        if nxt in seen:
            return min(seen[seen.index(nxt):])
        seen.append(nxt)
        current = nxt
    return current
