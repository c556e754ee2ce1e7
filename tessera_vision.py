# -*- coding: utf-8 -*-
"""
Tessera: Setting perceptual color into accessible systems
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Color Vision Deficiency Simulation
==================================
Approximates how ramp colors appear to dichromats, for checking that a
ramp still reads as an ordered scale.

Approach:
 - OKLCH -> linear sRGB (clipped to the display gamut)
 - Apply the 3x3 deficiency matrix
 - Clip, then back to OKLCH and a full Color

References:
    - Machado, G. M., Oliveira, M. M., & Fernandes, L. A. F. (2009).
      "A Physiologically-based Model for Simulation of Color Vision
      Deficiency".  Severity 1.0 matrices.
"""

from typing import Dict, Final, Literal, Tuple

import numpy as np

from tessera_colorengine import (
    ArrayFloat,
    ColorLike,
    ColorSpaceEngine,
    as_oklch,
    build_color,
    clean_oklch,
)
from tessera_structure import Color, Ramp

__all__ = [
    "DeficiencyType",
    "DEFICIENCY_TYPES",
    "simulate_deficiency",
    "simulate_ramp",
]

DeficiencyType = Literal["protanopia", "deuteranopia", "tritanopia"]
DEFICIENCY_TYPES: Final[Tuple[str, ...]] = ("protanopia", "deuteranopia", "tritanopia")

_MACHADO: Dict[str, ArrayFloat] = {
    "protanopia": np.array([
        [ 0.152286,  1.052583, -0.204868],
        [ 0.114503,  0.786281,  0.099216],
        [-0.003882, -0.048116,  1.051998],
    ], dtype=np.float64),
    "deuteranopia": np.array([
        [ 0.367322,  0.860646, -0.227968],
        [ 0.280085,  0.672501,  0.047413],
        [-0.011820,  0.042940,  0.968881],
    ], dtype=np.float64),
    "tritanopia": np.array([
        [ 1.255528, -0.076749, -0.178779],
        [-0.078411,  0.930809,  0.147602],
        [ 0.004733,  0.691367,  0.303900],
    ], dtype=np.float64),
}
# Pre-transposed for row-vector products.
_MACHADO_T: Final[Dict[str, ArrayFloat]] = {k: m.T.copy() for k, m in _MACHADO.items()}


def simulate_deficiency(color: ColorLike, deficiency: DeficiencyType) -> Color:
    """Return the color as seen with the given dichromacy."""
    try:
        matrix_t = _MACHADO_T[deficiency]
    except KeyError:
        raise ValueError(
            f"Unknown deficiency {deficiency!r}; expected one of {list(DEFICIENCY_TYPES)}"
        ) from None

    c = as_oklch(color)
    lab = ColorSpaceEngine.oklch_to_oklab(np.array([c.l, c.c, c.h], dtype=np.float64))
    linear = np.clip(ColorSpaceEngine.oklab_to_linear_srgb(lab), 0.0, 1.0)
    simulated = np.clip(np.dot(linear, matrix_t), 0.0, 1.0)
    l, ch, h = ColorSpaceEngine.oklab_to_oklch(ColorSpaceEngine.linear_srgb_to_oklab(simulated))
    return build_color(clean_oklch(l, ch, h))


def simulate_ramp(ramp: Ramp, deficiency: DeficiencyType) -> Tuple[Tuple[int, Color], ...]:
    """``(stop_id, simulated color)`` for every stop, in ramp order."""
    return tuple((s.id, simulate_deficiency(s.color, deficiency)) for s in ramp.stops)
