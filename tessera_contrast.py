# -*- coding: utf-8 -*-
"""
Tessera: Setting perceptual color into accessible systems
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Contrast Engine
===============
WCAG 2.x contrast ratio (the compliance gate) and APCA Lc (informational).

The two metrics work in different numeric domains: WCAG reads linear-light
sRGB floats, while APCA-W3 is specified on 8-bit integer channels.  The
8-bit conversion goes through ``build_color`` so it is the same clip and
half-up rounding used for hex output.

References:
    - W3C WCAG 2.2, Success Criterion 1.4.3 / 1.4.11.
    - Somers, A. APCA-W3 0.0.98G-4g (SAPC constants).
"""

from typing import Dict, Final

import numpy as np

from tessera_colorengine import ColorLike, ColorSpaceEngine, as_oklch, build_color
from tessera_structure import (
    THRESHOLD_CLASSES,
    AAResult,
    ContrastResult,
    ThresholdClass,
)

__all__ = [
    "AA_THRESHOLDS",
    "relative_luminance",
    "screen_luminance",
    "wcag_ratio",
    "apca_lc",
    "check_contrast",
    "passes_threshold",
]

# WCAG 2.2 AA minimum ratios.
AA_THRESHOLDS: Final[Dict[str, float]] = {
    "normal_text": 4.5,
    "large_text": 3.0,
    "ui_component": 3.0,
}

# --- WCAG ---
_WCAG_COEFFS: Final = np.array([0.2126, 0.7152, 0.0722], dtype=np.float64)
_WCAG_FLARE: Final[float] = 0.05

# --- APCA-W3 0.0.98G-4g ---
_APCA_TRC: Final[float] = 2.4
_APCA_COEFFS: Final = np.array([0.2126729, 0.7151522, 0.0721750], dtype=np.float64)
_APCA_NORM_BG: Final[float] = 0.56
_APCA_NORM_TXT: Final[float] = 0.57
_APCA_REV_TXT: Final[float] = 0.62
_APCA_REV_BG: Final[float] = 0.65
_APCA_BLK_THRS: Final[float] = 0.022
_APCA_BLK_CLMP: Final[float] = 1.414
_APCA_SCALE: Final[float] = 1.14
_APCA_OFFSET: Final[float] = 0.027
_APCA_DELTA_Y_MIN: Final[float] = 0.0005
_APCA_LO_CLIP: Final[float] = 0.1
_APCA_Y_RANGE: Final = (0.0, 1.1)


def relative_luminance(color: ColorLike) -> float:
    """WCAG relative luminance from linear sRGB clipped to [0, 1]."""
    c = as_oklch(color)
    srgb = ColorSpaceEngine.oklch_to_srgb(np.array([c.l, c.c, c.h], dtype=np.float64))
    linear = ColorSpaceEngine.srgb_to_linear(np.clip(srgb, 0.0, 1.0))
    return float(np.dot(linear, _WCAG_COEFFS))


def wcag_ratio(fg: ColorLike, bg: ColorLike) -> float:
    """Contrast ratio in [1, 21]; order of the arguments does not matter."""
    y1 = relative_luminance(fg)
    y2 = relative_luminance(bg)
    hi, lo = (y1, y2) if y1 >= y2 else (y2, y1)
    return (hi + _WCAG_FLARE) / (lo + _WCAG_FLARE)


def screen_luminance(color: ColorLike) -> float:
    """APCA screen luminance Ys from 8-bit channels with a pure 2.4 power."""
    rgb = build_color(as_oklch(color)).rgb
    channels = np.array([rgb.r, rgb.g, rgb.b], dtype=np.float64) / 255.0
    return float(np.dot(channels ** _APCA_TRC, _APCA_COEFFS))


def _soft_clamp_black(y: float) -> float:
    if y > _APCA_BLK_THRS:
        return y
    return y + (_APCA_BLK_THRS - y) ** _APCA_BLK_CLMP


def apca_lc(text: ColorLike, bg: ColorLike) -> float:
    """
    APCA lightness contrast Lc of ``text`` over ``bg``.

    Positive for dark text on a light background, negative for the reverse,
    0 when the difference falls under the low-contrast clip.
    """
    txt_y = screen_luminance(text)
    bg_y = screen_luminance(bg)

    lo, hi = _APCA_Y_RANGE
    if min(txt_y, bg_y) < lo or max(txt_y, bg_y) > hi:
        return 0.0

    txt_y = _soft_clamp_black(txt_y)
    bg_y = _soft_clamp_black(bg_y)

    if abs(bg_y - txt_y) < _APCA_DELTA_Y_MIN:
        return 0.0

    if bg_y > txt_y:
        # Normal polarity: dark text on light background.
        sapc = (bg_y ** _APCA_NORM_BG - txt_y ** _APCA_NORM_TXT) * _APCA_SCALE
        lc = 0.0 if sapc < _APCA_LO_CLIP else sapc - _APCA_OFFSET
    else:
        # Reverse polarity: light text on dark background.
        sapc = (bg_y ** _APCA_REV_BG - txt_y ** _APCA_REV_TXT) * _APCA_SCALE
        lc = 0.0 if sapc > -_APCA_LO_CLIP else sapc + _APCA_OFFSET
    return lc * 100.0


def check_contrast(fg: ColorLike, bg: ColorLike) -> ContrastResult:
    """WCAG ratio, APCA Lc and AA pass flags.  Only the ratio gates."""
    ratio = wcag_ratio(fg, bg)
    return ContrastResult(
        wcag_ratio=ratio,
        apca_lc=apca_lc(fg, bg),
        passes_aa=AAResult(
            normal_text=ratio >= AA_THRESHOLDS["normal_text"],
            large_text=ratio >= AA_THRESHOLDS["large_text"],
            ui_component=ratio >= AA_THRESHOLDS["ui_component"],
        ),
    )


def passes_threshold(result: ContrastResult, threshold: ThresholdClass) -> bool:
    """Whether ``result`` meets the AA minimum of ``threshold``."""
    if threshold not in THRESHOLD_CLASSES:
        raise ValueError(
            f"Unknown threshold class {threshold!r}; expected one of {list(THRESHOLD_CLASSES)}"
        )
    return result.wcag_ratio >= AA_THRESHOLDS[threshold]
