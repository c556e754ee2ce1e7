# -*- coding: utf-8 -*-
"""
Tessera: Setting perceptual color into accessible systems
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

OKLCH Color Engine
==================
Parsing, OKLCH <-> Oklab <-> sRGB conversion, sRGB gamut mapping, hue
arithmetic and perceptual distance for the Tessera ramp system.

Architecture:
1. Batch math: ``ColorSpaceEngine`` exposes shape-safe numpy transforms.
   Every public transform accepts a single ``(3,)`` triple or an ``(N, 3)``
   batch; 3x3 matrices are stored pre-transposed for row-vector products.
2. Kernels: element-wise transfer functions and the polar conversion are
   Numba-compiled with ``fastmath=False`` so results are bit-stable between
   runs.  Matrix products stay in numpy.
3. Boundary: CSS strings are parsed by ``coloraide`` into sRGB
   coordinates; everything after that runs through this module's own
   matrices, so parsing and generation share one Oklab definition.
4. Gamut: chroma is reduced at constant lightness and hue, the boundary
   being located with ``scipy.optimize.brentq``.

References:
    - IEC 61966-2-1:1999 (sRGB Standard)
    - Ottosson, B. (2020). "A perceptual color space for image processing".
"""

import functools
import math
import warnings
from dataclasses import dataclass
from typing import Any, Callable, Final, Tuple, TypeAlias, Union

import numpy as np
from coloraide import Color as CssColor
from numba import njit
from scipy.optimize import brentq

from tessera_structure import (
    Color,
    InvalidColorError,
    OklchColor,
    RgbTriple,
    TesseraWarning,
)

__all__ = [
    # --- Type Aliases ---
    "ArrayFloat",
    "ColorLike",

    # --- Constants ---
    "GAMUT_EPSILON",
    "ACHROMATIC_CHROMA",
    "NEUTRAL_CHROMA",
    "DEG2RAD",
    "RAD2DEG",

    # --- Matrices ---
    "M1_OKLAB_SRGB_T",
    "M2_OKLAB_SRGB_T",
    "M1_OKLAB_SRGB_INV_T",
    "M2_OKLAB_SRGB_INV_T",

    # --- Decorators ---
    "handle_shapes",

    # --- Classes ---
    "ColorSpaceEngine",
    "GamutMapping",
    "ColorMetrics",
    "OklchDelta",

    # --- Functions ---
    "parse_color",
    "to_color",
    "to_hex",
    "build_color",
    "oklch_to_color",
    "as_oklch",
    "clamp_to_srgb",
    "is_in_gamut",
    "hue_difference",
    "normalize_hue",
    "clean_oklch",
    "format_oklch_css",
    "hue_to_name",
    "delta_e_ok",
    "oklch_components",
]

# --- Type Aliases ---
ArrayFloat: TypeAlias = np.typing.NDArray[np.floating]
ColorLike: TypeAlias = Union[OklchColor, Color]

# --- Shared tolerances ---
# Single epsilon for gamut checks and boundary searches.  An exact [0, 1]
# bound rejects white and black after an OKLCH round trip.
GAMUT_EPSILON: Final[float] = 1e-6
# Below this chroma a base color is treated as gray by ramp generation.
ACHROMATIC_CHROMA: Final[float] = 0.001
# Below this chroma a color is reported as "neutral" by hue_to_name.
NEUTRAL_CHROMA: Final[float] = 0.01
# Residual chroma of grays after the Oklab and simulation matrices; its hue
# is noise.
_HUE_NOISE_CHROMA: Final[float] = 1e-5
# deltaE values below this are float noise from the polar round trip.
_DELTA_E_FLOOR: Final[float] = 1e-10

DEG2RAD: Final[float] = np.pi / 180.0
RAD2DEG: Final[float] = 180.0 / np.pi

# Oklab Matrices (sRGB oriented)
# Linear sRGB -> LMS and LMS' -> Lab, as published with Oklab.
_M1_OKLAB_SRGB = np.array([
    [0.4122214708, 0.5363325363, 0.0514459929],
    [0.2119034982, 0.6806995451, 0.1073969566],
    [0.0883024619, 0.2817188376, 0.6299787005]
], dtype=np.float64)
M1_OKLAB_SRGB_T: Final[ArrayFloat] = _M1_OKLAB_SRGB.T.copy()

_M2_OKLAB_SRGB = np.array([
    [0.2104542553, 0.7936177850, -0.0040720468],
    [1.9779984951, -2.4285922050, 0.4505937099],
    [0.0259040371, 0.7827717662, -0.8086757660]
], dtype=np.float64)
M2_OKLAB_SRGB_T: Final[ArrayFloat] = _M2_OKLAB_SRGB.T.copy()

M1_OKLAB_SRGB_INV_T: Final[ArrayFloat] = np.linalg.inv(_M1_OKLAB_SRGB).T.copy()
M2_OKLAB_SRGB_INV_T: Final[ArrayFloat] = np.linalg.inv(_M2_OKLAB_SRGB).T.copy()

# Hue bands, upper bound exclusive.  Red sits around 25-40 in OKLCH, so the
# band below 20 and the band above 335 both read as pink.
_HUE_NAMES: Final[Tuple[Tuple[float, str], ...]] = (
    (20.0, "pink"),
    (45.0, "red"),
    (65.0, "orange"),
    (90.0, "amber"),
    (115.0, "yellow"),
    (145.0, "lime"),
    (175.0, "green"),
    (200.0, "emerald"),
    (230.0, "cyan"),
    (260.0, "sky"),
    (285.0, "blue"),
    (310.0, "indigo"),
    (335.0, "purple"),
    (360.0, "pink"),
)


# =============================================================================
# 1. ROBUST DECORATORS
# =============================================================================

def handle_shapes(func: Callable[..., ArrayFloat]) -> Callable[..., ArrayFloat]:
    """
    Decorator to normalize inputs to (N, 3) float64 and safeguard shape.

    Returns:
        The wrapped function with shape handling.
        - If input is (3,), returns (3,)
        - If input is (N, 3), returns (N, 3)
    """
    @functools.wraps(func)
    def wrapper(arr: ArrayFloat, *args: Any, **kwargs: Any) -> ArrayFloat:
        arr = np.asarray(arr, dtype=np.float64)
        arr_in = np.ascontiguousarray(np.atleast_2d(arr))

        if arr_in.ndim != 2 or arr_in.shape[-1] != 3:
            raise ValueError(f"Expected shape (3,) or (N, 3), got {arr.shape}")

        res = func(arr_in, *args, **kwargs)

        if arr.ndim == 1:
            return res[0]
        return res
    return wrapper


# =============================================================================
# 2. LOW-LEVEL MATH KERNELS (Numba)
# =============================================================================

@njit(cache=True, fastmath=False)
def _gamma_srgb(linear: ArrayFloat) -> ArrayFloat:
    """
    Applies the sRGB OETF (linear -> gamma encoded).

    Negative inputs stay on the linear segment so out-of-gamut values keep
    their sign, which the gamut checks rely on.
    """
    out = np.empty_like(linear)
    linear_flat = linear.ravel()
    out_flat = out.ravel()

    for i in range(linear.size):
        v = linear_flat[i]
        if v <= 0.0031308:
            out_flat[i] = 12.92 * v
        else:
            out_flat[i] = 1.055 * (v ** (1.0 / 2.4)) - 0.055
    return out


@njit(cache=True, fastmath=False)
def _inverse_gamma_srgb(srgb: ArrayFloat) -> ArrayFloat:
    """Applies the sRGB EOTF (gamma encoded -> linear)."""
    out = np.empty_like(srgb)
    srgb_flat = srgb.ravel()
    out_flat = out.ravel()

    for i in range(srgb.size):
        v = srgb_flat[i]
        if v <= 0.04045:
            out_flat[i] = v / 12.92
        else:
            out_flat[i] = ((v + 0.055) / 1.055) ** 2.4
    return out


@njit(cache=True, fastmath=False)
def _lab_to_lch_kernel(lab: ArrayFloat) -> ArrayFloat:
    """
    Oklab -> OKLCH.  Input shape (N, 3), output shape (N, 3).
    Hue is returned in [0, 360).
    """
    n = lab.shape[0]
    lch = np.empty_like(lab)

    for i in range(n):
        L, a, b = lab[i, 0], lab[i, 1], lab[i, 2]
        C = np.hypot(a, b)
        h_deg = np.arctan2(b, a) * RAD2DEG
        if h_deg < 0.0:
            h_deg += 360.0
        if h_deg >= 360.0:
            h_deg -= 360.0
        lch[i, 0], lch[i, 1], lch[i, 2] = L, C, h_deg
    return lch


@njit(cache=True, fastmath=False)
def _lch_to_lab_kernel(lch: ArrayFloat) -> ArrayFloat:
    """OKLCH -> Oklab.  Input shape (N, 3), output shape (N, 3)."""
    n = lch.shape[0]
    lab = np.empty_like(lch)

    for i in range(n):
        L, C, h_deg = lch[i, 0], lch[i, 1], lch[i, 2]
        h_rad = h_deg * DEG2RAD
        lab[i, 0] = L
        lab[i, 1] = C * np.cos(h_rad)
        lab[i, 2] = C * np.sin(h_rad)
    return lab


# =============================================================================
# 3. COLOR SPACE ENGINE
# =============================================================================

class ColorSpaceEngine:
    """Static utility class for the sRGB / Oklab / OKLCH transforms.

    Core transforms provide both a public ``@handle_shapes`` decorated API
    and an internal ``_raw`` fast-path that assumes pre-validated (N, 3)
    float64 input.  Chained pipelines call the ``_raw`` variants.

    Nothing here clips unless asked to: gamma-encoded values outside
    [0, 1] are how the gamut mapper detects out-of-gamut colors.
    """

    # =====================================================================
    #  Internal _raw fast-path methods  (assume validated (N, 3) float64)
    # =====================================================================

    @staticmethod
    def _linear_srgb_to_oklab_raw(linear_rgb: ArrayFloat) -> ArrayFloat:
        lms = np.dot(linear_rgb, M1_OKLAB_SRGB_T)
        return np.dot(np.cbrt(lms), M2_OKLAB_SRGB_T)

    @staticmethod
    def _oklab_to_linear_srgb_raw(lab_array: ArrayFloat) -> ArrayFloat:
        lms_prime = np.dot(lab_array, M2_OKLAB_SRGB_INV_T)
        return np.dot(lms_prime ** 3, M1_OKLAB_SRGB_INV_T)

    @staticmethod
    def _srgb_to_oklab_raw(rgb_array: ArrayFloat) -> ArrayFloat:
        linear = _inverse_gamma_srgb(rgb_array)
        return ColorSpaceEngine._linear_srgb_to_oklab_raw(linear)

    @staticmethod
    def _oklab_to_srgb_raw(lab_array: ArrayFloat, clip: bool = False) -> ArrayFloat:
        linear = ColorSpaceEngine._oklab_to_linear_srgb_raw(lab_array)
        if clip:
            linear = np.clip(linear, 0.0, 1.0)
        return _gamma_srgb(linear)

    @staticmethod
    def _oklch_to_srgb_raw(lch_array: ArrayFloat, clip: bool = False) -> ArrayFloat:
        lab = _lch_to_lab_kernel(lch_array)
        return ColorSpaceEngine._oklab_to_srgb_raw(lab, clip)

    @staticmethod
    def _srgb_to_oklch_raw(rgb_array: ArrayFloat) -> ArrayFloat:
        lab = ColorSpaceEngine._srgb_to_oklab_raw(rgb_array)
        return _lab_to_lch_kernel(lab)

    # =====================================================================
    #  Public API  (@handle_shapes validates shape and dtype)
    # =====================================================================

    # --- Transfer functions ---
    @staticmethod
    @handle_shapes
    def srgb_to_linear(rgb_array: ArrayFloat) -> ArrayFloat:
        """Gamma-encoded sRGB -> linear-light sRGB (IEC 61966-2-1)."""
        return _inverse_gamma_srgb(rgb_array)

    @staticmethod
    @handle_shapes
    def linear_to_srgb(linear_array: ArrayFloat) -> ArrayFloat:
        """Linear-light sRGB -> gamma-encoded sRGB (IEC 61966-2-1)."""
        return _gamma_srgb(linear_array)

    # --- Oklab ---
    @staticmethod
    @handle_shapes
    def linear_srgb_to_oklab(linear_array: ArrayFloat) -> ArrayFloat:
        return ColorSpaceEngine._linear_srgb_to_oklab_raw(linear_array)

    @staticmethod
    @handle_shapes
    def oklab_to_linear_srgb(lab_array: ArrayFloat) -> ArrayFloat:
        return ColorSpaceEngine._oklab_to_linear_srgb_raw(lab_array)

    @staticmethod
    @handle_shapes
    def srgb_to_oklab(rgb_array: ArrayFloat) -> ArrayFloat:
        """
        Converts gamma-encoded sRGB to Oklab.

        Inputs are not clipped, so wide-gamut colors that coloraide hands
        over as out-of-range sRGB survive the conversion.
        """
        return ColorSpaceEngine._srgb_to_oklab_raw(rgb_array)

    @staticmethod
    @handle_shapes
    def oklab_to_srgb(lab_array: ArrayFloat, clip: bool = False) -> ArrayFloat:
        """
        Converts Oklab to gamma-encoded sRGB.

        Args:
            lab_array: Oklab coordinates.
            clip: If True, clip linear RGB to [0, 1] before encoding
                (display-referred).  Default False keeps out-of-gamut
                values visible to the caller.
        """
        return ColorSpaceEngine._oklab_to_srgb_raw(lab_array, clip)

    # --- OKLCH ---
    @staticmethod
    @handle_shapes
    def oklab_to_oklch(lab_array: ArrayFloat) -> ArrayFloat:
        return _lab_to_lch_kernel(lab_array)

    @staticmethod
    @handle_shapes
    def oklch_to_oklab(lch_array: ArrayFloat) -> ArrayFloat:
        return _lch_to_lab_kernel(lch_array)

    @staticmethod
    @handle_shapes
    def srgb_to_oklch(rgb_array: ArrayFloat) -> ArrayFloat:
        return ColorSpaceEngine._srgb_to_oklch_raw(rgb_array)

    @staticmethod
    @handle_shapes
    def oklch_to_srgb(lch_array: ArrayFloat, clip: bool = False) -> ArrayFloat:
        return ColorSpaceEngine._oklch_to_srgb_raw(lch_array, clip)


# =============================================================================
# 4. GAMUT MAPPING
# =============================================================================

def _gamut_excess(lch: ArrayFloat) -> float:
    """Largest distance any gamma-encoded channel lies outside [0, 1]."""
    rgb = ColorSpaceEngine._oklch_to_srgb_raw(lch)[0]
    return float(max(np.max(rgb - 1.0), np.max(-rgb)))


class GamutMapping:
    """sRGB gamut checks and chroma reduction at constant L and h."""

    @staticmethod
    def in_gamut(lch: ArrayFloat, eps: float = GAMUT_EPSILON) -> bool:
        """True when every gamma-encoded channel lies within [-eps, 1 + eps]."""
        lch_in = np.ascontiguousarray(np.atleast_2d(np.asarray(lch, dtype=np.float64)))
        rgb = ColorSpaceEngine._oklch_to_srgb_raw(lch_in)
        return bool(np.all(rgb >= -eps) and np.all(rgb <= 1.0 + eps))

    @staticmethod
    def max_chroma(l: float, c: float, h: float, eps: float = GAMUT_EPSILON) -> float:
        """
        Largest chroma in [0, c] whose color is inside the sRGB gamut.

        The boundary is solved as the root of ``excess(c) - eps / 2`` so the
        returned chroma sits strictly inside the ``eps`` tolerance band.
        Returns 0.0 when even the gray axis at ``l`` is out of gamut.
        """
        def f(chroma: float) -> float:
            return _gamut_excess(np.array([[l, chroma, h]], dtype=np.float64)) - eps * 0.5

        if f(0.0) >= 0.0:
            return 0.0
        if f(c) <= 0.0:
            return c
        return float(brentq(f, 0.0, c, xtol=1e-12, maxiter=200))


# =============================================================================
# 5. METRICS
# =============================================================================

@njit(cache=True, fastmath=False)
def _batch_delta_e_ok(lab1: ArrayFloat, lab2: ArrayFloat) -> ArrayFloat:
    """Euclidean distance in Oklab, row by row."""
    n = len(lab1)
    res = np.empty(n, dtype=np.float64)
    for i in range(n):
        dL = lab1[i, 0] - lab2[i, 0]
        da = lab1[i, 1] - lab2[i, 1]
        db = lab1[i, 2] - lab2[i, 2]
        res[i] = np.sqrt(dL * dL + da * da + db * db)
    return res


class ColorMetrics:
    @staticmethod
    def delta_e_ok(lch1: ArrayFloat, lch2: ArrayFloat) -> Union[float, ArrayFloat]:
        """
        Delta E OK between OKLCH triples (or (N, 3) batches).

        Computed in Oklab, which handles hue wraparound without special
        cases.  Returns a float for single triples, an (N,) array otherwise.
        """
        a = np.asarray(lch1, dtype=np.float64)
        b = np.asarray(lch2, dtype=np.float64)
        lab1 = ColorSpaceEngine.oklch_to_oklab(np.atleast_2d(a))
        lab2 = ColorSpaceEngine.oklch_to_oklab(np.atleast_2d(b))
        res = _batch_delta_e_ok(lab1, lab2)
        res = np.where(res < _DELTA_E_FLOOR, 0.0, res)
        if a.ndim == 1 and b.ndim == 1:
            return float(res[0])
        return res


@dataclass(slots=True, frozen=True)
class OklchDelta:
    """Per-component difference between two OKLCH colors."""
    d_l: float
    d_c: float
    d_h: float

    def get_state(self) -> dict:
        return {"dL": self.d_l, "dC": self.d_c, "dH": self.d_h}


# =============================================================================
# 6. SCALAR API  (OklchColor / Color boundary)
# =============================================================================

def normalize_hue(h: float) -> float:
    """Wrap a hue angle into [0, 360)."""
    h = float(h) % 360.0
    # -1e-17 % 360.0 rounds to 360.0
    return 0.0 if h >= 360.0 else h + 0.0


def clean_oklch(l: float, c: float, h: float) -> OklchColor:
    """Build an OklchColor from converted components, zeroing a noise hue."""
    if c < _HUE_NOISE_CHROMA:
        return OklchColor(float(l), float(c), 0.0)
    return OklchColor(float(l), float(c), normalize_hue(h))


def _lch_row(color: OklchColor) -> ArrayFloat:
    return np.array([[color.l, color.c, color.h]], dtype=np.float64)


def as_oklch(color: ColorLike) -> OklchColor:
    """Accept either representation and return the OKLCH one."""
    if isinstance(color, OklchColor):
        return color
    if isinstance(color, Color):
        return color.oklch
    raise TypeError(f"Expected OklchColor or Color, got {type(color).__name__}")


def parse_color(value: str) -> OklchColor:
    """
    Parse any CSS color string into OKLCH.

    coloraide handles the syntax (hex, named, ``rgb()``, ``hsl()``,
    ``oklch()``, ``lab()``, ...).  Its sRGB coordinates are not clipped, so
    wide-gamut inputs come through with channels outside [0, 1].

    Raises:
        InvalidColorError: If ``value`` is not a string or cannot be parsed.
    """
    if not isinstance(value, str):
        raise InvalidColorError(value, f"expected a string, got {type(value).__name__}")
    try:
        css = CssColor(value.strip())
    except ValueError as exc:
        raise InvalidColorError(value) from exc

    rgb = np.nan_to_num(np.array(css.convert("srgb").coords(), dtype=np.float64))
    l, c, h = ColorSpaceEngine._srgb_to_oklch_raw(rgb.reshape(1, 3))[0]
    return clean_oklch(l, c, h)


def build_color(oklch: OklchColor) -> Color:
    """
    Derive hex and 8-bit RGB from an OKLCH color.

    Channels are clipped to [0, 1] and rounded half-up, so a color that has
    been through ``clamp_to_srgb`` is only ever clipped by float noise.
    """
    rgb = ColorSpaceEngine._oklch_to_srgb_raw(_lch_row(oklch))[0]
    rgb = np.clip(rgb, 0.0, 1.0)
    r, g, b = (int(math.floor(v * 255.0 + 0.5)) for v in rgb)
    return Color(
        oklch=oklch,
        hex=f"#{r:02x}{g:02x}{b:02x}",
        rgb=RgbTriple(r, g, b),
    )


def to_color(value: str) -> Color:
    """Parse a CSS color string into a full Color.  Raises InvalidColorError."""
    return build_color(parse_color(value))


def to_hex(value: str) -> str:
    """Parse a CSS color string and return its lowercase ``#rrggbb`` form."""
    return to_color(value).hex


def is_in_gamut(color: OklchColor) -> bool:
    """True when the color's sRGB channels lie within [-eps, 1 + eps]."""
    return GamutMapping.in_gamut(_lch_row(color))


def clamp_to_srgb(color: OklchColor) -> OklchColor:
    """
    Bring a color into the sRGB gamut by reducing chroma only.

    In-gamut colors are returned unchanged.  Lightness and hue are never
    touched; when the lightness itself lies outside the gamut (below 0 or
    above 1) the chroma collapses to 0 and a TesseraWarning is emitted.
    """
    if is_in_gamut(color):
        return color

    c = GamutMapping.max_chroma(color.l, color.c, color.h)
    if c == 0.0 and not is_in_gamut(OklchColor(color.l, 0.0, color.h)):
        warnings.warn(
            f"Lightness {color.l:.6g} is outside the sRGB gamut; chroma set to 0.",
            TesseraWarning,
            stacklevel=2,
        )
    return OklchColor(color.l, c, color.h)


def oklch_to_color(l: float, c: float, h: float) -> Color:
    """Gamut-clamp an OKLCH triple and derive its full Color."""
    return build_color(clamp_to_srgb(OklchColor(l, c, normalize_hue(h))))


def hue_difference(h1: float, h2: float) -> float:
    """Shortest angular distance between two hues, in [0, 180]."""
    d = abs(h1 - h2) % 360.0
    return 360.0 - d if d > 180.0 else d


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def format_oklch_css(l: float, c: float, h: float) -> str:
    """
    Format as ``oklch(L% C H)``.

    L is an integer percent, C is rounded to two decimals and H to an
    integer, all half-up.  Numbers print without trailing zeros and never
    as ``-0``.
    """
    l_pct = _round_half_up(l * 100.0)
    c_round = _round_half_up(c * 100.0) / 100.0 + 0.0
    h_round = _round_half_up(h)
    return f"oklch({l_pct}% {c_round:g} {h_round})"


def hue_to_name(hue: float, chroma: float) -> str:
    """Human-readable hue family, or ``"neutral"`` below NEUTRAL_CHROMA."""
    if chroma < NEUTRAL_CHROMA:
        return "neutral"
    h = hue % 360.0
    for upper, name in _HUE_NAMES:
        if h < upper:
            return name
    return "pink"


def delta_e_ok(a: ColorLike, b: ColorLike) -> float:
    """Perceptual distance between two colors; 0 for identical inputs, symmetric."""
    ca, cb = as_oklch(a), as_oklch(b)
    return ColorMetrics.delta_e_ok(
        np.array([ca.l, ca.c, ca.h], dtype=np.float64),
        np.array([cb.l, cb.c, cb.h], dtype=np.float64),
    )


def oklch_components(a: ColorLike, b: ColorLike) -> OklchDelta:
    """Absolute L and C differences plus the shortest hue distance."""
    ca, cb = as_oklch(a), as_oklch(b)
    return OklchDelta(
        d_l=abs(ca.l - cb.l),
        d_c=abs(ca.c - cb.c),
        d_h=hue_difference(ca.h, cb.h),
    )
