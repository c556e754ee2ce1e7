# -*- coding: utf-8 -*-
"""
Tessera: Setting perceptual color into accessible systems
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: tessera_structure.py — Value types, error types and state
serialisation shared by every Tessera engine.

Design notes:
  1.  Every type is a frozen, slotted dataclass.  Engines never mutate a
      value; "edits" go through ``dataclasses.replace`` and yield a new one.
  2.  ``get_state()`` emits the camelCase field layout consumed by the
      external format adapters (CSS / Figma serialisers, UI layer).  Input
      types also provide ``from_state()`` so presets can arrive as plain
      JSON-shaped dicts.
  3.  TokenSource is a closed union of two variants.  Consumers dispatch
      with ``isinstance`` and raise ``TypeError`` on anything else.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import (
    Any,
    Dict,
    Iterable,
    Literal,
    Mapping,
    Optional,
    Tuple,
    TypeAlias,
    Union,
)

__all__ = [
    # --- Type aliases ---
    "ChromaCurve",
    "ThresholdClass",
    "TokenSource",
    "CHROMA_CURVES",
    "THRESHOLD_CLASSES",
    # --- Diagnostics & errors ---
    "TesseraWarning",
    "TesseraError",
    "InvalidColorError",
    "ReferenceNotFoundError",
    "StopNotFoundError",
    # --- Color primitives ---
    "OklchColor",
    "RgbTriple",
    "Color",
    # --- Ramp system ---
    "StopDefinition",
    "OklchOverride",
    "RampParams",
    "RampStop",
    "Ramp",
    # --- Token system ---
    "RampSource",
    "LiteralSource",
    "TokenDefinition",
    "ResolvedToken",
    # --- Contrast & audit ---
    "AAResult",
    "ContrastResult",
    "TokenPairDefinition",
    "AuditPairResult",
    "AuditSummary",
    "AuditReport",
    # --- Helpers ---
    "source_from_state",
]


# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------
ChromaCurve = Literal["natural", "linear", "flat"]
ThresholdClass = Literal["normal_text", "large_text", "ui_component"]

CHROMA_CURVES: Tuple[str, ...] = ("natural", "linear", "flat")
THRESHOLD_CLASSES: Tuple[str, ...] = ("normal_text", "large_text", "ui_component")

# Wire names used by the external adapters.
_THRESHOLD_TO_WIRE: Dict[str, str] = {
    "normal_text": "normalText",
    "large_text": "largeText",
    "ui_component": "uiComponent",
}
_THRESHOLD_FROM_WIRE: Dict[str, str] = {v: k for k, v in _THRESHOLD_TO_WIRE.items()}


# ═══════════════════════════════════════════════════════════════════════════════
# 1.  Diagnostics & errors
# ═══════════════════════════════════════════════════════════════════════════════
class TesseraWarning(UserWarning):
    """Category for every warning Tessera emits (filterable by callers)."""


class TesseraError(Exception):
    """Base class for Tessera validation failures."""


class InvalidColorError(TesseraError, ValueError):
    """An input could not be parsed as a CSS color."""

    def __init__(self, value: Any, detail: str = "") -> None:
        self.value = value
        msg = f"Invalid color: {value!r}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


def _format_available(available: Iterable[Any]) -> str:
    items = [str(a) for a in available]
    return ", ".join(items) if items else "(none)"


class ReferenceNotFoundError(TesseraError, LookupError):
    """
    A ramp name, stop id or token name lookup failed.

    Attributes:
        kind:       What was looked up ("ramp", "stop", "token").
        identifier: The missing identifier.
        available:  The valid alternatives at the point of failure.
    """

    def __init__(
        self,
        kind: str,
        identifier: Any,
        available: Iterable[Any],
        context: str = "",
    ) -> None:
        self.kind = kind
        self.identifier = identifier
        self.available: Tuple[Any, ...] = tuple(available)
        self.context = context
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        shown = f'"{self.identifier}"' if isinstance(self.identifier, str) else str(self.identifier)
        where = f" in {self.context}" if self.context else ""
        return (
            f"{self.kind.capitalize()} {shown} not found{where}. "
            f"Available {self.kind}s: {_format_available(self.available)}"
        )


class StopNotFoundError(ReferenceNotFoundError):
    """An override operation targeted a stop id the ramp does not have."""

    def __init__(self, stop_id: Any, available: Iterable[Any], ramp_name: str = "") -> None:
        context = f'ramp "{ramp_name}"' if ramp_name else ""
        super().__init__("stop", stop_id, available, context=context)


def _check_finite(owner: str, **values: Optional[float]) -> None:
    for name, v in values.items():
        if v is None:
            continue
        if not isinstance(v, (int, float)) or isinstance(v, bool):
            raise TypeError(f"{owner}.{name} must be a number, got {type(v).__name__}")
        if not math.isfinite(v):
            raise ValueError(f"{owner}.{name} must be finite, got {v}")


# ═══════════════════════════════════════════════════════════════════════════════
# 2.  Color primitives
# ═══════════════════════════════════════════════════════════════════════════════
@dataclass(slots=True, frozen=True)
class OklchColor:
    """A color in OKLCH: lightness (0-1), chroma (>= 0), hue (degrees)."""
    l: float
    c: float
    h: float

    def __post_init__(self) -> None:
        _check_finite("OklchColor", l=self.l, c=self.c, h=self.h)
        if self.c < 0.0:
            raise ValueError(f"OklchColor.c must be >= 0, got {self.c}")

    def get_state(self) -> Dict[str, float]:
        return {"l": self.l, "c": self.c, "h": self.h}

    @classmethod
    def from_state(cls, state: Mapping[str, Any]) -> OklchColor:
        return cls(float(state["l"]), float(state["c"]), float(state["h"]))


@dataclass(slots=True, frozen=True)
class RgbTriple:
    """8-bit sRGB channels."""
    r: int
    g: int
    b: int

    def get_state(self) -> Dict[str, int]:
        return {"r": self.r, "g": self.g, "b": self.b}


@dataclass(slots=True, frozen=True)
class Color:
    """
    A color in all boundary representations.

    Only ``tessera_colorengine.build_color`` constructs these, which keeps
    ``hex`` and ``rgb`` derived from ``oklch`` and mutually consistent.
    """
    oklch: OklchColor
    hex:   str
    rgb:   RgbTriple

    def get_state(self) -> Dict[str, Any]:
        return {
            "oklch": self.oklch.get_state(),
            "hex": self.hex,
            "rgb": self.rgb.get_state(),
        }


# ═══════════════════════════════════════════════════════════════════════════════
# 3.  Ramp system
# ═══════════════════════════════════════════════════════════════════════════════
@dataclass(slots=True, frozen=True)
class StopDefinition:
    """One preset stop: numeric id, display label, fixed lightness target."""
    id:        int
    label:     str
    lightness: float

    def __post_init__(self) -> None:
        _check_finite("StopDefinition", lightness=self.lightness)

    def get_state(self) -> Dict[str, Any]:
        return {"id": self.id, "label": self.label, "lightness": self.lightness}

    @classmethod
    def from_state(cls, state: Mapping[str, Any]) -> StopDefinition:
        stop_id = int(state["id"])
        return cls(
            id=stop_id,
            label=str(state.get("label", stop_id)),
            lightness=float(state["lightness"]),
        )


_OVERRIDE_KEYS: Tuple[str, ...] = ("l", "c", "h")


@dataclass(slots=True, frozen=True)
class OklchOverride:
    """Partial OKLCH pin: only the components that are not None are pinned."""
    l: Optional[float] = None
    c: Optional[float] = None
    h: Optional[float] = None

    def __post_init__(self) -> None:
        _check_finite("OklchOverride", l=self.l, c=self.c, h=self.h)
        if self.c is not None and self.c < 0.0:
            raise ValueError(f"OklchOverride.c must be >= 0, got {self.c}")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> OklchOverride:
        unknown = sorted(set(values) - set(_OVERRIDE_KEYS))
        if unknown:
            raise ValueError(
                f"Unknown override component(s) {unknown}; "
                f"expected a subset of {list(_OVERRIDE_KEYS)}"
            )
        return cls(**{k: (None if v is None else float(v)) for k, v in values.items()})

    @property
    def pinned(self) -> Tuple[str, ...]:
        """Names of the pinned components, in l/c/h order."""
        return tuple(k for k in _OVERRIDE_KEYS if getattr(self, k) is not None)

    def get_state(self) -> Dict[str, float]:
        return {k: getattr(self, k) for k in self.pinned}

    @classmethod
    def from_state(cls, state: Mapping[str, Any]) -> OklchOverride:
        return cls.from_mapping(state)


@dataclass(slots=True, frozen=True)
class RampParams:
    """Everything a ramp is generated from; carried on the Ramp itself."""
    base_color:        str
    chroma_curve:      ChromaCurve = "natural"
    hue_shift_enabled: bool = False
    base_lightness:    Optional[float] = None

    def __post_init__(self) -> None:
        if self.chroma_curve not in CHROMA_CURVES:
            raise ValueError(
                f"Unknown chroma curve {self.chroma_curve!r}; "
                f"expected one of {list(CHROMA_CURVES)}"
            )
        _check_finite("RampParams", base_lightness=self.base_lightness)

    def get_state(self) -> Dict[str, Any]:
        state: Dict[str, Any] = {
            "baseColor": self.base_color,
            "chromaCurve": self.chroma_curve,
            "hueShiftEnabled": self.hue_shift_enabled,
        }
        if self.base_lightness is not None:
            state["baseLightness"] = self.base_lightness
        return state

    @classmethod
    def from_state(cls, state: Mapping[str, Any]) -> RampParams:
        base_lightness = state.get("baseLightness")
        return cls(
            base_color=str(state["baseColor"]),
            chroma_curve=state.get("chromaCurve", "natural"),
            hue_shift_enabled=bool(state.get("hueShiftEnabled", False)),
            base_lightness=None if base_lightness is None else float(base_lightness),
        )


@dataclass(slots=True, frozen=True)
class RampStop:
    """
    One ramp position.

    ``overrides`` is set only when ``overridden`` is True, and holds the
    partial exactly as the caller supplied it.
    """
    id:         int
    color:      Color
    overridden: bool = False
    overrides:  Optional[OklchOverride] = None

    def __post_init__(self) -> None:
        if self.overridden != (self.overrides is not None):
            raise ValueError(
                f"RampStop {self.id}: 'overrides' must be present exactly "
                f"when 'overridden' is True"
            )

    def get_state(self) -> Dict[str, Any]:
        state: Dict[str, Any] = {
            "id": self.id,
            "color": self.color.get_state(),
            "overridden": self.overridden,
        }
        if self.overrides is not None:
            state["overrides"] = self.overrides.get_state()
        return state


@dataclass(slots=True, frozen=True)
class Ramp:
    """An ordered sequence of stops (lightest first) sharing a hue lineage."""
    name:         str
    params:       RampParams
    stops:        Tuple[RampStop, ...]
    base_stop_id: int

    @property
    def stop_ids(self) -> Tuple[int, ...]:
        return tuple(s.id for s in self.stops)

    @property
    def overridden_stops(self) -> Tuple[RampStop, ...]:
        return tuple(s for s in self.stops if s.overridden)

    def stop(self, stop_id: int) -> RampStop:
        """Return the stop with ``stop_id`` or raise StopNotFoundError."""
        for s in self.stops:
            if s.id == stop_id:
                return s
        raise StopNotFoundError(stop_id, self.stop_ids, ramp_name=self.name)

    def get_state(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "params": self.params.get_state(),
            "stops": [s.get_state() for s in self.stops],
            "baseStopId": self.base_stop_id,
        }


# ═══════════════════════════════════════════════════════════════════════════════
# 4.  Token system
# ═══════════════════════════════════════════════════════════════════════════════
@dataclass(slots=True, frozen=True)
class RampSource:
    """Token value taken from ``ramp`` at stop ``stop``."""
    ramp: str
    stop: int

    def get_state(self) -> Dict[str, Any]:
        return {"type": "ramp", "ramp": self.ramp, "stop": self.stop}


@dataclass(slots=True, frozen=True)
class LiteralSource:
    """Token value given directly as a CSS color string."""
    value: str

    def get_state(self) -> Dict[str, Any]:
        return {"type": "literal", "value": self.value}


TokenSource: TypeAlias = Union[RampSource, LiteralSource]


def source_from_state(state: Mapping[str, Any]) -> TokenSource:
    """Rebuild a TokenSource from its ``{"type": ...}`` dict form."""
    kind = state.get("type")
    if kind == "ramp":
        return RampSource(ramp=str(state["ramp"]), stop=int(state["stop"]))
    if kind == "literal":
        return LiteralSource(value=str(state["value"]))
    raise ValueError(f"Unknown token source type: {kind!r}")


@dataclass(slots=True, frozen=True)
class TokenDefinition:
    """A semantic token and where its light/dark values come from."""
    name:        str
    light:       TokenSource
    dark:        TokenSource
    description: Optional[str] = None

    def get_state(self) -> Dict[str, Any]:
        state: Dict[str, Any] = {
            "name": self.name,
            "light": self.light.get_state(),
            "dark": self.dark.get_state(),
        }
        if self.description is not None:
            state["description"] = self.description
        return state

    @classmethod
    def from_state(cls, state: Mapping[str, Any]) -> TokenDefinition:
        return cls(
            name=str(state["name"]),
            light=source_from_state(state["light"]),
            dark=source_from_state(state["dark"]),
            description=state.get("description"),
        )


@dataclass(slots=True, frozen=True)
class ResolvedToken:
    """Concrete light/dark colors plus source labels for traceability."""
    name:         str
    light:        Color
    dark:         Color
    light_source: str
    dark_source:  str

    def get_state(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "light": self.light.get_state(),
            "dark": self.dark.get_state(),
            "lightSource": self.light_source,
            "darkSource": self.dark_source,
        }


# ═══════════════════════════════════════════════════════════════════════════════
# 5.  Contrast & audit
# ═══════════════════════════════════════════════════════════════════════════════
@dataclass(slots=True, frozen=True)
class AAResult:
    normal_text:  bool
    large_text:   bool
    ui_component: bool

    def get_state(self) -> Dict[str, bool]:
        return {
            "normalText": self.normal_text,
            "largeText": self.large_text,
            "uiComponent": self.ui_component,
        }


@dataclass(slots=True, frozen=True)
class ContrastResult:
    """WCAG ratio (gating) and signed APCA Lc (informational)."""
    wcag_ratio: float
    apca_lc:    float
    passes_aa:  AAResult

    def get_state(self) -> Dict[str, Any]:
        return {
            "wcagRatio": self.wcag_ratio,
            "apcaLc": self.apca_lc,
            "passesAA": self.passes_aa.get_state(),
        }


@dataclass(slots=True, frozen=True)
class TokenPairDefinition:
    """A foreground/background token pair and the threshold it must meet."""
    name:       str
    foreground: str
    background: str
    threshold:  ThresholdClass = "normal_text"

    def __post_init__(self) -> None:
        if self.threshold not in THRESHOLD_CLASSES:
            raise ValueError(
                f"Unknown threshold class {self.threshold!r}; "
                f"expected one of {list(THRESHOLD_CLASSES)}"
            )

    def get_state(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "foreground": self.foreground,
            "background": self.background,
            "threshold": _THRESHOLD_TO_WIRE[self.threshold],
        }

    @classmethod
    def from_state(cls, state: Mapping[str, Any]) -> TokenPairDefinition:
        raw = str(state.get("threshold", "normalText"))
        return cls(
            name=str(state["name"]),
            foreground=str(state["foreground"]),
            background=str(state["background"]),
            threshold=_THRESHOLD_FROM_WIRE.get(raw, raw),  # type: ignore[arg-type]
        )


@dataclass(slots=True, frozen=True)
class AuditPairResult:
    pair:         TokenPairDefinition
    light:        ContrastResult
    dark:         ContrastResult
    light_passes: bool
    dark_passes:  bool

    @property
    def passes(self) -> bool:
        return self.light_passes and self.dark_passes

    def get_state(self) -> Dict[str, Any]:
        return {
            "pair": self.pair.get_state(),
            "light": self.light.get_state(),
            "dark": self.dark.get_state(),
            "lightPasses": self.light_passes,
            "darkPasses": self.dark_passes,
        }


@dataclass(slots=True, frozen=True)
class AuditSummary:
    total_pairs:  int
    light_passes: int
    dark_passes:  int
    failures:     Tuple[AuditPairResult, ...] = field(default_factory=tuple)

    def get_state(self) -> Dict[str, Any]:
        return {
            "totalPairs": self.total_pairs,
            "lightPasses": self.light_passes,
            "darkPasses": self.dark_passes,
            "failures": [f.get_state() for f in self.failures],
        }


@dataclass(slots=True, frozen=True)
class AuditReport:
    pairs:   Tuple[AuditPairResult, ...]
    summary: AuditSummary

    def get_state(self) -> Dict[str, Any]:
        return {
            "pairs": [p.get_state() for p in self.pairs],
            "summary": self.summary.get_state(),
        }
