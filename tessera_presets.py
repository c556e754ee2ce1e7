# -*- coding: utf-8 -*-
"""
Tessera: Setting perceptual color into accessible systems
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Presets
=======
A preset bundles the read-only schema a design system is built on: its
stop definitions, token names, the pairs to audit and a default token
mapping.  The catalog of presets lives outside Tessera; this module only
validates them and loads them from plain data.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from tessera_structure import StopDefinition, TokenDefinition, TokenPairDefinition

__all__ = ["TokenSlot", "Preset", "validate_preset", "get_stops", "preset_from_state"]


@dataclass(slots=True, frozen=True)
class TokenSlot:
    """A token name the preset expects, without a color mapping."""
    name:        str
    description: Optional[str] = None

    def get_state(self) -> Dict[str, Any]:
        state: Dict[str, Any] = {"name": self.name}
        if self.description is not None:
            state["description"] = self.description
        return state


@dataclass(slots=True, frozen=True)
class Preset:
    name:            str
    stops:           Tuple[StopDefinition, ...]
    tokens:          Tuple[TokenSlot, ...]
    pairs:           Tuple[TokenPairDefinition, ...] = ()
    default_mapping: Tuple[TokenDefinition, ...] = ()
    description:     Optional[str] = None

    def get_state(self) -> Dict[str, Any]:
        state: Dict[str, Any] = {"name": self.name}
        if self.description is not None:
            state["description"] = self.description
        state["stops"] = [s.get_state() for s in self.stops]
        state["tokenSchema"] = {
            "tokens": [t.get_state() for t in self.tokens],
            "pairs": [p.get_state() for p in self.pairs],
            "defaultMapping": [d.get_state() for d in self.default_mapping],
        }
        return state


def validate_preset(preset: Preset) -> None:
    """
    Raise ValueError describing the first structural problem found.

    Checks: a name, at least one stop and one token, unique stop ids,
    lightness targets strictly descending inside [0, 1], and pairs and
    default mappings that only name schema tokens.
    """
    if not preset.name:
        raise ValueError("Preset must have a name")
    if not preset.stops:
        raise ValueError("Preset must define at least one stop")
    if not preset.tokens:
        raise ValueError("Preset must define at least one token")

    ids = [s.id for s in preset.stops]
    if len(set(ids)) != len(ids):
        raise ValueError(f"Preset {preset.name!r} has duplicate stop ids: {ids}")

    prev: Optional[StopDefinition] = None
    for stop in preset.stops:
        if not 0.0 <= stop.lightness <= 1.0:
            raise ValueError(
                f"Stop {stop.id} lightness {stop.lightness} is outside [0, 1]"
            )
        if prev is not None and stop.lightness >= prev.lightness:
            raise ValueError(
                f"Stop lightness must strictly decrease: stop {stop.id} "
                f"({stop.lightness}) follows stop {prev.id} ({prev.lightness})"
            )
        prev = stop

    names = {t.name for t in preset.tokens}
    for pair in preset.pairs:
        for role, ref in (("foreground", pair.foreground), ("background", pair.background)):
            if ref not in names:
                raise ValueError(
                    f"Pair {pair.name!r} {role} token {ref!r} is not in the token schema"
                )
    for mapping in preset.default_mapping:
        if mapping.name not in names:
            raise ValueError(
                f"Default mapping for {mapping.name!r} does not match a schema token"
            )


def get_stops(preset: Preset) -> Tuple[StopDefinition, ...]:
    return preset.stops


def preset_from_state(state: Mapping[str, Any]) -> Preset:
    """
    Build a Preset from its JSON-shaped dict and validate it.

    Accepts the ``tokenSchema`` nesting produced by ``Preset.get_state``.
    """
    schema = state.get("tokenSchema", {})
    preset = Preset(
        name=str(state.get("name", "")),
        description=state.get("description"),
        stops=tuple(StopDefinition.from_state(s) for s in state.get("stops", ())),
        tokens=tuple(
            TokenSlot(name=str(t["name"]), description=t.get("description"))
            for t in schema.get("tokens", ())
        ),
        pairs=tuple(TokenPairDefinition.from_state(p) for p in schema.get("pairs", ())),
        default_mapping=tuple(
            TokenDefinition.from_state(d) for d in schema.get("defaultMapping", ())
        ),
    )
    validate_preset(preset)
    return preset
