# -*- coding: utf-8 -*-
"""
Tessera: Setting perceptual color into accessible systems
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Token Resolver
==============
Maps semantic token definitions to concrete light/dark colors using a set
of generated ramps.

Resolution is all-or-nothing per call: the first bad reference raises and
no partial result is returned.  Callers that want one bad token not to
block the others resolve entry by entry.
"""

from typing import Dict, Iterable, Sequence, Tuple

from tessera_colorengine import to_color
from tessera_structure import (
    Color,
    LiteralSource,
    Ramp,
    RampSource,
    ReferenceNotFoundError,
    ResolvedToken,
    TokenDefinition,
    TokenSource,
)

__all__ = [
    "LITERAL_LABEL",
    "ramp_source",
    "literal_source",
    "resolve_source",
    "resolve_tokens",
]

LITERAL_LABEL = "literal"


def ramp_source(ramp: str, stop: int) -> RampSource:
    return RampSource(ramp=ramp, stop=stop)


def literal_source(value: str) -> LiteralSource:
    return LiteralSource(value=value)


def _index_ramps(ramps: Iterable[Ramp]) -> Dict[str, Ramp]:
    # First ramp wins on duplicate names, matching lookup-by-scan.
    index: Dict[str, Ramp] = {}
    for ramp in ramps:
        index.setdefault(ramp.name, ramp)
    return index


def resolve_source(source: TokenSource, ramps: Dict[str, Ramp]) -> Tuple[Color, str]:
    """
    Resolve one source to ``(color, label)``.

    Labels are ``"{ramp}-{stop}"`` for ramp sources and ``"literal"``
    otherwise.

    Raises:
        ReferenceNotFoundError: Unknown ramp name, or stop id missing from
            the named ramp.
        InvalidColorError: Unparseable literal.
        TypeError: ``source`` is not a TokenSource.
    """
    if isinstance(source, RampSource):
        ramp = ramps.get(source.ramp)
        if ramp is None:
            raise ReferenceNotFoundError("ramp", source.ramp, ramps.keys())
        # Ramp.stop raises StopNotFoundError listing the ramp's stop ids.
        stop = ramp.stop(source.stop)
        return stop.color, f"{source.ramp}-{source.stop}"
    elif isinstance(source, LiteralSource):
        return to_color(source.value), LITERAL_LABEL
    else:
        raise TypeError(f"Unsupported token source type: {type(source).__name__}")


def resolve_tokens(
    token_defs: Sequence[TokenDefinition],
    ramps: Iterable[Ramp],
) -> Tuple[ResolvedToken, ...]:
    """Resolve the light and dark source of every token independently."""
    index = _index_ramps(ramps)
    resolved = []
    for token in token_defs:
        light, light_label = resolve_source(token.light, index)
        dark, dark_label = resolve_source(token.dark, index)
        resolved.append(ResolvedToken(
            name=token.name,
            light=light,
            dark=dark,
            light_source=light_label,
            dark_source=dark_label,
        ))
    return tuple(resolved)
