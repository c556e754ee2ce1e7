# -*- coding: utf-8 -*-
"""
Tessera: Setting perceptual color into accessible systems
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Audit Engine
============
Checks foreground/background token pairs against WCAG AA thresholds in
both light and dark mode.  APCA Lc is carried on every result but never
affects pass/fail.
"""

import warnings
from typing import Dict, Sequence

from tessera_contrast import check_contrast, passes_threshold
from tessera_structure import (
    AuditPairResult,
    AuditReport,
    AuditSummary,
    ReferenceNotFoundError,
    ResolvedToken,
    TesseraWarning,
    TokenPairDefinition,
)

__all__ = ["audit_pair", "audit_token_pairs"]


def _lookup(tokens: Dict[str, ResolvedToken], name: str) -> ResolvedToken:
    try:
        return tokens[name]
    except KeyError:
        raise ReferenceNotFoundError(
            "token", name, tokens.keys(), context="resolved tokens"
        ) from None


def audit_pair(fg: ResolvedToken, bg: ResolvedToken, pair: TokenPairDefinition) -> AuditPairResult:
    """Contrast of one pair in both modes, judged by the pair's threshold."""
    light = check_contrast(fg.light.oklch, bg.light.oklch)
    dark = check_contrast(fg.dark.oklch, bg.dark.oklch)
    return AuditPairResult(
        pair=pair,
        light=light,
        dark=dark,
        light_passes=passes_threshold(light, pair.threshold),
        dark_passes=passes_threshold(dark, pair.threshold),
    )


def audit_token_pairs(
    resolved: Sequence[ResolvedToken],
    pair_defs: Sequence[TokenPairDefinition],
) -> AuditReport:
    """
    Audit every pair and summarise.

    The summary counts light-mode and dark-mode passes separately and lists
    every pair that fails in either mode, in input order.

    Raises:
        ReferenceNotFoundError: A pair names a token that is not among
            ``resolved``; the message lists the known token names.
    """
    tokens: Dict[str, ResolvedToken] = {}
    for token in resolved:
        tokens.setdefault(token.name, token)

    results = []
    for pair in pair_defs:
        fg = _lookup(tokens, pair.foreground)
        bg = _lookup(tokens, pair.background)
        if pair.foreground == pair.background:
            warnings.warn(
                f"Pair {pair.name!r} uses token {pair.foreground!r} as both "
                f"foreground and background.",
                TesseraWarning,
                stacklevel=2,
            )
        results.append(audit_pair(fg, bg, pair))

    pairs = tuple(results)
    summary = AuditSummary(
        total_pairs=len(pairs),
        light_passes=sum(1 for r in pairs if r.light_passes),
        dark_passes=sum(1 for r in pairs if r.dark_passes),
        failures=tuple(r for r in pairs if not r.passes),
    )
    return AuditReport(pairs=pairs, summary=summary)
