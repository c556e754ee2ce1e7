# -*- coding: utf-8 -*-
"""
Tessera: Setting perceptual color into accessible systems
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Raw JSON export of ramps, resolved tokens and audit reports.
"""

import json
from typing import Sequence

from tessera_structure import AuditReport, Ramp, ResolvedToken

__all__ = ["export_ramp_json", "export_tokens_json", "export_audit_json"]

_INDENT = 2


def export_ramp_json(ramp: Ramp) -> str:
    return json.dumps(ramp.get_state(), indent=_INDENT)


def export_tokens_json(tokens: Sequence[ResolvedToken]) -> str:
    return json.dumps([t.get_state() for t in tokens], indent=_INDENT)


def export_audit_json(report: AuditReport) -> str:
    return json.dumps(report.get_state(), indent=_INDENT)
