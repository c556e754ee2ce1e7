# -*- coding: utf-8 -*-
"""Shared fixtures: a Tailwind-style 11-stop set and a few generated ramps."""

import pytest

from tessera_ramp import generate_ramp
from tessera_structure import StopDefinition

TAILWIND_TARGETS = (
    (50, 0.985),
    (100, 0.93),
    (200, 0.87),
    (300, 0.80),
    (400, 0.71),
    (500, 0.62),
    (600, 0.53),
    (700, 0.45),
    (800, 0.37),
    (900, 0.27),
    (950, 0.17),
)


@pytest.fixture
def stops():
    return tuple(StopDefinition(i, str(i), l) for i, l in TAILWIND_TARGETS)


@pytest.fixture
def blue_ramp(stops):
    return generate_ramp("blue", "#3366cc", stops, "natural")


@pytest.fixture
def gray_ramp(stops):
    return generate_ramp("gray", "#808080", stops, "flat")
