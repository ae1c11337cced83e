"""Shared test fixtures."""

from __future__ import annotations

import math

import pytest


def star_polygon(points: int, step: int, radius: float = 1.0) -> list[tuple[float, float]]:
    """Regular star polygon {points/step}, first vertex straight up."""
    out = []
    for k in range(points):
        idx = (k * step) % points
        ang = math.radians(90.0 + 360.0 * idx / points)
        out.append((radius * math.cos(ang), radius * math.sin(ang)))
    return out


# Scenario A: hexagon crossing itself twice (bowtie with a middle diamond)
BOWTIE_HEXAGON = [(-100, 100), (0, -50), (100, 100), (100, -100), (0, 50), (-100, -100)]

# Scenario B
UNIT_SQUARE = [(0, 0), (1, 0), (1, 1), (0, 1)]

# Scenario C: two triangles touching at the origin
FIGURE_EIGHT = [(0, 0), (-1, 1), (-1, -1), (0, 0), (1, 1), (1, -1)]

# Scenario D: unit square with a near-duplicate vertex
SQUARE_WITH_DUPLICATE = [(0, 0), (1, 0), (1, 1e-12), (1, 1), (0, 1), (0, 0)]

PENTAGRAM = star_polygon(5, 2)

# Radius of the inner pentagon of a unit pentagram
PENTAGRAM_INNER_RADIUS = math.cos(math.radians(72)) / math.cos(math.radians(36))
PENTAGRAM_AREA = 5 * PENTAGRAM_INNER_RADIUS * math.sin(math.radians(36))
PENTAGON_AREA = 2.5 * PENTAGRAM_INNER_RADIUS**2 * math.sin(math.radians(72))


@pytest.fixture
def bowtie() -> list[tuple[float, float]]:
    return list(BOWTIE_HEXAGON)


@pytest.fixture
def square() -> list[tuple[float, float]]:
    return list(UNIT_SQUARE)


@pytest.fixture
def figure_eight() -> list[tuple[float, float]]:
    return list(FIGURE_EIGHT)


@pytest.fixture
def pentagram() -> list[tuple[float, float]]:
    return list(PENTAGRAM)
