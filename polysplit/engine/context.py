"""DecompositionContext — the state object flowing through all stages.

Each stage reads the output of earlier stages and stores fresh collections
of its own; nothing written by one stage is mutated by a later one.
"""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray
from shapely.geometry import Polygon

from polysplit.engine.config import DecomposeConfig
from polysplit.utils.geometry import DEFAULT_EPS, Point, approx, signed_area, unwrap


class Tag(str, enum.Enum):
    OUTER = "O"
    INNER = "I"


@dataclass(frozen=True)
class Intersection:
    """Crossing of two non-adjacent segments of the same path."""

    point: Point
    seg_a: int
    param_a: float
    seg_b: int
    param_b: float


@dataclass(frozen=True)
class Cut:
    """Cut-list entry: a position along the path given as (segment, parameter)."""

    seg: int
    param: float
    point: Point


@dataclass(frozen=True)
class Fragment:
    """Contiguous arc of the path between two consecutive cuts."""

    points: tuple[Point, ...]
    closed: bool = False

    @classmethod
    def from_points(cls, points: Sequence[Sequence[float]], eps: float = DEFAULT_EPS) -> Fragment:
        pts = tuple((float(p[0]), float(p[1])) for p in points)
        closed = len(pts) > 2 and approx(pts[0], pts[-1], eps)
        return cls(points=pts, closed=closed)

    @property
    def start(self) -> Point:
        return self.points[0]

    @property
    def end(self) -> Point:
        return self.points[-1]

    @property
    def min_x(self) -> float:
        return min(p[0] for p in self.points)

    def reversed(self) -> Fragment:
        return Fragment(points=self.points[::-1], closed=self.closed)

    def __len__(self) -> int:
        return len(self.points)


@dataclass(frozen=True)
class AssembledLoop:
    """One output polygon, unwrapped (no repeated closing point)."""

    points: tuple[Point, ...]
    # False when the walk ran out of continuations (dangling result)
    complete: bool = True
    # False when the loop was a fragment that came out of the split already closed
    assembled: bool = True

    @property
    def area(self) -> float:
        return signed_area(self.points)


@dataclass
class DecompositionContext:
    """Shared state flowing through the entire pipeline."""

    # Input as given by the caller
    path_raw: NDArray[np.float64] = field(default_factory=lambda: np.empty((0, 2)))
    config: DecomposeConfig = field(default_factory=DecomposeConfig)

    # --- D0: cleaned, implicitly closed path ---
    path: NDArray[np.float64] = field(default_factory=lambda: np.empty((0, 2)))

    # --- D1: topology ---
    intersections: list[Intersection] = field(default_factory=list)
    tagged: list[tuple[Tag, Fragment]] = field(default_factory=list)

    # --- D2: assembly ---
    stitched: list[Fragment] = field(default_factory=list)
    loops: list[AssembledLoop] = field(default_factory=list)

    # --- Pipeline metadata ---
    completed_stages: set[str] = field(default_factory=set)
    skipped_stages: set[str] = field(default_factory=set)
    errors: dict[str, str] = field(default_factory=dict)
    timings_ms: dict[str, float] = field(default_factory=dict)

    @property
    def eps(self) -> float:
        return self.config.eps

    @property
    def outer_fragments(self) -> list[Fragment]:
        return [frag for tag, frag in self.tagged if tag is Tag.OUTER]

    @property
    def closed_fragments(self) -> list[Fragment]:
        return [frag for frag in self.outer_fragments if frag.closed]

    @property
    def open_fragments(self) -> list[Fragment]:
        return [frag for frag in self.outer_fragments if not frag.closed]

    @property
    def is_simple(self) -> bool:
        return len(self.path) >= 2 and not self.intersections

    @property
    def polygons(self) -> list[list[Point]]:
        """Completed fragments first, assembled loops after."""
        out = [unwrap(frag.points, self.eps) for frag in self.closed_fragments]
        out.extend(list(loop.points) for loop in self.loops)
        return out

    @property
    def dangling_count(self) -> int:
        return sum(1 for loop in self.loops if not loop.complete)

    @property
    def total_area(self) -> float:
        return float(sum(abs(signed_area(poly)) for poly in self.polygons))

    @property
    def shapes(self) -> list[Polygon]:
        """Output polygons as shapely geometry, skipping those with < 3 vertices."""
        return [Polygon(poly) for poly in self.polygons if len(poly) >= 3]
