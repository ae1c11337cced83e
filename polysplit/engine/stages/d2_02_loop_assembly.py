"""D2.02 — Loop Assembler.

Greedy reassembly of the remaining open fragments into closed loops.

Each round starts from the fragment holding the leftmost vertex, which
lies on the outer boundary of some loop. From there two walks are made,
one always taking the rightmost continuation and one always taking the
leftmost. At a vertex visited more than twice only one of the two keeps
to a single region; the other wraps around territory that belongs to a
neighbouring loop, so the walk enclosing the smaller absolute area wins.
The winner's fragments leave the pool and the round repeats until the
pool is empty. Every round removes at least one fragment, so assembly
terminates.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from polysplit.engine.context import AssembledLoop, DecompositionContext, Fragment
from polysplit.engine.registry import Layer, stage
from polysplit.utils.geometry import (
    DEFAULT_EPS,
    Point,
    approx,
    matching_indices,
    signed_area,
    unwrap,
)
from polysplit.utils.math_helpers import turn_angle

logger = logging.getLogger(__name__)


@dataclass
class WalkResult:
    points: list[Point]
    remainder: list[Fragment]
    # False when no fragment continued the walk (dangling)
    complete: bool


def extreme_angle_fragment(
    seg: tuple[Point, Point],
    fragments: Sequence[Fragment],
    rightmost: bool = True,
    eps: float = DEFAULT_EPS,
) -> tuple[int, Fragment] | None:
    """Pick the continuation of ``seg`` with the smallest (or largest) turn.

    Fragments are tried forwards and, when their end touches the current
    point, reversed. Returns the pool index and the fragment oriented to
    start at ``seg[1]``, or None when nothing connects. Ties keep the
    earliest fragment.
    """
    (x0, y0), (x1, y1) = seg
    incoming = (x1 - x0, y1 - y0)

    best: tuple[float, int, Fragment] | None = None
    for i, frag in enumerate(fragments):
        if approx(frag.start, seg[1], eps):
            candidate = frag
        elif approx(frag.end, seg[1], eps):
            candidate = frag.reversed()
        else:
            continue

        (a0, b0), (a1, b1) = candidate.points[0], candidate.points[1]
        angle = turn_angle(incoming, (a1 - a0, b1 - b0))
        if best is None or (angle < best[0] if rightmost else angle > best[0]):
            best = (angle, i, candidate)

    if best is None:
        return None
    return best[1], best[2]


def walk_loop(
    fragments: Sequence[Fragment],
    start: int,
    rightmost: bool = True,
    eps: float = DEFAULT_EPS,
) -> WalkResult:
    """Grow one loop from ``fragments[start]`` by always turning one way."""
    first = fragments[start]
    pool = [frag for i, frag in enumerate(fragments) if i != start]
    path = list(first.points)
    if first.closed:
        return WalkResult(path, pool, complete=True)

    while True:
        choice = extreme_angle_fragment((path[-2], path[-1]), pool, rightmost, eps)
        if choice is None:
            return WalkResult(path, pool, complete=False)

        idx, found = choice
        del pool[idx]

        if found.closed:
            # Emit what we have; the closed piece goes back for a later round
            return WalkResult(path, [found] + pool, complete=True)

        hits = matching_indices(path[:-1], found.end, eps)
        if len(hits):
            # Loop closes on an earlier vertex; the lead-in goes back to the pool
            hit = int(hits[-1])
            head = path[: hit + 1]
            if len(head) > 1:
                pool.insert(0, Fragment.from_points(head, eps))
            return WalkResult(path[hit:-1] + list(found.points), pool, complete=True)

        path.extend(found.points[1:])


def assemble_fragments(fragments: Sequence[Fragment], eps: float = DEFAULT_EPS) -> list[AssembledLoop]:
    """Turn a fragment pool into loops: closed fragments first, assembled loops after."""
    loops = [
        AssembledLoop(points=tuple(unwrap(frag.points, eps)), complete=True, assembled=False)
        for frag in fragments
        if frag.closed
    ]
    pool = [frag for frag in fragments if not frag.closed]

    while pool:
        start = int(np.argmin([frag.min_x for frag in pool]))
        left = walk_loop(pool, start, rightmost=False, eps=eps)
        right = walk_loop(pool, start, rightmost=True, eps=eps)
        l_area = abs(signed_area(left.points))
        r_area = abs(signed_area(right.points))
        result = left if l_area < r_area else right

        poly = unwrap(result.points, eps)
        if not result.complete:
            logger.warning(
                "Dangling fragment chain of %d point(s) starting at (%.6g, %.6g); "
                "keeping it flagged incomplete",
                len(poly),
                poly[0][0],
                poly[0][1],
            )
        if len(poly) > 1:
            loops.append(AssembledLoop(points=tuple(poly), complete=result.complete))
        pool = result.remainder

    return loops


@stage(
    id="D2.02",
    layer=Layer.ASSEMBLY,
    dependencies=["D2.01"],
    description="Assemble open fragments into simple closed loops",
)
def loop_assembly(ctx: DecompositionContext) -> None:
    ctx.loops = assemble_fragments(ctx.stitched, ctx.eps)
    logger.debug(
        "Assembled %d loop(s) from %d fragment(s), %d dangling",
        len(ctx.loops),
        len(ctx.stitched),
        ctx.dangling_count,
    )
