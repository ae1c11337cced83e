"""D1.01 — Segment Intersector.

Pairwise test of every non-adjacent segment pair. Bounding boxes reject
most pairs before the 2x2 line system is solved. Each row i is solved
against all of its candidate partners j > i at once, so records come out
ordered by (i, j).

Parallel and collinear-overlapping segments make the system singular and
are skipped; overlapping collinear edges are never reported.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import ArrayLike

from polysplit.engine.context import DecompositionContext, Intersection
from polysplit.engine.registry import Layer, stage
from polysplit.utils.geometry import DEFAULT_EPS

logger = logging.getLogger(__name__)


def find_self_intersections(
    path: ArrayLike, closed: bool = True, eps: float = DEFAULT_EPS
) -> list[Intersection]:
    """Return every crossing between non-adjacent segments of a cleaned path.

    Segment i runs from ``path[i]`` to ``path[i+1]`` (wrapping for closed
    paths). A solution is accepted when both parameters fall in
    ``(eps, 1+eps]``; parameters are clamped to 1, so a crossing at a shared
    vertex is reported once, at the end of the earlier segment.
    """
    pts = np.asarray(path, dtype=np.float64).reshape(-1, 2)
    n = len(pts)
    nseg = n if closed else n - 1
    if nseg < 3:
        return []

    starts = pts[:nseg]
    ends = pts[(np.arange(nseg) + 1) % n]
    r = ends - starts
    lo = np.minimum(starts, ends) - eps
    hi = np.maximum(starts, ends) + eps

    found: list[Intersection] = []
    for i in range(nseg - 2):
        js = np.arange(i + 2, nseg)
        if closed and i == 0:
            # First and last segments share path[0]
            js = js[js != nseg - 1]
        if len(js) == 0:
            continue

        overlap = (
            (lo[js, 0] <= hi[i, 0])
            & (hi[js, 0] >= lo[i, 0])
            & (lo[js, 1] <= hi[i, 1])
            & (hi[js, 1] >= lo[i, 1])
        )
        js = js[overlap]
        if len(js) == 0:
            continue

        s = r[js]
        denom = r[i, 0] * s[:, 1] - r[i, 1] * s[:, 0]
        solvable = np.abs(denom) >= eps
        js, s, denom = js[solvable], s[solvable], denom[solvable]
        if len(js) == 0:
            continue

        q = starts[js] - starts[i]
        t = (q[:, 0] * s[:, 1] - q[:, 1] * s[:, 0]) / denom
        u = (q[:, 0] * r[i, 1] - q[:, 1] * r[i, 0]) / denom
        hit = (t > eps) & (t <= 1 + eps) & (u > eps) & (u <= 1 + eps)

        for j, tt, uu in zip(js[hit], t[hit], u[hit]):
            tt = 1.0 if tt >= 1 - eps else float(tt)
            uu = 1.0 if uu >= 1 - eps else float(uu)
            p = ends[i] if tt == 1.0 else starts[i] + tt * r[i]
            found.append(
                Intersection(
                    point=(float(p[0]), float(p[1])),
                    seg_a=i,
                    param_a=tt,
                    seg_b=int(j),
                    param_b=uu,
                )
            )

    return found


def is_path_simple(path: ArrayLike, closed: bool = True, eps: float = DEFAULT_EPS) -> bool:
    """True if no two non-adjacent segments of the path cross or touch."""
    return not find_self_intersections(path, closed=closed, eps=eps)


@stage(
    id="D1.01",
    layer=Layer.TOPOLOGY,
    dependencies=["D0.01"],
    description="Find crossings between non-adjacent segments",
)
def segment_intersection(ctx: DecompositionContext) -> None:
    ctx.intersections = find_self_intersections(ctx.path, closed=True, eps=ctx.eps)
    logger.debug(
        "Found %d intersection(s) across %d segments", len(ctx.intersections), len(ctx.path)
    )
