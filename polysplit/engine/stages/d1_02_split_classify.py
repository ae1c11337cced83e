"""D1.02 — Path Splitter / Classifier.

Cut the path at every intersection parameter, then tag each fragment by
probing just off both sides of its first edge. A fragment with the
path's interior on both sides separates two inside regions and is not
part of any output boundary (Inner); everything else is Outer.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from polysplit.engine.config import DecomposeConfig
from polysplit.engine.context import Cut, DecompositionContext, Fragment, Intersection, Tag
from polysplit.engine.registry import Layer, stage
from polysplit.engine.stages.d1_01_segment_intersection import find_self_intersections
from polysplit.utils.geometry import (
    DEFAULT_EPS,
    Point,
    characteristic_scale,
    cleanup_path,
    dedupe_points,
    line_normal,
    point_in_polygon,
)

logger = logging.getLogger(__name__)


def _point_at(pts: NDArray[np.float64], seg: int, param: float) -> Point:
    n = len(pts)
    a = pts[seg % n]
    b = pts[(seg + 1) % n]
    if param == 0.0:
        p = a
    elif param == 1.0:
        p = b
    else:
        p = a + param * (b - a)
    return (float(p[0]), float(p[1]))


def build_cut_list(
    path: ArrayLike,
    intersections: Sequence[Intersection],
    closed: bool = True,
    eps: float = DEFAULT_EPS,
) -> list[Cut]:
    """Sorted, deduplicated cut positions bracketed by the path's own ends."""
    pts = np.asarray(path, dtype=np.float64).reshape(-1, 2)
    last_seg = len(pts) - 1 if closed else len(pts) - 2

    inner: list[Cut] = []
    for x in intersections:
        inner.append(Cut(seg=x.seg_a, param=x.param_a, point=x.point))
        inner.append(Cut(seg=x.seg_b, param=x.param_b, point=x.point))
    inner.sort(key=lambda c: (c.seg, c.param))

    cuts = [Cut(seg=0, param=0.0, point=_point_at(pts, 0, 0.0))]
    cuts.extend(inner)
    cuts.append(Cut(seg=last_seg, param=1.0, point=_point_at(pts, last_seg, 1.0)))

    deduped = [cuts[0]]
    for cut in cuts[1:]:
        prev = deduped[-1]
        if cut.seg == prev.seg and abs(cut.param - prev.param) <= eps:
            continue
        deduped.append(cut)
    return deduped


def split_at_cuts(path: ArrayLike, cuts: Sequence[Cut], eps: float = DEFAULT_EPS) -> list[Fragment]:
    """Slice the path between each consecutive pair of cuts."""
    pts = np.asarray(path, dtype=np.float64).reshape(-1, 2)
    n = len(pts)

    fragments: list[Fragment] = []
    for a, b in zip(cuts, cuts[1:]):
        section: list[Point] = [a.point]
        section.extend((float(pts[k % n][0]), float(pts[k % n][1])) for k in range(a.seg + 1, b.seg + 1))
        section.append(b.point)
        section = dedupe_points(section, eps)
        if len(section) < 2:
            continue
        fragments.append(Fragment.from_points(section, eps))
    return fragments


def split_path_at_self_crossings(
    path: ArrayLike, closed: bool = True, eps: float = DEFAULT_EPS
) -> list[Fragment]:
    """Cut a path into the arcs between its self-crossings."""
    pts = cleanup_path(path, closed=closed, eps=eps)
    if len(pts) < 2:
        return []
    intersections = find_self_intersections(pts, closed=closed, eps=eps)
    return split_at_cuts(pts, build_cut_list(pts, intersections, closed=closed, eps=eps), eps)


def classify_fragment(
    fragment: Fragment,
    path: ArrayLike,
    config: DecomposeConfig,
    scale: float | None = None,
) -> Tag:
    """Inner iff probes on both sides of the first edge are strictly inside."""
    if scale is None:
        scale = characteristic_scale(path)
    (x0, y0), (x1, y1) = fragment.points[0], fragment.points[1]
    nx, ny = line_normal((x0, y0), (x1, y1))
    d = config.probe_fraction * scale
    mx = (x0 + x1) / 2
    my = (y0 + y1) / 2

    probes = ((mx + nx * d, my + ny * d), (mx - nx * d, my - ny * d))
    inside = [
        point_in_polygon(p, path, nonzero=config.nonzero, eps=config.eps) == 1 for p in probes
    ]
    return Tag.INNER if all(inside) else Tag.OUTER


def tag_fragments(
    path: ArrayLike, fragments: Sequence[Fragment], config: DecomposeConfig
) -> list[tuple[Tag, Fragment]]:
    scale = characteristic_scale(path)
    return [(classify_fragment(frag, path, config, scale), frag) for frag in fragments]


def tag_self_crossing_subpaths(
    path: ArrayLike, config: DecomposeConfig | None = None
) -> list[tuple[Tag, Fragment]]:
    """Split a closed path at its self-crossings and tag every fragment."""
    config = config or DecomposeConfig()
    pts = cleanup_path(path, closed=True, eps=config.eps)
    if len(pts) < 2:
        return []
    return tag_fragments(pts, split_path_at_self_crossings(pts, closed=True, eps=config.eps), config)


@stage(
    id="D1.02",
    layer=Layer.TOPOLOGY,
    dependencies=["D1.01"],
    description="Split the path at crossings and tag fragments Inner/Outer",
)
def split_classify(ctx: DecompositionContext) -> None:
    if len(ctx.path) < 2:
        ctx.tagged = []
        return

    cuts = build_cut_list(ctx.path, ctx.intersections, closed=True, eps=ctx.eps)
    fragments = split_at_cuts(ctx.path, cuts, ctx.eps)
    ctx.tagged = tag_fragments(ctx.path, fragments, ctx.config)

    inner = sum(1 for tag, _ in ctx.tagged if tag is Tag.INNER)
    logger.debug(
        "Split into %d fragment(s) at %d cut(s): %d outer, %d inner dropped",
        len(fragments),
        len(cuts),
        len(fragments) - inner,
        inner,
    )
