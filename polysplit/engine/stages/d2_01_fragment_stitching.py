"""D2.01 — Fragment Stitcher.

Cheap forward merge of open fragments that meet at an unambiguous point,
i.e. a point where exactly two fragment endpoints lie: this fragment's end
and the start of one other fragment. Junctions with more endpoints, and
joins that would need a reversal, are left for loop assembly.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from polysplit.engine.context import DecompositionContext, Fragment
from polysplit.engine.registry import Layer, stage
from polysplit.utils.geometry import DEFAULT_EPS, Point, approx, matching_indices

logger = logging.getLogger(__name__)


def stitch_fragments(fragments: Sequence[Fragment], eps: float = DEFAULT_EPS) -> list[Fragment]:
    """Merge chains of open fragments that have exactly one way to continue.

    A tail is extended only when it and the start of one other fragment are
    the sole endpoints at that point. If a further fragment also ends there
    the join could be walked backwards as well, so it is left to loop
    assembly.

    Closed input fragments come first, untouched; merged chains follow in
    the order their first piece appeared in the input.
    """
    pending = [frag for frag in fragments if not frag.closed]
    done: list[Fragment] = [frag for frag in fragments if frag.closed]
    if not pending:
        return done

    endpoints = np.array([frag.start for frag in pending] + [frag.end for frag in pending])

    while pending:
        current: list[Point] = list(pending.pop(0).points)
        while not approx(current[0], current[-1], eps):
            tail = current[-1]
            if len(matching_indices(endpoints, tail, eps)) != 2:
                break
            starts_here = [i for i, frag in enumerate(pending) if approx(frag.start, tail, eps)]
            if len(starts_here) != 1:
                break
            current.extend(pending.pop(starts_here[0]).points[1:])
        done.append(Fragment.from_points(current, eps))

    return done


@stage(
    id="D2.01",
    layer=Layer.ASSEMBLY,
    dependencies=["D1.02"],
    description="Merge open fragments joined at unambiguous points",
)
def fragment_stitching(ctx: DecompositionContext) -> None:
    open_frags = ctx.open_fragments
    ctx.stitched = stitch_fragments(open_frags, ctx.eps)
    logger.debug(
        "Stitched %d open fragment(s) into %d (%d closed)",
        len(open_frags),
        len(ctx.stitched),
        sum(1 for frag in ctx.stitched if frag.closed),
    )
