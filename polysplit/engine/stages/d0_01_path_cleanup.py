"""D0.01 — Path Cleanup.

Remove zero-length edges (consecutive points within eps) and an explicit
closing point. Everything downstream works on the cleaned, implicitly
closed path.
"""

from __future__ import annotations

import logging

from polysplit.engine.context import DecompositionContext
from polysplit.engine.registry import Layer, stage
from polysplit.utils.geometry import cleanup_path

logger = logging.getLogger(__name__)


@stage(
    id="D0.01",
    layer=Layer.PREPARATION,
    description="Remove duplicate consecutive points and the closing point",
)
def path_cleanup(ctx: DecompositionContext) -> None:
    ctx.path = cleanup_path(ctx.path_raw, closed=True, eps=ctx.eps)

    removed = len(ctx.path_raw) - len(ctx.path)
    if removed:
        logger.debug("Cleanup removed %d duplicate point(s)", removed)
    if len(ctx.path) < 2:
        logger.debug("Path collapsed to %d point(s); nothing to decompose", len(ctx.path))
