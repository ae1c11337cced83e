"""Pipeline orchestrator — runs stages in dependency order with adaptive gating."""

from __future__ import annotations

import importlib
import logging
import pkgutil
import time

from numpy.typing import ArrayLike

from polysplit.engine.config import DecomposeConfig
from polysplit.engine.context import DecompositionContext
from polysplit.engine.registry import Layer, StageRegistry, StageSpec, get_registry
from polysplit.errors import DecompositionError
from polysplit.utils.geometry import Point, as_path_array

logger = logging.getLogger(__name__)

_STAGES_PACKAGE = "polysplit.engine.stages"


class Pipeline:
    """Orchestrates the decomposition stages."""

    def __init__(
        self,
        registry: StageRegistry | None = None,
        config: DecomposeConfig | None = None,
    ) -> None:
        self.registry = registry or get_registry()
        self.config = config or DecomposeConfig()

    def run(self, ctx: DecompositionContext) -> DecompositionContext:
        """Run every registered stage on the context, stopping at the first failure."""
        start = time.perf_counter()
        ordered = self.registry.resolve_order()
        logger.info("Pipeline: %d stages queued", len(ordered))

        for spec in ordered:
            if spec.id in self._adaptive_gate(ctx):
                ctx.skipped_stages.add(spec.id)
                logger.debug("  %s skipped", spec.label)
                continue
            if not self._run_stage(ctx, spec):
                break

        total = (time.perf_counter() - start) * 1000
        logger.info(
            "Pipeline complete: %d/%d stages in %.1fms (%d skipped)",
            len(ctx.completed_stages),
            len(ordered),
            total,
            len(ctx.skipped_stages),
        )
        return ctx

    def run_layer(self, ctx: DecompositionContext, layer: Layer) -> DecompositionContext:
        """Run only the stages in a specific layer."""
        for spec in self.registry.get_layer(layer):
            if not self._run_stage(ctx, spec):
                break
        return ctx

    def _run_stage(self, ctx: DecompositionContext, spec: StageSpec) -> bool:
        t0 = time.perf_counter()
        try:
            spec.fn(ctx)
        except Exception as e:
            ctx.errors[spec.id] = str(e)
            logger.warning("  %s FAILED: %s", spec.label, e)
            return False
        elapsed = (time.perf_counter() - t0) * 1000
        ctx.completed_stages.add(spec.id)
        ctx.timings_ms[spec.id] = elapsed
        logger.debug("  %s completed in %.2fms", spec.label, elapsed)
        return True

    def _adaptive_gate(self, ctx: DecompositionContext) -> set[str]:
        """Determine which stages to skip given the state reached so far.

        Once the split has run, a path without open outer fragments (simple
        input, or crossings that only produced closed pieces) needs no
        stitching or assembly.
        """
        skip: set[str] = set()
        if "D1.02" in ctx.completed_stages and not ctx.open_fragments:
            skip.update({
                "D2.01",  # Fragment stitching
                "D2.02",  # Loop assembly
            })
        return skip


def register_stages() -> None:
    """Import all stage modules so @stage decorators fire."""
    package = importlib.import_module(_STAGES_PACKAGE)
    for _, module_name, _ in pkgutil.iter_modules(package.__path__):
        importlib.import_module(f"{_STAGES_PACKAGE}.{module_name}")


def create_pipeline(config: DecomposeConfig | None = None) -> Pipeline:
    """Factory function for creating a pipeline over the registered stages."""
    register_stages()
    return Pipeline(config=config)


def decompose_path(path: ArrayLike, config: DecomposeConfig | None = None) -> DecompositionContext:
    """Decompose a closed, possibly self-crossing path and return the full context.

    Raises InvalidPathError for malformed input before any stage runs, and
    DecompositionError if a stage fails.
    """
    raw = as_path_array(path)
    pipeline = create_pipeline(config)
    ctx = DecompositionContext(path_raw=raw, config=pipeline.config)
    pipeline.run(ctx)

    if ctx.errors:
        stage_id, message = next(iter(ctx.errors.items()))
        raise DecompositionError(stage_id, message)
    return ctx


def decompose(
    path: ArrayLike,
    eps: float = 1e-9,
    *,
    config: DecomposeConfig | None = None,
) -> list[list[Point]]:
    """Split a self-crossing closed path into simple polygons.

    ``config`` takes precedence over ``eps`` when both are given. Completed
    fragments come first, assembled loops after; callers should rely only
    on set membership and area.
    """
    config = config or DecomposeConfig(eps=eps)
    return decompose_path(path, config).polygons
