"""Tests for the pipeline orchestrator."""

import numpy as np
import pytest

from polysplit.engine.config import DecomposeConfig
from polysplit.engine.context import DecompositionContext
from polysplit.engine.pipeline import Pipeline, create_pipeline, decompose_path
from polysplit.engine.registry import Layer, StageRegistry, StageSpec, get_registry
from polysplit.errors import DecompositionError
from tests.conftest import BOWTIE_HEXAGON, UNIT_SQUARE


def test_pipeline_runs_stages_in_order():
    reg = StageRegistry()
    results = []

    def s1(ctx: DecompositionContext) -> None:
        results.append("s1")

    def s2(ctx: DecompositionContext) -> None:
        results.append("s2")

    reg.register(StageSpec(id="D0.02", layer=Layer.PREPARATION, fn=s2, dependencies=["D0.01"]))
    reg.register(StageSpec(id="D0.01", layer=Layer.PREPARATION, fn=s1))

    ctx = Pipeline(registry=reg).run(DecompositionContext())

    assert results == ["s1", "s2"]
    assert ctx.completed_stages == {"D0.01", "D0.02"}
    assert set(ctx.timings_ms) == {"D0.01", "D0.02"}


def test_pipeline_stops_at_failing_stage():
    reg = StageRegistry()
    ran = []

    def fail(ctx: DecompositionContext) -> None:
        raise ValueError("test error")

    def after(ctx: DecompositionContext) -> None:
        ran.append("after")

    reg.register(StageSpec(id="D0.01", layer=Layer.PREPARATION, fn=fail))
    reg.register(StageSpec(id="D1.01", layer=Layer.TOPOLOGY, fn=after, dependencies=["D0.01"]))

    ctx = Pipeline(registry=reg).run(DecompositionContext())

    assert "test error" in ctx.errors["D0.01"]
    assert ran == []
    assert ctx.completed_stages == set()


def test_simple_path_skips_assembly():
    pipeline = create_pipeline()
    ctx = DecompositionContext(path_raw=np.array(UNIT_SQUARE, dtype=float))
    pipeline.run(ctx)
    assert ctx.skipped_stages == {"D2.01", "D2.02"}
    assert ctx.loops == []
    assert ctx.is_simple


def test_self_crossing_path_runs_every_stage():
    ctx = decompose_path(BOWTIE_HEXAGON)
    assert ctx.skipped_stages == set()
    assert ctx.completed_stages == {"D0.01", "D1.01", "D1.02", "D2.01", "D2.02"}
    assert not ctx.is_simple


def test_run_layer_only_touches_that_layer():
    pipeline = create_pipeline()
    ctx = DecompositionContext(path_raw=np.array(BOWTIE_HEXAGON, dtype=float))
    pipeline.run_layer(ctx, Layer.PREPARATION)
    pipeline.run_layer(ctx, Layer.TOPOLOGY)
    assert len(ctx.intersections) == 2
    assert len(ctx.tagged) == 5
    assert ctx.stitched == []
    assert ctx.loops == []


def test_stage_failure_raises_decomposition_error(monkeypatch):
    create_pipeline()
    spec = get_registry().get("D1.01")

    def boom(ctx: DecompositionContext) -> None:
        raise RuntimeError("kaboom")

    monkeypatch.setattr(spec, "fn", boom)
    with pytest.raises(DecompositionError) as exc:
        decompose_path(BOWTIE_HEXAGON)
    assert exc.value.stage_id == "D1.01"
    assert "kaboom" in str(exc.value)


def test_config_reaches_context():
    config = DecomposeConfig(eps=1e-6, fill_rule="evenodd")
    ctx = decompose_path(UNIT_SQUARE, config)
    assert ctx.config is config
    assert ctx.eps == 1e-6
