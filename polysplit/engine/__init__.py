"""polysplit decomposition engine."""

from polysplit.engine.config import DecomposeConfig
from polysplit.engine.context import (
    AssembledLoop,
    Cut,
    DecompositionContext,
    Fragment,
    Intersection,
    Tag,
)
from polysplit.engine.pipeline import Pipeline, create_pipeline, decompose, decompose_path
from polysplit.engine.registry import Layer, get_registry, stage

__all__ = [
    "AssembledLoop",
    "Cut",
    "DecomposeConfig",
    "DecompositionContext",
    "Fragment",
    "Intersection",
    "Layer",
    "Pipeline",
    "Tag",
    "create_pipeline",
    "decompose",
    "decompose_path",
    "get_registry",
    "stage",
]
