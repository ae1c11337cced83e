"""Stage registry.

Each module under ``polysplit.engine.stages`` contributes one function
through the ``@stage`` decorator:

    @stage(id="D1.01", layer=Layer.TOPOLOGY, dependencies=["D0.01"])
    def segment_intersection(ctx: DecompositionContext) -> None:
        ...

The registry hands the pipeline a run order in which every stage follows
the stages whose context fields it reads.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from polysplit.engine.context import DecompositionContext

logger = logging.getLogger(__name__)

StageFn = Callable[["DecompositionContext"], None]


class Layer(enum.IntEnum):
    PREPARATION = 0
    TOPOLOGY = 1
    ASSEMBLY = 2


@dataclass
class StageSpec:
    id: str
    layer: Layer
    fn: StageFn
    dependencies: list[str] = field(default_factory=list)
    # Shown in pipeline logs next to the stage ID
    description: str = ""

    @property
    def label(self) -> str:
        return f"{self.id} ({self.description})" if self.description else self.id


class StageRegistry:
    """Stages keyed by ID."""

    def __init__(self) -> None:
        self._stages: dict[str, StageSpec] = {}

    def register(self, spec: StageSpec) -> None:
        existing = self._stages.get(spec.id)
        if existing is not None:
            raise ValueError(
                f"Duplicate stage ID: {spec.id} (already bound to {existing.fn.__qualname__})"
            )
        self._stages[spec.id] = spec
        logger.debug("Registered %s in layer %s", spec.label, spec.layer.name)

    def get(self, stage_id: str) -> StageSpec:
        return self._stages[stage_id]

    def get_layer(self, layer: Layer) -> list[StageSpec]:
        return [spec for spec in self.resolve_order() if spec.layer == layer]

    def resolve_order(self) -> list[StageSpec]:
        """Depth-first ordering: dependencies first, otherwise by (layer, id).

        Raises ValueError for a dependency on an unregistered stage or a
        dependency cycle.
        """
        ordered: list[StageSpec] = []
        placed: set[str] = set()

        def visit(spec: StageSpec, trail: list[str]) -> None:
            if spec.id in placed:
                return
            if spec.id in trail:
                cycle = trail[trail.index(spec.id):] + [spec.id]
                raise ValueError(f"Circular dependency detected: {' -> '.join(cycle)}")
            for dep in spec.dependencies:
                if dep not in self._stages:
                    raise ValueError(f"Stage {spec.id} depends on unregistered stage {dep}")
                visit(self._stages[dep], trail + [spec.id])
            placed.add(spec.id)
            ordered.append(spec)

        for spec in sorted(self._stages.values(), key=lambda s: (s.layer, s.id)):
            visit(spec, [])
        return ordered

    @property
    def count(self) -> int:
        return len(self._stages)


_registry = StageRegistry()


def get_registry() -> StageRegistry:
    return _registry


def stage(
    *,
    id: str,
    layer: Layer,
    dependencies: list[str] | None = None,
    description: str = "",
) -> Callable[[StageFn], StageFn]:
    """Register the decorated function as a stage of the global registry."""

    def decorator(fn: StageFn) -> StageFn:
        _registry.register(
            StageSpec(
                id=id,
                layer=layer,
                fn=fn,
                dependencies=list(dependencies or []),
                description=description,
            )
        )
        return fn

    return decorator
