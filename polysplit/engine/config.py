"""Decomposition configuration — tolerances threaded through every stage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from polysplit.config import Settings

FILL_RULES = ("nonzero", "evenodd")


@dataclass(frozen=True)
class DecomposeConfig:
    """Immutable knobs for one decomposition call."""

    # Coincidence / degeneracy tolerance for points, parameters and determinants
    eps: float = 1e-9

    # Classifier probe offset as a fraction of the path's bbox diagonal
    probe_fraction: float = 1.0 / 2048

    # Point-in-polygon rule used to tag fragments
    fill_rule: str = "nonzero"

    def __post_init__(self) -> None:
        if not self.eps > 0:
            raise ValueError(f"eps must be positive, got {self.eps}")
        if not self.probe_fraction > 0:
            raise ValueError(f"probe_fraction must be positive, got {self.probe_fraction}")
        if self.fill_rule not in FILL_RULES:
            raise ValueError(f"fill_rule must be one of {FILL_RULES}, got {self.fill_rule!r}")

    @property
    def nonzero(self) -> bool:
        return self.fill_rule == "nonzero"

    @classmethod
    def from_settings(cls, settings: Settings) -> DecomposeConfig:
        return cls(
            eps=settings.polysplit_eps,
            probe_fraction=settings.polysplit_probe_fraction,
            fill_rule=settings.polysplit_fill_rule.strip().lower(),
        )
