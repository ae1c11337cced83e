"""Exception taxonomy for the decomposition engine."""

from __future__ import annotations


class PolysplitError(Exception):
    """Base class for every error raised by polysplit."""


class InvalidPathError(PolysplitError, ValueError):
    """The input path is structurally unusable (too short, not 2D, non-finite)."""


class DecompositionError(PolysplitError):
    """A pipeline stage failed while decomposing a path."""

    def __init__(self, stage_id: str, message: str) -> None:
        super().__init__(f"stage {stage_id} failed: {message}")
        self.stage_id = stage_id
        self.message = message
