"""Decompose self-crossing 2D paths into simple polygons."""

from polysplit.engine import (
    AssembledLoop,
    DecomposeConfig,
    DecompositionContext,
    Fragment,
    Intersection,
    Tag,
    decompose,
    decompose_path,
)
from polysplit.engine.stages.d1_01_segment_intersection import (
    find_self_intersections,
    is_path_simple,
)
from polysplit.engine.stages.d1_02_split_classify import (
    split_path_at_self_crossings,
    tag_self_crossing_subpaths,
)
from polysplit.engine.stages.d2_01_fragment_stitching import stitch_fragments
from polysplit.engine.stages.d2_02_loop_assembly import assemble_fragments
from polysplit.errors import DecompositionError, InvalidPathError, PolysplitError
from polysplit.utils.geometry import cleanup_path, point_in_polygon, signed_area

__version__ = "0.1.0"

__all__ = [
    "AssembledLoop",
    "DecomposeConfig",
    "DecompositionContext",
    "DecompositionError",
    "Fragment",
    "Intersection",
    "InvalidPathError",
    "PolysplitError",
    "Tag",
    "assemble_fragments",
    "cleanup_path",
    "decompose",
    "decompose_path",
    "find_self_intersections",
    "is_path_simple",
    "point_in_polygon",
    "signed_area",
    "split_path_at_self_crossings",
    "stitch_fragments",
    "tag_self_crossing_subpaths",
]
