"""Leaf-node geometry helpers. No engine imports."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from polysplit.errors import InvalidPathError

Point = tuple[float, float]

DEFAULT_EPS = 1e-9


def as_path_array(path: ArrayLike) -> NDArray[np.float64]:
    """Coerce a point list to an Nx2 float array, rejecting malformed input."""
    try:
        arr = np.asarray(path, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidPathError(f"path must be a sequence of 2D points: {e}") from e

    if arr.ndim != 2 or arr.shape[1] != 2:
        raise InvalidPathError(f"path must be a sequence of 2D points, got shape {arr.shape}")
    if len(arr) < 2:
        raise InvalidPathError(f"path needs at least 2 points, got {len(arr)}")
    if not np.all(np.isfinite(arr)):
        raise InvalidPathError("path contains non-finite coordinates")
    return arr


def approx(a: Sequence[float], b: Sequence[float], eps: float = DEFAULT_EPS) -> bool:
    """True if two points coincide within eps (Euclidean distance)."""
    return float(np.hypot(a[0] - b[0], a[1] - b[1])) <= eps


def matching_indices(
    points: ArrayLike, target: Sequence[float], eps: float = DEFAULT_EPS
) -> NDArray[np.intp]:
    """Indices of every point within eps of target."""
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    dists = np.hypot(pts[:, 0] - target[0], pts[:, 1] - target[1])
    return np.nonzero(dists <= eps)[0]


def cleanup_path(
    path: ArrayLike, closed: bool = True, eps: float = DEFAULT_EPS
) -> NDArray[np.float64]:
    """Drop zero-length edges.

    Consecutive points within eps of each other collapse to the first one.
    For closed paths a trailing point equal to the start is removed too, so
    the closing edge is implicit. Applying it twice changes nothing.
    """
    pts = np.asarray(path, dtype=np.float64).reshape(-1, 2)
    if len(pts) == 0:
        return pts

    kept = [pts[0]]
    for p in pts[1:]:
        if not approx(p, kept[-1], eps):
            kept.append(p)

    if closed:
        while len(kept) > 1 and approx(kept[-1], kept[0], eps):
            kept.pop()
    return np.array(kept, dtype=np.float64)


def dedupe_points(points: Sequence[Point], eps: float = DEFAULT_EPS) -> list[Point]:
    """Collapse consecutive duplicates of an open point sequence."""
    out: list[Point] = []
    for p in points:
        if not out or not approx(p, out[-1], eps):
            out.append(p)
    return out


def unwrap(points: Sequence[Point], eps: float = DEFAULT_EPS) -> list[Point]:
    """Remove the repeated closing point of a closed point sequence."""
    out = list(points)
    if len(out) > 1 and approx(out[0], out[-1], eps):
        out.pop()
    return out


def signed_area(points: ArrayLike) -> float:
    """Shoelace formula for signed area. Positive = CCW, Negative = CW.

    The closing edge is implicit; a repeated closing point adds nothing.
    """
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    if len(pts) < 3:
        return 0.0
    x = pts[:, 0]
    y = pts[:, 1]
    return float(0.5 * np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y))


def bbox(points: ArrayLike) -> tuple[float, float, float, float]:
    """Compute (xmin, ymin, xmax, ymax) bounding box."""
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    if len(pts) == 0:
        return (0.0, 0.0, 0.0, 0.0)
    return (
        float(np.min(pts[:, 0])),
        float(np.min(pts[:, 1])),
        float(np.max(pts[:, 0])),
        float(np.max(pts[:, 1])),
    )


def characteristic_scale(points: ArrayLike) -> float:
    """Bounding-box diagonal; 1.0 for a degenerate point set."""
    xmin, ymin, xmax, ymax = bbox(points)
    diag = float(np.hypot(xmax - xmin, ymax - ymin))
    return diag if diag > 0 else 1.0


def line_normal(p0: Sequence[float], p1: Sequence[float]) -> Point:
    """Unit normal of the line p0→p1, pointing to its left."""
    dx = p1[0] - p0[0]
    dy = p1[1] - p0[1]
    length = float(np.hypot(dx, dy))
    if length == 0:
        return (0.0, 0.0)
    return (-dy / length, dx / length)


def winding_number(point: Sequence[float], polygon_points: ArrayLike) -> int:
    """Compute winding number of point w.r.t. polygon boundary.

    The polygon is implicitly closed. Non-zero → point is inside polygon.
    """
    px, py = point[0], point[1]
    pts = np.asarray(polygon_points, dtype=np.float64).reshape(-1, 2)
    x = pts[:, 0]
    y = pts[:, 1]
    x2 = np.roll(x, -1)
    y2 = np.roll(y, -1)

    cross = (x2 - x) * (py - y) - (px - x) * (y2 - y)
    upward = (y <= py) & (y2 > py) & (cross > 0)
    downward = (y > py) & (y2 <= py) & (cross < 0)
    return int(np.count_nonzero(upward) - np.count_nonzero(downward))


def point_on_boundary(
    point: Sequence[float], polygon_points: ArrayLike, eps: float = DEFAULT_EPS
) -> bool:
    """True if point lies within eps of any edge of the closed polygon."""
    pts = np.asarray(polygon_points, dtype=np.float64).reshape(-1, 2)
    p = np.asarray(point, dtype=np.float64)
    a = pts
    d = np.roll(pts, -1, axis=0) - a
    len2 = np.sum(d * d, axis=1)
    safe = np.where(len2 > 0, len2, 1.0)
    t = np.clip(np.sum((p - a) * d, axis=1) / safe, 0.0, 1.0)
    t = np.where(len2 > 0, t, 0.0)
    proj = a + d * t[:, None]
    dists = np.hypot(proj[:, 0] - p[0], proj[:, 1] - p[1])
    return bool(np.any(dists <= eps))


def point_in_polygon(
    point: Sequence[float],
    polygon_points: ArrayLike,
    nonzero: bool = True,
    eps: float = DEFAULT_EPS,
) -> int:
    """Classify a point against a possibly self-crossing polygon.

    Returns 1 inside, 0 on the boundary, -1 outside. With ``nonzero=False``
    the even-odd rule decides instead of the nonzero winding rule.
    """
    if point_on_boundary(point, polygon_points, eps):
        return 0
    wn = winding_number(point, polygon_points)
    inside = wn != 0 if nonzero else wn % 2 != 0
    return 1 if inside else -1
