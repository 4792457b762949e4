"""Point-cloud geometry for stroke matching.

Pure functions over 2D point sequences: resampling by arc length,
centroid translation, bounding-box scaling, rotation and mean point
distance. Every function accepts a sequence of ``Point``, a sequence of
``(x, y)`` pairs, or an ``(N, 2)`` array and returns numpy arrays.

Usage:
    pts = normalize(raw_points, n=64, size=1.0)
    dist = distance_at_best_angle(pts, template.points)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np

# Golden ratio conjugate used by the rotation search
PHI = 0.5 * (-1.0 + math.sqrt(5.0))

_EPS = 1e-9


@dataclass(frozen=True)
class Point:
    """A captured pointer sample tagged with its 1-based stroke id."""
    x: float
    y: float
    stroke_id: int = 1

    def distance_to(self, other: Point) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def with_stroke_id(self, stroke_id: int) -> Point:
        return Point(self.x, self.y, stroke_id)


PointsLike = Union[Sequence[Point], Sequence[Sequence[float]], np.ndarray]


def as_array(points: PointsLike) -> np.ndarray:
    """Convert points to an ``(N, 2)`` float64 array. Stroke ids are dropped."""
    if isinstance(points, np.ndarray):
        arr = points.astype(np.float64, copy=False)
    else:
        points = list(points)
        if points and isinstance(points[0], Point):
            arr = np.array([(p.x, p.y) for p in points], dtype=np.float64)
        else:
            arr = np.asarray(points, dtype=np.float64)

    if arr.size == 0:
        return np.zeros((0, 2), dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] < 2:
        raise ValueError(f"Expected (N, 2) points, got shape {arr.shape}")
    return arr[:, :2]


def path_length(points: PointsLike) -> float:
    """Sum of distances between consecutive points."""
    pts = as_array(points)
    if len(pts) < 2:
        return 0.0
    return float(np.sum(np.linalg.norm(np.diff(pts, axis=0), axis=1)))


def resample(points: PointsLike, n: int) -> np.ndarray:
    """Resample a path to ``n`` points evenly spaced by arc length.

    Points are joined in input order, so a multi-stroke candidate is
    treated as one concatenated path. A path with no length (one point or
    only duplicates) yields ``n`` copies of its first point.
    """
    if n < 1:
        raise ValueError(f"Resample count must be positive, got {n}")
    pts = as_array(points)
    if len(pts) == 0:
        raise ValueError("Cannot resample an empty path")

    diffs = np.diff(pts, axis=0)
    seg_lengths = np.linalg.norm(diffs, axis=1)
    cum_length = np.concatenate([[0.0], np.cumsum(seg_lengths)])
    total = cum_length[-1]

    if len(pts) < 2 or total < _EPS:
        return np.tile(pts[0], (n, 1))

    # Interpolate at evenly spaced arc lengths
    targets = np.linspace(0.0, total, n)
    idx = np.searchsorted(cum_length, targets, side="right") - 1
    idx = np.clip(idx, 0, len(pts) - 2)
    seg = seg_lengths[idx]
    t_param = np.where(seg > _EPS, (targets - cum_length[idx]) / np.where(seg > _EPS, seg, 1.0), 0.0)
    resampled = pts[idx] + t_param[:, None] * diffs[idx]

    if n > 1:
        resampled[-1] = pts[-1]
    return resampled


def centroid(points: PointsLike) -> np.ndarray:
    """Arithmetic mean of x and y."""
    pts = as_array(points)
    if len(pts) == 0:
        raise ValueError("Centroid of an empty point set is undefined")
    return pts.mean(axis=0)


def translate_to_origin(points: PointsLike) -> np.ndarray:
    """Shift points so their centroid sits at (0, 0)."""
    pts = as_array(points)
    return pts - centroid(pts)


def bounding_box_size(points: PointsLike) -> tuple[float, float]:
    """Return ``(width, height)`` of the axis-aligned bounding box."""
    pts = as_array(points)
    if len(pts) == 0:
        return 0.0, 0.0
    span = pts.max(axis=0) - pts.min(axis=0)
    return float(span[0]), float(span[1])


def scale_to(points: PointsLike, reference_size: Union[float, Sequence[float]]) -> np.ndarray:
    """Scale each axis independently so the bounding box matches ``reference_size``.

    An axis with zero extent keeps a scale factor of 1.
    """
    pts = as_array(points)
    size = np.broadcast_to(np.asarray(reference_size, dtype=np.float64), (2,))
    span = np.asarray(bounding_box_size(pts), dtype=np.float64)
    flat = span < _EPS
    factor = np.where(flat, 1.0, size / np.where(flat, 1.0, span))
    return pts * factor


def rotate_by(points: PointsLike, theta: float) -> np.ndarray:
    """Rotate points by ``theta`` radians around their centroid."""
    pts = as_array(points)
    c = centroid(pts)
    cos, sin = math.cos(theta), math.sin(theta)
    d = pts - c
    rotated = np.column_stack([
        d[:, 0] * cos - d[:, 1] * sin,
        d[:, 0] * sin + d[:, 1] * cos,
    ])
    return rotated + c


def path_distance(a: PointsLike, b: PointsLike) -> float:
    """Mean Euclidean distance between same-index points of two paths."""
    pa, pb = as_array(a), as_array(b)
    if len(pa) != len(pb):
        raise ValueError(f"Path lengths differ: {len(pa)} vs {len(pb)}")
    if len(pa) == 0:
        raise ValueError("Cannot compare empty paths")
    return float(np.mean(np.linalg.norm(pa - pb, axis=1)))


def normalize(points: PointsLike, n: int, size: Union[float, Sequence[float]] = 1.0) -> np.ndarray:
    """Resample, center on the centroid and scale into the reference box."""
    return scale_to(translate_to_origin(resample(points, n)), size)


def distance_at_angle(candidate: np.ndarray, template: np.ndarray, theta: float) -> float:
    return path_distance(rotate_by(candidate, theta), template)


def distance_at_best_angle(
    candidate: PointsLike,
    template: PointsLike,
    angle_range: float = math.radians(45.0),
    angle_precision: float = math.radians(2.0),
) -> float:
    """Minimum path distance over rotations of ``candidate`` in ``[-angle_range, angle_range]``.

    Golden-section search over the rotation angle, stopping once the
    bracket is narrower than ``angle_precision``. The unrotated distance is
    always considered, so the result never exceeds it.
    """
    cand = as_array(candidate)
    tmpl = as_array(template)

    best = distance_at_angle(cand, tmpl, 0.0)
    if angle_range <= 0:
        return best

    a, b = -angle_range, angle_range
    x1 = PHI * a + (1.0 - PHI) * b
    f1 = distance_at_angle(cand, tmpl, x1)
    x2 = (1.0 - PHI) * a + PHI * b
    f2 = distance_at_angle(cand, tmpl, x2)

    while abs(b - a) > angle_precision:
        if f1 < f2:
            b = x2
            x2, f2 = x1, f1
            x1 = PHI * a + (1.0 - PHI) * b
            f1 = distance_at_angle(cand, tmpl, x1)
        else:
            a = x1
            x1, f1 = x2, f2
            x2 = (1.0 - PHI) * a + PHI * b
            f2 = distance_at_angle(cand, tmpl, x2)

    return min(best, f1, f2)
