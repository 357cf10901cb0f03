"""Coordinate conversion and small numeric helpers."""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from typing import Any

_EPSILON = 0.00001


def c2s(values: Sequence[float]) -> tuple[float, float, float]:
    """Convert a Cartesian point to (azimuth deg, elevation deg, radius)."""
    x, y, z = values[0], values[1], values[2]
    r = radius(values)
    theta = math.atan2(z, math.sqrt(x * x + y * y))
    phi = math.atan2(y, x)
    return (math.fmod(math.degrees(phi) + 360.0, 360.0), math.degrees(theta), r)


def s2c(values: Sequence[float]) -> tuple[float, float, float]:
    """Convert (azimuth deg, elevation deg, radius) to a Cartesian point."""
    phi = math.radians(values[0])
    theta = math.radians(values[1])
    r = values[2]
    x = math.cos(theta) * r
    return (math.cos(phi) * x, math.sin(phi) * x, math.sin(theta) * r)


def _convert_triplets(
    values: Sequence[float], convert: Callable[[Sequence[float]], tuple[float, ...]]
) -> list[float]:
    out = list(values)
    for start in range(0, len(out) - 2, 3):
        out[start:start + 3] = convert(out[start:start + 3])
    return out


def cartesian_to_spherical(values: Sequence[float]) -> list[float]:
    """Convert a flat list of Cartesian triplets; leftover values are kept."""
    return _convert_triplets(values, c2s)


def spherical_to_cartesian(values: Sequence[float]) -> list[float]:
    """Convert a flat list of spherical triplets; leftover values are kept."""
    return _convert_triplets(values, s2c)


def radius(point: Sequence[float]) -> float:
    """Euclidean length of a 3D point."""
    return math.sqrt(point[0] ** 2 + point[1] ** 2 + point[2] ** 2)


def distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Euclidean distance between two 3D points."""
    return math.sqrt(
        (a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2 + (a[2] - b[2]) ** 2
    )


def fequals(a: float, b: float) -> bool:
    """Approximate float equality with a fixed absolute tolerance."""
    return abs(a - b) < _EPSILON


def loudness(values: Sequence[float]) -> float:
    """Energy of a signal: the sum of its squared samples."""
    return sum(v * v for v in values)


def nsearch(
    key: Any, items: Sequence[Any], compare: Callable[[Any, Any], int]
) -> tuple[int, int]:
    """Binary search for the neighbours of ``key`` in sorted ``items``.

    Returns (lower, higher) indices. On an exact match both are the match;
    otherwise they bracket the key, with -1 where no neighbour exists.
    """
    start, end = 0, len(items)
    while start < end:
        mid = start + (end - start) // 2
        result = compare(key, items[mid])
        if result < 0:
            end = mid
        elif result > 0:
            start = mid + 1
        else:
            return mid, mid
    if start == len(items):
        return start - 1, -1
    if start == 0:
        return -1, 0
    return start - 1, start