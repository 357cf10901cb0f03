"""Neighbouring measurements along azimuth, elevation and radius."""

from __future__ import annotations

from .coords import c2s, s2c
from .hrtf import DEFAULT_NEIGH_STEP_ANGLE, DEFAULT_NEIGH_STEP_RADIUS, Hrtf
from .lookup import _FLT_MIN, Lookup

# Angle in degrees beyond which the neighbour search is abandoned.
_MAX_SEARCH_ANGLE = 45.0


class Neighborhood:
    """For every measurement, the nearest other measurement in six directions.

    Each entry is a 6-tuple: +azimuth, -azimuth, +elevation, -elevation,
    +radius, -radius; -1 where no neighbour was found.
    """

    def __init__(
        self,
        hrtf: Hrtf,
        lookup: Lookup,
        angle_step: float = DEFAULT_NEIGH_STEP_ANGLE,
        radius_step: float = DEFAULT_NEIGH_STEP_RADIUS,
    ) -> None:
        if angle_step <= 0 or radius_step <= 0:
            raise ValueError("neighbour search steps must be positive")

        search_phi = (lookup.phi_max - lookup.phi_min) > _FLT_MIN
        search_theta = (lookup.theta_max - lookup.theta_min) > _FLT_MIN
        search_radius = (lookup.radius_max - lookup.radius_min) > _FLT_MIN

        stride = hrtf.C
        values = hrtf.source_position.values
        self._index: list[tuple[int, int, int, int, int, int]] = []
        for i in range(hrtf.M):
            origin = c2s(values[i * stride:i * stride + 3])
            found = [-1] * 6
            if search_phi:
                found[0] = _angle_search(lookup, i, origin, 0, angle_step)
                found[1] = _angle_search(lookup, i, origin, 0, -angle_step)
            if search_theta:
                found[2] = _angle_search(lookup, i, origin, 1, angle_step)
                found[3] = _angle_search(lookup, i, origin, 1, -angle_step)
            if search_radius:
                found[4] = _radius_search(lookup, i, origin, radius_step)
                found[5] = _radius_search(lookup, i, origin, -radius_step)
            self._index.append(tuple(found))  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self._index)

    def neighbors(self, index: int) -> tuple[int, int, int, int, int, int]:
        """Return the six neighbour indices of a measurement."""
        if index < 0 or index >= len(self._index):
            raise IndexError(f"measurement index {index} out of range")
        return self._index[index]


def _angle_search(
    lookup: Lookup,
    own: int,
    origin: tuple[float, float, float],
    axis: int,
    step: float,
) -> int:
    offset = step
    while True:
        test = list(origin)
        test[axis] += offset
        index, _ = lookup.nearest(s2c(test))
        if index != own:
            return index
        offset += step
        if abs(offset) > _MAX_SEARCH_ANGLE:
            return -1


def _radius_search(
    lookup: Lookup, own: int, origin: tuple[float, float, float], step: float
) -> int:
    offset = step
    while True:
        r = origin[2] + offset
        index, _ = lookup.nearest(s2c((origin[0], origin[1], r)))
        if index != own:
            return index
        offset += step
        if step > 0 and r > lookup.radius_max + step:
            return -1
        if step < 0 and r < lookup.radius_min + step:
            return -1