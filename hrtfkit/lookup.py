"""Nearest-measurement lookup over the source positions of an HRTF set."""

from __future__ import annotations

from collections.abc import Sequence

from .coords import c2s, radius
from .hrtf import ErrorCode, Hrtf, SofaError, verify_attribute
from .kdtree import KdTree

_FLT_MAX = 3.4028234663852886e38
_FLT_MIN = 1.1754943508222875e-38


class Lookup:
    """Finds the measurement closest to a Cartesian coordinate.

    Also records the spherical extent (azimuth, elevation, radius) of the
    source positions.
    """

    def __init__(self, hrtf: Hrtf) -> None:
        positions = hrtf.source_position
        if not verify_attribute(positions.attributes, "Type", "cartesian"):
            raise SofaError(
                ErrorCode.INTERNAL_ERROR, "source positions must be cartesian"
            )

        self.phi_min = _FLT_MAX
        self.phi_max = _FLT_MIN
        self.theta_min = _FLT_MAX
        self.theta_max = _FLT_MIN
        self.radius_min = _FLT_MAX
        self.radius_max = _FLT_MIN

        stride = hrtf.C
        values = positions.values
        self._tree = KdTree()
        for i in range(hrtf.M):
            point = values[i * stride:i * stride + 3]
            phi, theta, r = c2s(point)
            self.phi_min = min(self.phi_min, phi)
            self.phi_max = max(self.phi_max, phi)
            self.theta_min = min(self.theta_min, theta)
            self.theta_max = max(self.theta_max, theta)
            self.radius_min = min(self.radius_min, r)
            self.radius_max = max(self.radius_max, r)
        for i in range(hrtf.M):
            self._tree.insert(values[i * stride:i * stride + 3], i)

    def nearest(
        self, coordinate: Sequence[float]
    ) -> tuple[int, tuple[float, float, float]]:
        """Return the closest measurement index and the searched point.

        The coordinate is first scaled onto the radius range of the set;
        the scaled point is returned alongside the index.
        """
        point = [float(coordinate[0]), float(coordinate[1]), float(coordinate[2])]
        r = radius(point)
        if r > self.radius_max:
            scale = self.radius_max / r
            point = [v * scale for v in point]
        elif 0 < r < self.radius_min:
            scale = self.radius_min / r
            point = [v * scale for v in point]

        try:
            index = self._tree.nearest(point)
        except LookupError as exc:
            raise SofaError(ErrorCode.INTERNAL_ERROR, "no source positions") from exc
        return index, (point[0], point[1], point[2])