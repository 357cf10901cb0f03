"""One-stop access to filters of an HRTF set for arbitrary directions."""

from __future__ import annotations

from .check import check
from .hrtf import (
    DEFAULT_NEIGH_STEP_ANGLE,
    DEFAULT_NEIGH_STEP_RADIUS,
    ErrorCode,
    Hrtf,
    SofaError,
)
from .interpolate import interpolate as _interpolate
from .lookup import Lookup
from .neighbors import Neighborhood
from .processing import normalize_loudness, resample
from .spherical import to_cartesian

_SHORT_SCALE = 32767.0
_SHORT_MIN = -32768
_SHORT_MAX = 32767

FloatFilter = tuple[list[float], list[float], float, float]
ShortFilter = tuple[list[int], list[int], int, int]


class EasyHrtf:
    """A validated, prepared HRTF set ready for filter queries.

    Use :meth:`open` to build one. Instances are context managers that
    release their data on exit.
    """

    def __init__(self, hrtf: Hrtf, lookup: Lookup, neighborhood: Neighborhood) -> None:
        self.hrtf: Hrtf | None = hrtf
        self.lookup: Lookup | None = lookup
        self.neighborhood: Neighborhood | None = neighborhood

    @classmethod
    def open(
        cls,
        hrtf: Hrtf,
        samplerate: float,
        norm: bool = True,
        neighbor_angle_step: float = DEFAULT_NEIGH_STEP_ANGLE,
        neighbor_radius_step: float = DEFAULT_NEIGH_STEP_RADIUS,
    ) -> EasyHrtf:
        """Validate, resample and optionally normalise a set, then index it.

        Raises SofaError when the set is unsupported.
        """
        check(hrtf)
        resample(hrtf, samplerate)
        if norm:
            normalize_loudness(hrtf)
        to_cartesian(hrtf)
        if len(hrtf.source_position.values) != hrtf.C * hrtf.M:
            raise SofaError(ErrorCode.INVALID_FORMAT, "source positions do not match M")
        lookup = Lookup(hrtf)
        neighborhood = Neighborhood(hrtf, lookup, neighbor_angle_step, neighbor_radius_step)
        return cls(hrtf, lookup, neighborhood)

    def _parts(self) -> tuple[Hrtf, Lookup, Neighborhood]:
        if self.hrtf is None or self.lookup is None or self.neighborhood is None:
            raise ValueError("HRTF set is closed")
        return self.hrtf, self.lookup, self.neighborhood

    def filter_length(self) -> int:
        """Number of samples in each filter."""
        return self._parts()[0].N

    def get_filter_float_advanced(
        self, x: float, y: float, z: float, interpolate: bool
    ) -> FloatFilter:
        """Return (left, right, left delay, right delay) for a direction.

        Delays are in seconds. Without ``interpolate`` the filters of the
        nearest measurement are returned unchanged.
        """
        hrtf, lookup, neighborhood = self._parts()
        nearest, point = lookup.nearest((x, y, z))
        neighbors = neighborhood.neighbors(nearest)
        if not interpolate:
            start = nearest * hrtf.C
            point = tuple(hrtf.source_position.values[start:start + 3])
        fir, (left_delay, right_delay) = _interpolate(hrtf, point, nearest, neighbors)
        n = hrtf.N
        return fir[:n], fir[n:2 * n], left_delay, right_delay

    def get_filter_float(self, x: float, y: float, z: float) -> FloatFilter:
        """Interpolated float filters and delays in seconds for a direction."""
        return self.get_filter_float_advanced(x, y, z, True)

    def get_filter_float_nointerp(self, x: float, y: float, z: float) -> FloatFilter:
        """Float filters and delays of the measurement nearest a direction."""
        return self.get_filter_float_advanced(x, y, z, False)

    def get_filter_short(self, x: float, y: float, z: float) -> ShortFilter:
        """Interpolated 16-bit filters and delays in samples for a direction."""
        hrtf, lookup, neighborhood = self._parts()
        nearest, point = lookup.nearest((x, y, z))
        neighbors = neighborhood.neighbors(nearest)
        fir, (left_delay, right_delay) = _interpolate(hrtf, point, nearest, neighbors)
        rate = hrtf.data_sampling_rate.values[0]
        n = hrtf.N
        shorts = [
            max(_SHORT_MIN, min(_SHORT_MAX, int(v * _SHORT_SCALE))) for v in fir[:2 * n]
        ]
        return shorts[:n], shorts[n:], int(left_delay * rate), int(right_delay * rate)

    def close(self) -> None:
        """Release the set and its indexes."""
        self.hrtf = None
        self.lookup = None
        self.neighborhood = None

    def __enter__(self) -> EasyHrtf:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()