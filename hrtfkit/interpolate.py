"""Inverse-distance interpolation of HRTF filters between measurements."""

from __future__ import annotations

from collections.abc import Sequence

from .coords import distance, fequals
from .hrtf import Hrtf


def interpolate(
    hrtf: Hrtf,
    coordinate: Sequence[float],
    nearest: int,
    neighborhood: Sequence[int],
) -> tuple[list[float], tuple[float, float]]:
    """Interpolate the filter pair for a Cartesian coordinate.

    ``nearest`` is the index of the closest measurement and ``neighborhood``
    its six neighbour indices (-1 for none), paired as +/- azimuth,
    +/- elevation and +/- radius. Returns the filters of all receivers as
    one flat list and the (left, right) delays.
    """
    size = hrtf.N * hrtf.R
    c = hrtf.C
    receivers = hrtf.R
    positions = hrtf.source_position.values
    filters = hrtf.data_ir.values
    delay_values = hrtf.data_delay.values
    per_measurement = len(delay_values) > receivers

    def position(index: int) -> Sequence[float]:
        return positions[index * c:index * c + 3]

    def filter_of(index: int) -> list[float]:
        return filters[index * size:(index + 1) * size]

    def delays_of(index: int) -> tuple[float, float]:
        if per_measurement:
            return (
                delay_values[index * receivers],
                delay_values[index * receivers + 1],
            )
        return delay_values[0], delay_values[1]

    d = distance(coordinate, position(nearest))
    if fequals(d, 0):
        return list(filter_of(nearest)), delays_of(nearest)

    chosen: list[tuple[int, float]] = []
    for first, second in zip(neighborhood[0::2], neighborhood[1::2]):
        if first >= 0 and second >= 0:
            d_first = distance(coordinate, position(first))
            d_second = distance(coordinate, position(second))
            if not fequals(d_first, d_second):
                chosen.append(
                    (first, d_first) if d_first < d_second else (second, d_second)
                )
        elif first >= 0:
            chosen.append((first, distance(coordinate, position(first))))
        elif second >= 0:
            chosen.append((second, distance(coordinate, position(second))))

    weight = 1 / d
    fir = [value * weight for value in filter_of(nearest)]
    left, right = delays_of(nearest)
    left *= weight
    right *= weight

    for index, dist in chosen:
        w = 1 / dist
        fir = [acc + value * w for acc, value in zip(fir, filter_of(index))]
        weight += w
        if per_measurement:
            n_left, n_right = delays_of(index)
            left += n_left * w
            right += n_right * w

    scale = 1 / weight
    return [value * scale for value in fir], (left * scale, right * scale)