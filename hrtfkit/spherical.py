"""Convert the position variables of an HRTF set between coordinate systems."""

from __future__ import annotations

from collections.abc import Iterator

from .coords import cartesian_to_spherical, spherical_to_cartesian
from .hrtf import Hrtf, SofaArray, change_attribute


def _position_arrays(hrtf: Hrtf) -> Iterator[SofaArray]:
    yield hrtf.listener_view
    yield hrtf.listener_up
    yield hrtf.listener_position
    yield hrtf.emitter_position
    yield hrtf.receiver_position
    yield hrtf.source_position


def to_spherical(hrtf: Hrtf) -> None:
    """Convert every Cartesian position variable to spherical, in place."""
    for array in _position_arrays(hrtf):
        if not change_attribute(array.attributes, "Type", "cartesian", "spherical"):
            continue
        change_attribute(array.attributes, "Units", None, "degree, degree, meter")
        array.values = cartesian_to_spherical(array.values)


def to_cartesian(hrtf: Hrtf) -> None:
    """Convert every spherical position variable to Cartesian, in place."""
    for array in _position_arrays(hrtf):
        if not change_attribute(array.attributes, "Type", "spherical", "cartesian"):
            continue
        change_attribute(array.attributes, "Units", None, "meter")
        array.values = spherical_to_cartesian(array.values)