"""Validation of HRTF sets against the supported subset of SOFA."""

from __future__ import annotations

import itertools
import logging
import re
from collections.abc import Sequence

from .coords import fequals
from .hrtf import ErrorCode, Hrtf, SofaArray, SofaError, get_attribute, verify_attribute

_log = logging.getLogger(__name__)

_ROOM_TYPES = ("free field", "reverberant", "shoebox")
_LEGACY_API_NAME = "ARI SOFA API for Matlab/Octave"
_VERSION = re.compile(r"\s*([+-]?\d+)\.\s*([+-]?\d+)\.\s*([+-]?\d+)")
_EAR_TOLERANCE = 0.02

_VIEW_CARTESIAN = (1.0, 0.0, 0.0)
_VIEW_SPHERICAL = (0.0, 0.0, 1.0)
_ORIGIN = (0.0, 0.0, 0.0)


def _compare_values(array: SofaArray, expected: Sequence[float], repeat: int) -> bool:
    """True if the array holds ``expected`` repeated ``repeat`` times."""
    values = array.values
    if not values or len(values) != len(expected) * repeat:
        return False
    return all(fequals(v, e) for v, e in zip(values, itertools.cycle(expected)))


def _dimension_list(array: SofaArray, name: str) -> bool:
    return verify_attribute(array.attributes, "DIMENSION_LIST", name)


def _check_listener_view(hrtf: Hrtf) -> None:
    view = hrtf.listener_view
    if not view.values:
        return
    repeat = 1
    if not _dimension_list(view, "I,C"):
        if not _dimension_list(view, "M,C"):
            raise SofaError(ErrorCode.INVALID_DIMENSION_LIST)
        repeat = hrtf.M
    if verify_attribute(view.attributes, "Type", "cartesian"):
        expected = _VIEW_CARTESIAN
    elif verify_attribute(view.attributes, "Type", "spherical"):
        expected = _VIEW_SPHERICAL
    else:
        raise SofaError(ErrorCode.INVALID_COORDINATE_TYPE)
    if not _compare_values(view, expected, repeat):
        raise SofaError(ErrorCode.INVALID_FORMAT, "unsupported listener view")


def _check_receivers(hrtf: Hrtf) -> list[str]:
    receivers = hrtf.receiver_position
    values = receivers.values
    count = hrtf.C * hrtf.R

    if _dimension_list(receivers, "R,C,I"):
        pass
    elif _dimension_list(receivers, "R,C,M"):
        if len(values) != count * hrtf.M:
            raise SofaError(ErrorCode.INVALID_RECEIVER_POSITIONS)
        for i in range(count):
            block = values[i * hrtf.M:(i + 1) * hrtf.M]
            if not all(fequals(block[0], v) for v in block[1:]):
                raise SofaError(ErrorCode.RECEIVERS_WITH_RCI_SUPPORTED)
    else:
        raise SofaError(ErrorCode.RECEIVERS_WITH_RCI_SUPPORTED)

    if not verify_attribute(receivers.attributes, "Type", "cartesian"):
        raise SofaError(ErrorCode.RECEIVERS_WITH_CARTESIAN_SUPPORTED)

    if len(values) < count or len(values) < 6 or any(
        abs(values[i]) >= _EAR_TOLERANCE for i in (0, 2, 3, 5)
    ):
        raise SofaError(ErrorCode.INVALID_RECEIVER_POSITIONS)
    if abs(values[4] + values[1]) >= _EAR_TOLERANCE:
        raise SofaError(ErrorCode.INVALID_RECEIVER_POSITIONS, "ears not symmetric")

    if values[1] >= 0:
        return []

    # Old API versions sometimes wrote the left and right ears swapped.
    if not verify_attribute(hrtf.attributes, "APIName", _LEGACY_API_NAME):
        raise SofaError(ErrorCode.INVALID_RECEIVER_POSITIONS)
    version = get_attribute(hrtf.attributes, "APIVersion")
    if version is None:
        raise SofaError(ErrorCode.INVALID_RECEIVER_POSITIONS)
    match = _VERSION.match(version)
    if match is None:
        raise SofaError(ErrorCode.INVALID_RECEIVER_POSITIONS)
    major, minor, patch = (int(part) for part in match.groups())
    if (major, minor, patch) > (1, 1, 0) and (
        major > 1 or (major == 1 and minor > 1) or (major == 1 and minor == 1 and patch > 0)
    ):
        raise SofaError(ErrorCode.INVALID_RECEIVER_POSITIONS)

    warning = (
        "SOFA file is written with wrong receiver positions. "
        f"{major}.{minor}.{patch} {values[1]}<>{values[4]}"
    )
    _log.warning(warning)
    return [warning]


def check(hrtf: Hrtf) -> list[str]:
    """Verify that an HRTF set is a supported SimpleFreeFieldHRIR set.

    Raises SofaError with the matching code on the first violation.
    Returns the warnings found for sets that are accepted despite flaws.
    """
    attributes = hrtf.attributes
    if (
        not verify_attribute(attributes, "Conventions", "SOFA")
        or not verify_attribute(attributes, "SOFAConventions", "SimpleFreeFieldHRIR")
        or not verify_attribute(attributes, "DataType", "FIR")
    ):
        raise SofaError(ErrorCode.INVALID_ATTRIBUTES)
    if not any(verify_attribute(attributes, "RoomType", room) for room in _ROOM_TYPES):
        raise SofaError(ErrorCode.INVALID_ATTRIBUTES, "unsupported room type")

    if hrtf.C != 3 or hrtf.I != 1 or hrtf.E != 1 or hrtf.R != 2 or hrtf.M == 0:
        raise SofaError(ErrorCode.INVALID_DIMENSIONS)

    _check_listener_view(hrtf)

    emitters = hrtf.emitter_position
    repeat = 1
    if not _dimension_list(emitters, "E,C,I"):
        if not _dimension_list(emitters, "E,C,M"):
            raise SofaError(ErrorCode.ONLY_EMITTER_WITH_ECI_SUPPORTED)
        repeat = hrtf.M
    if not _compare_values(emitters, _ORIGIN, repeat):
        raise SofaError(ErrorCode.ONLY_EMITTER_WITH_ECI_SUPPORTED)

    if hrtf.data_delay.values and not (
        _dimension_list(hrtf.data_delay, "I,R") or _dimension_list(hrtf.data_delay, "M,R")
    ):
        raise SofaError(ErrorCode.ONLY_DELAYS_WITH_IR_OR_MR_SUPPORTED)

    if not _dimension_list(hrtf.data_sampling_rate, "I"):
        raise SofaError(ErrorCode.ONLY_THE_SAME_SAMPLING_RATE_SUPPORTED)

    warnings = _check_receivers(hrtf)

    if not _dimension_list(hrtf.source_position, "M,C"):
        raise SofaError(ErrorCode.ONLY_SOURCES_WITH_MC_SUPPORTED)

    return warnings