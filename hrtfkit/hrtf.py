"""Core data model for SOFA head-related transfer function sets."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

DEFAULT_NEIGH_STEP_ANGLE = 0.5
DEFAULT_NEIGH_STEP_RADIUS = 0.01

Attributes = dict[str, "str | None"]


class ErrorCode(IntEnum):
    """Error codes reported while loading and validating HRTF sets."""

    OK = 0
    INTERNAL_ERROR = -1
    INVALID_FORMAT = 10000
    UNSUPPORTED_FORMAT = 10001
    NO_MEMORY = 10002
    READ_ERROR = 10003
    INVALID_ATTRIBUTES = 10004
    INVALID_DIMENSIONS = 10005
    INVALID_DIMENSION_LIST = 10006
    INVALID_COORDINATE_TYPE = 10007
    ONLY_EMITTER_WITH_ECI_SUPPORTED = 10008
    ONLY_DELAYS_WITH_IR_OR_MR_SUPPORTED = 10009
    ONLY_THE_SAME_SAMPLING_RATE_SUPPORTED = 10010
    RECEIVERS_WITH_RCI_SUPPORTED = 10011
    RECEIVERS_WITH_CARTESIAN_SUPPORTED = 10012
    INVALID_RECEIVER_POSITIONS = 10013
    ONLY_SOURCES_WITH_MC_SUPPORTED = 10014


class SofaError(Exception):
    """Raised when an HRTF set is invalid or cannot be processed."""

    def __init__(self, code: ErrorCode | int, message: str | None = None) -> None:
        try:
            code = ErrorCode(code)
        except ValueError:
            pass
        self.code = code
        name = code.name if isinstance(code, ErrorCode) else str(code)
        super().__init__(message or name)


@dataclass
class SofaArray:
    """A variable of a SOFA file: flat float values plus attributes."""

    values: list[float] = field(default_factory=list)
    attributes: Attributes = field(default_factory=dict)


@dataclass
class Hrtf:
    """An HRTF set with the AES69 dimensions and standard variables.

    Dimensions: M measurements, R receivers, E emitters, N samples per
    filter, I singleton, C coordinate triplet size.
    """

    I: int = 0  # noqa: E741
    C: int = 0
    R: int = 0
    E: int = 0
    N: int = 0
    M: int = 0
    listener_position: SofaArray = field(default_factory=SofaArray)
    receiver_position: SofaArray = field(default_factory=SofaArray)
    source_position: SofaArray = field(default_factory=SofaArray)
    emitter_position: SofaArray = field(default_factory=SofaArray)
    listener_up: SofaArray = field(default_factory=SofaArray)
    listener_view: SofaArray = field(default_factory=SofaArray)
    data_ir: SofaArray = field(default_factory=SofaArray)
    data_sampling_rate: SofaArray = field(default_factory=SofaArray)
    data_delay: SofaArray = field(default_factory=SofaArray)
    attributes: Attributes = field(default_factory=dict)
    variables: dict[str, SofaArray] = field(default_factory=dict)

    def get_attribute(self, name: str) -> str | None:
        """Return a global attribute of the set, or None if absent."""
        return get_attribute(self.attributes, name)


def verify_attribute(attributes: Attributes, name: str, value: str) -> bool:
    """True if the attribute exists and has exactly the given value."""
    current = attributes.get(name)
    return current is not None and current == value


def change_attribute(
    attributes: Attributes, name: str, value: str | None, new_value: str
) -> bool:
    """Replace an attribute's value if it matches ``value``.

    A ``value`` of None, or an attribute whose value is None, matches
    anything. The attribute must already exist. Returns whether it changed.
    """
    if name not in attributes:
        return False
    current = attributes[name]
    if value is None or current is None or current == value:
        attributes[name] = new_value
        return True
    return False


def get_attribute(attributes: Attributes, name: str) -> str | None:
    """Return the value of an attribute, or None if absent."""
    return attributes.get(name)