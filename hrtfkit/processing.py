"""Loudness normalisation, delay extraction and resampling of HRTF sets."""

from __future__ import annotations

import math
from collections.abc import Sequence

from .coords import c2s, fequals, loudness
from .hrtf import ErrorCode, Hrtf, SofaError, verify_attribute
from .resampler import Resampler, ResamplerError

_FLT_MAX = 3.4028234663852886e38
_QUALITY = 10
_ZERO_CHUNK = [0.0] * 10


def normalize_loudness(hrtf: Hrtf) -> float:
    """Scale all filters so the frontal filter pair has an energy of 2.

    Returns the applied factor, or 1.0 when no scaling was needed.
    """
    positions = hrtf.source_position.values
    cartesian = verify_attribute(hrtf.source_position.attributes, "Type", "cartesian")

    minimum = _FLT_MAX
    radius = 0
    index = 0
    for i in range(0, len(positions), hrtf.C):
        if i + 2 >= len(positions):
            break
        c = positions[i:i + 3]
        if cartesian:
            c = c2s(c)
        angle = c[0] + c[1]
        if minimum > angle:
            minimum = angle
            radius = int(c[2])
            index = i
        elif minimum == angle and radius < c[2]:
            radius = int(c[2])
            index = i

    size = hrtf.N * hrtf.R
    start = (index // hrtf.C) * size
    energy = loudness(hrtf.data_ir.values[start:start + size])
    if energy == 0:
        raise SofaError(ErrorCode.INVALID_FORMAT, "frontal filter has no energy")
    factor = math.sqrt(2 / energy)
    if fequals(factor, 1.0):
        return 1.0

    hrtf.data_ir.values = [v * factor for v in hrtf.data_ir.values]
    return factor


def _trunk(values: Sequence[float], threshold: float) -> tuple[int, int]:
    """Range [start, end) left after trimming low-energy ends."""
    energy = 0.0
    s = 0
    e = len(values) - 1
    threshold *= loudness(values)
    ss = values[s] * values[s]
    ee = values[e] * values[e]
    while s < e:
        if ss <= ee:
            if energy + ss > threshold:
                break
            energy += ss
            s += 1
            ss = values[s] * values[s]
        else:
            if energy + ee > threshold:
                break
            energy += ee
            e -= 1
            ee = values[e] * values[e]
    return s, e + 1


def minphase(hrtf: Hrtf, threshold: float) -> int:
    """Trim quiet leading and trailing samples from every filter.

    Leading samples removed become per-filter delays. Returns the new
    filter length.
    """
    if len(hrtf.data_delay.values) != 2:
        raise SofaError(ErrorCode.INVALID_FORMAT, "expected exactly two delays")
    n = hrtf.N
    if n == 0:
        return 0

    filters = hrtf.M * hrtf.R
    ir = hrtf.data_ir.values
    ranges = [_trunk(ir[i * n:(i + 1) * n], threshold) for i in range(filters)]
    longest = max((end - start for start, end in ranges), default=0)
    if longest == n:
        return longest

    samplerate = hrtf.data_sampling_rate.values[0]
    base_delay = hrtf.data_delay.values[0]
    delays: list[float] = []
    trimmed: list[float] = []
    for i, (start, _) in enumerate(ranges):
        start = min(start, n - longest)
        delays.append(base_delay + start / samplerate)
        offset = i * n + start
        trimmed.extend(ir[offset:offset + longest])

    hrtf.data_delay.values = delays
    hrtf.data_ir.values = trimmed
    hrtf.N = longest
    return longest


def resample(hrtf: Hrtf, samplerate: float) -> None:
    """Convert every filter and delay of the set to a new sampling rate."""
    rates = hrtf.data_sampling_rate.values
    if (
        len(rates) != 1
        or samplerate < 8000.0
        or len(hrtf.data_ir.values) != hrtf.R * hrtf.M * hrtf.N
    ):
        raise SofaError(ErrorCode.INVALID_FORMAT, "cannot resample this set")
    if samplerate == rates[0]:
        return

    factor = samplerate / rates[0]
    new_n = math.ceil(hrtf.N * factor)
    n = hrtf.N

    values: list[float] = []
    try:
        resampler = Resampler(1, int(rates[0]), int(samplerate), _QUALITY)
    except ResamplerError as exc:
        raise SofaError(exc.code, str(exc)) from exc

    if n:
        ir = hrtf.data_ir.values
        for i in range(hrtf.R * hrtf.M):
            resampler.reset_mem()
            resampler.skip_zeros()
            _, out = resampler.process_float(0, ir[i * n:(i + 1) * n], new_n)
            while len(out) < new_n:
                _, more = resampler.process_float(0, _ZERO_CHUNK, new_n - len(out))
                out.extend(more)
            values.extend(out)

    hrtf.data_ir.values = values
    hrtf.data_delay.values = [d * factor for d in hrtf.data_delay.values]
    rates[0] = samplerate
    hrtf.N = new_n