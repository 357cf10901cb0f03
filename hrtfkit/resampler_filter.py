"""Windowed-sinc filter design for the sample-rate converter."""

from __future__ import annotations

import math
from dataclasses import dataclass

_UINT32_MAX = 0xFFFFFFFF
_INT_MAX = 0x7FFFFFFF
_SAMPLE_SIZE = 4  # bytes per stored filter coefficient

# Kaiser window (beta 12) sampled with an oversampling factor of 64.
_KAISER12_TABLE = (
    0.99859849, 1.00000000, 0.99859849, 0.99440475, 0.98745105, 0.97779076,
    0.96549770, 0.95066529, 0.93340547, 0.91384741, 0.89213598, 0.86843014,
    0.84290116, 0.81573067, 0.78710866, 0.75723148, 0.72629970, 0.69451601,
    0.66208321, 0.62920216, 0.59606986, 0.56287762, 0.52980938, 0.49704014,
    0.46473455, 0.43304576, 0.40211431, 0.37206735, 0.34301800, 0.31506490,
    0.28829195, 0.26276832, 0.23854851, 0.21567274, 0.19416736, 0.17404546,
    0.15530766, 0.13794294, 0.12192957, 0.10723616, 0.09382272, 0.08164178,
    0.07063950, 0.06075685, 0.05193064, 0.04409466, 0.03718069, 0.03111947,
    0.02584161, 0.02127838, 0.01736250, 0.01402878, 0.01121463, 0.00886058,
    0.00691064, 0.00531256, 0.00401805, 0.00298291, 0.00216702, 0.00153438,
    0.00105297, 0.00069463, 0.00043489, 0.00025272, 0.00013031, 0.0000527734,
    0.00001000, 0.00000000,
)
_KAISER12_OVERSAMPLE = 64

# The single supported quality setting.
_BASE_LENGTH = 256
_BASE_OVERSAMPLE = 32
_DOWNSAMPLE_BANDWIDTH = 0.975
_UPSAMPLE_BANDWIDTH = 0.975


@dataclass(frozen=True)
class FilterSpec:
    """A designed filter for a reduced rate ratio ``num_rate / den_rate``.

    With ``use_direct`` the sinc table holds one row of ``filt_len``
    coefficients per fractional phase; otherwise it is an oversampled table
    of ``filt_len * oversample + 8`` values read with cubic interpolation.
    """

    num_rate: int
    den_rate: int
    int_advance: int
    frac_advance: int
    filt_len: int
    oversample: int
    cutoff: float
    use_direct: bool
    sinc_table: tuple[float, ...]


def compute_window(x: float) -> float:
    """Evaluate the Kaiser window at ``x`` in [0, 1] by cubic interpolation."""
    y = x * _KAISER12_OVERSAMPLE
    ind = math.floor(y)
    frac = y - ind
    frac2 = frac * frac
    frac3 = frac2 * frac
    i3 = -0.1666666667 * frac + 0.1666666667 * frac3
    i2 = frac + 0.5 * frac2 - 0.5 * frac3
    i0 = -0.3333333333 * frac + 0.5 * frac2 - 0.1666666667 * frac3
    i1 = 1.0 - i3 - i2 - i0
    table = _KAISER12_TABLE
    return (
        i0 * table[ind]
        + i1 * table[ind + 1]
        + i2 * table[ind + 2]
        + i3 * table[ind + 3]
    )


def sinc(cutoff: float, x: float, n: int) -> float:
    """Windowed sinc of a filter of length ``n`` at offset ``x``."""
    xx = x * cutoff
    if abs(x) < 1e-6:
        return cutoff
    if abs(x) > 0.5 * n:
        return 0.0
    return (
        cutoff
        * math.sin(math.pi * xx)
        / (math.pi * xx)
        * compute_window(abs(2.0 * x / n))
    )


def cubic_coef(frac: float) -> tuple[float, float, float, float]:
    """Interpolation coefficients for a fractional position in [0, 1)."""
    frac2 = frac * frac
    frac3 = frac2 * frac
    c0 = -0.16667 * frac + 0.16667 * frac3
    c1 = frac + 0.5 * frac2 - 0.5 * frac3
    c3 = -0.33333 * frac + 0.5 * frac2 - 0.16667 * frac3
    c2 = 1.0 - c0 - c1 - c3
    return (c0, c1, c2, c3)


def muldiv(value: int, mul: int, div: int) -> int:
    """Compute ``value * mul / div`` within 32-bit unsigned range.

    Raises OverflowError when the result does not fit.
    """
    if div == 0:
        raise ZeroDivisionError("muldiv by zero")
    major, remainder = divmod(value, div)
    if mul and (
        remainder > _UINT32_MAX // mul
        or major > _UINT32_MAX // mul
        or major * mul > _UINT32_MAX - remainder * mul // div
    ):
        raise OverflowError(f"{value} * {mul} / {div} exceeds 32 bits")
    return remainder * mul // div + major * mul


def design_filter(num_rate: int, den_rate: int) -> FilterSpec:
    """Design the interpolation filter for the ratio ``num_rate / den_rate``.

    Raises ValueError for non-positive rates and OverflowError when the
    filter tables would be too large.
    """
    if num_rate <= 0 or den_rate <= 0:
        raise ValueError("rate ratio must be positive")

    int_advance, frac_advance = divmod(num_rate, den_rate)
    oversample = _BASE_OVERSAMPLE
    filt_len = _BASE_LENGTH

    if num_rate > den_rate:
        cutoff = _DOWNSAMPLE_BANDWIDTH * den_rate / num_rate
        filt_len = muldiv(filt_len, num_rate, den_rate)
        # Round up to a multiple of 8.
        filt_len = ((filt_len - 1) & ~0x7) + 8
        for factor in (2, 4, 8, 16):
            if factor * den_rate < num_rate:
                oversample >>= 1
        oversample = max(oversample, 1)
    else:
        cutoff = _UPSAMPLE_BANDWIDTH

    direct_size = (filt_len * den_rate) & _UINT32_MAX
    interp_size = (filt_len * oversample + 8) & _UINT32_MAX
    use_direct = (
        direct_size <= interp_size
        and _INT_MAX // _SAMPLE_SIZE // den_rate >= filt_len
    )

    if use_direct:
        half = filt_len // 2
        table = tuple(
            sinc(cutoff, (j - half + 1) - phase / den_rate, filt_len)
            for phase in range(den_rate)
            for j in range(filt_len)
        )
    else:
        if (_INT_MAX // _SAMPLE_SIZE - 8) // oversample < filt_len:
            raise OverflowError("interpolation table too large")
        half = filt_len // 2
        table = tuple(
            sinc(cutoff, i / oversample - half, filt_len)
            for i in range(-4, oversample * filt_len + 4)
        )

    return FilterSpec(
        num_rate=num_rate,
        den_rate=den_rate,
        int_advance=int_advance,
        frac_advance=frac_advance,
        filt_len=filt_len,
        oversample=oversample,
        cutoff=cutoff,
        use_direct=use_direct,
        sinc_table=table,
    )