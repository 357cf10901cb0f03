import pytest

from hrtfkit.hrtf import Hrtf, SofaArray
from hrtfkit.interpolate import interpolate

NONE = [-1, -1, -1, -1, -1, -1]


def _hrtf(filters, delays):
    # three measurements, two receivers, two samples per filter
    return Hrtf(
        C=3,
        R=2,
        N=2,
        M=3,
        source_position=SofaArray(
            [1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0], {"Type": "cartesian"}
        ),
        data_ir=SofaArray(list(filters)),
        data_delay=SofaArray(list(delays)),
    )


FILTERS = [
    0.0, 0.0, 0.0, 0.0,
    1.0, 1.0, 1.0, 1.0,
    0.5, 0.25, -0.5, 0.75,
]
PER_MEASUREMENT_DELAYS = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]


def test_exact_position_returns_measured_filter():
    hrtf = _hrtf(FILTERS, PER_MEASUREMENT_DELAYS)
    fir, delays = interpolate(hrtf, [0.0, 0.0, 1.0], 2, NONE)
    assert fir == FILTERS[8:12]
    assert delays == (5.0, 6.0)


def test_exact_position_with_shared_delays():
    hrtf = _hrtf(FILTERS, [7.0, 8.0])
    fir, delays = interpolate(hrtf, [1.0, 0.0, 0.0], 0, NONE)
    assert fir == FILTERS[0:4]
    assert delays == (7.0, 8.0)


def test_result_is_a_copy():
    hrtf = _hrtf(FILTERS, PER_MEASUREMENT_DELAYS)
    fir, _ = interpolate(hrtf, [0.0, 1.0, 0.0], 1, NONE)
    fir[0] = 99.0
    assert hrtf.data_ir.values == FILTERS


def test_without_neighbors_nearest_dominates():
    hrtf = _hrtf(FILTERS, PER_MEASUREMENT_DELAYS)
    fir, delays = interpolate(hrtf, [0.9, 0.1, 0.0], 0, NONE)
    assert fir == pytest.approx(FILTERS[0:4])
    assert delays == pytest.approx((1.0, 2.0))


def test_single_neighbor_gives_weighted_average():
    hrtf = _hrtf(FILTERS, PER_MEASUREMENT_DELAYS)
    fir, delays = interpolate(hrtf, [0.8, 0.3, 0.0], 0, [1, -1, -1, -1, -1, -1])
    assert len(fir) == 4
    assert all(0.0 < value < 1.0 for value in fir)
    assert fir[0] == pytest.approx(fir[3])
    assert 1.0 < delays[0] < 3.0
    assert 2.0 < delays[1] < 4.0


def test_constant_filters_stay_constant():
    hrtf = _hrtf([0.25] * 12, PER_MEASUREMENT_DELAYS)
    neighbors = [1, -1, 2, -1, -1, -1]
    fir, _ = interpolate(hrtf, [0.6, 0.4, 0.3], 0, neighbors)
    assert fir == pytest.approx([0.25] * 4)


def test_equidistant_pair_is_ignored():
    hrtf = _hrtf(FILTERS, PER_MEASUREMENT_DELAYS)
    # measurements 1 and 2 are equally far from this coordinate
    fir, delays = interpolate(hrtf, [0.9, 0.2, 0.2], 0, [1, 2, -1, -1, -1, -1])
    assert fir == pytest.approx(FILTERS[0:4])
    assert delays == pytest.approx((1.0, 2.0))


def test_closer_of_pair_is_used():
    hrtf = _hrtf(FILTERS, PER_MEASUREMENT_DELAYS)
    near_one, _ = interpolate(hrtf, [0.8, 0.3, 0.0], 0, [1, 2, -1, -1, -1, -1])
    only_one, _ = interpolate(hrtf, [0.8, 0.3, 0.0], 0, [1, -1, -1, -1, -1, -1])
    assert near_one == pytest.approx(only_one)


def test_shared_delays_only_weight_nearest():
    hrtf = _hrtf(FILTERS, [7.0, 8.0])
    _, delays = interpolate(hrtf, [0.8, 0.3, 0.0], 0, [1, -1, -1, -1, -1, -1])
    assert 0.0 < delays[0] < 7.0
    assert 0.0 < delays[1] < 8.0
    assert delays[0] / delays[1] == pytest.approx(7.0 / 8.0)