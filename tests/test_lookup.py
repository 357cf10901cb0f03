import math

import pytest

from hrtfkit.coords import s2c
from hrtfkit.hrtf import ErrorCode, Hrtf, SofaArray, SofaError
from hrtfkit.lookup import Lookup


def _hrtf(points, kind="cartesian"):
    flat = [v for p in points for v in p]
    return Hrtf(
        C=3,
        M=len(points),
        source_position=SofaArray(values=flat, attributes={"Type": kind}),
    )


def _circle(radius=1.0, step=10):
    return [s2c((az, 0.0, radius)) for az in range(0, 360, step)]


def test_spherical_positions_rejected():
    with pytest.raises(SofaError) as info:
        Lookup(_hrtf([(0.0, 0.0, 1.0)], kind="spherical"))
    assert info.value.code == ErrorCode.INTERNAL_ERROR


def test_empty_set_raises_on_lookup():
    lookup = Lookup(_hrtf([]))
    with pytest.raises(SofaError):
        lookup.nearest((1.0, 0.0, 0.0))


def test_exact_positions_found():
    points = _circle()
    lookup = Lookup(_hrtf(points))
    for index, point in enumerate(points):
        assert lookup.nearest(point)[0] == index


def test_ranges_recorded():
    points = [(1.0, 0.0, 0.0), (0.0, 2.0, 0.0), (0.0, 0.0, 3.0)]
    lookup = Lookup(_hrtf(points))
    assert lookup.radius_min == pytest.approx(1.0)
    assert lookup.radius_max == pytest.approx(3.0)
    assert lookup.phi_min == pytest.approx(0.0)
    assert lookup.phi_max == pytest.approx(90.0)
    assert lookup.theta_min == pytest.approx(0.0)
    assert lookup.theta_max == pytest.approx(90.0)


def test_far_coordinate_scaled_to_max_radius():
    lookup = Lookup(_hrtf(_circle(radius=1.0)))
    index, point = lookup.nearest((5.0, 0.0, 0.0))
    assert index == 0
    assert point == pytest.approx((1.0, 0.0, 0.0))


def test_near_coordinate_scaled_to_min_radius():
    lookup = Lookup(_hrtf(_circle(radius=2.0)))
    target = s2c((90.0, 0.0, 0.1))
    index, point = lookup.nearest(target)
    assert index == 9
    assert math.hypot(*point) == pytest.approx(2.0)


def test_coordinate_inside_range_unchanged():
    points = [(1.0, 0.0, 0.0), (3.0, 0.0, 0.0)]
    lookup = Lookup(_hrtf(points))
    index, point = lookup.nearest((2.6, 0.1, 0.0))
    assert index == 1
    assert point == (2.6, 0.1, 0.0)