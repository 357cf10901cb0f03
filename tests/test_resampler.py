import math

import pytest

from hrtfkit.resampler import ERR_INVALID_ARG, Resampler, ResamplerError


def _middle_close_to_one(values, tolerance=0.02):
    return all(abs(v - 1.0) < tolerance for v in values)


def test_invalid_channel_count():
    with pytest.raises(ResamplerError) as info:
        Resampler(0, 8000, 16000)
    assert info.value.code == ERR_INVALID_ARG


def test_invalid_rate():
    with pytest.raises(ResamplerError):
        Resampler(1, 0, 16000)


def test_invalid_quality():
    with pytest.raises(ResamplerError):
        Resampler(1, 8000, 16000, 11)


def test_set_quality_out_of_range():
    r = Resampler(1, 8000, 16000)
    with pytest.raises(ResamplerError):
        r.set_quality(-1)


def test_set_rate_frac_zero_rejected():
    r = Resampler(1, 8000, 16000)
    with pytest.raises(ResamplerError):
        r.set_rate_frac(0, 1, 8000, 8000)


def test_bad_channel_index():
    r = Resampler(1, 8000, 16000)
    with pytest.raises(ResamplerError):
        r.process_float(1, [1.0], 4)


def test_output_latency_up_and_down():
    assert Resampler(1, 8000, 16000).output_latency() == 256
    assert Resampler(1, 16000, 8000).output_latency() == 128


def test_upsampling_preserves_dc():
    r = Resampler(1, 8000, 16000)
    r.skip_zeros()
    consumed, out = r.process_float(0, [1.0] * 600, 1200)
    assert consumed == 600
    assert 800 < len(out) <= 1200
    assert _middle_close_to_one(out[300:800])


def test_downsampling_preserves_dc():
    r = Resampler(1, 16000, 8000)
    r.skip_zeros()
    consumed, out = r.process_float(0, [1.0] * 2000, 1000)
    assert consumed == 2000
    assert len(out) <= 1000
    assert _middle_close_to_one(out[300:700])


def test_interpolated_table_preserves_dc():
    r = Resampler(1, 44100, 48000)
    r.skip_zeros()
    consumed, out = r.process_float(0, [1.0] * 600, 700)
    assert consumed == 600
    assert _middle_close_to_one(out[160:480])


def test_output_limited_by_out_len():
    r = Resampler(1, 8000, 16000)
    r.skip_zeros()
    consumed, out = r.process_float(0, [0.5] * 600, 50)
    assert len(out) == 50
    assert consumed < 600


def test_reset_mem_makes_runs_repeatable():
    r = Resampler(1, 8000, 16000)
    signal = [math.sin(i * 0.1) for i in range(300)]
    r.reset_mem()
    r.skip_zeros()
    first = r.process_float(0, signal, 600)
    r.reset_mem()
    r.skip_zeros()
    second = r.process_float(0, signal, 600)
    assert first == second


def test_rate_change_after_start_grows_and_shrinks_filter():
    r = Resampler(1, 8000, 16000)
    r.skip_zeros()
    _, out1 = r.process_float(0, [1.0] * 300, 600)
    r.set_rate_frac(2, 1, 16000, 8000)
    assert r.filt_len == 512
    consumed2, out2 = r.process_float(0, [1.0] * 300, 600)
    r.set_rate_frac(1, 2, 8000, 16000)
    assert r.filt_len == 256
    consumed3, out3 = r.process_float(0, [1.0] * 300, 2000)
    assert consumed2 == 300
    assert consumed3 == 300
    assert out1 and out3
    assert all(math.isfinite(v) for v in out1 + out2 + out3)