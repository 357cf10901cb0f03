"""Arbitrary-ratio sample-rate converter built on windowed-sinc filters."""

from __future__ import annotations

from collections.abc import Sequence
from math import gcd

from .resampler_filter import FilterSpec, cubic_coef, design_filter, muldiv

ERR_SUCCESS = 0
ERR_ALLOC_FAILED = 1
ERR_BAD_STATE = 2
ERR_INVALID_ARG = 3
ERR_PTR_OVERLAP = 4
ERR_OVERFLOW = 5

QUALITY_MIN = 0
QUALITY_MAX = 10

_BUFFER_SIZE = 160


class ResamplerError(Exception):
    """Raised when the resampler is misconfigured or cannot be set up."""

    def __init__(self, code: int, message: str | None = None) -> None:
        self.code = code
        super().__init__(message or f"resampler error {code}")


class Resampler:
    """Converts streams of float samples between two sampling rates.

    Each channel keeps its own filter memory, so channels are processed
    independently with :meth:`process_float`.
    """

    def __init__(
        self, channels: int, in_rate: int, out_rate: int, quality: int = 10
    ) -> None:
        if channels <= 0 or in_rate <= 0 or out_rate <= 0:
            raise ResamplerError(ERR_INVALID_ARG, "channels and rates must be positive")
        if not QUALITY_MIN <= quality <= QUALITY_MAX:
            raise ResamplerError(ERR_INVALID_ARG, f"quality {quality} out of range")

        self.channels = channels
        self.in_rate = 0
        self.out_rate = 0
        self.num_rate = 0
        self.den_rate = 0
        self.quality = -1
        self.filt_len = 0
        self._initialised = False
        self._started = False
        self._mem_alloc = 0
        self._filter: FilterSpec | None = None
        self._last_sample = [0] * channels
        self._magic = [0] * channels
        self._frac = [0] * channels
        self._mem: list[list[float]] = [[] for _ in range(channels)]

        self.set_quality(quality)
        self.set_rate_frac(in_rate, out_rate, in_rate, out_rate)
        self._update_filter()
        self._initialised = True

    def set_rate_frac(
        self, ratio_num: int, ratio_den: int, in_rate: int, out_rate: int
    ) -> None:
        """Change the conversion ratio and the nominal rates."""
        if ratio_num <= 0 or ratio_den <= 0:
            raise ResamplerError(ERR_INVALID_ARG, "rate ratio must be positive")
        if (
            self.in_rate == in_rate
            and self.out_rate == out_rate
            and self.num_rate == ratio_num
            and self.den_rate == ratio_den
        ):
            return

        old_den = self.den_rate
        self.in_rate = in_rate
        self.out_rate = out_rate
        fact = gcd(ratio_num, ratio_den)
        self.num_rate = ratio_num // fact
        self.den_rate = ratio_den // fact

        if old_den > 0:
            for ch, frac in enumerate(self._frac):
                try:
                    frac = muldiv(frac, self.den_rate, old_den)
                except OverflowError as exc:
                    raise ResamplerError(ERR_OVERFLOW, str(exc)) from exc
                self._frac[ch] = min(frac, self.den_rate - 1)

        if self._initialised:
            self._update_filter()

    def set_quality(self, quality: int) -> None:
        """Change the conversion quality, 0 to 10."""
        if not QUALITY_MIN <= quality <= QUALITY_MAX:
            raise ResamplerError(ERR_INVALID_ARG, f"quality {quality} out of range")
        if self.quality == quality:
            return
        self.quality = quality
        if self._initialised:
            self._update_filter()

    def output_latency(self) -> int:
        """Latency of the filter, measured in output samples."""
        return (
            (self.filt_len // 2) * self.den_rate + (self.num_rate >> 1)
        ) // self.num_rate

    def skip_zeros(self) -> None:
        """Start output at the filter centre so no leading zeros appear."""
        self._last_sample = [self.filt_len // 2] * self.channels

    def reset_mem(self) -> None:
        """Clear the stream state so an unrelated stream can be processed."""
        self._last_sample = [0] * self.channels
        self._magic = [0] * self.channels
        self._frac = [0] * self.channels
        used = max(self.filt_len - 1, 0)
        for mem in self._mem:
            mem[0:used] = [0.0] * used

    def process_float(
        self, channel_index: int, samples: Sequence[float], out_len: int
    ) -> tuple[int, list[float]]:
        """Resample input for one channel.

        Produces at most ``out_len`` samples. Returns how many input samples
        were consumed and the produced output.
        """
        if not 0 <= channel_index < self.channels:
            raise ResamplerError(ERR_INVALID_ARG, f"no channel {channel_index}")
        if self._filter is None:
            raise ResamplerError(ERR_BAD_STATE, "resampler has no filter")

        mem = self._mem[channel_index]
        filt_offs = self.filt_len - 1
        xlen = self._mem_alloc - filt_offs
        remaining_in = len(samples)
        remaining_out = out_len
        output: list[float] = []

        if self._magic[channel_index]:
            produced = self._process_magic(channel_index, remaining_out)
            output.extend(produced)
            remaining_out -= len(produced)

        if not self._magic[channel_index]:
            pos = 0
            while remaining_in and remaining_out:
                chunk = min(remaining_in, xlen)
                mem[filt_offs:filt_offs + chunk] = [
                    float(v) for v in samples[pos:pos + chunk]
                ]
                consumed, produced = self._process_native(
                    channel_index, chunk, remaining_out
                )
                remaining_in -= consumed
                remaining_out -= len(produced)
                output.extend(produced)
                pos += consumed

        return len(samples) - remaining_in, output

    def _update_filter(self) -> None:
        old_length = self.filt_len
        try:
            spec = design_filter(self.num_rate, self.den_rate)
        except OverflowError as exc:
            self._filter = None
            raise ResamplerError(ERR_ALLOC_FAILED, str(exc)) from exc

        self._filter = spec
        filt_len = spec.filt_len
        self.filt_len = filt_len

        min_alloc = filt_len - 1 + _BUFFER_SIZE
        if min_alloc > self._mem_alloc:
            for mem in self._mem:
                mem.extend([0.0] * (min_alloc - len(mem)))
            self._mem_alloc = min_alloc

        if not self._started:
            for mem in self._mem:
                mem[:] = [0.0] * len(mem)
        elif filt_len > old_length:
            for ch, mem in enumerate(self._mem):
                magic = self._magic[ch]
                olen = old_length + 2 * magic
                count = old_length - 1 + magic
                mem[magic:magic + count] = mem[0:count]
                mem[0:magic] = [0.0] * magic
                self._magic[ch] = 0
                if filt_len > olen:
                    mem[filt_len - olen:filt_len - 1] = mem[0:olen - 1]
                    mem[0:filt_len - olen] = [0.0] * (filt_len - olen)
                    self._last_sample[ch] += (filt_len - olen) // 2
                else:
                    new_magic = (olen - filt_len) // 2
                    self._magic[ch] = new_magic
                    count = filt_len - 1 + new_magic
                    mem[0:count] = mem[new_magic:new_magic + count]
        elif filt_len < old_length:
            for ch, mem in enumerate(self._mem):
                old_magic = self._magic[ch]
                magic = (old_length - filt_len) // 2
                count = filt_len - 1 + magic + old_magic
                mem[0:count] = mem[magic:magic + count]
                self._magic[ch] = magic + old_magic

    def _process_native(
        self, ch: int, in_len: int, out_len: int
    ) -> tuple[int, list[float]]:
        self._started = True
        mem = self._mem[ch]
        produced = self._run_kernel(ch, mem, in_len, out_len)

        if self._last_sample[ch] < in_len:
            in_len = self._last_sample[ch]
        self._last_sample[ch] -= in_len

        keep = self.filt_len - 1
        mem[0:keep] = mem[in_len:in_len + keep]
        return in_len, produced

    def _process_magic(self, ch: int, out_len: int) -> list[float]:
        mem = self._mem[ch]
        keep = self.filt_len - 1
        consumed, produced = self._process_native(ch, self._magic[ch], out_len)
        self._magic[ch] -= consumed
        left = self._magic[ch]
        if left:
            mem[keep:keep + left] = mem[keep + consumed:keep + consumed + left]
        return produced

    def _run_kernel(
        self, ch: int, mem: list[float], in_len: int, out_len: int
    ) -> list[float]:
        spec = self._filter
        assert spec is not None
        n = spec.filt_len
        table = spec.sinc_table
        den_rate = spec.den_rate
        int_advance = spec.int_advance
        frac_advance = spec.frac_advance
        oversample = spec.oversample
        last_sample = self._last_sample[ch]
        frac_num = self._frac[ch]
        output: list[float] = []

        while last_sample < in_len and len(output) < out_len:
            window = mem[last_sample:last_sample + n]
            if spec.use_direct:
                row = table[frac_num * n:(frac_num + 1) * n]
                total = sum(a * b for a, b in zip(row, window))
            else:
                scaled = frac_num * oversample
                offset = scaled // den_rate
                frac = (scaled % den_rate) / den_rate
                base = 4 + oversample - offset - 2
                accum = [
                    sum(
                        a * b
                        for a, b in zip(
                            window,
                            table[base + k:base + k + n * oversample:oversample],
                        )
                    )
                    for k in range(4)
                ]
                total = sum(c * a for c, a in zip(cubic_coef(frac), accum))
            output.append(total)

            last_sample += int_advance
            frac_num += frac_advance
            if frac_num >= den_rate:
                frac_num -= den_rate
                last_sample += 1

        self._last_sample[ch] = last_sample
        self._frac[ch] = frac_num
        return output