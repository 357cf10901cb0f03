"""Validation, resampling, lookup and interpolation of HRTF sets."""

__version__ = "1.3.0"