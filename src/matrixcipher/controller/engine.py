"""
Single-step cipher application. Pure functions, no shared state.
"""
from __future__ import annotations

from matrixcipher.model.key_series import KeySeries
from matrixcipher.model.matrix import Matrix


def _check_index(series: KeySeries, index: int) -> None:
    if not 0 <= index < series.num_steps:
        raise IndexError(f"Step index {index} out of range 0..{series.num_steps - 1}.")


def apply_forward(series: KeySeries, index: int, current: Matrix) -> Matrix:
    """Encrypt one step: ``encrypt_series[index] @ current``."""
    _check_index(series, index)
    return series.encrypt_series[index] @ current


def apply_backward(series: KeySeries, index: int, current: Matrix) -> Matrix:
    """Decrypt one step: ``decrypt_series[index] @ current``."""
    _check_index(series, index)
    return series.decrypt_series[index] @ current
