"""True peak per ITU-R BS.1770 Annex 2.

Each raw (unweighted) sample is interpolated 4x through a polyphase FIR built
from a 48-tap Kaiser-windowed sinc (beta 7.0), and the running maximum of the
absolute interpolated values is reported in dBTP.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

OVERSAMPLING = 4
TAPS_PER_PHASE = 12
KAISER_BETA = 7.0


def _polyphase_coefficients() -> np.ndarray:
    total_taps = OVERSAMPLING * TAPS_PER_PHASE
    centre = (total_taps - 1) / 2.0
    positions = (np.arange(total_taps) - centre) / OVERSAMPLING
    prototype = np.sinc(positions) * np.kaiser(total_taps, KAISER_BETA)

    # Phase p takes prototype taps p, p + 4, ..., p + 44; each phase gets unity DC gain.
    phases = prototype.reshape(TAPS_PER_PHASE, OVERSAMPLING).T.copy()
    sums = phases.sum(axis=1, keepdims=True)
    return np.where(np.abs(sums) > 1e-10, phases / sums, phases)


POLYPHASE_COEFFICIENTS = _polyphase_coefficients()


@dataclass(slots=True)
class TruePeakState:
    """Per-channel interpolation history and running peak."""

    history: np.ndarray = field(default_factory=lambda: np.zeros(TAPS_PER_PHASE, dtype=np.float64))
    max_abs: float = 0.0


def create_true_peak_state() -> TruePeakState:
    return TruePeakState()


def true_peak_to_dbtp(value: float) -> float:
    if value <= 0.0:
        return float("-inf")
    return 20.0 * math.log10(value)


def process_true_peak(state: TruePeakState, samples: Sequence[float] | np.ndarray) -> float:
    """Feed a block of raw samples and return the running true peak in dBTP."""

    block = np.asarray(samples, dtype=np.float64).ravel()
    if block.size:
        buffer = np.concatenate((state.history, block))
        # One window per new sample, oldest tap first, ending at that sample.
        windows = np.lib.stride_tricks.sliding_window_view(buffer, TAPS_PER_PHASE)[1:]
        interpolated = windows @ POLYPHASE_COEFFICIENTS.T
        state.max_abs = max(state.max_abs, float(np.max(np.abs(interpolated))))
        state.history = buffer[-TAPS_PER_PHASE:].copy()
    return true_peak_to_dbtp(state.max_abs)


def reset_true_peak(state: TruePeakState) -> None:
    state.max_abs = 0.0
    state.history.fill(0.0)
