"""Loudness measurement contract shared by every stage of the meter.

Invariants
----------
* LUFS values may be ``-inf``; that is the "no measurable signal" sentinel and
  never an error.
* Loudness range is ``0.0`` when there is not enough data to measure it.
* K-weighting reference constants are defined at ``REFERENCE_SAMPLE_RATE_HZ``.
"""

from __future__ import annotations

# BS.1770 reference rate for the K-weighting biquads.
REFERENCE_SAMPLE_RATE_HZ = 48_000.0
REFERENCE_RATE_TOLERANCE_HZ = 0.5

# L = LOUDNESS_OFFSET_DB + 10 * log10(sum(G_i * z_i))
LOUDNESS_OFFSET_DB = -0.691

ABSOLUTE_GATE_LUFS = -70.0
RELATIVE_GATE_LU = -10.0

# EBU Tech 3342 loudness range histogram.
LRA_BINS = 1000
LRA_MIN_LUFS = -70.0
LRA_MAX_LUFS = 10.0
LRA_BIN_WIDTH = (LRA_MAX_LUFS - LRA_MIN_LUFS) / LRA_BINS
LRA_RELATIVE_GATE_LU = -20.0
LRA_LOW_PERCENTILE = 0.10
LRA_HIGH_PERCENTILE = 0.95

MOMENTARY_WINDOW_S = 0.4
SHORT_TERM_WINDOW_S = 3.0
DEFAULT_ANALYSIS_BLOCK_SIZE = 2048

MAX_CHANNEL_COUNT = 6


class FilterDesignError(ValueError):
    """Raised when a bilinear re-discretization has a zero leading denominator term."""
