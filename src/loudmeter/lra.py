"""Loudness range (LRA) per EBU Tech 3342, computed from a short-term loudness histogram."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from .loudness_contract import (
    ABSOLUTE_GATE_LUFS,
    LRA_BIN_WIDTH,
    LRA_BINS,
    LRA_HIGH_PERCENTILE,
    LRA_LOW_PERCENTILE,
    LRA_MAX_LUFS,
    LRA_MIN_LUFS,
    LRA_RELATIVE_GATE_LU,
)


@dataclass(slots=True)
class LraState:
    """Per-program histogram of short-term loudness values."""

    channel_count: int
    histogram: np.ndarray = field(default_factory=lambda: np.zeros(LRA_BINS, dtype=np.uint32))
    total_blocks: int = 0
    # Raw values for inspection only; the histogram drives the computation.
    short_term_loudnesses: list[float] = field(default_factory=list)


def create_lra_state(channel_count: int) -> LraState:
    return LraState(channel_count=channel_count)


def _bin_index(lufs: float) -> int:
    return math.floor((lufs - LRA_MIN_LUFS) / LRA_BIN_WIDTH)


def _bin_center(index: int) -> float:
    return LRA_MIN_LUFS + (index + 0.5) * LRA_BIN_WIDTH


def add_lra_block(state: LraState, short_term_lufs: float) -> None:
    """Record one 3 s short-term loudness value.

    Values outside ``[-70, +10)`` LUFS, including ``-inf``, are kept in
    ``short_term_loudnesses`` but not counted.
    """

    value = float(short_term_lufs)
    state.short_term_loudnesses.append(value)
    if not LRA_MIN_LUFS <= value < LRA_MAX_LUFS:
        return

    index = _bin_index(value)
    if 0 <= index < LRA_BINS:
        state.histogram[index] += 1
        state.total_blocks += 1


def compute_lra(state: LraState) -> float:
    """Loudness range in LU; ``0.0`` when fewer than two blocks survive gating."""

    if state.total_blocks < 2:
        return 0.0

    histogram = state.histogram
    absolute_start = max(0, _bin_index(ABSOLUTE_GATE_LUFS) + 1)

    count_above_absolute = 0
    energy_sum = 0.0
    for index in range(absolute_start, LRA_BINS):
        count = int(histogram[index])
        if count:
            count_above_absolute += count
            energy_sum += count * 10.0 ** (_bin_center(index) / 10.0)
    if count_above_absolute == 0:
        return 0.0

    mean_lufs = 10.0 * math.log10(energy_sum / count_above_absolute)
    relative_start = max(0, _bin_index(mean_lufs + LRA_RELATIVE_GATE_LU) + 1)

    population = int(histogram[relative_start:].sum())
    if population < 2:
        return 0.0

    low_target = math.ceil(population * LRA_LOW_PERCENTILE)
    high_target = math.ceil(population * LRA_HIGH_PERCENTILE)

    cumulative = 0
    low_lufs: float | None = None
    high_lufs = LRA_MAX_LUFS
    for index in range(relative_start, LRA_BINS):
        count = int(histogram[index])
        if not count:
            continue
        cumulative += count
        if low_lufs is None and cumulative >= low_target:
            low_lufs = _bin_center(index)
        if cumulative >= high_target:
            high_lufs = _bin_center(index)
            break

    if low_lufs is None:
        low_lufs = LRA_MIN_LUFS
    return max(0.0, high_lufs - low_lufs)


def reset_lra_state(state: LraState) -> None:
    state.histogram.fill(0)
    state.total_blocks = 0
    state.short_term_loudnesses.clear()
