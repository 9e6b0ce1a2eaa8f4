"""Block energy aggregation and windowed (momentary/short-term) loudness."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from .channels import channel_weight
from .loudness_contract import LOUDNESS_OFFSET_DB


def block_mean_square(samples: Sequence[float] | np.ndarray) -> float:
    """Mean square power of a block of K-weighted samples.

    The block must not be empty.
    """

    block = np.asarray(samples, dtype=np.float64)
    return float(np.mean(np.square(block)))


def lufs_from_mean_squares(mean_squares: Sequence[float] | np.ndarray, channel_count: int) -> float:
    """Loudness ``-0.691 + 10 log10(sum(G_i * z_i))`` of per-channel mean squares.

    Returns ``-inf`` when the weighted sum is not positive (silence, or energy
    only on excluded channels such as LFE).
    """

    total = 0.0
    for index, mean_square in enumerate(mean_squares):
        total += channel_weight(index, channel_count) * float(mean_square)
    if total <= 0.0:
        return float("-inf")
    return LOUDNESS_OFFSET_DB + 10.0 * math.log10(total)


def _average_blocks(blocks: Sequence[Sequence[float]], block_count: int, channel_count: int) -> list[float]:
    # Extra channels are ignored and missing channels count as silence.
    stacked = np.zeros((block_count, channel_count), dtype=np.float64)
    for row, block in enumerate(blocks[:block_count]):
        values = np.asarray(block, dtype=np.float64).ravel()[:channel_count]
        stacked[row, : values.size] = values
    return np.mean(stacked, axis=0).tolist()


def windowed_lufs(ring: Sequence[Sequence[float]], valid_block_count: int, channel_count: int) -> float:
    """Loudness of the first ``valid_block_count`` per-channel mean-square vectors in ``ring``.

    Each channel is averaged in the energy domain before the log conversion.
    """

    if valid_block_count == 0:
        return float("-inf")
    return lufs_from_mean_squares(_average_blocks(ring, valid_block_count, channel_count), channel_count)


def mean_square_to_db(mean_square: float) -> float:
    """Single-channel K-weighted level in dB, ``-inf`` for silence."""

    if mean_square <= 0.0:
        return float("-inf")
    return 10.0 * math.log10(mean_square)


class MeanSquareRing:
    """Fixed-capacity ring of per-channel mean-square vectors."""

    def __init__(self, capacity: int, channel_count: int) -> None:
        if capacity < 1:
            raise ValueError("Ring capacity must be at least one block.")
        self.capacity = capacity
        self.channel_count = channel_count
        self._blocks = [[0.0] * channel_count for _ in range(capacity)]
        self._next = 0
        self._count = 0

    @property
    def valid_count(self) -> int:
        return self._count

    @property
    def is_full(self) -> bool:
        return self._count >= self.capacity

    def push(self, mean_squares: Sequence[float]) -> None:
        self._blocks[self._next] = [float(value) for value in mean_squares]
        self._next = (self._next + 1) % self.capacity
        self._count = min(self._count + 1, self.capacity)

    def average(self) -> list[float]:
        if self._count == 0:
            return [0.0] * self.channel_count
        return _average_blocks(self._blocks, self._count, self.channel_count)

    def lufs(self) -> float:
        return windowed_lufs(self._blocks, self._count, self.channel_count)

    def clear(self) -> None:
        self._blocks = [[0.0] * self.channel_count for _ in range(self.capacity)]
        self._next = 0
        self._count = 0
