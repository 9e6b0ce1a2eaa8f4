"""BS.1770 gated integrated loudness.

A :class:`GatingState` collects one entry per 400 ms block: the block's
loudness and the per-channel mean squares it was computed from. Integration
applies the two-stage gate:

1. Absolute gate: keep blocks louder than -70 LUFS.
2. ``Γ_a``: loudness of the energy-domain average of the kept blocks.
3. Relative gate: keep blocks louder than ``Γ_a - 10`` LU.
4. Integrated loudness: energy-domain average of the remaining blocks.

Averages are always taken over mean-square vectors, never over LUFS values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from .blocks import lufs_from_mean_squares, windowed_lufs
from .loudness_contract import ABSOLUTE_GATE_LUFS, RELATIVE_GATE_LU


@dataclass(slots=True)
class GatingState:
    """Per-program accumulator for integrated loudness."""

    channel_count: int
    block_loudnesses: list[float] = field(default_factory=list)
    block_mean_squares: list[list[float]] = field(default_factory=list)

    @property
    def block_count(self) -> int:
        return len(self.block_loudnesses)


def create_gating_state(channel_count: int) -> GatingState:
    return GatingState(channel_count=channel_count)


def add_gating_block(state: GatingState, per_channel_mean_squares: Sequence[float]) -> float:
    """Append a 400 ms block and return its loudness.

    The vector is fitted to ``channel_count``: extra entries are dropped and
    missing channels are stored as silence.
    """

    mean_squares = [float(value) for value in per_channel_mean_squares][: state.channel_count]
    mean_squares.extend([0.0] * (state.channel_count - len(mean_squares)))
    lufs = lufs_from_mean_squares(mean_squares, state.channel_count)
    state.block_loudnesses.append(lufs)
    state.block_mean_squares.append(mean_squares)
    return lufs


def _mean_loudness(state: GatingState, indices: Sequence[int]) -> float:
    selected = [state.block_mean_squares[index] for index in indices]
    return windowed_lufs(selected, len(selected), state.channel_count)


def compute_integrated_loudness(state: GatingState) -> float:
    """Gated integrated loudness in LUFS, ``-inf`` when no block survives the gates."""

    absolute = [index for index, lufs in enumerate(state.block_loudnesses) if lufs > ABSOLUTE_GATE_LUFS]
    if not absolute:
        return float("-inf")

    relative_gate = _mean_loudness(state, absolute) + RELATIVE_GATE_LU
    relative = [index for index in absolute if state.block_loudnesses[index] > relative_gate]
    if not relative:
        return float("-inf")

    return _mean_loudness(state, relative)


def reset_gating_state(state: GatingState) -> None:
    state.block_loudnesses.clear()
    state.block_mean_squares.clear()
