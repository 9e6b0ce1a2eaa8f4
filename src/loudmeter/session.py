"""A single loudness measurement session fed one analysis block at a time.

The session keeps the momentary (400 ms) and short-term (3 s) windows as rings
of per-channel mean squares. Every time a full momentary window's worth of
analysis blocks has been pushed, the momentary average becomes a gating block,
and once the short-term ring is full the short-term loudness is added to the
loudness range histogram. Raw blocks, when supplied, feed a per-channel
true peak meter.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence
from uuid import uuid4

import numpy as np

from loudmeter.blocks import MeanSquareRing, block_mean_square, mean_square_to_db
from loudmeter.event_publisher import EventPublisher, NullEventPublisher
from loudmeter.events import GatingBlockAdded, LraBlockAdded, MeasurementReset
from loudmeter.gating import add_gating_block, compute_integrated_loudness, create_gating_state, reset_gating_state
from loudmeter.kweighting import KWeightCoeffs, KWeightingCache, design_k_weighting
from loudmeter.loudness_contract import MAX_CHANNEL_COUNT
from loudmeter.lra import add_lra_block, compute_lra, create_lra_state, reset_lra_state
from loudmeter.true_peak import create_true_peak_state, process_true_peak, reset_true_peak, true_peak_to_dbtp
from loudmeter.utils.config import MeterConfig


@dataclass(frozen=True, slots=True)
class LoudnessReading:
    """Meter values after one analysis block. LUFS and dBTP fields may be ``-inf``."""

    momentary: float
    short_term: float
    integrated: float
    loudness_range: float
    momentary_per_channel: tuple[float, ...]
    true_peak: float
    true_peak_per_channel: tuple[float, ...]


class LoudnessMeterSession:
    """Owns the windows, gating state and loudness range state of one audio source."""

    def __init__(
        self,
        config: MeterConfig | None = None,
        *,
        cache: KWeightingCache | None = None,
        event_publisher: EventPublisher | None = None,
        session_id: str | None = None,
    ) -> None:
        self.config = config if config is not None else MeterConfig()
        self.session_id = session_id or str(uuid4())
        self.channel_count = min(self.config.channel_count, MAX_CHANNEL_COUNT)
        self._cache = cache
        self._event_publisher = event_publisher or NullEventPublisher()

        blocks_per_second = self.config.blocks_per_second
        self.momentary_capacity = math.ceil(self.config.momentary_window_s * blocks_per_second)
        self.short_term_capacity = math.ceil(self.config.short_term_window_s * blocks_per_second)

        self._momentary = MeanSquareRing(self.momentary_capacity, self.channel_count)
        self._short_term = MeanSquareRing(self.short_term_capacity, self.channel_count)
        self._blocks_since_gate = 0

        self.gating = create_gating_state(self.channel_count)
        self.lra = create_lra_state(self.channel_count)
        self.true_peaks = [create_true_peak_state() for _ in range(self.channel_count)]

    @property
    def k_weighting(self) -> KWeightCoeffs:
        return design_k_weighting(self.config.sample_rate_hz, cache=self._cache)

    def push_samples(
        self,
        channel_blocks: Sequence[Sequence[float]] | np.ndarray,
        *,
        raw_blocks: Sequence[Sequence[float]] | np.ndarray | None = None,
    ) -> LoudnessReading:
        """Feed one block of already K-weighted samples per channel.

        ``raw_blocks`` holds the same block before K-weighting and drives the
        true peak reading; without it the true peak keeps its previous value.
        """

        mean_squares = [block_mean_square(block) for block in channel_blocks[: self.channel_count]]
        return self.push_mean_squares(mean_squares, raw_blocks=raw_blocks)

    def push_mean_squares(
        self,
        per_channel_mean_squares: Sequence[float],
        *,
        raw_blocks: Sequence[Sequence[float]] | np.ndarray | None = None,
    ) -> LoudnessReading:
        mean_squares = [float(value) for value in per_channel_mean_squares[: self.channel_count]]
        if len(mean_squares) != self.channel_count:
            raise ValueError(f"Expected {self.channel_count} channel mean squares, got {len(mean_squares)}.")

        if raw_blocks is not None:
            for state, block in zip(self.true_peaks, raw_blocks[: self.channel_count]):
                process_true_peak(state, block)
        true_peak_per_channel = tuple(true_peak_to_dbtp(state.max_abs) for state in self.true_peaks)

        self._momentary.push(mean_squares)
        self._short_term.push(mean_squares)

        momentary = self._momentary.lufs()
        short_term = self._short_term.lufs()

        self._blocks_since_gate += 1
        if self._blocks_since_gate >= self.momentary_capacity:
            self._blocks_since_gate = 0
            self._add_gating_block()
            if self._short_term.is_full:
                self._add_lra_block(short_term)

        return LoudnessReading(
            momentary=momentary,
            short_term=short_term,
            integrated=compute_integrated_loudness(self.gating),
            loudness_range=compute_lra(self.lra),
            momentary_per_channel=tuple(mean_square_to_db(value) for value in mean_squares),
            true_peak=max(true_peak_per_channel, default=float("-inf")),
            true_peak_per_channel=true_peak_per_channel,
        )

    def reset(self) -> None:
        """Clear integrated loudness, loudness range and true peak; the sliding windows keep running."""

        reset_gating_state(self.gating)
        reset_lra_state(self.lra)
        for state in self.true_peaks:
            reset_true_peak(state)
        self._event_publisher.publish(
            MeasurementReset(
                correlation_id=self.session_id,
                payload_summary={"channel_count": self.channel_count},
            )
        )

    def _add_gating_block(self) -> None:
        block_lufs = add_gating_block(self.gating, self._momentary.average())
        self._event_publisher.publish(
            GatingBlockAdded(
                correlation_id=self.session_id,
                payload_summary={"block_lufs": block_lufs, "block_count": self.gating.block_count},
            )
        )

    def _add_lra_block(self, short_term: float) -> None:
        add_lra_block(self.lra, short_term)
        self._event_publisher.publish(
            LraBlockAdded(
                correlation_id=self.session_id,
                payload_summary={"short_term_lufs": short_term, "total_blocks": self.lra.total_blocks},
            )
        )
