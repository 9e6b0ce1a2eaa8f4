"""K-weighting filter coefficient design for arbitrary sample rates.

BS.1770 publishes the two K-weighting biquads (a high-shelf "pre-filter" and
the RLB high-pass) only at 48 kHz. Other rates are derived by inverting the
bilinear transform at 48 kHz to recover the analog prototype, then applying
the bilinear transform again at the target rate. Both steps are closed-form
substitutions on second-order polynomials.

Designs are memoized per exact sample rate in a :class:`KWeightingCache`.
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass

import numpy as np

from .loudness_contract import (
    REFERENCE_RATE_TOLERANCE_HZ,
    REFERENCE_SAMPLE_RATE_HZ,
    FilterDesignError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BiquadCoeffs:
    """Second-order IIR section ``H(z) = (b0 + b1 z^-1 + b2 z^-2) / (a0 + a1 z^-1 + a2 z^-2)``."""

    b: tuple[float, float, float]
    a: tuple[float, float, float]


@dataclass(frozen=True, slots=True)
class KWeightCoeffs:
    """The two cascaded K-weighting stages: shelf first, then high-pass."""

    shelf: BiquadCoeffs
    highpass: BiquadCoeffs


REFERENCE_K_WEIGHTING = KWeightCoeffs(
    shelf=BiquadCoeffs(
        b=(1.53512485958697, -2.69169618940638, 1.19839281085285),
        a=(1.0, -1.69065929318241, 0.73248077421585),
    ),
    highpass=BiquadCoeffs(
        b=(1.0, -2.0, 1.0),
        a=(1.0, -1.99004745483398, 0.99007225036621),
    ),
)


def _to_analog(coeffs: tuple[float, float, float], k: float) -> tuple[float, float, float]:
    # z^-1 -> (k - s) / (k + s), scaled by (k + s)^2. Returned as (s^2, s^1, s^0).
    c0, c1, c2 = coeffs
    return (
        c0 - c1 + c2,
        2.0 * k * (c0 - c2),
        k * k * (c0 + c1 + c2),
    )


def _to_digital(coeffs: tuple[float, float, float], k: float) -> tuple[float, float, float]:
    # s -> k (1 - z^-1) / (1 + z^-1), scaled by (1 + z^-1)^2. Returned as (z^0, z^-1, z^-2).
    s2, s1, s0 = coeffs
    k2 = k * k
    return (
        s2 * k2 + s1 * k + s0,
        2.0 * (s0 - s2 * k2),
        s2 * k2 - s1 * k + s0,
    )


def _redesign_biquad(biquad: BiquadCoeffs, sample_rate: float) -> BiquadCoeffs:
    k_ref = 2.0 * REFERENCE_SAMPLE_RATE_HZ
    k_tgt = 2.0 * sample_rate

    b = _to_digital(_to_analog(biquad.b, k_ref), k_tgt)
    a = _to_digital(_to_analog(biquad.a, k_ref), k_tgt)

    a0 = a[0]
    if a0 == 0.0 or not math.isfinite(a0):
        raise FilterDesignError(
            f"Bilinear re-discretization at {sample_rate!r} Hz has a degenerate leading denominator term ({a0!r})."
        )

    return BiquadCoeffs(
        b=(b[0] / a0, b[1] / a0, b[2] / a0),
        a=(1.0, a[1] / a0, a[2] / a0),
    )


def _design(sample_rate: float) -> KWeightCoeffs:
    if abs(sample_rate - REFERENCE_SAMPLE_RATE_HZ) < REFERENCE_RATE_TOLERANCE_HZ:
        return REFERENCE_K_WEIGHTING

    return KWeightCoeffs(
        shelf=_redesign_biquad(REFERENCE_K_WEIGHTING.shelf, sample_rate),
        highpass=_redesign_biquad(REFERENCE_K_WEIGHTING.highpass, sample_rate),
    )


class KWeightingCache:
    """Thread-safe get-or-insert store of K-weighting designs keyed by exact sample rate."""

    def __init__(self) -> None:
        self._entries: dict[float, KWeightCoeffs] = {}
        self._lock = threading.Lock()

    def get(self, sample_rate: float) -> KWeightCoeffs:
        key = float(sample_rate)
        cached = self._entries.get(key)
        if cached is not None:
            return cached

        with self._lock:
            cached = self._entries.get(key)
            if cached is None:
                cached = _design(key)
                self._entries[key] = cached
                logger.debug("Designed K-weighting coefficients for %s Hz.", key)
        return cached

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, sample_rate: object) -> bool:
        return sample_rate in self._entries

    def __len__(self) -> int:
        return len(self._entries)


DEFAULT_KWEIGHTING_CACHE = KWeightingCache()


def design_k_weighting(sample_rate: float, *, cache: KWeightingCache | None = None) -> KWeightCoeffs:
    """Return the K-weighting biquads for ``sample_rate``.

    The result is memoized in ``cache`` (the process-wide default when omitted),
    so repeated calls with the same rate return the identical object. Rates
    within 0.5 Hz of 48 kHz return the published reference constants unchanged.
    The sample rate must be positive and finite; it is not re-validated here.
    """

    if cache is None:
        cache = DEFAULT_KWEIGHTING_CACHE
    return cache.get(sample_rate)


def magnitude_response_db(coeffs: KWeightCoeffs, frequency_hz: float, sample_rate: float) -> float:
    """Gain of the cascaded shelf and high-pass stages at ``frequency_hz``, in dB."""

    omega = 2.0 * np.pi * frequency_hz / sample_rate
    z_inv = np.exp(-1j * omega)
    powers = np.array([1.0, z_inv, z_inv * z_inv])

    response = 1.0 + 0.0j
    for stage in (coeffs.shelf, coeffs.highpass):
        response *= np.dot(np.asarray(stage.b), powers) / np.dot(np.asarray(stage.a), powers)

    magnitude = float(np.abs(response))
    if magnitude <= 0.0:
        return float("-inf")
    return float(20.0 * np.log10(magnitude))
