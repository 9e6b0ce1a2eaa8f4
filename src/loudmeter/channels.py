"""BS.1770 channel weighting for mono, stereo and 5.1 layouts."""

from __future__ import annotations

# SMPTE order: FL, FR, C, LFE, SL, SR. LFE is excluded; surrounds get +1.5 dB.
CHANNEL_WEIGHTS_5_1: tuple[float, ...] = (1.0, 1.0, 1.0, 0.0, 1.41, 1.41)


def channel_weight(index: int, channel_count: int) -> float:
    """Return the weighting factor ``G_i`` of channel ``index`` in a ``channel_count`` layout.

    Layouts other than mono, stereo and 6-channel 5.1 weight every channel ``1.0``.
    """

    if channel_count <= 2:
        return 1.0
    if channel_count == 6 and 0 <= index < len(CHANNEL_WEIGHTS_5_1):
        return CHANNEL_WEIGHTS_5_1[index]
    return 1.0


def channel_weights(channel_count: int) -> tuple[float, ...]:
    return tuple(channel_weight(index, channel_count) for index in range(channel_count))
