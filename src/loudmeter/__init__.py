"""Public package exports for loudmeter with lazy imports."""

from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = [
    "BiquadCoeffs",
    "KWeightCoeffs",
    "KWeightingCache",
    "design_k_weighting",
    "channel_weight",
    "block_mean_square",
    "lufs_from_mean_squares",
    "windowed_lufs",
    "GatingState",
    "create_gating_state",
    "add_gating_block",
    "compute_integrated_loudness",
    "reset_gating_state",
    "LraState",
    "create_lra_state",
    "add_lra_block",
    "compute_lra",
    "reset_lra_state",
    "TruePeakState",
    "create_true_peak_state",
    "process_true_peak",
    "reset_true_peak",
    "LoudnessMeterSession",
    "LoudnessReading",
    "MeterConfig",
    "FilterDesignError",
]

_EXPORT_MODULES: dict[str, str] = {
    "BiquadCoeffs": "loudmeter.kweighting",
    "KWeightCoeffs": "loudmeter.kweighting",
    "KWeightingCache": "loudmeter.kweighting",
    "design_k_weighting": "loudmeter.kweighting",
    "channel_weight": "loudmeter.channels",
    "block_mean_square": "loudmeter.blocks",
    "lufs_from_mean_squares": "loudmeter.blocks",
    "windowed_lufs": "loudmeter.blocks",
    "GatingState": "loudmeter.gating",
    "create_gating_state": "loudmeter.gating",
    "add_gating_block": "loudmeter.gating",
    "compute_integrated_loudness": "loudmeter.gating",
    "reset_gating_state": "loudmeter.gating",
    "LraState": "loudmeter.lra",
    "create_lra_state": "loudmeter.lra",
    "add_lra_block": "loudmeter.lra",
    "compute_lra": "loudmeter.lra",
    "reset_lra_state": "loudmeter.lra",
    "TruePeakState": "loudmeter.true_peak",
    "create_true_peak_state": "loudmeter.true_peak",
    "process_true_peak": "loudmeter.true_peak",
    "reset_true_peak": "loudmeter.true_peak",
    "LoudnessMeterSession": "loudmeter.session",
    "LoudnessReading": "loudmeter.session",
    "MeterConfig": "loudmeter.utils.config",
    "FilterDesignError": "loudmeter.loudness_contract",
}


def __getattr__(name: str) -> Any:
    if name not in _EXPORT_MODULES:
        raise AttributeError(f"module 'loudmeter' has no attribute {name!r}")

    module = import_module(_EXPORT_MODULES[name])
    value = getattr(module, name)
    globals()[name] = value
    return value
