from __future__ import annotations

import json
import math
import os
from pathlib import Path
from typing import Mapping

from pydantic import BaseModel, Field, field_validator, model_validator

from loudmeter.loudness_contract import (
    DEFAULT_ANALYSIS_BLOCK_SIZE,
    MOMENTARY_WINDOW_S,
    REFERENCE_SAMPLE_RATE_HZ,
    SHORT_TERM_WINDOW_S,
)

_ENV_PREFIX = "LOUDMETER_"


class MeterConfig(BaseModel):
    sample_rate_hz: float = Field(REFERENCE_SAMPLE_RATE_HZ, gt=0.0)
    channel_count: int = Field(2, ge=1)
    analysis_block_size: int = Field(DEFAULT_ANALYSIS_BLOCK_SIZE, gt=0)
    momentary_window_s: float = Field(MOMENTARY_WINDOW_S, gt=0.0)
    short_term_window_s: float = Field(SHORT_TERM_WINDOW_S, gt=0.0)

    @field_validator("sample_rate_hz")
    @classmethod
    def _validate_sample_rate(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("sample_rate_hz must be finite.")
        return value

    @model_validator(mode="after")
    def _validate_windows(self) -> "MeterConfig":
        if self.short_term_window_s < self.momentary_window_s:
            raise ValueError("short_term_window_s must be >= momentary_window_s.")
        return self

    @property
    def blocks_per_second(self) -> float:
        return self.sample_rate_hz / self.analysis_block_size


def load_meter_config(path: Path) -> MeterConfig:
    data = _load_config_data(path)
    return MeterConfig.model_validate(data)


def load_meter_config_from_env(environ: Mapping[str, str] | None = None) -> MeterConfig:
    """Build a config from ``LOUDMETER_*`` variables, e.g. ``LOUDMETER_SAMPLE_RATE_HZ``."""

    environ = os.environ if environ is None else environ
    data = {}
    for name in MeterConfig.model_fields:
        raw = environ.get(f"{_ENV_PREFIX}{name.upper()}")
        if raw is not None and raw.strip():
            data[name] = raw.strip()
    return MeterConfig.model_validate(data)


def _load_config_data(path: Path) -> dict:
    if path.suffix.lower() in {".yaml", ".yml"}:
        try:
            import yaml
        except ImportError as exc:
            raise ImportError("PyYAML is required to load YAML configs.") from exc

        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle) or {}

    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)
