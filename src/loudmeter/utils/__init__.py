from .config import MeterConfig, load_meter_config, load_meter_config_from_env

__all__ = [
    "MeterConfig",
    "load_meter_config",
    "load_meter_config_from_env",
]
