"""Runtime settings, read from QUADWALK_* environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

from quadwalk.hardware.absolute_truths import (
    BUS,
    PCA_ADDR,
    WRITE_DELAY_US,
    SETTLE_DELAY_US,
    RETRY_DELAY_US,
)


@dataclass
class QuadwalkConfig:
    i2c_bus: int = BUS
    address: int = PCA_ADDR
    steps: int = 20
    interpolation: str = "truncate"
    write_retries: int = 3
    retry_delay_us: int = RETRY_DELAY_US
    abort_on_write_failure: bool = True
    write_delay_us: int = WRITE_DELAY_US
    settle_delay_us: int = SETTLE_DELAY_US
    log_level: str = "INFO"
    log_file: str | None = None


_ENV_KEYS = {
    "i2c_bus": "QUADWALK_I2C_BUS",
    "address": "QUADWALK_PCA_ADDR",
    "steps": "QUADWALK_STEPS",
    "interpolation": "QUADWALK_INTERPOLATION",
    "write_retries": "QUADWALK_WRITE_RETRIES",
    "retry_delay_us": "QUADWALK_RETRY_DELAY_US",
    "abort_on_write_failure": "QUADWALK_ABORT_ON_WRITE_FAILURE",
    "write_delay_us": "QUADWALK_WRITE_DELAY_US",
    "settle_delay_us": "QUADWALK_SETTLE_DELAY_US",
    "log_level": "QUADWALK_LOG_LEVEL",
    "log_file": "QUADWALK_LOG_FILE",
}

_INTERPOLATIONS = {"truncate", "round"}


def _parse_env_value(key: str, default: object) -> object:
    value = os.getenv(_ENV_KEYS[key])
    if value is None or value == "":
        return default
    if isinstance(default, bool):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    if key == "address":
        # Accept "0x40" as well as "64".
        try:
            return int(value, 0)
        except ValueError:
            return default
    if key == "interpolation":
        value = value.strip().lower()
        return value if value in _INTERPOLATIONS else default
    if isinstance(default, int):
        try:
            return int(value)
        except ValueError:
            return default
    return value


def load_config() -> QuadwalkConfig:
    defaults = QuadwalkConfig()
    values: dict[str, object] = {}
    for field_name in _ENV_KEYS:
        default = getattr(defaults, field_name)
        values[field_name] = _parse_env_value(field_name, default)
    return QuadwalkConfig(**values)
