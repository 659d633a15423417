"""Environment driven runtime settings for the export bridge."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass


logger = logging.getLogger("uvicorn.error")

_ENV_PREFIX = "TACTICS_BOARD_"
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_float(name: str, default: float, *, clamp_min: float | None = None, clamp_max: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    if clamp_max is not None:
        value = min(clamp_max, value)
    return value


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    logger.warning("Invalid bool for %s: %s; using default %s", name, raw, default)
    return default


@dataclass(frozen=True)
class ExportSettings:
    viewport_width: int = 3840
    viewport_height: int = 2160
    device_scale_factor: float = 2.0
    navigation_timeout_ms: int = 30_000
    ready_timeout_ms: int = 30_000
    settle_ms: int = 1_500
    reflow_wait_ms: int = 500
    max_concurrent_exports: int = 4
    context_acquire_timeout_ms: int = 10_000
    headless: bool = True
    render_origin: str = "http://tactics-board.export"

    @property
    def render_url(self) -> str:
        return f"{self.render_origin}/export-preview"

    @classmethod
    def from_env(cls) -> "ExportSettings":
        defaults = cls()
        return cls(
            viewport_width=_env_int(f"{_ENV_PREFIX}VIEWPORT_WIDTH", defaults.viewport_width, min_value=1),
            viewport_height=_env_int(f"{_ENV_PREFIX}VIEWPORT_HEIGHT", defaults.viewport_height, min_value=1),
            device_scale_factor=_env_float(
                f"{_ENV_PREFIX}DEVICE_SCALE", defaults.device_scale_factor, clamp_min=1.0, clamp_max=4.0
            ),
            navigation_timeout_ms=_env_int(
                f"{_ENV_PREFIX}NAVIGATION_TIMEOUT_MS", defaults.navigation_timeout_ms, min_value=1
            ),
            ready_timeout_ms=_env_int(f"{_ENV_PREFIX}READY_TIMEOUT_MS", defaults.ready_timeout_ms, min_value=1),
            settle_ms=_env_int(f"{_ENV_PREFIX}SETTLE_MS", defaults.settle_ms, min_value=0),
            reflow_wait_ms=_env_int(f"{_ENV_PREFIX}REFLOW_WAIT_MS", defaults.reflow_wait_ms, min_value=0),
            max_concurrent_exports=_env_int(
                f"{_ENV_PREFIX}MAX_CONCURRENT_EXPORTS", defaults.max_concurrent_exports, min_value=1
            ),
            context_acquire_timeout_ms=_env_int(
                f"{_ENV_PREFIX}CONTEXT_ACQUIRE_TIMEOUT_MS", defaults.context_acquire_timeout_ms, min_value=1
            ),
            headless=_env_bool(f"{_ENV_PREFIX}HEADLESS", defaults.headless),
        )
