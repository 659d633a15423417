"""Configuration helpers for pitch geometry, presentation and export settings."""

from .field import (
    DEFAULT_FIELD_COLOR,
    DEFAULT_PLAYER_COLOR,
    FieldOptions,
    MarkerType,
    clamp_percent,
    marker_scale,
)
from .settings import ExportSettings

__all__ = [
    "DEFAULT_FIELD_COLOR",
    "DEFAULT_PLAYER_COLOR",
    "ExportSettings",
    "FieldOptions",
    "MarkerType",
    "clamp_percent",
    "marker_scale",
]
