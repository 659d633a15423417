"""Pitch geometry constants and presentation defaults."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Tuple


MarkerType = Literal["circle", "shirt"]

DEFAULT_FIELD_COLOR = "#0d4b3e"
DEFAULT_PLAYER_COLOR = "#1a1a1a"

# Pitch is drawn 11 wide by 7 tall; normalized coordinates run 0-100 on both axes.
PITCH_ASPECT: Tuple[int, int] = (11, 7)
PITCH_VIEWBOX: Tuple[int, int] = (550, 350)
PITCH_MARGIN = 20
# Touchline box as (left, top, width, height) percentages of the drawn field.
PITCH_BOUNDS: Tuple[float, float, float, float] = (
    100.0 * PITCH_MARGIN / PITCH_VIEWBOX[0],
    100.0 * PITCH_MARGIN / PITCH_VIEWBOX[1],
    100.0 * (PITCH_VIEWBOX[0] - 2 * PITCH_MARGIN) / PITCH_VIEWBOX[0],
    100.0 * (PITCH_VIEWBOX[1] - 2 * PITCH_MARGIN) / PITCH_VIEWBOX[1],
)

ROTATION_STEP = 15.0
TILT_STEP = 5.0
TILT_MIN = 0.0
TILT_MAX = 45.0
DEFAULT_ROTATION = 0.0
DEFAULT_TILT = 20.0
DEFAULT_ZOOM = 1.0
ZOOM_LADDER: Tuple[float, ...] = (0.75, 1.0, 1.2)
BASE_FIT_SCALE = 0.675
PERSPECTIVE_DISTANCE = 1200.0

CONTEXT_MENU_WIDTH = 180.0
CONTEXT_MENU_HEIGHT = 120.0

MARKER_SCALE_MIN = 0.8
MARKER_SCALE_MAX = 1.5
MARKER_SCALE_REFERENCE_WIDTH = 1000.0

LINEUP_SIZE = 11


@dataclass(frozen=True)
class FieldOptions:
    """Presentation options for one editing session.

    Defaults:
        field_color: ``#0d4b3e``
        player_color: ``#1a1a1a``
        show_player_labels: True
        marker_type: ``"circle"``
        enable_context_menu: True
        editable: True
    """

    field_color: str = DEFAULT_FIELD_COLOR
    player_color: str = DEFAULT_PLAYER_COLOR
    show_player_labels: bool = True
    marker_type: MarkerType = "circle"
    enable_context_menu: bool = True
    editable: bool = True


def marker_scale(field_width: float) -> float:
    """Scale factor for markers drawn on a field of ``field_width`` pixels."""

    ratio = field_width / MARKER_SCALE_REFERENCE_WIDTH
    return max(MARKER_SCALE_MIN, min(MARKER_SCALE_MAX, ratio))


def clamp_percent(value: float) -> float:
    """Clamp a normalized pitch coordinate into ``[0, 100]``."""

    return max(0.0, min(100.0, float(value)))
