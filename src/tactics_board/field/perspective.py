"""Rotation / tilt / zoom state for the pitch surface and its projection.

The composed CSS transform is ``perspective(d) scale(s) rotateZ(r) rotateX(t)``
anchored at the pitch centre, where ``s = 0.675 * zoom``.  Normalized player
coordinates are never changed by the transform; only their rendered position is.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Tuple

from tactics_board.config.field import (
    BASE_FIT_SCALE,
    DEFAULT_ROTATION,
    DEFAULT_TILT,
    DEFAULT_ZOOM,
    PERSPECTIVE_DISTANCE,
    ROTATION_STEP,
    TILT_MAX,
    TILT_MIN,
    TILT_STEP,
    ZOOM_LADDER,
)
from tactics_board.field.coordinates import Rect, Viewport, to_pointer


def _on_rung(value: float, rung: float) -> bool:
    return math.isclose(value, rung, abs_tol=1e-9)


@dataclass(frozen=True)
class PerspectiveState:
    rotation_angle: float = DEFAULT_ROTATION
    tilt_angle: float = DEFAULT_TILT
    zoom_level: float = DEFAULT_ZOOM

    @property
    def scale(self) -> float:
        return BASE_FIT_SCALE * self.zoom_level

    @property
    def on_zoom_ladder(self) -> bool:
        return any(_on_rung(self.zoom_level, rung) for rung in ZOOM_LADDER)

    def rotate_left(self) -> "PerspectiveState":
        return replace(self, rotation_angle=(self.rotation_angle - ROTATION_STEP) % 360)

    def rotate_right(self) -> "PerspectiveState":
        return replace(self, rotation_angle=(self.rotation_angle + ROTATION_STEP) % 360)

    def tilt_up(self) -> "PerspectiveState":
        return replace(self, tilt_angle=min(TILT_MAX, max(TILT_MIN, self.tilt_angle + TILT_STEP)))

    def tilt_down(self) -> "PerspectiveState":
        return replace(self, tilt_angle=max(TILT_MIN, min(TILT_MAX, self.tilt_angle - TILT_STEP)))

    def zoom_in(self) -> "PerspectiveState":
        for rung in ZOOM_LADDER:
            if rung > self.zoom_level and not _on_rung(self.zoom_level, rung):
                return replace(self, zoom_level=rung)
        return replace(self, zoom_level=ZOOM_LADDER[-1]) if self.zoom_level > ZOOM_LADDER[-1] else self

    def zoom_out(self) -> "PerspectiveState":
        for rung in reversed(ZOOM_LADDER):
            if rung < self.zoom_level and not _on_rung(self.zoom_level, rung):
                return replace(self, zoom_level=rung)
        return replace(self, zoom_level=ZOOM_LADDER[0]) if self.zoom_level < ZOOM_LADDER[0] else self

    def css_transform(self) -> str:
        return (
            f"perspective({PERSPECTIVE_DISTANCE:g}px) "
            f"scale({self.scale:g}) "
            f"rotateZ({self.rotation_angle:g}deg) "
            f"rotateX({self.tilt_angle:g}deg)"
        )


def project_point(state: PerspectiveState, rect: Rect, x: float, y: float) -> Tuple[float, float]:
    """Screen position of pitch point ``(x, y)`` once ``state`` is applied to ``rect``.

    Mirrors the CSS matrix product: the point goes through rotateX, then
    rotateZ, then scale, then the perspective divide, relative to the centre.
    """

    cx, cy = rect.center
    px, py = to_pointer(x, y, rect)
    dx, dy = px - cx, py - cy

    tilt = math.radians(state.tilt_angle)
    y1 = dy * math.cos(tilt)
    z1 = dy * math.sin(tilt)

    rot = math.radians(state.rotation_angle)
    x2 = dx * math.cos(rot) - y1 * math.sin(rot)
    y2 = dx * math.sin(rot) + y1 * math.cos(rot)

    x3 = x2 * state.scale
    y3 = y2 * state.scale

    w = 1.0 - z1 / PERSPECTIVE_DISTANCE
    return (cx + x3 / w, cy + y3 / w)


class ProjectedGeometry:
    """Headless geometry provider that derives marker positions by projection.

    Stands in for bounding-rect lookups on a real rendering surface.  The
    field rect is the untransformed container box used for drag math.
    """

    def __init__(self, field_rect: Rect, viewport: Viewport, state_getter, player_getter) -> None:
        self._field_rect = field_rect
        self._viewport = viewport
        self._state_getter = state_getter
        self._player_getter = player_getter

    def field_rect(self) -> Rect:
        return self._field_rect

    def viewport(self) -> Viewport:
        return self._viewport

    def marker_point(self, player_id: int) -> Tuple[float, float] | None:
        player = self._player_getter(player_id)
        if player is None:
            return None
        return project_point(self._state_getter(), self._field_rect, player.x, player.y)


__all__ = [
    "PerspectiveState",
    "ProjectedGeometry",
    "project_point",
]
