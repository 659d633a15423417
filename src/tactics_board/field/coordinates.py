"""Conversion between pointer (viewport pixel) space and normalized pitch space.

Pointer math is perspective-agnostic: the container rectangle handed in is
whatever bounding box the rendering surface reports, and drags always move a
player along the flat semantic pitch rather than the tilted visual plane.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Tuple

from tactics_board.config.field import clamp_percent


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center(self) -> Tuple[float, float]:
        return (self.left + self.width / 2, self.top + self.height / 2)

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float


class GeometryProvider(Protocol):
    """Source of on-screen geometry for the field and its markers."""

    def field_rect(self) -> Rect:
        ...

    def marker_point(self, player_id: int) -> Tuple[float, float] | None:
        ...

    def viewport(self) -> Viewport:
        ...


def to_normalized(pointer_x: float, pointer_y: float, rect: Rect) -> Tuple[float, float]:
    """Map a pointer position to clamped pitch percentages."""

    if rect.is_degenerate:
        raise ValueError(f"container rect has no area: {rect!r}")
    x = 100.0 * (pointer_x - rect.left) / rect.width
    y = 100.0 * (pointer_y - rect.top) / rect.height
    return clamp_percent(x), clamp_percent(y)


def to_pointer(x: float, y: float, rect: Rect) -> Tuple[float, float]:
    """Inverse of :func:`to_normalized` for in-range coordinates."""

    return (rect.left + rect.width * x / 100.0, rect.top + rect.height * y / 100.0)
