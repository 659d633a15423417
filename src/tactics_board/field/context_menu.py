"""Player context menu anchored to the rendered marker position."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from tactics_board.config.field import CONTEXT_MENU_HEIGHT, CONTEXT_MENU_WIDTH
from tactics_board.field.coordinates import GeometryProvider


@dataclass(frozen=True)
class ContextMenuState:
    visible: bool = False
    x: float = 0.0
    y: float = 0.0
    player_id: Optional[int] = None


class ContextMenu:
    """Open/close/re-anchor logic for the per-player action menu.

    The anchor is always computed from the marker's current on-screen
    position, so :meth:`reposition` must run after any perspective change.
    """

    def __init__(self, geometry: GeometryProvider) -> None:
        self._geometry = geometry
        self.state = ContextMenuState()

    @property
    def visible(self) -> bool:
        return self.state.visible

    def _anchor(self, player_id: int) -> Optional[tuple[float, float]]:
        point = self._geometry.marker_point(player_id)
        if point is None:
            return None
        viewport = self._geometry.viewport()
        x = max(0.0, min(point[0], viewport.width - CONTEXT_MENU_WIDTH))
        y = max(0.0, min(point[1], viewport.height - CONTEXT_MENU_HEIGHT))
        return x, y

    def open(self, player_id: int) -> bool:
        anchor = self._anchor(player_id)
        if anchor is None:
            return False
        self.state = ContextMenuState(visible=True, x=anchor[0], y=anchor[1], player_id=player_id)
        return True

    def reposition(self) -> None:
        if not self.state.visible or self.state.player_id is None:
            return
        anchor = self._anchor(self.state.player_id)
        if anchor is None:
            self.close()
            return
        self.state = replace(self.state, x=anchor[0], y=anchor[1])

    def close(self) -> None:
        if self.state.visible:
            self.state = replace(self.state, visible=False)

    def outside_click(self) -> None:
        self.close()
