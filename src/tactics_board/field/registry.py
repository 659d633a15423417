"""Ordered player collection and the drag controller that mutates it."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional, Tuple

from tactics_board.field.coordinates import GeometryProvider, to_normalized
from tactics_board.field.store import Observable
from tactics_board.models import Player


logger = logging.getLogger("uvicorn.error")


class PlayerRegistry(Observable):
    """Ordered list of players keyed by unique id.

    Players are immutable; every mutation swaps in a validated copy and
    notifies subscribers with ``"players"``.
    """

    def __init__(self, players: Iterable[Player] = ()) -> None:
        super().__init__()
        self._players: List[Player] = []
        self._set(players)

    def _set(self, players: Iterable[Player]) -> None:
        items = list(players)
        ids = [player.id for player in items]
        if len(ids) != len(set(ids)):
            raise ValueError(f"duplicate player ids in {ids}")
        self._players = items

    def __iter__(self) -> Iterator[Player]:
        return iter(list(self._players))

    def __len__(self) -> int:
        return len(self._players)

    def __contains__(self, player_id: object) -> bool:
        return any(player.id == player_id for player in self._players)

    @property
    def players(self) -> Tuple[Player, ...]:
        return tuple(self._players)

    def get(self, player_id: int) -> Optional[Player]:
        for player in self._players:
            if player.id == player_id:
                return player
        return None

    def replace_all(self, players: Iterable[Player]) -> None:
        self._set(players)
        self._notify("players")

    def update(self, player_id: int, **changes) -> bool:
        """Apply ``changes`` to one player; return False if the id is unknown."""

        for idx, player in enumerate(self._players):
            if player.id == player_id:
                self._players[idx] = player.with_changes(**changes)
                self._notify("players")
                return True
        return False

    def remove(self, player_id: int) -> bool:
        before = len(self._players)
        self._players = [player for player in self._players if player.id != player_id]
        if len(self._players) == before:
            return False
        self._notify("players")
        return True

    def captain(self) -> Optional[Player]:
        return next((player for player in self._players if player.is_captain), None)

    @property
    def has_captain(self) -> bool:
        return self.captain() is not None


class DragController:
    """Turns pointer moves into registry updates for one active player.

    Sticky drags restore the player's pre-drag position on release.
    """

    def __init__(self, registry: PlayerRegistry, geometry: GeometryProvider) -> None:
        self._registry = registry
        self._geometry = geometry
        self._active_id: Optional[int] = None
        self._origin: Optional[Tuple[float, float]] = None
        self._sticky = False
        self._pending: Optional[Tuple[float, float]] = None

    @property
    def active_id(self) -> Optional[int]:
        return self._active_id

    @property
    def is_dragging(self) -> bool:
        return self._active_id is not None

    def begin_drag(self, player_id: int, *, sticky: bool = False) -> bool:
        player = self._registry.get(player_id)
        if player is None:
            return False
        self._active_id = player_id
        self._sticky = sticky
        self._origin = (player.x, player.y) if sticky else None
        self._pending = None
        return True

    def on_pointer_move(self, pointer_x: float, pointer_y: float) -> bool:
        """Move the active player under the pointer; False when nothing moved."""

        if self._active_id is None:
            return False
        rect = self._geometry.field_rect()
        if rect.is_degenerate:
            return False
        x, y = to_normalized(pointer_x, pointer_y, rect)
        moved = self._registry.update(self._active_id, x=x, y=y)
        if not moved:
            # Player vanished mid-drag; expected during teardown.
            logger.debug("Dropping pointer move for missing player %s", self._active_id)
        return moved

    def queue_pointer_move(self, pointer_x: float, pointer_y: float) -> None:
        """Record a move to apply on the next :meth:`flush_frame` (last write wins)."""

        if self._active_id is not None:
            self._pending = (pointer_x, pointer_y)

    def flush_frame(self) -> bool:
        if self._pending is None:
            return False
        pointer_x, pointer_y = self._pending
        self._pending = None
        return self.on_pointer_move(pointer_x, pointer_y)

    def end_drag(self) -> None:
        self.flush_frame()
        if self._sticky and self._active_id is not None and self._origin is not None:
            x, y = self._origin
            self._registry.update(self._active_id, x=x, y=y)
        self._active_id = None
        self._origin = None
        self._sticky = False
        self._pending = None
