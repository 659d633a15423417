"""Player flags, waypoint connectors and tactical zone overlays."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from tactics_board.config.field import PITCH_BOUNDS, clamp_percent
from tactics_board.field.registry import PlayerRegistry
from tactics_board.field.store import Observable


class AnnotationAction(str, Enum):
    CAPTAIN = "captain"
    YELLOW = "yellow"
    RED = "red"
    KEY = "key"

    @property
    def flag(self) -> str:
        return _ACTION_FLAGS[self]

    @property
    def label(self) -> str:
        return _ACTION_LABELS[self]


_ACTION_FLAGS: Dict[AnnotationAction, str] = {
    AnnotationAction.CAPTAIN: "is_captain",
    AnnotationAction.YELLOW: "has_yellow_card",
    AnnotationAction.RED: "has_red_card",
    AnnotationAction.KEY: "is_star_player",
}

_ACTION_LABELS: Dict[AnnotationAction, str] = {
    AnnotationAction.CAPTAIN: "Toggle Captain",
    AnnotationAction.YELLOW: "Toggle Yellow Card",
    AnnotationAction.RED: "Toggle Red Card",
    AnnotationAction.KEY: "Toggle Star Player",
}


def available_actions(registry: PlayerRegistry, player_id: int) -> Dict[AnnotationAction, bool]:
    """Which context actions are enabled for ``player_id``.

    Captaincy can only be toggled when nobody holds it or when the target is
    the current captain.
    """

    if registry.get(player_id) is None:
        return {action: False for action in AnnotationAction}
    captain = registry.captain()
    enabled = {action: True for action in AnnotationAction}
    enabled[AnnotationAction.CAPTAIN] = captain is None or captain.id == player_id
    return enabled


def apply_action(registry: PlayerRegistry, player_id: int, action: AnnotationAction | str) -> bool:
    """Toggle the flag behind ``action``; disabled or unknown targets are no-ops."""

    action = AnnotationAction(action)
    player = registry.get(player_id)
    if player is None or not available_actions(registry, player_id)[action]:
        return False
    current = getattr(player, action.flag)
    return registry.update(player_id, **{action.flag: not current})


@dataclass(frozen=True)
class Waypoint:
    from_id: int
    to_id: int


class WaypointSelector:
    """Two-click protocol: Idle -> Selecting(a) -> Idle, emitting ``a -> b``."""

    def __init__(self) -> None:
        self._selected: Optional[int] = None

    @property
    def selected(self) -> Optional[int]:
        return self._selected

    @property
    def is_idle(self) -> bool:
        return self._selected is None

    def click(self, player_id: int) -> Optional[Waypoint]:
        if self._selected is None:
            self._selected = player_id
            return None
        if self._selected == player_id:
            self._selected = None
            return None
        waypoint = Waypoint(from_id=self._selected, to_id=player_id)
        self._selected = None
        return waypoint

    def cancel(self) -> None:
        self._selected = None


class WaypointList(Observable):
    """Ordered waypoints; duplicates allowed and removed by index."""

    def __init__(self, waypoints: Iterable[Waypoint] = ()) -> None:
        super().__init__()
        self._items: List[Waypoint] = list(waypoints)

    def __iter__(self) -> Iterator[Waypoint]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> Waypoint:
        return self._items[index]

    def add(self, waypoint: Waypoint) -> None:
        self._items.append(waypoint)
        self._notify("waypoints")

    def remove(self, index: int) -> bool:
        if not 0 <= index < len(self._items):
            return False
        del self._items[index]
        self._notify("waypoints")
        return True

    def clear(self) -> None:
        if self._items:
            self._items.clear()
            self._notify("waypoints")

    def segments(self, registry: PlayerRegistry) -> List[Tuple[float, float, float, float]]:
        """Line endpoints for waypoints whose players both still exist."""

        lines = []
        for waypoint in self._items:
            start = registry.get(waypoint.from_id)
            end = registry.get(waypoint.to_id)
            if start is None or end is None:
                continue
            lines.append((start.x, start.y, end.x, end.y))
        return lines

    def describe(self, registry: PlayerRegistry) -> List[str]:
        labels = []
        for waypoint in self._items:
            start = registry.get(waypoint.from_id)
            end = registry.get(waypoint.to_id)
            start_name = start.name if start and start.name else f"Player {waypoint.from_id}"
            end_name = end.name if end and end.name else f"Player {waypoint.to_id}"
            labels.append(f"{start_name} → {end_name}")
        return labels


def _goal_line_percent(x: float) -> float:
    """Field x (0-100 across the drawn box) measured between the goal lines."""

    left, _, width, _ = PITCH_BOUNDS
    return clamp_percent((clamp_percent(x) - left) / width * 100.0)


@dataclass(frozen=True)
class TacticalZone:
    """A full-width strip of the pitch between two goal-line distances.

    Thirds and lanes are both vertical strips; ``start`` and ``end`` are
    percentages of the length between the goal lines, so every band sits
    inside the touchlines.
    """

    key: str
    label: str
    description: str
    group: str
    start: float
    end: float

    def contains(self, x: float) -> bool:
        value = _goal_line_percent(x)
        if self.end >= 100.0:
            return self.start <= value <= self.end
        return self.start <= value < self.end

    def rect(self) -> Tuple[float, float, float, float]:
        """``(x, y, width, height)`` in field coordinates."""

        left, top, width, height = PITCH_BOUNDS
        return (left + self.start * width / 100.0, top, (self.end - self.start) * width / 100.0, height)


HORIZONTAL_ZONES: Tuple[TacticalZone, ...] = (
    TacticalZone("defensive", "Defensive third", "Defensive third - Your team's defensive area", "third", 0.0, 25.0),
    TacticalZone("middle", "Middle third", "Middle third - Transition and midfield area", "third", 25.0, 75.0),
    TacticalZone("attacking", "Attacking third", "Attacking third - Attacking and goal-scoring area", "third", 75.0, 100.0),
)

VERTICAL_ZONES: Tuple[TacticalZone, ...] = (
    TacticalZone("wide-left", "Wide area", "Wide area - Left flank for crosses and width", "lane", 0.0, 15.0),
    TacticalZone("half-left", "Half-space", "Half-space - Left channel for creative play", "lane", 15.0, 25.0),
    TacticalZone("center", "Centre", "Centre - Central corridor for build-up play", "lane", 25.0, 75.0),
    TacticalZone("half-right", "Half-space", "Half-space - Right channel for creative play", "lane", 75.0, 85.0),
    TacticalZone("wide-right", "Wide area", "Wide area - Right flank for crosses and width", "lane", 85.0, 100.0),
)


def zones_for(horizontal: bool, vertical: bool) -> List[TacticalZone]:
    zones: List[TacticalZone] = []
    if horizontal:
        zones.extend(HORIZONTAL_ZONES)
    if vertical:
        zones.extend(VERTICAL_ZONES)
    return zones


def locate_zones(x: float, y: float) -> Tuple[TacticalZone, TacticalZone]:
    """Third and lane containing field point ``(x, y)``.

    Every band spans the full pitch width, so only ``x`` decides; points in
    the margin count as the nearest band.
    """

    third = next(zone for zone in HORIZONTAL_ZONES if zone.contains(x))
    lane = next(zone for zone in VERTICAL_ZONES if zone.contains(x))
    return third, lane
