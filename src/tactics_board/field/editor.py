"""Editing session that composes registry, drag, perspective and annotations."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List, Optional

from tactics_board.config.field import FieldOptions, MarkerType
from tactics_board.field.annotations import (
    AnnotationAction,
    Waypoint,
    WaypointList,
    WaypointSelector,
    apply_action,
    available_actions,
)
from tactics_board.field.context_menu import ContextMenu
from tactics_board.field.coordinates import GeometryProvider, Rect, Viewport
from tactics_board.field.perspective import PerspectiveState, ProjectedGeometry
from tactics_board.field.registry import DragController, PlayerRegistry
from tactics_board.field.store import Observable
from tactics_board.models import (
    FieldSnapshot,
    Player,
    SnapshotPlayer,
    TacticPlayer,
    TacticSubmission,
    WaypointPayload,
    default_lineup,
)
from tactics_board.render import resolve_players


class FieldEditor(Observable):
    """One interactive editing session.

    Every view (live field, mini preview, export preview) subscribes here and
    re-reads state on change; nothing else holds a copy of the players.
    """

    def __init__(
        self,
        players: Iterable[Player] | None = None,
        *,
        options: FieldOptions | None = None,
        perspective: PerspectiveState | None = None,
        geometry: GeometryProvider | None = None,
        field_rect: Rect | None = None,
        viewport: Viewport | None = None,
    ) -> None:
        super().__init__()
        self.registry = PlayerRegistry(default_lineup() if players is None else players)
        self.waypoints = WaypointList()
        self.selector = WaypointSelector()
        self.options = options or FieldOptions()
        self.perspective = perspective or PerspectiveState()
        self.waypoints_mode = False
        self.horizontal_zones_mode = False
        self.vertical_spaces_mode = False
        if geometry is None:
            rect = field_rect or Rect(0.0, 0.0, 1100.0, 700.0)
            geometry = ProjectedGeometry(
                rect,
                viewport or Viewport(rect.right, rect.bottom),
                lambda: self.perspective,
                self.registry.get,
            )
        self.geometry = geometry
        self.drag = DragController(self.registry, geometry)
        self.context_menu = ContextMenu(geometry)
        self.registry.subscribe(self._notify)
        self.waypoints.subscribe(self._notify)

    # -- drag -------------------------------------------------------------

    def begin_drag(self, player_id: int, *, sticky: bool = False) -> bool:
        if not self.options.editable:
            return False
        return self.drag.begin_drag(player_id, sticky=sticky)

    def on_pointer_move(self, pointer_x: float, pointer_y: float) -> bool:
        return self.drag.on_pointer_move(pointer_x, pointer_y)

    def end_drag(self) -> None:
        self.drag.end_drag()

    # -- perspective ------------------------------------------------------

    def _set_perspective(self, state: PerspectiveState) -> None:
        if state == self.perspective:
            return
        self.perspective = state
        self.context_menu.reposition()
        self._notify("perspective")

    def rotate_left(self) -> None:
        self._set_perspective(self.perspective.rotate_left())

    def rotate_right(self) -> None:
        self._set_perspective(self.perspective.rotate_right())

    def tilt_up(self) -> None:
        self._set_perspective(self.perspective.tilt_up())

    def tilt_down(self) -> None:
        self._set_perspective(self.perspective.tilt_down())

    def zoom_in(self) -> None:
        self._set_perspective(self.perspective.zoom_in())

    def zoom_out(self) -> None:
        self._set_perspective(self.perspective.zoom_out())

    # -- options and overlays ---------------------------------------------

    def set_options(self, **changes) -> None:
        self.options = replace(self.options, **changes)
        self._notify("options")

    def set_field_color(self, color: str) -> None:
        self.set_options(field_color=color)

    def toggle_player_labels(self) -> None:
        self.set_options(show_player_labels=not self.options.show_player_labels)

    def toggle_marker_type(self) -> None:
        marker: MarkerType = "shirt" if self.options.marker_type == "circle" else "circle"
        self.set_options(marker_type=marker)

    def toggle_waypoints_mode(self) -> None:
        self.waypoints_mode = not self.waypoints_mode
        if not self.waypoints_mode:
            self.selector.cancel()
        self._notify("overlays")

    def toggle_horizontal_zones(self) -> None:
        self.horizontal_zones_mode = not self.horizontal_zones_mode
        self._notify("overlays")

    def toggle_vertical_spaces(self) -> None:
        self.vertical_spaces_mode = not self.vertical_spaces_mode
        self._notify("overlays")

    # -- annotations ------------------------------------------------------

    def click_player(self, player_id: int) -> Optional[Waypoint]:
        """Feed a player click into the waypoint protocol when it is active."""

        if not self.waypoints_mode or player_id not in self.registry:
            return None
        waypoint = self.selector.click(player_id)
        if waypoint is not None:
            self.waypoints.add(waypoint)
        else:
            self._notify("selection")
        return waypoint

    def remove_waypoint(self, index: int) -> bool:
        return self.waypoints.remove(index)

    def open_context_menu(self, player_id: int) -> bool:
        if not (self.options.enable_context_menu and self.options.editable):
            return False
        opened = self.context_menu.open(player_id)
        if opened:
            self._notify("context_menu")
        return opened

    def menu_actions(self) -> dict[AnnotationAction, bool]:
        player_id = self.context_menu.state.player_id
        if not self.context_menu.visible or player_id is None:
            return {action: False for action in AnnotationAction}
        return available_actions(self.registry, player_id)

    def apply_context_action(self, action: AnnotationAction | str) -> bool:
        state = self.context_menu.state
        if not state.visible or state.player_id is None:
            return False
        applied = apply_action(self.registry, state.player_id, action)
        self.context_menu.close()
        self._notify("context_menu")
        return applied

    def outside_click(self) -> None:
        if self.context_menu.visible:
            self.context_menu.outside_click()
            self._notify("context_menu")

    def rename_player(self, player_id: int, name: str) -> bool:
        if not self.options.editable:
            return False
        return self.registry.update(player_id, name=name.strip() or None)

    # -- lifecycle --------------------------------------------------------

    def reset(self) -> None:
        self.drag.end_drag()
        self.context_menu.close()
        self.selector.cancel()
        self.waypoints.clear()
        self.options = FieldOptions()
        self.perspective = PerspectiveState()
        self.waypoints_mode = False
        self.horizontal_zones_mode = False
        self.vertical_spaces_mode = False
        self.registry.replace_all(default_lineup())
        self._notify("reset")

    def snapshot(self) -> FieldSnapshot:
        return FieldSnapshot(
            rotation_angle=self.perspective.rotation_angle,
            tilt_angle=self.perspective.tilt_angle,
            zoom_level=self.perspective.zoom_level,
            field_color=self.options.field_color,
            player_color=self.options.player_color,
            players=[
                SnapshotPlayer(
                    id=player.id,
                    x=player.x,
                    y=player.y,
                    number=player.number,
                    name=player.name,
                    position=player.position,
                    is_captain=player.is_captain,
                    has_yellow_card=player.has_yellow_card,
                    has_red_card=player.has_red_card,
                    is_star_player=player.is_star_player,
                )
                for player in self.registry
            ],
            show_player_labels=self.options.show_player_labels,
            marker_type=self.options.marker_type,
            waypoints_mode=self.waypoints_mode,
            horizontal_zones_mode=self.horizontal_zones_mode,
            vertical_spaces_mode=self.vertical_spaces_mode,
            waypoints=[WaypointPayload(from_id=w.from_id, to_id=w.to_id) for w in self.waypoints],
        )

    @classmethod
    def from_snapshot(cls, snapshot: FieldSnapshot, **kwargs) -> "FieldEditor":
        """Rebuild a session whose :meth:`snapshot` reproduces ``snapshot``."""

        options = FieldOptions(
            field_color=snapshot.field_color,
            player_color=snapshot.player_color,
            show_player_labels=snapshot.show_player_labels,
            marker_type=snapshot.marker_type,
        )
        perspective = PerspectiveState(
            rotation_angle=snapshot.rotation_angle,
            tilt_angle=snapshot.tilt_angle,
            zoom_level=snapshot.zoom_level,
        )
        editor = cls(resolve_players(snapshot), options=options, perspective=perspective, **kwargs)
        editor.waypoints_mode = snapshot.waypoints_mode
        editor.horizontal_zones_mode = snapshot.horizontal_zones_mode
        editor.vertical_spaces_mode = snapshot.vertical_spaces_mode
        for item in snapshot.waypoints:
            editor.waypoints.add(Waypoint(from_id=item.from_id, to_id=item.to_id))
        return editor

    def to_submission(
        self,
        *,
        title: str,
        formation: str,
        description: str,
        tags: List[str] | None = None,
    ) -> TacticSubmission:
        """Build a tactic for the persistence sink; raises ValidationError if incomplete."""

        players = [
            TacticPlayer(
                id=player.id,
                x=player.x,
                y=player.y,
                number=player.number,
                name=player.name,
                position=player.position,
                is_captain=player.is_captain or None,
                has_yellow_card=player.has_yellow_card or None,
                has_red_card=player.has_red_card or None,
                is_star_player=player.is_star_player or None,
            )
            for player in self.registry
        ]
        return TacticSubmission(
            title=title,
            formation=formation,
            tags=list(tags or []),
            description=description,
            players=players,
        )
