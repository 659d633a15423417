"""Field render contract shared by the live view and the export renderer."""

from __future__ import annotations

from typing import Any, List, Literal

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict

from tactics_board.config.field import DEFAULT_PLAYER_COLOR


_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)

# Hex, rgb()/rgba() or a bare colour keyword; nothing that can end a CSS declaration.
COLOR_PATTERN = (
    r"^(?:#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})"
    r"|rgba?\(\s*\d{1,3}\s*,\s*\d{1,3}\s*,\s*\d{1,3}\s*(?:,\s*(?:0|1|0?\.\d+)\s*)?\)"
    r"|[a-zA-Z]+)$"
)


def _require_number(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("must be a number")
    return value


class SnapshotPlayer(BaseModel):
    id: int
    x: float
    y: float
    number: int | str
    name: str | None = None
    position: str | None = None
    is_captain: bool = False
    has_yellow_card: bool = False
    has_red_card: bool = False
    is_star_player: bool = False

    model_config = _CAMEL


class WaypointPayload(BaseModel):
    from_id: int = Field(..., alias="from")
    to_id: int = Field(..., alias="to")

    model_config = ConfigDict(populate_by_name=True)


class FieldSnapshot(BaseModel):
    """Complete, self-contained description of one pitch view.

    This is the only input the export renderer receives; two equal snapshots
    always render identically.
    """

    rotation_angle: float
    tilt_angle: float
    zoom_level: float
    field_color: str = Field(..., pattern=COLOR_PATTERN)
    player_color: str = Field(default=DEFAULT_PLAYER_COLOR, pattern=COLOR_PATTERN)
    players: List[SnapshotPlayer] = Field(..., min_length=1)
    show_player_labels: bool
    marker_type: Literal["circle", "shirt"]
    waypoints_mode: bool
    horizontal_zones_mode: bool
    vertical_spaces_mode: bool
    waypoints: List[WaypointPayload] = Field(default_factory=list)

    model_config = _CAMEL

    @field_validator("rotation_angle", "tilt_angle", "zoom_level", mode="before")
    @classmethod
    def _numbers_only(cls, value: Any) -> Any:
        return _require_number(value)

    @field_validator("players", mode="before")
    @classmethod
    def _players_array(cls, value: Any) -> Any:
        if not isinstance(value, list):
            raise ValueError("players must be an array")
        return value

    @model_validator(mode="after")
    def _unique_player_ids(self) -> "FieldSnapshot":
        seen: set[int] = set()
        for player in self.players:
            if player.id in seen:
                raise ValueError(f"duplicate player id {player.id}")
            seen.add(player.id)
        return self

    def to_payload(self) -> dict:
        """JSON-ready dict using the wire (camelCase) names."""

        return self.model_dump(mode="json", by_alias=True)
