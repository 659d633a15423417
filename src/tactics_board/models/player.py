"""Canonical player token shared by the editor, the renderer and the export payload."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict

from tactics_board.config.field import LINEUP_SIZE, clamp_percent


class Player(BaseModel):
    """A single marker on the pitch.

    ``x`` and ``y`` are percentages of pitch width/height and are clamped into
    ``[0, 100]`` on construction, so every copy made through ``model_copy``
    with validation keeps the invariant.
    """

    id: int
    x: float
    y: float
    number: int = Field(..., ge=1, le=LINEUP_SIZE)
    name: str | None = None
    position: str | None = Field(default=None, max_length=2)
    is_captain: bool = False
    has_yellow_card: bool = False
    has_red_card: bool = False
    is_star_player: bool = False

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    @field_validator("x", "y")
    @classmethod
    def _clamp(cls, value: float) -> float:
        return clamp_percent(value)

    @property
    def display_name(self) -> str:
        return self.name or f"Player {self.number}"

    @property
    def label(self) -> str:
        return self.position or str(self.number)

    def with_changes(self, **changes) -> "Player":
        """Return a validated copy with ``changes`` applied."""

        data = self.model_dump()
        data.update(changes)
        return Player.model_validate(data)


_DEFAULT_LINEUP = (
    (1, 5, 50, 1),
    (2, 20, 85, 2),
    (3, 20, 65, 5),
    (4, 20, 35, 6),
    (5, 20, 15, 3),
    (6, 45, 65, 4),
    (7, 45, 35, 8),
    (8, 65, 80, 7),
    (9, 65, 50, 10),
    (10, 65, 20, 11),
    (11, 80, 50, 9),
)


def default_lineup() -> List[Player]:
    """Fresh copy of the single-team 4-3-3 starting layout."""

    return [Player(id=pid, x=x, y=y, number=number) for pid, x, y, number in _DEFAULT_LINEUP]
