from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict

from tactics_board.config.field import LINEUP_SIZE


FORMATION_PATTERN = r"^\d+-\d+(-\d+)*$"
MAX_TAGS = 5


class TacticPlayer(BaseModel):
    id: int
    x: float = Field(..., ge=0.0, le=100.0)
    y: float = Field(..., ge=0.0, le=100.0)
    number: int = Field(..., ge=1, le=LINEUP_SIZE)
    name: str | None = None
    position: str | None = Field(default=None, max_length=2)
    is_captain: bool | None = None
    has_yellow_card: bool | None = None
    has_red_card: bool | None = None
    is_star_player: bool | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TacticSubmission(BaseModel):
    title: str = Field(..., min_length=3, max_length=100)
    formation: str = Field(..., pattern=FORMATION_PATTERN)
    tags: List[str] = Field(default_factory=list, max_length=MAX_TAGS)
    description: str = Field(..., min_length=10, max_length=1000)
    players: List[TacticPlayer] = Field(..., min_length=LINEUP_SIZE, max_length=LINEUP_SIZE)
