from __future__ import annotations

from typing import List

from pydantic import BaseModel

from tactics_board.models import TacticPlayer


class TacticResponse(BaseModel):
    id: str
    created_at: str
    title: str
    formation: str
    tags: List[str]
    description: str
    players: List[TacticPlayer]
