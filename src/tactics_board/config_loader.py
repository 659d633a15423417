"""Persist and load CLI display profiles."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from tactics_board.models import FieldSnapshot


@dataclass
class FieldProfile:
    field_color: Optional[str] = None
    marker_type: Optional[str] = None
    show_player_labels: Optional[bool] = None

    @classmethod
    def load(cls, path: Path) -> "FieldProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls(
            field_color=data.get("field_color"),
            marker_type=data.get("marker_type"),
            show_player_labels=data.get("show_player_labels"),
        )

    @classmethod
    def from_snapshot(cls, snapshot: FieldSnapshot) -> "FieldProfile":
        return cls(
            field_color=snapshot.field_color,
            marker_type=snapshot.marker_type,
            show_player_labels=snapshot.show_player_labels,
        )

    def save(self, path: Path) -> None:
        payload = {
            "field_color": self.field_color,
            "marker_type": self.marker_type,
            "show_player_labels": self.show_player_labels,
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def apply(self, snapshot: FieldSnapshot) -> FieldSnapshot:
        """Return ``snapshot`` with every value this profile sets overridden.

        The result is re-validated, so a profile carrying a bad marker type
        raises ``ValidationError``.
        """

        overrides = {
            key: value
            for key, value in (
                ("field_color", self.field_color),
                ("marker_type", self.marker_type),
                ("show_player_labels", self.show_player_labels),
            )
            if value is not None
        }
        if not overrides:
            return snapshot
        data = snapshot.model_dump()
        data.update(overrides)
        return type(snapshot).model_validate(data)
