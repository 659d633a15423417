"""Shared domain models."""

from .player import Player, default_lineup
from .snapshot import FieldSnapshot, SnapshotPlayer, WaypointPayload
from .tactic import TacticPlayer, TacticSubmission

__all__ = [
    "FieldSnapshot",
    "Player",
    "SnapshotPlayer",
    "TacticPlayer",
    "TacticSubmission",
    "WaypointPayload",
    "default_lineup",
]
