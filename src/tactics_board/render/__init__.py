"""Shared field renderer used by the live preview and the export page."""

from .field import (
    EXPORT_FIELD_WIDTH,
    FIELD_CSS,
    render_export_shell,
    render_field_markup,
    render_field_page,
    resolve_players,
)

__all__ = [
    "EXPORT_FIELD_WIDTH",
    "FIELD_CSS",
    "render_export_shell",
    "render_field_markup",
    "render_field_page",
    "resolve_players",
]
