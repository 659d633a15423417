"""HTML/SVG rendering of a field snapshot.

The live preview page and the headless export page both build their pitch
from :func:`render_field_markup`, so the two surfaces cannot drift apart.
"""

from __future__ import annotations

import json
from html import escape
from typing import List

from tactics_board.config.field import LINEUP_SIZE, PITCH_MARGIN, PITCH_VIEWBOX, marker_scale
from tactics_board.config.settings import ExportSettings
from tactics_board.field.annotations import zones_for
from tactics_board.field.perspective import PerspectiveState
from tactics_board.models import FieldSnapshot, Player, SnapshotPlayer


FIELD_CSS = """
.tb-field { position: relative; width: 100%; aspect-ratio: 11 / 7; border-radius: 12px; overflow: hidden; }
.tb-surface { position: absolute; inset: 0; transform-origin: center center; transform-style: preserve-3d; }
.tb-surface svg { position: absolute; inset: 0; width: 100%; height: 100%; }
.tb-markings { opacity: 0.3; }
.tb-zone-label { position: absolute; transform: translate(-50%, -50%); color: #fff; font: bold 12px Arial, sans-serif; white-space: nowrap; pointer-events: none; }
.tb-zone-label.lane { font-size: 11px; }
.tb-marker { position: absolute; display: flex; flex-direction: column; align-items: center; transform-origin: center; user-select: none; }
.tb-token { position: relative; width: 40px; height: 40px; display: flex; align-items: center; justify-content: center; color: #fff; font: bold 18px Arial, sans-serif; }
.tb-token.circle { border-radius: 50%; }
.tb-token.shirt svg { position: absolute; inset: 0; width: 100%; height: 100%; }
.tb-token span { position: relative; }
.tb-name { margin-top: 4px; padding: 2px 8px; border-radius: 4px; background: #1a1a1a; color: #fff; opacity: 0.7; font: 600 12px Arial, sans-serif; white-space: nowrap; }
.tb-badge { position: absolute; font: bold 10px Arial, sans-serif; }
.tb-badge.captain { top: -6px; right: -6px; width: 16px; height: 16px; border-radius: 50%; background: #facc15; color: #1a1a1a; display: flex; align-items: center; justify-content: center; }
.tb-badge.yellow { top: -4px; left: -6px; width: 9px; height: 13px; border-radius: 2px; background: #facc15; }
.tb-badge.red { top: -4px; left: 5px; width: 9px; height: 13px; border-radius: 2px; background: #dc2626; }
.tb-badge.star { bottom: -6px; right: -8px; color: #fbbf24; font-size: 16px; }
"""

_LINE = 'stroke="white" stroke-width="2.5" fill="none"'

_PITCH_MARKINGS = f"""
<rect x="20" y="20" width="510" height="310" {_LINE}/>
<line x1="275" y1="20" x2="275" y2="330" stroke="white" stroke-width="2.5"/>
<circle cx="275" cy="175" r="40" {_LINE}/>
<circle cx="275" cy="175" r="3" fill="white"/>
<rect x="20" y="90" width="70" height="170" {_LINE}/>
<rect x="460" y="90" width="70" height="170" {_LINE}/>
<rect x="20" y="135" width="30" height="80" {_LINE}/>
<rect x="500" y="135" width="30" height="80" {_LINE}/>
<circle cx="65" cy="175" r="3" fill="white"/>
<circle cx="485" cy="175" r="3" fill="white"/>
<path d="M 90 155 A 30 30 0 0 1 90 195" {_LINE}/>
<path d="M 460 155 A 30 30 0 0 0 460 195" {_LINE}/>
<path d="M 20 30 A 10 10 0 0 0 30 20" {_LINE}/>
<path d="M 520 20 A 10 10 0 0 0 530 30" {_LINE}/>
<path d="M 30 330 A 10 10 0 0 0 20 320" {_LINE}/>
<path d="M 530 320 A 10 10 0 0 0 520 330" {_LINE}/>
"""

EXPORT_FIELD_WIDTH = 1240.0

_SHIRT_PATH = "M 13 4 L 4 9 L 7 17 L 11 15 L 11 36 L 29 36 L 29 15 L 33 17 L 36 9 L 27 4 Q 20 9 13 4 Z"


def _resolve_number(player: SnapshotPlayer) -> int:
    if isinstance(player.number, int):
        candidate = player.number
    else:
        try:
            candidate = int(str(player.number).strip())
        except ValueError:
            candidate = player.id
    if 1 <= candidate <= LINEUP_SIZE:
        return candidate
    return player.id if 1 <= player.id <= LINEUP_SIZE else 1


def _resolve_position(player: SnapshotPlayer) -> str | None:
    raw = player.position
    if raw is None and isinstance(player.number, str):
        raw = player.number
    if raw is None:
        return None
    raw = raw.strip()[:2]
    return raw or None


def resolve_players(snapshot: FieldSnapshot) -> List[Player]:
    """Turn snapshot players into canonical :class:`Player` tokens.

    String shirt numbers resolve to an int in 1..11 (falling back to the id)
    and, unless an explicit position is given, the raw value becomes the
    marker label.
    """

    return [
        Player(
            id=item.id,
            x=item.x,
            y=item.y,
            number=_resolve_number(item),
            name=item.name or None,
            position=_resolve_position(item),
            is_captain=item.is_captain,
            has_yellow_card=item.has_yellow_card,
            has_red_card=item.has_red_card,
            is_star_player=item.is_star_player,
        )
        for item in snapshot.players
    ]


def _fmt(value: float) -> str:
    return f"{value:.3f}".rstrip("0").rstrip(".")


def _render_zones(snapshot: FieldSnapshot) -> tuple[str, str]:
    rects: list[str] = []
    labels: list[str] = []
    # Thirds are labelled in the bottom margin, lanes in the top one.
    margin = 100.0 * PITCH_MARGIN / 2 / PITCH_VIEWBOX[1]
    for zone in zones_for(snapshot.horizontal_zones_mode, snapshot.vertical_spaces_mode):
        x, y, width, height = zone.rect()
        rects.append(
            f'<rect class="tb-zone" data-zone="{zone.key}" x="{_fmt(x)}" y="{_fmt(y)}" width="{_fmt(width)}" height="{_fmt(height)}" '
            f'fill="rgba(255, 255, 255, 0.1)" stroke="rgba(255, 255, 255, 0.8)" stroke-width="2" stroke-dasharray="5.5" '
            f'vector-effect="non-scaling-stroke"><title>{escape(zone.description)}</title></rect>'
        )
        if zone.group == "lane":
            top, css = margin, "tb-zone-label lane"
        else:
            top, css = 100.0 - margin, "tb-zone-label"
        labels.append(f'<div class="{css}" style="left:{_fmt(x + width / 2)}%;top:{_fmt(top)}%">{escape(zone.label)}</div>')
    return "".join(rects), "".join(labels)


def _render_waypoints(snapshot: FieldSnapshot, players: List[Player]) -> str:
    by_id = {player.id: player for player in players}
    lines: list[str] = []
    for index, waypoint in enumerate(snapshot.waypoints):
        start = by_id.get(waypoint.from_id)
        end = by_id.get(waypoint.to_id)
        if start is None or end is None:
            continue
        lines.append(
            f'<line class="tb-waypoint" data-index="{index}" x1="{_fmt(start.x)}" y1="{_fmt(start.y)}" '
            f'x2="{_fmt(end.x)}" y2="{_fmt(end.y)}" stroke="yellow" stroke-width="3" stroke-dasharray="5,5" '
            f'opacity="0.8" vector-effect="non-scaling-stroke"/>'
        )
    return "".join(lines)


def _render_marker(player: Player, snapshot: FieldSnapshot, scale: float) -> str:
    label = escape(player.label)
    if snapshot.marker_type == "shirt":
        token = (
            f'<div class="tb-token shirt"><svg viewBox="0 0 40 40"><path d="{_SHIRT_PATH}" '
            f'fill="{escape(snapshot.player_color)}" stroke="white" stroke-width="1.5"/></svg><span>{label}</span>'
        )
    else:
        token = (
            f'<div class="tb-token circle" style="background-color:{escape(snapshot.player_color)}">'
            f"<span>{label}</span>"
        )
    badges = []
    if player.is_captain:
        badges.append('<div class="tb-badge captain">C</div>')
    if player.has_yellow_card:
        badges.append('<div class="tb-badge yellow"></div>')
    if player.has_red_card:
        badges.append('<div class="tb-badge red"></div>')
    if player.is_star_player:
        badges.append('<div class="tb-badge star">&#9733;</div>')
    token += "".join(badges) + "</div>"
    name = f'<div class="tb-name">{escape(player.display_name)}</div>' if snapshot.show_player_labels else ""
    return (
        f'<div class="tb-marker" data-player-id="{player.id}" '
        f'style="left:{_fmt(player.x)}%;top:{_fmt(player.y)}%;transform:translate(-50%, -50%) scale({_fmt(scale)})">'
        f"{token}{name}</div>"
    )


def render_field_markup(snapshot: FieldSnapshot, *, field_width: float = EXPORT_FIELD_WIDTH) -> str:
    """Pitch, overlays and markers for ``snapshot`` as one HTML fragment."""

    players = resolve_players(snapshot)
    perspective = PerspectiveState(
        rotation_angle=snapshot.rotation_angle,
        tilt_angle=snapshot.tilt_angle,
        zoom_level=snapshot.zoom_level,
    )
    scale = marker_scale(field_width)
    zone_rects, zone_labels = _render_zones(snapshot)
    waypoints = _render_waypoints(snapshot, players)
    markers = "".join(_render_marker(player, snapshot, scale) for player in players)
    width, height = PITCH_VIEWBOX
    return (
        f'<div class="tb-field" style="background-color:{escape(snapshot.field_color)}">'
        f'<div class="tb-surface" style="transform:{perspective.css_transform()}">'
        f'<svg class="tb-markings" viewBox="0 0 {width} {height}" preserveAspectRatio="none">{_PITCH_MARKINGS}</svg>'
        f'<svg class="tb-overlay" viewBox="0 0 100 100" preserveAspectRatio="none">{zone_rects}{waypoints}</svg>'
        f"{zone_labels}{markers}"
        f"</div></div>"
    )


def render_field_page(snapshot: FieldSnapshot, *, title: str = "Lineup Field", field_width: float = EXPORT_FIELD_WIDTH) -> str:
    """Standalone HTML page showing the live view of ``snapshot``."""

    markup = render_field_markup(snapshot, field_width=field_width)
    return f"""<!DOCTYPE html>
<html lang=\"en\">
<head>
    <meta charset=\"utf-8\">
    <title>{escape(title)}</title>
    <style>
        body {{ font-family: Arial, sans-serif; margin: 2rem; background: #0f172a; color: #e2e8f0; }}
        main {{ max-width: {_fmt(field_width)}px; margin: 0 auto; }}
        {FIELD_CSS}
    </style>
</head>
<body>
    <main>
        <h2>{escape(title)}</h2>
        <div id=\"field-container\">{markup}</div>
    </main>
</body>
</html>"""


def render_export_shell(settings: ExportSettings) -> str:
    """Bare render-only page the headless browser loads before the snapshot arrives.

    ``window.fieldExport.mount(snapshot)`` posts the snapshot back to the
    page origin for markup, waits two animation frames plus the settle delay
    for 3D transforms, then resolves.  Its flags back the timeout diagnostics.
    """

    settle_ms = json.dumps(settings.settle_ms)
    return f"""<!DOCTYPE html>
<html lang=\"en\">
<head>
    <meta charset=\"utf-8\">
    <title>Export Preview</title>
    <style>
        html, body {{ margin: 0; padding: 0; background: #0f172a; }}
        body {{ min-height: 100vh; display: flex; align-items: center; justify-content: center; }}
        #export-field-container {{ width: {_fmt(EXPORT_FIELD_WIDTH)}px; padding: 20px; opacity: 0; }}
        {FIELD_CSS}
    </style>
</head>
<body>
    <div id=\"export-field-container\"></div>
    <script>
        window.fieldExport = {{
            received: false,
            ready: false,
            async mount(snapshot) {{
                this.received = true;
                const response = await fetch("/render", {{
                    method: "POST",
                    headers: {{ "Content-Type": "application/json" }},
                    body: JSON.stringify(snapshot),
                }});
                if (!response.ok) {{
                    throw new Error("render failed with status " + response.status);
                }}
                const container = document.getElementById("export-field-container");
                container.innerHTML = await response.text();
                await new Promise((resolve) => requestAnimationFrame(() => requestAnimationFrame(resolve)));
                await new Promise((resolve) => setTimeout(resolve, {settle_ms}));
                container.style.opacity = "1";
                this.ready = true;
                return true;
            }},
        }};
    </script>
</body>
</html>"""
