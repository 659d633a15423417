import pytest
from pydantic import ValidationError

from tactics_board.config import ExportSettings
from tactics_board.field.editor import FieldEditor
from tactics_board.models import FieldSnapshot
from tactics_board.render import render_export_shell, render_field_markup, render_field_page, resolve_players


def _snapshot(**overrides) -> FieldSnapshot:
    payload = {
        "rotationAngle": 30,
        "tiltAngle": 25,
        "zoomLevel": 1.2,
        "fieldColor": "#123456",
        "players": [
            {"id": 1, "x": 50, "y": 90, "name": "Keeper", "number": "1"},
            {"id": 2, "x": 30, "y": 40, "number": "GK"},
            {"id": 3, "x": 60, "y": 20, "number": 8, "position": "CM", "hasRedCard": True},
            {"id": 4, "x": 70, "y": 70, "name": "<Ace>", "number": 10, "isCaptain": True, "isStarPlayer": True},
        ],
        "showPlayerLabels": True,
        "markerType": "circle",
        "waypointsMode": True,
        "horizontalZonesMode": False,
        "verticalSpacesMode": False,
        "waypoints": [{"from": 1, "to": 4}, {"from": 4, "to": 99}],
    }
    payload.update(overrides)
    return FieldSnapshot.model_validate(payload)


def test_resolve_players_defaults_labels():
    players = resolve_players(_snapshot())

    assert [player.number for player in players] == [1, 2, 8, 10]
    assert [player.label for player in players] == ["1", "GK", "CM", "10"]
    assert players[1].display_name == "Player 2"
    assert players[3].is_captain and players[3].is_star_player


def test_markup_is_a_pure_function_of_the_snapshot():
    first = render_field_markup(_snapshot())
    second = render_field_markup(_snapshot())
    assert first == second
    assert render_field_markup(_snapshot(zoomLevel=1.0)) != first


def test_markup_carries_perspective_and_colors():
    markup = render_field_markup(_snapshot())

    assert "perspective(1200px) scale(0.81) rotateZ(30deg) rotateX(25deg)" in markup
    assert "background-color:#123456" in markup
    assert "background-color:#1a1a1a" in markup


def test_markup_renders_players_and_badges():
    markup = render_field_markup(_snapshot())

    assert markup.count('class="tb-marker"') == 4
    assert 'data-player-id="1" style="left:50%;top:90%' in markup
    assert "&lt;Ace&gt;" in markup
    assert "<Ace>" not in markup
    assert 'class="tb-badge captain">C<' in markup
    assert 'class="tb-badge red"' in markup
    assert 'class="tb-badge star"' in markup
    assert "Player 2" in markup


def test_labels_and_shirts_follow_flags():
    markup = render_field_markup(_snapshot(showPlayerLabels=False, markerType="shirt"))

    assert 'class="tb-name"' not in markup
    assert markup.count('class="tb-token shirt"') == 4


def test_waypoints_skip_missing_endpoints():
    markup = render_field_markup(_snapshot())

    assert markup.count('class="tb-waypoint"') == 1
    assert 'x1="50" y1="90" x2="70" y2="70"' in markup
    assert 'stroke-dasharray="5,5"' in markup


def test_zone_overlays_follow_modes():
    assert 'class="tb-zone"' not in render_field_markup(_snapshot())

    thirds = render_field_markup(_snapshot(horizontalZonesMode=True))
    assert thirds.count('class="tb-zone"') == 3
    assert "Middle third" in thirds

    both = render_field_markup(_snapshot(horizontalZonesMode=True, verticalSpacesMode=True))
    assert both.count('class="tb-zone"') == 8
    assert "Half-space" in both


def test_zones_are_drawn_inside_the_touchlines():
    markup = render_field_markup(_snapshot(horizontalZonesMode=True, verticalSpacesMode=True))

    assert 'data-zone="wide-left" x="3.636" y="5.714" width="13.909" height="88.571"' in markup
    assert 'data-zone="defensive" x="3.636" y="5.714" width="23.182" height="88.571"' in markup
    assert markup.count('stroke-dasharray="5.5"') == 8
    assert 'class="tb-zone-label lane" style="left:10.591%;top:2.857%">Wide area<' in markup
    assert 'class="tb-zone-label" style="left:15.227%;top:97.143%">Defensive third<' in markup


def test_live_page_embeds_the_export_markup():
    snapshot = _snapshot()
    page = render_field_page(snapshot)

    assert page.startswith("<!DOCTYPE html>")
    assert render_field_markup(snapshot) in page


def test_editor_snapshot_renders_same_as_rebuilt_session():
    editor = FieldEditor()
    editor.rotate_right()
    editor.toggle_horizontal_zones()
    snapshot = editor.snapshot()

    rebuilt = FieldEditor.from_snapshot(snapshot).snapshot()
    assert render_field_markup(rebuilt) == render_field_markup(snapshot)


def test_export_shell_waits_for_settle_delay():
    shell = render_export_shell(ExportSettings(settle_ms=1234))

    assert 'id="export-field-container"' in shell
    assert "window.fieldExport" in shell
    assert "setTimeout(resolve, 1234)" in shell
    assert 'fetch("/render"' in shell


@pytest.mark.parametrize("color", ["#0d4b3e", "#fff", "#11223344", "rgb(13, 75, 62)", "rgba(0,0,0,0.5)", "darkgreen"])
def test_snapshot_accepts_plain_colors(color):
    snapshot = _snapshot(fieldColor=color, playerColor=color)
    assert f"background-color:{color}" in render_field_markup(snapshot)


@pytest.mark.parametrize(
    "color",
    [
        "red;background-image:url(http://169.254.169.254/latest)",
        "url(http://example.com/x.png)",
        'red" onmouseover="x',
        "#12345",
        "",
    ],
)
def test_snapshot_rejects_colors_that_escape_the_declaration(color):
    with pytest.raises(ValidationError):
        _snapshot(fieldColor=color)
    with pytest.raises(ValidationError):
        _snapshot(playerColor=color)


def test_snapshot_rejects_duplicate_player_ids():
    players = [
        {"id": 5, "x": 10, "y": 10, "number": 5},
        {"id": 5, "x": 20, "y": 20, "number": 6},
    ]
    with pytest.raises(ValidationError, match="duplicate player id 5"):
        _snapshot(players=players)
