import json

import pytest

from tactics_board import cli
from tactics_board.config import ExportSettings, marker_scale
from tactics_board.config_loader import FieldProfile
from tactics_board.models import FieldSnapshot


def _snapshot_payload() -> dict:
    return {
        "rotationAngle": 0,
        "tiltAngle": 20,
        "zoomLevel": 1.0,
        "fieldColor": "#0d4b3e",
        "players": [{"id": 1, "x": 50, "y": 90, "name": "Keeper", "number": "1"}],
        "showPlayerLabels": True,
        "markerType": "circle",
        "waypointsMode": False,
        "horizontalZonesMode": False,
        "verticalSpacesMode": False,
    }


def test_export_settings_defaults(monkeypatch):
    for name in ("VIEWPORT_WIDTH", "READY_TIMEOUT_MS", "SETTLE_MS", "HEADLESS", "MAX_CONCURRENT_EXPORTS"):
        monkeypatch.delenv(f"TACTICS_BOARD_{name}", raising=False)
    settings = ExportSettings.from_env()

    assert (settings.viewport_width, settings.viewport_height) == (3840, 2160)
    assert settings.device_scale_factor == 2.0
    assert settings.ready_timeout_ms == 30_000
    assert settings.settle_ms == 1_500
    assert settings.headless is True
    assert settings.render_url == "http://tactics-board.export/export-preview"


def test_export_settings_from_env(monkeypatch):
    monkeypatch.setenv("TACTICS_BOARD_VIEWPORT_WIDTH", "1920")
    monkeypatch.setenv("TACTICS_BOARD_DEVICE_SCALE", "9")
    monkeypatch.setenv("TACTICS_BOARD_MAX_CONCURRENT_EXPORTS", "0")
    monkeypatch.setenv("TACTICS_BOARD_HEADLESS", "off")
    monkeypatch.setenv("TACTICS_BOARD_SETTLE_MS", "soon")

    settings = ExportSettings.from_env()

    assert settings.viewport_width == 1920
    assert settings.device_scale_factor == 4.0
    assert settings.max_concurrent_exports == 1
    assert settings.headless is False
    assert settings.settle_ms == 1_500


@pytest.mark.parametrize(("width", "expected"), [(500, 0.8), (1000, 1.0), (1240, 1.24), (4000, 1.5)])
def test_marker_scale(width, expected):
    assert marker_scale(width) == pytest.approx(expected)


def test_field_profile_roundtrip_and_apply(tmp_path):
    path = tmp_path / "profile.json"
    FieldProfile(field_color="#2c6e2f", marker_type="shirt").save(path)

    profile = FieldProfile.load(path)
    assert profile.show_player_labels is None

    snapshot = profile.apply(FieldSnapshot.model_validate(_snapshot_payload()))
    assert snapshot.field_color == "#2c6e2f"
    assert snapshot.marker_type == "shirt"
    assert snapshot.show_player_labels is True


def test_cli_preview_writes_html(tmp_path, capsys):
    snapshot_path = tmp_path / "snapshot.json"
    snapshot_path.write_text(json.dumps(_snapshot_payload()), encoding="utf-8")
    profile_path = tmp_path / "profile.json"
    FieldProfile(marker_type="shirt").save(profile_path)
    output = tmp_path / "field.html"

    cli.main(["preview", str(snapshot_path), "--output", str(output), "--load-profile", str(profile_path)])

    html = output.read_text(encoding="utf-8")
    assert 'data-player-id="1"' in html
    assert 'class="tb-token shirt"' in html
    assert "Wrote preview" in capsys.readouterr().out
