from datetime import datetime, timezone

from tactics_board.models import TacticSubmission, default_lineup
from tactics_board.persistence import TacticStore


def _submission() -> TacticSubmission:
    return TacticSubmission(
        title="Low block",
        formation="5-4-1",
        tags=["defending"],
        description="Two compact banks and a lone striker.",
        players=[
            {"id": p.id, "x": p.x, "y": p.y, "number": p.number, "isCaptain": p.id == 1 or None}
            for p in default_lineup()
        ],
    )


def test_save_and_get_tactic(tmp_path, monkeypatch):
    monkeypatch.setenv("TACTICS_BOARD_DB_PATH", str(tmp_path / "tactics.sqlite"))
    store = TacticStore()
    created_at = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    record = store.save_tactic(_submission(), created_at=created_at)
    fetched = store.get_tactic(record.tactic_id)

    assert (tmp_path / "tactics.sqlite").exists()
    assert fetched == record
    assert fetched.created_at == created_at
    assert fetched.tags == ["defending"]
    assert fetched.players[0] == {"id": 1, "x": 5.0, "y": 50.0, "number": 1, "isCaptain": True}
    assert "isCaptain" not in fetched.players[1]


def test_unknown_tactic_returns_none(tmp_path, monkeypatch):
    monkeypatch.setenv("TACTICS_BOARD_DB_PATH", str(tmp_path / "tactics.sqlite"))
    assert TacticStore().get_tactic("missing") is None


def test_store_uses_temp_db_under_pytest(monkeypatch):
    monkeypatch.delenv("TACTICS_BOARD_DB_PATH", raising=False)
    store = TacticStore("ignored.sqlite")
    assert store.db_path.name == "tactics.sqlite"
    assert store.db_path.parent.name == "tactics-board-test"
