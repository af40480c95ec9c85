from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Sequence

from loguru import logger

from swimmeet.models import RaceKey
from swimmeet.program import deserialize_race_key, serialize_race_key


SCHEMA = """
CREATE TABLE IF NOT EXISTS program_orders (
    event_id INTEGER PRIMARY KEY,
    race_keys TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS audit_log (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
    action TEXT NOT NULL,
    details TEXT
);
"""


class ProgramOrderRepository:
    """Custom program order per event, stored as a JSON list of race keys."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(self.db_path)
        self.conn.row_factory = sqlite3.Row
        self.conn.executescript(SCHEMA)
        self.conn.commit()

    def close(self) -> None:
        self.conn.close()

    def log(self, action: str, details: str = "") -> None:
        self.conn.execute(
            "INSERT INTO audit_log(action, details) VALUES (?, ?)",
            (action, details),
        )
        self.conn.commit()

    def list_log(self) -> list[tuple[str, str]]:
        rows = self.conn.execute("SELECT action, details FROM audit_log ORDER BY id").fetchall()
        return [(r["action"], r["details"] or "") for r in rows]

    def load_order(self, event_id: int) -> list[RaceKey] | None:
        row = self.conn.execute(
            "SELECT race_keys FROM program_orders WHERE event_id=?", (event_id,)
        ).fetchone()
        if row is None:
            return None
        try:
            raw_keys = json.loads(row["race_keys"])
        except ValueError:
            logger.warning(f"event={event_id}: stored program order is not valid JSON, ignoring it")
            return None
        keys = []
        for raw in raw_keys:
            key = deserialize_race_key(raw)
            if key is not None:
                keys.append(key)
        return keys

    def save_order(self, event_id: int, keys: Sequence[RaceKey]) -> None:
        payload = json.dumps([serialize_race_key(RaceKey(*k)) for k in keys], ensure_ascii=False)
        self.conn.execute(
            """
            INSERT INTO program_orders(event_id, race_keys) VALUES (?, ?)
            ON CONFLICT(event_id) DO UPDATE SET race_keys=excluded.race_keys, updated_at=CURRENT_TIMESTAMP
            """,
            (event_id, payload),
        )
        self.conn.commit()
        self.log("save_program_order", f"event={event_id}; races={len(keys)}")

    def clear_order(self, event_id: int) -> None:
        self.conn.execute("DELETE FROM program_orders WHERE event_id=?", (event_id,))
        self.conn.commit()
        self.log("clear_program_order", f"event={event_id}")
