"""Persistence layer for player override records."""

from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Protocol


logger = logging.getLogger(__name__)


@dataclass
class OverrideRecord:
    player_id: str
    fields: Dict[str, Any]
    created_at: datetime
    updated_at: datetime


class OverrideStore(Protocol):
    """Anything that can list, fetch and upsert override records by player id."""

    def list_all(self) -> List[OverrideRecord]: ...

    def get(self, player_id: str) -> Optional[OverrideRecord]: ...

    def upsert(
        self,
        player_id: str,
        patch: Mapping[str, Any],
        *,
        create: Mapping[str, Any] | None = None,
    ) -> OverrideRecord: ...


def _clean(fields: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in fields.items() if key != "id"}


class SqliteOverrideStore:
    """SQLite-backed store of sparse player patches.

    ``db_path`` may be a filesystem path or a ``file:`` URI.
    """

    def __init__(self, db_path: Path | str):
        if isinstance(db_path, str) and db_path.startswith("file:"):
            self.db_path: Path | str = db_path
            self._use_uri = True
        else:
            self.db_path = Path(db_path)
            self._use_uri = False
        self._ensure_schema()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        conn.row_factory = sqlite3.Row
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS player_overrides (
                    id TEXT PRIMARY KEY,
                    fields_json TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )

    def list_all(self) -> List[OverrideRecord]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM player_overrides ORDER BY datetime(created_at), id"
            ).fetchall()
        return [self._row_to_record(row) for row in rows]

    def get(self, player_id: str) -> Optional[OverrideRecord]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM player_overrides WHERE id = ?", (player_id,)
            ).fetchone()
        if row is None:
            return None
        return self._row_to_record(row)

    def upsert(
        self,
        player_id: str,
        patch: Mapping[str, Any],
        *,
        create: Mapping[str, Any] | None = None,
    ) -> OverrideRecord:
        """Create the record from ``create`` + ``patch``, or lay ``patch`` over the stored fields.

        Fields are replaced one level deep; nested values are never merged.
        """
        now_iso = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            conn.execute("BEGIN IMMEDIATE")
            existing = conn.execute(
                "SELECT * FROM player_overrides WHERE id = ?", (player_id,)
            ).fetchone()
            if existing is None:
                fields = {**_clean(create or {}), **_clean(patch)}
                conn.execute(
                    """
                    INSERT INTO player_overrides (id, fields_json, created_at, updated_at)
                    VALUES (?, ?, ?, ?)
                    """,
                    (player_id, json.dumps(fields), now_iso, now_iso),
                )
                logger.info("Created override for %s (%s fields)", player_id, len(fields))
            else:
                fields = {**json.loads(existing["fields_json"]), **_clean(patch)}
                conn.execute(
                    "UPDATE player_overrides SET fields_json = ?, updated_at = ? WHERE id = ?",
                    (json.dumps(fields), now_iso, player_id),
                )
                logger.info("Updated override for %s: %s", player_id, sorted(_clean(patch)))
        record = self.get(player_id)
        if record is None:  # pragma: no cover
            raise KeyError(f"Override {player_id} not found after upsert")
        return record

    def _row_to_record(self, row: sqlite3.Row) -> OverrideRecord:
        return OverrideRecord(
            player_id=row["id"],
            fields=json.loads(row["fields_json"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
