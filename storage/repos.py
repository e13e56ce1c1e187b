# storage/repos.py
#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import json
import logging
from typing import Optional

from domain.models import PersistedSnapshot
from storage.db import Database

_LOGGER = logging.getLogger(__name__)

SNAPSHOT_KEY = "countdown.snapshot"


class AppStateRepo:
    def __init__(self, db: Database):
        self.db = db

    def get(self, key: str) -> Optional[str]:
        row = self.db.conn.execute(
            "SELECT value FROM app_state WHERE key=?",
            (key,),
        ).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        self.db.conn.execute(
            """
            INSERT INTO app_state(key, value) VALUES(?, ?)
            ON CONFLICT(key) DO UPDATE SET value=excluded.value
            """,
            (key, value),
        )
        self.db.conn.commit()

    def delete(self, key: str) -> None:
        self.db.conn.execute("DELETE FROM app_state WHERE key=?", (key,))
        self.db.conn.commit()


class SnapshotStore:
    """
    Keeps the single countdown snapshot as one JSON value in app_state.
    One upsert per save, so readers never see a partial write.
    """

    def __init__(self, app_state: AppStateRepo, key: str = SNAPSHOT_KEY):
        self.app_state = app_state
        self.key = key

    def save(self, snapshot: PersistedSnapshot) -> None:
        self.app_state.set(self.key, json.dumps(snapshot.to_dict()))

    def load(self) -> Optional[PersistedSnapshot]:
        raw = self.app_state.get(self.key)
        if raw is None:
            return None
        try:
            return PersistedSnapshot.from_dict(json.loads(raw))
        except (ValueError, TypeError) as err:
            # JSONDecodeError and SnapshotError are both ValueErrors
            _LOGGER.warning("Discarding unreadable countdown snapshot: %s", err)
            self.clear()
            return None

    def clear(self) -> None:
        self.app_state.delete(self.key)
