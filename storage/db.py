#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import logging
import sqlite3

_LOGGER = logging.getLogger(__name__)


class Database:
    def __init__(self, db_path: str = "focus_timer.db"):
        self.db_path = db_path
        self.conn = sqlite3.connect(self.db_path)
        self.conn.row_factory = sqlite3.Row

    def _table_exists(self, name: str) -> bool:
        r = self.conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
            (name,),
        ).fetchone()
        return bool(r)

    def init_schema(self):
        if not self._table_exists("app_state"):
            _LOGGER.info("Creating app_state table in %s", self.db_path)

        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS app_state (
                key TEXT PRIMARY KEY,
                value TEXT
            );
        """)
        self.conn.commit()

    def close(self):
        try:
            self.conn.close()
        except sqlite3.Error as err:
            _LOGGER.warning("Failed to close %s: %s", self.db_path, err)
