#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import logging
import tkinter as tk

from config import AppConfig
from services.timer_service import TimerService
from storage.db import Database
from storage.repos import AppStateRepo, SnapshotStore
from ui.timer_widget import TimerWidget


def main():
    config = AppConfig.from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    db = Database(db_path=config.db_path)
    db.init_schema()

    store = SnapshotStore(AppStateRepo(db))
    timer_service = TimerService(
        store, config.duration_sec, catch_up=config.catch_up
    )

    root = tk.Tk()
    root.title("Focus Timer")
    root.attributes("-topmost", True)

    widget = TimerWidget(root, timer_service, tick_ms=config.tick_ms)
    widget.pack(expand=True, fill="both", padx=12, pady=12)

    def on_close():
        try:
            widget.shutdown()
        finally:
            root.destroy()

    root.protocol("WM_DELETE_WINDOW", on_close)
    try:
        root.mainloop()
    finally:
        db.close()


if __name__ == "__main__":
    main()
