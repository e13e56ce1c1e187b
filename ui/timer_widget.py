# -*- coding: utf-8 -*-

import tkinter as tk
from tkinter import ttk

from config import DEFAULT_TICK_MS
from domain.models import EngineSnapshot
from services.timer_service import TimerService


def format_time(seconds: int) -> str:
    m = max(0, seconds) // 60
    s = max(0, seconds) % 60
    return f"{m:02d}:{s:02d}"


class TimerWidget(ttk.Frame):
    def __init__(self, master, timer_service: TimerService, tick_ms: int = DEFAULT_TICK_MS):
        super().__init__(master)

        self.timer_service = timer_service
        self.tick_ms = tick_ms
        self._tick_job = None

        self._build_ui()

        # wire callbacks from service -> widget UI
        self.timer_service.set_on_tick(self._on_tick)
        self.timer_service.set_on_state_change(self._on_state_change)
        self.timer_service.set_on_complete(self._on_complete)

        # initial render
        snap = self.timer_service.get_snapshot()
        self._render(snap)
        if self.timer_service.completed_on_restore:
            self.info_var.set("Finished while you were away.")
        self._update_buttons()

    def _build_ui(self):
        self.columnconfigure(0, weight=1)

        self.time_var = tk.StringVar(value="25:00")
        self.info_var = tk.StringVar(value="Ready")

        title = ttk.Label(self, text="Focus", font=("Sans", 12, "bold"))
        title.grid(row=0, column=0, sticky="w", pady=(0, 6))

        self.time_label = ttk.Label(
            self, textvariable=self.time_var, font=("Sans", 32, "bold")
        )
        self.time_label.grid(row=1, column=0, sticky="w", pady=(8, 4))

        self.info_label = ttk.Label(self, textvariable=self.info_var)
        self.info_label.grid(row=2, column=0, sticky="w", pady=(0, 10))

        btns = ttk.Frame(self)
        btns.grid(row=3, column=0, sticky="w")

        self.toggle_btn = ttk.Button(btns, text="Start", command=self._toggle)
        self.reset_btn = ttk.Button(btns, text="Reset", command=self._reset)

        self.toggle_btn.grid(row=0, column=0, padx=(0, 6))
        self.reset_btn.grid(row=0, column=1)

    def _update_buttons(self):
        snap = self.timer_service.get_snapshot()

        if snap.is_running:
            self.toggle_btn.config(text="Pause")
        elif snap.is_paused:
            self.toggle_btn.config(text="Resume")
        else:
            self.toggle_btn.config(text="Start")

        if snap.is_completed:
            self.toggle_btn.state(["disabled"])
        else:
            self.toggle_btn.state(["!disabled"])

        if snap.is_idle:
            self.reset_btn.state(["disabled"])
        else:
            self.reset_btn.state(["!disabled"])

    def _toggle(self):
        self.timer_service.toggle()
        if self.timer_service.is_polling_needed():
            self._ensure_tick_loop()
        else:
            self._stop_tick_loop()

    def _reset(self):
        self._stop_tick_loop()
        self.timer_service.reset()

    def shutdown(self):
        self._stop_tick_loop()
        self.timer_service.shutdown()

    # ---- Tick loop (UI-driven) ----
    def _ensure_tick_loop(self):
        if self._tick_job is None:
            self._tick_job = self.after(self.tick_ms, self._tick_once)

    def _stop_tick_loop(self):
        if self._tick_job is not None:
            self.after_cancel(self._tick_job)
            self._tick_job = None

    def _tick_once(self):
        self._tick_job = None
        self.timer_service.tick()
        if self.timer_service.is_polling_needed():
            # schedule next tick
            self._tick_job = self.after(self.tick_ms, self._tick_once)

    # ---- Service callbacks ----
    def _on_tick(self, snap: EngineSnapshot):
        self.time_var.set(format_time(snap.remaining_sec))

    def _on_state_change(self, snap: EngineSnapshot):
        self._render(snap)
        self._update_buttons()

    def _on_complete(self, snap: EngineSnapshot):
        self._stop_tick_loop()
        self._render(snap)
        self.bell()

    def _render(self, snap: EngineSnapshot):
        self.time_var.set(format_time(snap.remaining_sec))
        if snap.is_idle:
            self.info_var.set("Ready")
        elif snap.is_running:
            self.info_var.set("Running...")
        elif snap.is_paused:
            self.info_var.set("Paused")
        else:
            self.info_var.set("Done. Take a break.")
