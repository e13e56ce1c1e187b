# -*- coding: utf-8 -*-

import logging
from typing import Callable, Optional

from core.timer_engine import DEFAULT_DURATION_SEC, SnapshotStoreLike, TimerEngine
from domain.models import EngineSnapshot, RunState

_LOGGER = logging.getLogger(__name__)


class TimerService:
    """
    Orchestrates:
    - TimerEngine state
    - snapshot restore on creation / flush on shutdown
    - Callbacks for UI
    """

    def __init__(
        self,
        store: SnapshotStoreLike,
        duration_sec: int = DEFAULT_DURATION_SEC,
        *,
        catch_up: bool = False,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.store = store
        self.engine = TimerEngine(
            duration_sec,
            store=store,
            on_complete=self._emit_complete,
            clock=clock,
        )

        self.completed_count = 0
        self._on_tick: Optional[Callable[[EngineSnapshot], None]] = None
        self._on_state_change: Optional[Callable[[EngineSnapshot], None]] = None
        self._on_complete: Optional[Callable[[EngineSnapshot], None]] = None

        # callbacks are not wired yet, so a catch-up completion here is
        # only visible through completed_on_restore
        self.engine.restore(store.load(), catch_up=catch_up)
        self.completed_on_restore = self.completed_count > 0

    # ----- Callbacks -----
    def set_on_tick(self, fn: Callable[[EngineSnapshot], None]) -> None:
        self._on_tick = fn

    def set_on_state_change(self, fn: Callable[[EngineSnapshot], None]) -> None:
        self._on_state_change = fn

    def set_on_complete(self, fn: Callable[[EngineSnapshot], None]) -> None:
        self._on_complete = fn

    def _emit_tick(self) -> None:
        if self._on_tick:
            self._on_tick(self.engine.snapshot())

    def _emit_state_change(self) -> None:
        if self._on_state_change:
            self._on_state_change(self.engine.snapshot())

    def _emit_complete(self) -> None:
        self.completed_count += 1
        if self._on_complete:
            self._on_complete(self.engine.snapshot())

    # ----- Public API -----
    def get_snapshot(self) -> EngineSnapshot:
        return self.engine.snapshot()

    def is_polling_needed(self) -> bool:
        return self.engine.run_state is RunState.RUNNING

    def start(self, duration_sec: Optional[int] = None) -> None:
        self.engine.start(duration_sec)
        self._emit_state_change()
        self._emit_tick()

    def toggle(self) -> RunState:
        before = self.engine.run_state
        state = self.engine.toggle()
        if state is not before:
            self._emit_state_change()
            self._emit_tick()
        return state

    def reset(self, duration_sec: Optional[int] = None) -> None:
        self.engine.reset(duration_sec)
        self._emit_state_change()
        self._emit_tick()

    def tick(self) -> None:
        """
        Called by the host polling loop, several times per second.
        """
        if not self.is_polling_needed():
            return

        self.engine.tick()

        # always emit tick
        self._emit_tick()

        if not self.is_polling_needed():
            self._emit_state_change()

    def shutdown(self) -> None:
        before = self.engine.run_state
        saved = self.engine.shutdown()
        if saved is None:
            _LOGGER.debug("Nothing to persist on shutdown")
        if self.engine.run_state is not before:
            self._emit_state_change()
