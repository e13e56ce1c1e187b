# -*- coding: utf-8 -*-

import logging
import threading
import time
from typing import Any, Callable, Dict, Optional, Protocol, Union

from domain.models import (
    EngineSnapshot,
    InvalidDurationError,
    InvalidTransitionError,
    PersistedSnapshot,
    RunState,
)

_LOGGER = logging.getLogger(__name__)

DEFAULT_DURATION_SEC = 25 * 60


class SnapshotStoreLike(Protocol):
    def save(self, snapshot: PersistedSnapshot) -> None: ...

    def load(self) -> Optional[PersistedSnapshot]: ...

    def clear(self) -> None: ...


def _now_ms() -> int:
    return int(time.time() * 1000)


def _validate_duration(duration_sec: Any) -> int:
    if isinstance(duration_sec, bool) or not isinstance(duration_sec, int):
        raise InvalidDurationError(
            f"Duration must be a whole number of seconds, got {duration_sec!r}"
        )
    if duration_sec < 0:
        raise InvalidDurationError(f"Duration must be >= 0, got {duration_sec}")
    return duration_sec


def _ceil_seconds(delta_ms: int) -> int:
    if delta_ms <= 0:
        return 0
    return -(-delta_ms // 1000)


class TimerEngine:
    """
    Pure countdown engine (no Tkinter).

    Remaining time is derived from an absolute deadline on every tick(),
    so a late or skipped tick never accumulates error. The host decides
    how often tick() runs; anything under a second keeps the display smooth.
    """

    def __init__(
        self,
        duration_sec: int = DEFAULT_DURATION_SEC,
        *,
        store: Optional[SnapshotStoreLike] = None,
        on_complete: Optional[Callable[[], None]] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        self._duration_sec = _validate_duration(duration_sec)
        self._remaining_sec = self._duration_sec
        self._run_state = RunState.IDLE
        self._deadline_ms: Optional[int] = None
        # set once the current countdown has reported completion
        self._notified = False

        self._store = store
        self._on_complete = on_complete
        self._clock = clock or _now_ms
        self._lock = threading.RLock()

    # ----- Read-only state -----
    @property
    def duration_sec(self) -> int:
        return self._duration_sec

    @property
    def remaining_sec(self) -> int:
        return self._remaining_sec

    @property
    def run_state(self) -> RunState:
        return self._run_state

    @property
    def deadline_ms(self) -> Optional[int]:
        return self._deadline_ms

    def snapshot(self) -> EngineSnapshot:
        with self._lock:
            return EngineSnapshot(
                duration_sec=self._duration_sec,
                remaining_sec=self._remaining_sec,
                run_state=self._run_state,
            )

    def set_on_complete(self, fn: Optional[Callable[[], None]]) -> None:
        self._on_complete = fn

    # ----- Controls -----
    def start(self, duration_sec: Optional[int] = None) -> None:
        """
        Begin a fresh countdown from Idle, or again after Completed.
        Calling this while Running or Paused is a bug in the caller and
        raises instead of discarding progress.
        """
        duration = _validate_duration(
            self._duration_sec if duration_sec is None else duration_sec
        )
        fire = False
        with self._lock:
            if self._run_state in (RunState.RUNNING, RunState.PAUSED):
                raise InvalidTransitionError(
                    f"start() called while {self._run_state.value}; reset() first"
                )
            self._duration_sec = duration
            self._remaining_sec = duration
            self._notified = False
            _LOGGER.info("Countdown started: %ss", duration)
            fire = self._run_from_remaining(self._clock())
        if fire:
            self._notify_complete()

    def toggle(self) -> RunState:
        """Pause a running countdown, or run an idle/paused one."""
        fire = False
        with self._lock:
            state = self._run_state
            if state is RunState.COMPLETED:
                _LOGGER.debug("toggle() ignored, countdown already completed")
                return state

            now = self._clock()
            if state is RunState.RUNNING:
                self._remaining_sec = self._compute_remaining(now)
                if self._remaining_sec == 0:
                    fire = self._complete()
                else:
                    self._deadline_ms = None
                    self._run_state = RunState.PAUSED
                    _LOGGER.info("Countdown paused at %ss", self._remaining_sec)
            else:
                _LOGGER.info("Countdown running from %ss", self._remaining_sec)
                fire = self._run_from_remaining(now)
            state = self._run_state
        if fire:
            self._notify_complete()
        return state

    def reset(self, duration_sec: Optional[int] = None) -> None:
        duration = _validate_duration(
            self._duration_sec if duration_sec is None else duration_sec
        )
        with self._lock:
            self._duration_sec = duration
            self._remaining_sec = duration
            self._deadline_ms = None
            self._run_state = RunState.IDLE
            self._notified = False
            if self._store is not None:
                self._store.clear()
            _LOGGER.info("Countdown reset to %ss", duration)

    def tick(self) -> int:
        """
        Recompute remaining seconds against the wall clock.
        Returns the remaining seconds after the update.
        """
        fire = False
        with self._lock:
            if self._run_state is not RunState.RUNNING:
                return self._remaining_sec

            self._remaining_sec = self._compute_remaining(self._clock())
            _LOGGER.debug("tick: %ss remaining", self._remaining_sec)
            if self._remaining_sec == 0:
                fire = self._complete()
            remaining = self._remaining_sec
        if fire:
            self._notify_complete()
        return remaining

    # ----- Persistence -----
    def restore(
        self,
        snapshot: Union[PersistedSnapshot, Dict[str, Any], None],
        *,
        catch_up: bool = False,
    ) -> EngineSnapshot:
        """
        Resume from a persisted snapshot. The engine ends up Paused because
        no polling is attached yet. A countdown that ran out while nobody was
        around goes straight to Completed; its completion callback only fires
        when catch_up is True.

        Only an Idle engine accepts a snapshot. A Running or Paused engine
        raises, and a Completed one ignores it.
        """
        if snapshot is None:
            _LOGGER.debug("No persisted countdown, starting idle")
            return self.snapshot()
        if isinstance(snapshot, dict):
            snapshot = PersistedSnapshot.from_dict(snapshot)

        fire = False
        with self._lock:
            if self._run_state is RunState.COMPLETED:
                # the countdown already finished here; a late snapshot is stale
                _LOGGER.debug("restore() ignored, countdown already completed")
                return self.snapshot()
            if self._run_state is not RunState.IDLE:
                raise InvalidTransitionError(
                    f"restore() called while {self._run_state.value}"
                )

            remaining = snapshot.remaining_sec
            if snapshot.run_state is RunState.RUNNING:
                deadline = snapshot.saved_at_ms + remaining * 1000
                remaining = min(remaining, _ceil_seconds(deadline - self._clock()))

            self._duration_sec = snapshot.duration_sec
            self._remaining_sec = remaining
            self._deadline_ms = None

            if snapshot.run_state is RunState.IDLE:
                self._run_state = RunState.IDLE
            elif remaining == 0 or snapshot.run_state is RunState.COMPLETED:
                due = self._complete()
                fire = catch_up and due and snapshot.run_state is not RunState.COMPLETED
            else:
                self._run_state = RunState.PAUSED

            _LOGGER.info(
                "Restored countdown: %s, %ss of %ss left",
                self._run_state.value,
                self._remaining_sec,
                self._duration_sec,
            )
            result = self.snapshot()
        if fire:
            self._notify_complete()
        return result

    def shutdown(self) -> Optional[PersistedSnapshot]:
        """
        Flush state before the engine is discarded. Returns the snapshot
        that was written, or None when the store was cleared instead.
        """
        fire = False
        saved: Optional[PersistedSnapshot] = None
        with self._lock:
            now = self._clock()
            if self._run_state is RunState.RUNNING:
                self._remaining_sec = self._compute_remaining(now)

            if self._run_state in (RunState.RUNNING, RunState.PAUSED):
                if self._remaining_sec > 0:
                    saved = PersistedSnapshot(
                        duration_sec=self._duration_sec,
                        remaining_sec=self._remaining_sec,
                        run_state=RunState.PAUSED,
                        saved_at_ms=now,
                    )
                    self._deadline_ms = None
                    self._run_state = RunState.PAUSED
                    if self._store is not None:
                        self._store.save(saved)
                    _LOGGER.info("Countdown saved at %ss", self._remaining_sec)
                else:
                    fire = self._complete()
            elif self._store is not None:
                self._store.clear()
        if fire:
            self._notify_complete()
        return saved

    # ----- Internals -----
    def _compute_remaining(self, now_ms: int) -> int:
        remaining = _ceil_seconds(self._deadline_ms - now_ms)
        # a wall clock stepping backwards must not raise the display
        return max(0, min(remaining, self._remaining_sec, self._duration_sec))

    def _run_from_remaining(self, now_ms: int) -> bool:
        if self._remaining_sec == 0:
            return self._complete()
        self._deadline_ms = now_ms + self._remaining_sec * 1000
        self._run_state = RunState.RUNNING
        return False

    def _complete(self) -> bool:
        """Enter Completed. Returns True if this countdown has not reported yet."""
        self._remaining_sec = 0
        self._deadline_ms = None
        self._run_state = RunState.COMPLETED
        if self._store is not None:
            self._store.clear()
        _LOGGER.info("Countdown completed (%ss)", self._duration_sec)
        due = not self._notified
        self._notified = True
        return due

    def _notify_complete(self) -> None:
        if self._on_complete:
            self._on_complete()
