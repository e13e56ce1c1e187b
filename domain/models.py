# -*- coding: utf-8 -*-

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


class InvalidDurationError(ValueError):
    """Duration is negative or not a whole number of seconds."""


class InvalidTransitionError(RuntimeError):
    """Operation is not allowed from the engine's current run state."""


class SnapshotError(ValueError):
    """Persisted snapshot payload cannot be parsed."""


@dataclass(frozen=True)
class EngineSnapshot:
    duration_sec: int
    remaining_sec: int
    run_state: RunState

    @property
    def is_running(self) -> bool:
        return self.run_state is RunState.RUNNING

    @property
    def is_idle(self) -> bool:
        return self.run_state is RunState.IDLE

    @property
    def is_paused(self) -> bool:
        return self.run_state is RunState.PAUSED

    @property
    def is_completed(self) -> bool:
        return self.run_state is RunState.COMPLETED


@dataclass(frozen=True)
class PersistedSnapshot:
    """
    State written to the external store when the engine is torn down.
    Holds remaining seconds, never a deadline.
    """

    duration_sec: int
    remaining_sec: int
    run_state: RunState
    saved_at_ms: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "durationSeconds": self.duration_sec,
            "remainingSeconds": self.remaining_sec,
            "runState": self.run_state.value,
            "savedAtEpochMillis": self.saved_at_ms,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PersistedSnapshot":
        try:
            duration = data["durationSeconds"]
            remaining = data["remainingSeconds"]
            state = RunState(data["runState"])
            saved_at = data["savedAtEpochMillis"]
        except (KeyError, TypeError, ValueError) as err:
            raise SnapshotError(f"Malformed snapshot: {data!r}") from err

        for name, value in (
            ("durationSeconds", duration),
            ("remainingSeconds", remaining),
            ("savedAtEpochMillis", saved_at),
        ):
            # bool is an int subclass; reject it explicitly
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise SnapshotError(f"{name} must be a non-negative integer, got {value!r}")

        if remaining > duration:
            raise SnapshotError(
                f"remainingSeconds {remaining} exceeds durationSeconds {duration}"
            )

        return cls(
            duration_sec=duration,
            remaining_sec=remaining,
            run_state=state,
            saved_at_ms=saved_at,
        )
