from typing import Optional

import pytest

from domain.models import PersistedSnapshot
from storage.db import Database
from storage.repos import AppStateRepo, SnapshotStore

EPOCH_MS = 1_700_000_000_000


class FakeClock:
    """Wall clock in epoch milliseconds that only moves when told to."""

    def __init__(self, now_ms: int = EPOCH_MS) -> None:
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, seconds: float) -> None:
        self.now_ms += int(round(seconds * 1000))


class MemoryStore:
    def __init__(self) -> None:
        self.snapshot: Optional[PersistedSnapshot] = None
        self.saves = 0
        self.clears = 0

    def save(self, snapshot: PersistedSnapshot) -> None:
        self.saves += 1
        self.snapshot = snapshot

    def load(self) -> Optional[PersistedSnapshot]:
        return self.snapshot

    def clear(self) -> None:
        self.clears += 1
        self.snapshot = None


class CompletionCounter:
    def __init__(self) -> None:
        self.calls = 0

    def __call__(self, *args) -> None:
        self.calls += 1


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def completions():
    return CompletionCounter()


@pytest.fixture
def db():
    database = Database(":memory:")
    database.init_schema()
    yield database
    database.close()


@pytest.fixture
def app_state(db):
    return AppStateRepo(db)


@pytest.fixture
def sqlite_store(app_state):
    return SnapshotStore(app_state)
