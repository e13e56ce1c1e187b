"""Tests for TimerService callback wiring and lifecycle."""

import pytest

from domain.models import InvalidTransitionError, PersistedSnapshot, RunState
from services.timer_service import TimerService


class Recorder:
    def __init__(self, service):
        self.ticks = []
        self.states = []
        self.completes = []
        service.set_on_tick(self.ticks.append)
        service.set_on_state_change(self.states.append)
        service.set_on_complete(self.completes.append)


@pytest.fixture
def service(sqlite_store, clock):
    return TimerService(sqlite_store, 60, clock=clock)


def test_fresh_service_is_idle(service):
    snap = service.get_snapshot()
    assert snap.is_idle
    assert snap.remaining_sec == 60
    assert not service.is_polling_needed()
    assert not service.completed_on_restore


def test_start_emits_state_and_tick(service):
    rec = Recorder(service)
    service.start()
    assert service.is_polling_needed()
    assert [s.run_state for s in rec.states] == [RunState.RUNNING]
    assert rec.ticks[-1].remaining_sec == 60


def test_start_twice_raises(service):
    service.start()
    with pytest.raises(InvalidTransitionError):
        service.start()


def test_tick_updates_listeners(service, clock):
    rec = Recorder(service)
    service.start()
    clock.advance(12.3)
    service.tick()
    assert rec.ticks[-1].remaining_sec == 48


def test_tick_when_not_running_emits_nothing(service, clock):
    rec = Recorder(service)
    clock.advance(5)
    service.tick()
    assert rec.ticks == []
    assert rec.states == []


def test_completion_notifies_once_and_stops_polling(service, clock):
    rec = Recorder(service)
    service.start(5)
    clock.advance(30)
    service.tick()
    service.tick()
    service.toggle()

    assert len(rec.completes) == 1
    assert rec.completes[0].is_completed
    assert rec.states[-1].is_completed
    assert not service.is_polling_needed()
    assert service.completed_count == 1


def test_toggle_pauses_and_resumes(service, clock):
    rec = Recorder(service)
    service.start()
    clock.advance(10)
    assert service.toggle() is RunState.PAUSED
    assert not service.is_polling_needed()
    clock.advance(100)
    assert service.toggle() is RunState.RUNNING
    assert service.get_snapshot().remaining_sec == 50
    assert [s.run_state for s in rec.states] == [
        RunState.RUNNING,
        RunState.PAUSED,
        RunState.RUNNING,
    ]


def test_toggle_on_completed_emits_nothing(service, clock):
    service.start(1)
    clock.advance(1)
    service.tick()
    rec = Recorder(service)
    assert service.toggle() is RunState.COMPLETED
    assert rec.states == []


def test_reset_clears_persisted_state(service, sqlite_store, clock):
    service.start()
    clock.advance(20)
    service.shutdown()
    assert sqlite_store.load() is not None

    service.reset(90)
    snap = service.get_snapshot()
    assert snap.is_idle
    assert snap.remaining_sec == 90
    assert sqlite_store.load() is None


def test_new_service_restores_paused(sqlite_store, clock):
    first = TimerService(sqlite_store, 60, clock=clock)
    first.start()
    clock.advance(20)
    first.shutdown()

    clock.advance(3600)
    second = TimerService(sqlite_store, 60, clock=clock)
    snap = second.get_snapshot()
    assert snap.is_paused
    assert snap.remaining_sec == 40
    assert not second.is_polling_needed()


def test_expired_restore_is_silent_by_default(sqlite_store, clock):
    sqlite_store.save(PersistedSnapshot(60, 30, RunState.RUNNING, clock.now_ms))
    clock.advance(31)
    service = TimerService(sqlite_store, 60, clock=clock)
    assert service.get_snapshot().is_completed
    assert service.completed_count == 0
    assert not service.completed_on_restore


def test_expired_restore_with_catch_up(sqlite_store, clock):
    sqlite_store.save(PersistedSnapshot(60, 30, RunState.RUNNING, clock.now_ms))
    clock.advance(31)
    service = TimerService(sqlite_store, 60, catch_up=True, clock=clock)
    assert service.completed_on_restore
    assert service.completed_count == 1

    rec = Recorder(service)
    service.tick()
    assert rec.completes == []


def test_shutdown_of_idle_service_clears_store(service, sqlite_store, clock):
    sqlite_store.save(PersistedSnapshot(60, 30, RunState.PAUSED, clock.now_ms))
    rec = Recorder(service)
    service.shutdown()
    assert sqlite_store.load() is None
    assert rec.states == []


def test_shutdown_of_running_service_emits_pause(service, clock):
    service.start()
    rec = Recorder(service)
    clock.advance(1)
    service.shutdown()
    assert [s.run_state for s in rec.states] == [RunState.PAUSED]
