"""Tests for snapshot parsing and run-state helpers."""

import pytest

from domain.models import EngineSnapshot, PersistedSnapshot, RunState, SnapshotError


def _payload(**overrides):
    data = {
        "durationSeconds": 60,
        "remainingSeconds": 40,
        "runState": "running",
        "savedAtEpochMillis": 1_000,
    }
    data.update(overrides)
    return data


def test_from_dict_parses_wire_shape():
    snap = PersistedSnapshot.from_dict(_payload())
    assert snap.duration_sec == 60
    assert snap.remaining_sec == 40
    assert snap.run_state is RunState.RUNNING
    assert snap.saved_at_ms == 1_000


@pytest.mark.parametrize(
    "payload",
    [
        {},
        _payload(runState="sleeping"),
        _payload(remainingSeconds=-1),
        _payload(durationSeconds="60"),
        _payload(savedAtEpochMillis=None),
        _payload(remainingSeconds=61),
        _payload(remainingSeconds=True),
    ],
)
def test_from_dict_rejects_bad_payloads(payload):
    with pytest.raises(SnapshotError):
        PersistedSnapshot.from_dict(payload)


def test_from_dict_rejects_non_mapping():
    with pytest.raises(SnapshotError):
        PersistedSnapshot.from_dict([1, 2, 3])


def test_run_state_values_are_wire_strings():
    assert [s.value for s in RunState] == ["idle", "running", "paused", "completed"]


def test_engine_snapshot_flags():
    snap = EngineSnapshot(duration_sec=10, remaining_sec=4, run_state=RunState.PAUSED)
    assert snap.is_paused
    assert not snap.is_running
    assert not snap.is_idle
    assert not snap.is_completed
