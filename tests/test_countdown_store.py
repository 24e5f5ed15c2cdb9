"""
Unit tests for CountdownStore.

Run: pytest tests/test_countdown_store.py -v
"""

import threading

import pytest

from conftest import T0, RecordingPreferences
from countdown1356.constants.constants import CountdownConfig, PrefsKeys
from countdown1356.core.countdown_store import CountdownStore
from countdown1356.core.errors import PersistenceError

DURATION = CountdownConfig.DURATION_MILLIS


class TestInitialization:
    """Tests for initialize_countdown and the start instant."""

    def test_first_call_records_start(self, store, prefs):
        assert store.initialize_countdown() is True
        assert store.get_start_instant() == T0
        assert prefs.writes == [(PrefsKeys.KEY_START_TIME_MILLIS, T0)]

    def test_repeated_calls_write_once(self, store, prefs, clock):
        store.initialize_countdown()
        for _ in range(10):
            clock.advance(1234)
            assert store.initialize_countdown() is False
            assert store.get_start_instant() == T0
        assert len(prefs.writes) == 1

    def test_unset_start_is_zero(self, store):
        assert store.get_start_instant() == CountdownConfig.UNSET_START_INSTANT == 0

    def test_restart_keeps_start_instant(self, tmp_path, clock):
        """A new process (fresh store on the same file) must not reset the start."""
        directory = tmp_path / "prefs"
        first = CountdownStore(RecordingPreferences("Countdown1356Prefs", directory), clock=clock)
        first.initialize_countdown()

        clock.advance(5000)
        second_prefs = RecordingPreferences("Countdown1356Prefs", directory)
        second = CountdownStore(second_prefs, clock=clock)

        assert second.initialize_countdown() is False
        assert second.get_start_instant() == T0
        assert second_prefs.writes == []

    def test_concurrent_initialization_single_writer(self, tmp_path, clock):
        prefs = RecordingPreferences("Countdown1356Prefs", tmp_path)
        store = CountdownStore(prefs, clock=clock)
        barrier = threading.Barrier(8)
        results = []
        starts = []

        def worker():
            barrier.wait()
            results.append(store.initialize_countdown())
            starts.append(store.get_start_instant())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count(True) == 1
        assert len(prefs.writes) == 1
        assert set(starts) == {T0}

    def test_stale_cache_in_other_process_does_not_rewrite(self, tmp_path, clock):
        """A second store that read "unset" earlier must see the first store's write."""
        directory = tmp_path / "prefs"
        manual_prefs = RecordingPreferences("Countdown1356Prefs", directory)
        boot_prefs = RecordingPreferences("Countdown1356Prefs", directory)
        manual = CountdownStore(manual_prefs, clock=clock)
        boot = CountdownStore(boot_prefs, clock=clock)

        assert boot.get_start_instant() == 0

        assert manual.initialize_countdown() is True
        clock.advance(5000)
        assert boot.initialize_countdown() is False

        assert boot.get_start_instant() == T0
        assert boot_prefs.writes == []

    def test_concurrent_stores_on_same_file_single_writer(self, tmp_path):
        """Independent stores (one per process) racing on a fresh install write once."""
        directory = tmp_path / "prefs"
        pairs = []
        for i in range(4):
            prefs = RecordingPreferences("Countdown1356Prefs", directory)
            store = CountdownStore(prefs, clock=lambda i=i: T0 + i * 5000)
            store.get_start_instant()
            pairs.append((prefs, store))

        barrier = threading.Barrier(len(pairs))
        results = {}

        def worker(index, store):
            barrier.wait()
            results[index] = store.initialize_countdown()

        threads = [
            threading.Thread(target=worker, args=(i, store))
            for i, (_, store) in enumerate(pairs)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert list(results.values()).count(True) == 1
        assert sum(len(prefs.writes) for prefs, _ in pairs) == 1

        on_disk = RecordingPreferences("Countdown1356Prefs", directory)
        winner = on_disk.get_long(PrefsKeys.KEY_START_TIME_MILLIS)
        for prefs, store in pairs:
            prefs.reload()
            assert store.get_start_instant() == winner


class TestRemainingTime:
    """Tests for remaining time, clamping and the unset default."""

    def test_unset_returns_full_duration(self, store):
        assert store.get_remaining_millis() == DURATION == 117_158_400_000
        assert store.is_expired() is False

    def test_remaining_after_elapsed_time(self, store, clock):
        store.initialize_countdown()
        clock.advance(90_000)
        assert store.get_remaining_millis() == DURATION - 90_000

    def test_monotonic_non_increase(self, store, clock):
        store.initialize_countdown()
        previous = store.get_remaining_millis()
        for step in (1, 999, 1000, 60_000, 86_400_000):
            clock.advance(step)
            current = store.get_remaining_millis()
            assert current <= previous
            previous = current

    def test_clamped_at_deadline(self, store, clock):
        store.initialize_countdown()
        clock.advance(DURATION)
        assert store.get_remaining_millis() == 0
        assert store.is_expired() is True

    def test_clamped_after_deadline(self, store, clock):
        store.initialize_countdown()
        clock.advance(DURATION + 10 * CountdownConfig.MILLIS_PER_DAY)
        assert store.get_remaining_millis() == 0
        assert store.is_expired() is True
        assert store.get_snapshot().is_expired is True

    def test_clock_rolled_back_extends_countdown(self, store, clock):
        """Setting the clock before the start instant yields more than the full duration."""
        store.initialize_countdown()
        clock.now = T0 - 60_000
        assert store.get_remaining_millis() == DURATION + 60_000
        assert store.is_expired() is False

    def test_snapshot_breakdown(self, store, clock):
        store.initialize_countdown()
        clock.advance(DURATION - 90_061_000)
        snapshot = store.get_snapshot()
        assert (snapshot.days, snapshot.hours, snapshot.minutes, snapshot.seconds) == (1, 1, 1, 1)
        assert snapshot.total_millis == 90_061_000


class TestPersistenceFailures:
    """Persistence errors propagate instead of silently resetting the countdown."""

    def test_corrupt_file_raises_on_init(self, tmp_path, clock):
        directory = tmp_path / "prefs"
        directory.mkdir()
        (directory / "Countdown1356Prefs.json").write_text("{not json", encoding="utf-8")
        store = CountdownStore(RecordingPreferences("Countdown1356Prefs", directory), clock=clock)

        with pytest.raises(PersistenceError):
            store.initialize_countdown()
        with pytest.raises(PersistenceError):
            store.get_remaining_millis()

    def test_write_failure_raises(self, store, monkeypatch):
        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("countdown1356.utils.preferences.os.replace", fail_replace)

        with pytest.raises(PersistenceError):
            store.initialize_countdown()
        assert store.get_start_instant() == 0

    def test_unreadable_location_raises(self, tmp_path, clock):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("file in the way", encoding="utf-8")
        store = CountdownStore(RecordingPreferences("Countdown1356Prefs", blocker), clock=clock)

        with pytest.raises(PersistenceError):
            store.initialize_countdown()
