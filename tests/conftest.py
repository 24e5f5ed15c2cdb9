"""
Shared fixtures: virtual clock/scheduler and recording sinks.
"""

import heapq
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from countdown1356.core.countdown_store import CountdownStore
from countdown1356.utils.preferences import PreferenceStore

T0 = 1_700_000_000_000  # arbitrary wall-clock start, epoch millis


class FakeHandle:
    def __init__(self, when, seq, callback, args):
        self.when = when
        self.seq = seq
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True

    def __lt__(self, other):
        return (self.when, self.seq) < (other.when, other.seq)


class FakeScheduler:
    """Virtual-time stand-in for the asyncio loop's call_later."""

    def __init__(self, start_millis=T0):
        self.start_millis = start_millis
        self.now = 0.0
        self._queue = []
        self._seq = 0

    def call_later(self, delay, callback, *args):
        handle = FakeHandle(self.now + delay, self._seq, callback, args)
        self._seq += 1
        heapq.heappush(self._queue, handle)
        return handle

    def advance(self, seconds):
        target = self.now + seconds
        while self._queue and self._queue[0].when <= target:
            handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = handle.when
            handle.callback(*handle.args)
        self.now = target

    def clock(self):
        """Wall clock in epoch millis that follows virtual time."""
        return self.start_millis + int(round(self.now * 1000))

    def pending(self):
        return [h for h in self._queue if not h.cancelled]


class FakeClock:
    def __init__(self, now=T0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, millis):
        self.now += millis


class RecordingPreferences(PreferenceStore):
    """PreferenceStore that counts writes."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.writes = []

    def put_long(self, key, value):
        self.writes.append((key, value))
        super().put_long(key, value)


class RecordingSurface:
    def __init__(self, scheduler=None):
        self.scheduler = scheduler
        self.calls = []
        self.errors = []

    def update_surface(self, snapshot):
        self.calls.append((self.scheduler.now if self.scheduler else None, snapshot))

    def show_error(self, message):
        self.errors.append(message)


class RecordingDisplay:
    def __init__(self, scheduler=None):
        self.scheduler = scheduler
        self.calls = []
        self.errors = []

    def update_display(self, snapshot):
        self.calls.append((self.scheduler.now if self.scheduler else None, snapshot))

    def show_error(self, message):
        self.errors.append(message)


@pytest.fixture
def prefs(tmp_path):
    return RecordingPreferences("Countdown1356Prefs", tmp_path / "shared_prefs")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(prefs, clock):
    return CountdownStore(prefs, clock=clock)


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point the user data dir at tmp_path and reset the config singleton."""
    from countdown1356.utils.config_manager import ConfigManager

    monkeypatch.setenv("COUNTDOWN1356_DATA_DIR", str(tmp_path / "data"))
    ConfigManager._instance = None
    yield ConfigManager.get_instance()
    ConfigManager._instance = None
