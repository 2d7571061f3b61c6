"""Shared fixtures: a manual-clock timer source and a recording announcer."""

import pytest

from controller import SessionController
from phases import PhaseDefinition, PhaseSequence


class FakeHandle:
    def __init__(self, source, due_ms, interval_ms, callback):
        self.source = source
        self.due_ms = due_ms
        self.interval_ms = interval_ms   # None for one-shot
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeTimerSource:
    """Timers that only fire when the test moves the clock with `advance`."""

    def __init__(self):
        self.now_ms = 0
        self.handles = []

    def call_later(self, delay_ms, callback):
        handle = FakeHandle(self, self.now_ms + delay_ms, None, callback)
        self.handles.append(handle)
        return handle

    def call_every(self, interval_ms, callback):
        handle = FakeHandle(self, self.now_ms + interval_ms, interval_ms, callback)
        self.handles.append(handle)
        return handle

    def pending(self):
        return [h for h in self.handles if not h.cancelled]

    def pending_recurring(self):
        return [h for h in self.pending() if h.interval_ms is not None]

    def pending_one_shot(self):
        return [h for h in self.pending() if h.interval_ms is None]

    def advance(self, ms):
        target = self.now_ms + ms
        while True:
            due = [h for h in self.pending() if h.due_ms <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.due_ms)
            self.now_ms = handle.due_ms
            if handle.interval_ms is None:
                handle.cancelled = True
            else:
                handle.due_ms += handle.interval_ms
            handle.callback()
        self.now_ms = target


class RecordingAnnouncer:
    def __init__(self):
        self.calls = []

    def interrupt(self):
        self.calls.append(("interrupt",))

    def speak(self, text):
        self.calls.append(("speak", text))

    @property
    def spoken(self):
        return [c[1] for c in self.calls if c[0] == "speak"]


@pytest.fixture
def two_phases():
    return PhaseSequence([
        PhaseDefinition("Prep", 2, "S1", "E1"),
        PhaseDefinition("Med", 3, "S2", "E2"),
    ])


@pytest.fixture
def timers():
    return FakeTimerSource()


@pytest.fixture
def announcer():
    return RecordingAnnouncer()


@pytest.fixture
def controller(two_phases, timers, announcer):
    return SessionController(two_phases, timers, announcer)
