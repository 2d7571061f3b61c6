# timers.py

from typing import Callable, Optional, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class TimerSource(Protocol):
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle: ...

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> TimerHandle: ...


class _AfterHandle:
    """One `after` registration. Recurring handles re-arm after each call."""

    def __init__(self, root, delay_ms: int, callback: Callable[[], None], repeat: bool) -> None:
        self.root = root
        self.delay_ms = delay_ms
        self.callback = callback
        self.repeat = repeat
        self.cancelled = False
        self._after_id: Optional[str] = root.after(delay_ms, self._fire)

    def _fire(self) -> None:
        self._after_id = None
        if self.cancelled:
            return
        if not self.repeat:
            self.cancelled = True
        self.callback()
        # The callback may have cancelled us.
        if self.repeat and not self.cancelled:
            self._after_id = self.root.after(self.delay_ms, self._fire)

    def cancel(self) -> None:
        self.cancelled = True
        if self._after_id is not None:
            self.root.after_cancel(self._after_id)
            self._after_id = None


class TkTimerSource:
    """Timers on the Tk event loop, so callbacks never race the UI."""

    def __init__(self, root) -> None:
        self.root = root

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> _AfterHandle:
        return _AfterHandle(self.root, delay_ms, callback, repeat=False)

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> _AfterHandle:
        return _AfterHandle(self.root, interval_ms, callback, repeat=True)
