# controller.py

import logging
from typing import Callable, List, Optional

import model
from announcer import Announcer
from config import PHASE_PAUSE_MS, TICK_INTERVAL_MS
from model import (
    Announce,
    CancelAdvance,
    DisplayInfo,
    Effect,
    InvalidOperation,
    ScheduleAdvance,
    SessionState,
    StartTicking,
    StopSpeech,
    StopTicking,
)
from phases import PhaseSequence
from timers import TimerHandle, TimerSource

logger = logging.getLogger(__name__)

Listener = Callable[[SessionState], None]


class SessionController:
    """
    Runs one guided session over a fixed phase sequence.

    All calls are expected on a single event loop (the one behind
    `timer_source`). At most one of the two timers is outstanding at a time:
    the per-second ticker while a phase counts down, or the one-shot advance
    timer during the gap between phases.
    """

    def __init__(self, phases: PhaseSequence, timer_source: TimerSource, announcer: Announcer,
                 pause_ms: int = PHASE_PAUSE_MS, tick_ms: int = TICK_INTERVAL_MS) -> None:
        self.phases = phases
        self.timers = timer_source
        self.announcer = announcer
        self.pause_ms = pause_ms
        self.tick_ms = tick_ms

        self._state = model.IDLE
        self._ticker: Optional[TimerHandle] = None
        self._advance_timer: Optional[TimerHandle] = None
        self._listeners: List[Listener] = []

    # --- read side ---

    @property
    def state(self) -> SessionState:
        return self._state

    def display(self) -> DisplayInfo:
        return model.display_info(self._state, self.phases)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- controls ---

    def start(self) -> None:
        self._run(model.start, "start")

    def pause(self) -> None:
        self._run(model.pause, "pause")

    def resume(self) -> None:
        self._run(model.resume, "resume")

    def reset(self) -> None:
        self._run(model.reset, "reset")

    # --- timer callbacks ---

    def tick(self) -> None:
        self._run(model.tick, "tick")

    def advance(self) -> None:
        # Safe if the one-shot has already fired; drops it if called early.
        self._cancel_advance()
        self._run(model.advance, "advance")

    # --- internals ---

    def _run(self, transition, name: str) -> None:
        old = self._state
        try:
            new, effects = transition(old, self.phases)
        except InvalidOperation as e:
            logger.warning(f"Rejected {name}(): {e}")
            raise

        self._state = new
        if new != old or effects:
            logger.debug(f"{name}: {old} -> {new} effects={effects}")
        for effect in effects:
            self._perform(effect)
        if new != old:
            self._notify()

    def _perform(self, effect: Effect) -> None:
        if isinstance(effect, Announce):
            self.announcer.interrupt()
            self.announcer.speak(effect.text)
        elif isinstance(effect, StopSpeech):
            self.announcer.interrupt()
        elif isinstance(effect, StartTicking):
            self._start_ticker()
        elif isinstance(effect, StopTicking):
            self._stop_ticker()
        elif isinstance(effect, ScheduleAdvance):
            self._schedule_advance()
        elif isinstance(effect, CancelAdvance):
            self._cancel_advance()
        else:
            raise TypeError(f"unknown effect: {effect!r}")

    def _start_ticker(self) -> None:
        # Single registration point: never two tickers, never ticker + advance.
        self._stop_ticker()
        self._cancel_advance()
        self._ticker = self.timers.call_every(self.tick_ms, self.tick)

    def _stop_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    def _schedule_advance(self) -> None:
        self._stop_ticker()
        self._cancel_advance()
        self._advance_timer = self.timers.call_later(self.pause_ms, self.advance)

    def _cancel_advance(self) -> None:
        if self._advance_timer is not None:
            self._advance_timer.cancel()
            self._advance_timer = None

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception("Session listener failed")
