# model.py

from dataclasses import dataclass, replace
from typing import List, Optional, Union

from config import COMPLETION_MESSAGE, IDLE_PHASE_TEXT
from phases import PhaseSequence


class InvalidOperation(Exception):
    """A control call was made in a state that forbids it. State is unchanged."""


def format_mmss(total_seconds: Optional[int]) -> str:
    if total_seconds is None:
        return "--:--"
    if total_seconds < 0:
        total_seconds = 0
    m = total_seconds // 60
    s = total_seconds % 60
    return f"{m:02d}:{s:02d}"


@dataclass(frozen=True)
class SessionState:
    phase_index: Optional[int] = None   # None -> idle
    remaining_seconds: int = 0
    is_running: bool = False
    in_phase_pause: bool = False        # end message spoken, waiting to advance

    @property
    def is_idle(self) -> bool:
        return self.phase_index is None


IDLE = SessionState()


# --- Effects: what the controller must do after a transition ---

@dataclass(frozen=True)
class Announce:
    text: str


@dataclass(frozen=True)
class StopSpeech:
    pass


@dataclass(frozen=True)
class StartTicking:
    pass


@dataclass(frozen=True)
class StopTicking:
    pass


@dataclass(frozen=True)
class ScheduleAdvance:
    pass


@dataclass(frozen=True)
class CancelAdvance:
    pass


Effect = Union[Announce, StopSpeech, StartTicking, StopTicking, ScheduleAdvance, CancelAdvance]
Transition = tuple[SessionState, List[Effect]]


# --- Next phase or completion ---

@dataclass(frozen=True)
class AdvanceTo:
    next_index: int


@dataclass(frozen=True)
class Complete:
    pass


def next_after(index: int, count: int) -> Union[AdvanceTo, Complete]:
    if index + 1 < count:
        return AdvanceTo(index + 1)
    return Complete()


# --- Transitions ---

def _enter_phase(index: int, phases: PhaseSequence) -> Transition:
    phase = phases.phase_at(index)
    state = SessionState(
        phase_index=index,
        remaining_seconds=phase.duration_seconds,
        is_running=True,
    )
    return state, [Announce(phase.start_message), StartTicking()]


def start(state: SessionState, phases: PhaseSequence) -> Transition:
    if not state.is_idle:
        raise InvalidOperation("session already in progress; reset it first")
    return _enter_phase(0, phases)


def tick(state: SessionState, phases: PhaseSequence) -> Transition:
    # Stray ticks (paused, idle, between phases) change nothing.
    if not state.is_running or state.in_phase_pause or state.is_idle:
        return state, []

    if state.remaining_seconds > 0:
        return replace(state, remaining_seconds=state.remaining_seconds - 1), []

    # Phase expired: stop the ticker before the one-shot advance timer exists.
    phase = phases.phase_at(state.phase_index)
    return replace(state, in_phase_pause=True), [
        StopTicking(),
        Announce(phase.end_message),
        ScheduleAdvance(),
    ]


def advance(state: SessionState, phases: PhaseSequence) -> Transition:
    if not state.in_phase_pause:
        raise InvalidOperation("advance is only valid after a phase has ended")

    outcome = next_after(state.phase_index, len(phases))
    if isinstance(outcome, AdvanceTo):
        return _enter_phase(outcome.next_index, phases)
    return IDLE, [Announce(COMPLETION_MESSAGE)]


def pause(state: SessionState, phases: PhaseSequence) -> Transition:
    # Already paused, idle, or in the inter-phase pause: nothing to do.
    if not state.is_running or state.in_phase_pause:
        return state, []
    return replace(state, is_running=False), [StopTicking()]


def resume(state: SessionState, phases: PhaseSequence) -> Transition:
    if state.is_idle:
        raise InvalidOperation("no phase is active")
    if state.in_phase_pause:
        raise InvalidOperation("cannot resume between phases")
    if state.is_running:
        raise InvalidOperation("session is already running")
    if state.remaining_seconds <= 0:
        raise InvalidOperation("no time left in the current phase")
    return replace(state, is_running=True), [StartTicking()]


def reset(state: SessionState, phases: PhaseSequence) -> Transition:
    return IDLE, [StopTicking(), CancelAdvance(), StopSpeech()]


# --- Presentation helpers ---

@dataclass
class DisplayInfo:
    phase_text: str
    time_text: str
    status_text: str


@dataclass
class Controls:
    start: bool
    pause: bool
    resume: bool
    reset: bool


def display_info(state: SessionState, phases: PhaseSequence) -> DisplayInfo:
    if state.is_idle:
        return DisplayInfo(
            phase_text=IDLE_PHASE_TEXT,
            time_text=format_mmss(0),
            status_text="",
        )

    phase = phases.phase_at(state.phase_index)
    if state.in_phase_pause:
        status_text = f"{phase.name} finished"
    elif state.is_running:
        status_text = f"Phase {state.phase_index + 1} of {len(phases)}"
    else:
        status_text = "Paused"

    return DisplayInfo(
        phase_text=phase.name,
        time_text=format_mmss(state.remaining_seconds),
        status_text=status_text,
    )


def available_controls(state: SessionState) -> Controls:
    active = not state.is_idle
    return Controls(
        start=not active,
        pause=active and state.is_running and not state.in_phase_pause,
        resume=active and not state.is_running and state.remaining_seconds > 0,
        reset=active,
    )
