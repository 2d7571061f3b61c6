# phases.py

from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple


@dataclass(frozen=True)
class PhaseDefinition:
    name: str
    duration_seconds: int
    start_message: str
    end_message: str


class PhaseSequence:
    """Ordered, immutable list of phases. Sequence order is execution order."""

    def __init__(self, phases: Iterable[PhaseDefinition]) -> None:
        self._phases: Tuple[PhaseDefinition, ...] = tuple(phases)
        if not self._phases:
            raise ValueError("a phase sequence needs at least one phase")
        for phase in self._phases:
            d = phase.duration_seconds
            if isinstance(d, bool) or not isinstance(d, int) or d < 1:
                raise ValueError(
                    f"phase {phase.name!r}: duration must be a whole number of seconds >= 1, got {d!r}"
                )

    def phase_at(self, index: int) -> PhaseDefinition:
        if not 0 <= index < len(self._phases):
            raise IndexError(f"phase index {index} out of range (0..{len(self._phases) - 1})")
        return self._phases[index]

    def __len__(self) -> int:
        return len(self._phases)

    def __iter__(self) -> Iterator[PhaseDefinition]:
        return iter(self._phases)

    def shortened(self, seconds: int) -> "PhaseSequence":
        """Same phases and messages, every duration capped at `seconds`."""
        return PhaseSequence(
            PhaseDefinition(p.name, min(p.duration_seconds, seconds), p.start_message, p.end_message)
            for p in self._phases
        )


MEDITATION_PHASES = PhaseSequence([
    PhaseDefinition("Preparation", 60, "Preparation started", "Preparation ended"),
    PhaseDefinition("Pranayama", 300, "Pranayama started", "Pranayama done"),
    PhaseDefinition("Dhyana", 600, "Meditation started", "Meditation done"),
    PhaseDefinition("Ending", 180, "Session complete", "Session complete"),
])
