# ui_tk.py

import argparse
import logging
import tkinter as tk
from typing import Optional, Sequence

from announcer import default_announcer
from config import (
    BG_COLOR,
    BUTTON_COLORS,
    CARD_COLOR,
    FG_COLOR,
    FONT_BUTTON,
    FONT_PHASE,
    FONT_TIME,
    FONT_TITLE,
    SHORT_PHASE_SECONDS,
    WINDOW_TITLE,
)
from controller import SessionController
from model import InvalidOperation, SessionState, available_controls
from phases import MEDITATION_PHASES, PhaseSequence
from timers import TkTimerSource

BUTTON_ORDER = ("start", "pause", "resume", "reset")


class SessionWindow:
    def __init__(self, phases: PhaseSequence = MEDITATION_PHASES, mute: bool = False) -> None:
        # --- Window setup ---
        self.root = tk.Tk()
        self.root.title(WINDOW_TITLE)
        self.root.configure(bg=BG_COLOR, padx=20, pady=20)

        self.controller = SessionController(
            phases,
            TkTimerSource(self.root),
            default_announcer(mute=mute),
        )

        self._build_widgets()

        self.controller.subscribe(self.refresh)
        self.refresh(self.controller.state)
        self.root.protocol("WM_DELETE_WINDOW", self.close)

    def _build_widgets(self) -> None:
        tk.Label(
            self.root,
            text=WINDOW_TITLE,
            bg=BG_COLOR,
            fg=FG_COLOR,
            font=FONT_TITLE,
        ).pack(pady=(0, 20))

        # Card: phase name + countdown
        card = tk.Frame(self.root, bg=CARD_COLOR, padx=20, pady=30)
        card.pack(fill="x", pady=(0, 20))

        self.label_phase = tk.Label(card, text="", bg=CARD_COLOR, fg=FG_COLOR, font=FONT_PHASE)
        self.label_phase.pack(pady=(0, 10))

        self.label_time = tk.Label(card, text="00:00", bg=CARD_COLOR, fg=FG_COLOR, font=FONT_TIME)
        self.label_time.pack()

        self.label_status = tk.Label(card, text="", bg=CARD_COLOR, fg=FG_COLOR, font=FONT_BUTTON)
        self.label_status.pack(pady=(10, 0))

        # Controls row
        controls = tk.Frame(self.root, bg=BG_COLOR)
        controls.pack(fill="x")

        actions = {
            "start": self.controller.start,
            "pause": self.controller.pause,
            "resume": self.controller.resume,
            "reset": self.controller.reset,
        }
        self.buttons = {}
        for column, name in enumerate(BUTTON_ORDER):
            controls.columnconfigure(column, weight=1)
            self.buttons[name] = tk.Button(
                controls,
                text=name.capitalize(),
                bg=BUTTON_COLORS[name],
                fg=FG_COLOR,
                activebackground=BUTTON_COLORS[name],
                font=FONT_BUTTON,
                relief="flat",
                command=lambda action=actions[name]: self._invoke(action),
            )
            self.buttons[name].grid(row=0, column=column, padx=6, sticky="ew")

    def _invoke(self, action) -> None:
        try:
            action()
        except InvalidOperation:
            # Already logged by the controller; the button should not have been visible.
            return

    def refresh(self, state: SessionState) -> None:
        info = self.controller.display()
        self.label_phase.config(text=info.phase_text)
        self.label_time.config(text=info.time_text)
        self.label_status.config(text=info.status_text)

        visible = vars(available_controls(state))
        for name, button in self.buttons.items():
            if visible[name]:
                button.grid()
            else:
                button.grid_remove()

    def close(self) -> None:
        self.controller.reset()
        self.root.destroy()

    def run(self) -> None:
        self.root.mainloop()


def main(argv: Optional[Sequence[str]] = None) -> None:
    ap = argparse.ArgumentParser(description="Guided meditation session timer with spoken phase announcements.")
    ap.add_argument("--mute", action="store_true", help="Log announcements instead of speaking them.")
    ap.add_argument("--short", action="store_true",
                    help=f"Shorten every phase to {SHORT_PHASE_SECONDS}s to try out the flow.")
    ap.add_argument("--debug", action="store_true", help="Log every state transition.")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    phases = MEDITATION_PHASES.shortened(SHORT_PHASE_SECONDS) if args.short else MEDITATION_PHASES
    SessionWindow(phases, mute=args.mute).run()


if __name__ == "__main__":
    main()
