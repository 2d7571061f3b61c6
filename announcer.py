# announcer.py

import logging
import shutil
import subprocess
from typing import List, Optional, Protocol

import psutil

from config import (
    SPEECH_COMMAND,
    SPEECH_PITCH,
    SPEECH_RATE_WPM,
    SPEECH_STOP_TIMEOUT_S,
    SPEECH_VOICE,
)

logger = logging.getLogger(__name__)


class Announcer(Protocol):
    def interrupt(self) -> None: ...

    def speak(self, text: str) -> None: ...


class LoggingAnnouncer:
    """Announcer that only logs. Used when muted or no speech engine exists."""

    def interrupt(self) -> None:
        pass

    def speak(self, text: str) -> None:
        logger.info(f"Announce: {text}")


class SpeechAnnouncer:
    """
    Speaks through an espeak-compatible command line engine.

    Each utterance is its own subprocess. interrupt() stops the running
    utterance (and anything it spawned) before the next one begins, so
    messages never overlap. Failures are logged and never raised.
    """

    def __init__(self, command: str = SPEECH_COMMAND, voice: str = SPEECH_VOICE,
                 rate_wpm: int = SPEECH_RATE_WPM, pitch: int = SPEECH_PITCH,
                 stop_timeout: float = SPEECH_STOP_TIMEOUT_S) -> None:
        self.command = command
        self.voice = voice
        self.rate_wpm = rate_wpm
        self.pitch = pitch
        self.stop_timeout = stop_timeout
        self.current_process: Optional[subprocess.Popen] = None
        # Killed utterances not yet reaped; polled on later calls, never waited on.
        self.unreaped: List[subprocess.Popen] = []

    @classmethod
    def available(cls, command: str = SPEECH_COMMAND) -> bool:
        return shutil.which(command) is not None

    def build_command(self, text: str) -> List[str]:
        return [
            self.command,
            "-v", self.voice,
            "-s", str(self.rate_wpm),
            "-p", str(self.pitch),
            text,
        ]

    def speak(self, text: str) -> None:
        try:
            self.current_process = subprocess.Popen(
                self.build_command(text),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
            logger.debug(f"Speaking (pid {self.current_process.pid}): {text}")
        except (OSError, subprocess.SubprocessError) as e:
            self.current_process = None
            logger.error(f"Failed to speak {text!r}: {e}")

    def _reap(self) -> None:
        self.unreaped = [p for p in self.unreaped if p.poll() is None]

    def interrupt(self) -> None:
        self._reap()
        proc = self.current_process
        self.current_process = None
        if proc is None or proc.poll() is not None:
            return

        try:
            parent = psutil.Process(proc.pid)
            victims = parent.children(recursive=True) + [parent]
        except psutil.NoSuchProcess:
            return
        except psutil.Error as e:
            logger.error(f"Failed to inspect speech process {proc.pid}: {e}")
            return

        for p in victims:
            try:
                p.terminate()
            except psutil.NoSuchProcess:
                continue
            except psutil.Error as e:
                logger.error(f"Failed to stop speech process {p.pid}: {e}")

        _, alive = psutil.wait_procs(victims, timeout=self.stop_timeout)
        for p in alive:
            try:
                p.kill()
            except psutil.NoSuchProcess:
                continue
            except psutil.Error as e:
                logger.error(f"Failed to kill speech process {p.pid}: {e}")

        if proc.poll() is None:
            self.unreaped.append(proc)
        logger.debug("Interrupted speech")


def default_announcer(mute: bool = False):
    if mute:
        return LoggingAnnouncer()
    if SpeechAnnouncer.available():
        return SpeechAnnouncer()
    logger.warning(f"'{SPEECH_COMMAND}' not found on PATH; announcements will only be logged")
    return LoggingAnnouncer()
