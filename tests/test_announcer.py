import logging
import subprocess
from unittest.mock import MagicMock, patch

import psutil

from announcer import LoggingAnnouncer, SpeechAnnouncer, default_announcer


def make_process(pid=4242, running=True):
    proc = MagicMock()
    proc.pid = pid
    proc.poll.return_value = None if running else 0
    return proc


def test_logging_announcer_logs(caplog):
    a = LoggingAnnouncer()
    with caplog.at_level(logging.INFO, logger="announcer"):
        a.interrupt()
        a.speak("Preparation started")
    assert "Announce: Preparation started" in caplog.text


def test_build_command_uses_voice_settings():
    a = SpeechAnnouncer(command="espeak", voice="en-us", rate_wpm=120, pitch=30)
    assert a.build_command("hello") == ["espeak", "-v", "en-us", "-s", "120", "-p", "30", "hello"]


@patch("announcer.subprocess.Popen")
def test_speak_starts_subprocess(popen):
    popen.return_value = make_process()
    a = SpeechAnnouncer()
    a.speak("Pranayama started")
    args, kwargs = popen.call_args
    assert args[0][-1] == "Pranayama started"
    assert kwargs["stdout"] is subprocess.DEVNULL
    assert a.current_process is popen.return_value


@patch("announcer.subprocess.Popen", side_effect=FileNotFoundError("espeak"))
def test_speak_failure_is_logged_not_raised(popen, caplog):
    a = SpeechAnnouncer()
    with caplog.at_level(logging.ERROR, logger="announcer"):
        a.speak("hello")
    assert a.current_process is None
    assert "Failed to speak" in caplog.text


@patch("announcer.psutil.wait_procs")
@patch("announcer.psutil.Process")
def test_interrupt_terminates_process_tree(process_cls, wait_procs):
    child = MagicMock()
    parent = MagicMock()
    parent.children.return_value = [child]
    process_cls.return_value = parent
    straggler = child
    wait_procs.return_value = ([parent], [straggler])

    a = SpeechAnnouncer()
    proc = make_process()
    a.current_process = proc
    a.interrupt()

    process_cls.assert_called_once_with(4242)
    parent.terminate.assert_called_once()
    child.terminate.assert_called_once()
    child.kill.assert_called_once()
    proc.wait.assert_not_called()
    assert wait_procs.call_args.kwargs["timeout"] <= 0.1
    assert a.current_process is None
    assert a.unreaped == [proc]

    # Reaped without blocking once it has exited.
    proc.poll.return_value = -9
    a.interrupt()
    assert a.unreaped == []


@patch("announcer.psutil.Process")
def test_interrupt_skips_finished_process(process_cls):
    a = SpeechAnnouncer()
    a.current_process = make_process(running=False)
    a.interrupt()
    process_cls.assert_not_called()
    assert a.current_process is None


@patch("announcer.psutil.Process", side_effect=psutil.NoSuchProcess(4242))
def test_interrupt_tolerates_vanished_process(process_cls):
    a = SpeechAnnouncer()
    a.current_process = make_process()
    a.interrupt()
    assert a.current_process is None


@patch("announcer.psutil.wait_procs", return_value=([], []))
@patch("announcer.psutil.Process")
def test_interrupt_logs_access_errors(process_cls, wait_procs, caplog):
    parent = MagicMock()
    parent.pid = 4242
    parent.children.return_value = []
    parent.terminate.side_effect = psutil.AccessDenied(4242)
    process_cls.return_value = parent

    a = SpeechAnnouncer()
    a.current_process = make_process()
    with caplog.at_level(logging.ERROR, logger="announcer"):
        a.interrupt()
    assert "Failed to stop speech process" in caplog.text


def test_interrupt_without_utterance_is_noop():
    SpeechAnnouncer().interrupt()


def test_default_announcer_selection():
    assert isinstance(default_announcer(mute=True), LoggingAnnouncer)
    with patch("announcer.shutil.which", return_value="/usr/bin/espeak"):
        assert isinstance(default_announcer(), SpeechAnnouncer)
    with patch("announcer.shutil.which", return_value=None):
        assert isinstance(default_announcer(), LoggingAnnouncer)
