import time

import pytest

from bash_runner import CommandExecutionError, CommandTimeoutError, PlatformUnsupportedError
from bash_runner.execution import capabilities
from bash_runner.execution.foreground import execute_foreground
from bash_runner.execution.pty_engine import execute_pty

requires_pty = pytest.mark.skipif(
    not capabilities.pty_supported(), reason="PTY not supported on this platform"
)


@requires_pty
def test_pty_output_keeps_terminal_line_endings() -> None:
    assert execute_pty("echo 'Hello from PTY!'", timeout_seconds=5) == "Hello from PTY!\r\n"


@requires_pty
def test_pty_output_differs_from_pipe_capture() -> None:
    command = "echo one; echo two"

    assert execute_pty(command, timeout_seconds=5) == "one\r\ntwo\r\n"
    assert execute_foreground(command, timeout_seconds=5) == "one\ntwo\n"


@requires_pty
def test_pty_command_sees_a_terminal() -> None:
    command = "if [ -t 0 ] && [ -t 1 ] && [ -t 2 ]; then echo 'Is a TTY'; else echo 'Not a TTY'; fi"

    assert "Is a TTY" in execute_pty(command, timeout_seconds=5)


@requires_pty
def test_pty_sets_marker_environment_variable() -> None:
    assert execute_pty("echo $BASH_RUNNER", timeout_seconds=5) == "1\r\n"


@requires_pty
def test_pty_failure_carries_output() -> None:
    with pytest.raises(CommandExecutionError) as exc:
        execute_pty("echo 'broken' >&2; exit 4", timeout_seconds=5)

    assert exc.value.returncode == 4
    assert "broken" in str(exc.value)


@requires_pty
def test_pty_timeout_returns_near_deadline() -> None:
    start = time.monotonic()
    with pytest.raises(CommandTimeoutError) as exc:
        execute_pty("sleep 1 && echo 'Should not see this'", timeout_seconds=0.1)

    assert time.monotonic() - start < 1.0
    assert "timed out" in str(exc.value)


def test_pty_unsupported_platform(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(capabilities, "_pty", None)

    with pytest.raises(PlatformUnsupportedError):
        execute_pty("echo hi", timeout_seconds=5)
