"""Exception hierarchy for command execution failures."""

from __future__ import annotations

TIMEOUT_MARKER = "timed out"


class BashRunnerError(Exception):
    """Base exception for bash-runner errors."""


class RequestValidationError(BashRunnerError, ValueError):
    """Request was malformed and nothing was spawned."""


class CommandTimeoutError(BashRunnerError, TimeoutError):
    """Command exceeded its deadline and its process group was killed."""

    def __init__(self, command: str, timeout_seconds: float) -> None:
        """Build a timeout error whose message carries the timeout marker.

        Example:
            ```python
            raise CommandTimeoutError("sleep 10", 0.1)
            ```
        """
        self.command = command
        self.timeout_seconds = timeout_seconds
        super().__init__(f"command {TIMEOUT_MARKER} after {timeout_seconds:g}s: {command}")


class CommandExecutionError(BashRunnerError):
    """Command exited non-zero or could not be started.

    ``output`` holds everything the command wrote before exiting, stdout and
    stderr interleaved as captured.
    """

    def __init__(self, command: str, returncode: int | None, output: str = "") -> None:
        """Build an execution error that embeds the captured output.

        Example:
            ```python
            raise CommandExecutionError("exit 1", 1, "boom\\n")
            ```
        """
        self.command = command
        self.returncode = returncode
        self.output = output
        if returncode is None:
            message = f"command failed to start: {command}"
        else:
            message = f"command failed with exit code {returncode}: {command}"
        if output:
            message = f"{message}\n{output}"
        super().__init__(message)


class PlatformUnsupportedError(BashRunnerError):
    """Pseudo-terminal execution was requested where it is not available."""


class LaunchError(BashRunnerError):
    """Background launch failed before the process was started."""
