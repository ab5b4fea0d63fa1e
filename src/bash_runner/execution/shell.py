from __future__ import annotations

import os
import shutil

MARKER_ENV_VAR = "BASH_RUNNER"
MARKER_ENV_VALUE = "1"


def build_shell_command(command: str) -> list[str]:
    """Wrap a command line for a non-interactive interpreter.

    Example:
        ```python
        argv = build_shell_command("echo hi")  # ["bash", "-c", "echo hi"]
        ```
    """
    if shutil.which("bash"):
        return ["bash", "-c", command]
    if shutil.which("sh"):
        return ["sh", "-c", command]
    raise FileNotFoundError("No supported shell found (expected bash/sh on POSIX)")


def command_env() -> dict[str, str]:
    """Return the caller's environment plus the agent marker variable.

    Example:
        ```python
        env = command_env()
        assert env["BASH_RUNNER"] == "1"
        ```
    """
    env = dict(os.environ)
    env[MARKER_ENV_VAR] = MARKER_ENV_VALUE
    return env
