from __future__ import annotations

import logging
import subprocess

from ..errors import CommandExecutionError, CommandTimeoutError
from .process import kill_process_tree, spawn_session
from .shell import build_shell_command, command_env

logger = logging.getLogger(__name__)


def decode_output(raw: bytes) -> str:
    """Decode captured process output, replacing undecodable bytes.

    Example:
        ```python
        text = decode_output(b"hello\\n")
        ```
    """
    return raw.decode("utf-8", errors="replace")


def execute_foreground(command: str, timeout_seconds: float) -> str:
    """Run a command to completion and return its combined output.

    stderr is redirected into the stdout pipe, so the text keeps the order in
    which both streams were written.

    Example:
        ```python
        out = execute_foreground("echo 'Hello, world!'", timeout_seconds=5)
        ```
    """
    try:
        proc = spawn_session(
            build_shell_command(command),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            env=command_env(),
        )
    except OSError as exc:
        raise CommandExecutionError(command, None, str(exc)) from exc

    try:
        raw, _ = proc.communicate(timeout=timeout_seconds)
    except subprocess.TimeoutExpired:
        logger.debug("pid=%s exceeded %ss", proc.pid, timeout_seconds)
        kill_process_tree(proc)
        if proc.stdout is not None:
            proc.stdout.close()
        raise CommandTimeoutError(command, timeout_seconds) from None
    except BaseException:
        kill_process_tree(proc)
        raise

    output = decode_output(raw)
    if proc.returncode != 0:
        raise CommandExecutionError(command, proc.returncode, output)
    return output
