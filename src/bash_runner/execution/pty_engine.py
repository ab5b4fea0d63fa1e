from __future__ import annotations

import errno
import logging
import os
import select
import subprocess
import time

from ..errors import CommandExecutionError, CommandTimeoutError
from .capabilities import open_pty
from .foreground import decode_output
from .process import kill_process_tree, spawn_session
from .shell import build_shell_command, command_env

logger = logging.getLogger(__name__)

_READ_CHUNK = 4096


def read_pty_chunk(master_fd: int) -> bytes:
    """Read one chunk from a PTY master, returning ``b""`` at end of output.

    Linux reports a hung-up slave as EIO rather than EOF.

    Example:
        ```python
        chunk = read_pty_chunk(master_fd)
        ```
    """
    try:
        return os.read(master_fd, _READ_CHUNK)
    except OSError as exc:
        if exc.errno == errno.EIO:
            return b""
        raise


def spawn_on_pty(command: str) -> tuple[subprocess.Popen[bytes], int]:
    """Start a command with all standard streams on a fresh PTY slave.

    Returns the process and the master descriptor; the caller owns the
    master and must close it.

    Example:
        ```python
        proc, master_fd = spawn_on_pty("echo hi")
        ```
    """
    master_fd, slave_fd = open_pty()
    try:
        proc = spawn_session(
            build_shell_command(command),
            stdin=slave_fd,
            stdout=slave_fd,
            stderr=slave_fd,
            env=command_env(),
        )
    except BaseException:
        os.close(master_fd)
        raise
    finally:
        os.close(slave_fd)
    return proc, master_fd


def execute_pty(command: str, timeout_seconds: float) -> str:
    """Run a command attached to a pseudo-terminal and return what it printed.

    Output is returned exactly as the terminal emitted it, ``\\r\\n`` included.

    Example:
        ```python
        out = execute_pty("echo hi", timeout_seconds=5)  # "hi\\r\\n"
        ```
    """
    deadline = time.monotonic() + timeout_seconds
    try:
        proc, master_fd = spawn_on_pty(command)
    except OSError as exc:
        raise CommandExecutionError(command, None, str(exc)) from exc

    chunks: list[bytes] = []
    try:
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise CommandTimeoutError(command, timeout_seconds)
            ready, _, _ = select.select([master_fd], [], [], remaining)
            if not ready:
                continue
            chunk = read_pty_chunk(master_fd)
            if not chunk:
                break
            chunks.append(chunk)

        remaining = deadline - time.monotonic()
        try:
            returncode = proc.wait(timeout=max(remaining, 0))
        except subprocess.TimeoutExpired:
            raise CommandTimeoutError(command, timeout_seconds) from None
    except CommandTimeoutError:
        logger.debug("pty pid=%s exceeded %ss", proc.pid, timeout_seconds)
        kill_process_tree(proc)
        raise
    except BaseException:
        kill_process_tree(proc)
        raise
    finally:
        os.close(master_fd)

    output = decode_output(b"".join(chunks))
    if returncode != 0:
        raise CommandExecutionError(command, returncode, output)
    return output
