"""Detached command launches with file-based output capture.

Each launch gets its own temporary directory holding ``stdout.log`` and
``stderr.log``. The directory, the files and the process belong to the caller
once the handle is returned; nothing here cleans them up or reports on the
process afterwards.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import tempfile
import threading
import time
from pathlib import Path
from typing import Callable

from ..errors import LaunchError, PlatformUnsupportedError
from .capabilities import pty_supported
from .process import kill_process_tree, process_group_alive, spawn_session
from .pty_engine import read_pty_chunk, spawn_on_pty
from .shell import build_shell_command, command_env
from .types import BackgroundHandle

logger = logging.getLogger(__name__)

RUN_DIR_PREFIX = "bash-runner-bg-"
STDOUT_FILENAME = "stdout.log"
STDERR_FILENAME = "stderr.log"
_GROUP_POLL_SECONDS = 1.0


def _create_output_files() -> tuple[Path, Path]:
    """Create a per-launch directory and its two empty output files.

    Example:
        ```python
        stdout_path, stderr_path = _create_output_files()
        ```
    """
    run_dir = Path(tempfile.mkdtemp(prefix=RUN_DIR_PREFIX))
    stdout_path = run_dir / STDOUT_FILENAME
    stderr_path = run_dir / STDERR_FILENAME
    stdout_path.touch()
    stderr_path.touch()
    return stdout_path, stderr_path


def _supervise(proc: subprocess.Popen[bytes], timeout_seconds: float) -> None:
    """Reap a detached process, killing its group once the deadline passes.

    Children left behind by a shell that already exited stay bound to the
    same deadline.

    Example:
        ```python
        _supervise(proc, timeout_seconds=86400)
        ```
    """
    deadline = time.monotonic() + timeout_seconds
    try:
        proc.wait(timeout=timeout_seconds)
    except subprocess.TimeoutExpired:
        logger.debug("background pid=%s exceeded %ss", proc.pid, timeout_seconds)
        kill_process_tree(proc)
        return
    logger.debug("background pid=%s exited with %s", proc.pid, proc.returncode)

    while process_group_alive(proc.pid):
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            logger.debug("background group pid=%s exceeded %ss", proc.pid, timeout_seconds)
            kill_process_tree(proc)
            return
        time.sleep(min(remaining, _GROUP_POLL_SECONDS))


def _pump_pty(master_fd: int, stdout_path: Path) -> None:
    """Copy everything the PTY emits into the stdout file until it hangs up.

    Example:
        ```python
        _pump_pty(master_fd, Path("/tmp/run/stdout.log"))
        ```
    """
    try:
        with stdout_path.open("ab", buffering=0) as sink:
            while chunk := read_pty_chunk(master_fd):
                sink.write(chunk)
    finally:
        os.close(master_fd)


def _start_thread(target: Callable[..., None], name: str, *args: object) -> None:
    """Start a daemon thread so supervisors never block interpreter exit.

    Example:
        ```python
        _start_thread(_supervise, "bash-runner-supervise-42", proc, 60.0)
        ```
    """
    threading.Thread(target=target, args=args, name=name, daemon=True).start()


def _spawn_with_files(command: str, stdout_path: Path, stderr_path: Path) -> subprocess.Popen[bytes]:
    """Start a command whose stdout and stderr go straight to the given files.

    Example:
        ```python
        proc = _spawn_with_files("echo hi", stdout_path, stderr_path)
        ```
    """
    with stdout_path.open("ab") as out, stderr_path.open("ab") as err:
        return spawn_session(
            build_shell_command(command),
            stdin=subprocess.DEVNULL,
            stdout=out,
            stderr=err,
            env=command_env(),
        )


def launch_background(
    command: str,
    *,
    pty: bool = False,
    timeout_seconds: float,
) -> BackgroundHandle:
    """Start a detached command and return its handle without waiting.

    The process runs in its own session, so signals aimed at the caller's
    process group do not reach it. It is killed only if it outlives
    ``timeout_seconds``.

    Example:
        ```python
        handle = launch_background("sleep 1 && echo x", timeout_seconds=86400)
        ```
    """
    if pty and not pty_supported():
        raise PlatformUnsupportedError("PTY execution is not supported on this platform")

    try:
        stdout_path, stderr_path = _create_output_files()
    except OSError as exc:
        raise LaunchError(f"failed to create output files: {exc}") from exc

    try:
        if pty:
            proc, master_fd = spawn_on_pty(command)
        else:
            proc = _spawn_with_files(command, stdout_path, stderr_path)
    except OSError as exc:
        shutil.rmtree(stdout_path.parent, ignore_errors=True)
        raise LaunchError(f"failed to start background command: {exc}") from exc

    if pty:
        _start_thread(_pump_pty, f"bash-runner-pty-{proc.pid}", master_fd, stdout_path)
    _start_thread(_supervise, f"bash-runner-supervise-{proc.pid}", proc, timeout_seconds)

    logger.debug(
        "launched background pid=%s pty=%s stdout=%s stderr=%s",
        proc.pid,
        pty,
        stdout_path,
        stderr_path,
    )
    return BackgroundHandle(pid=proc.pid, stdout_file=stdout_path, stderr_file=stderr_path)
