from __future__ import annotations

import logging
import os
import signal
import subprocess
from typing import Any

logger = logging.getLogger(__name__)


def spawn_session(argv: list[str], **popen_kwargs: Any) -> subprocess.Popen[bytes]:
    """Start a process as the leader of a new session and process group.

    Example:
        ```python
        proc = spawn_session(["bash", "-c", "sleep 1"], stdout=subprocess.PIPE)
        ```
    """
    proc = subprocess.Popen(argv, start_new_session=True, **popen_kwargs)
    logger.debug("spawned pid=%s argv=%r", proc.pid, argv)
    return proc


def process_group_alive(pgid: int) -> bool:
    """Report whether any member of a process group is still around.

    The group id outlives its leader for as long as a child remains.

    Example:
        ```python
        if process_group_alive(proc.pid):
            kill_process_tree(proc)
        ```
    """
    try:
        os.killpg(pgid, 0)
    except ProcessLookupError:
        return False
    return True


def kill_process_tree(proc: subprocess.Popen[Any]) -> None:
    """SIGKILL a session leader's whole process group and reap the leader.

    Children the command started share the leader's group, so they die with
    it even when the leader itself already exited.

    Example:
        ```python
        kill_process_tree(proc)
        ```
    """
    if hasattr(os, "killpg"):
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
    elif proc.poll() is None:  # pragma: no cover - platform specific
        proc.kill()
    logger.debug("killed process group pid=%s", proc.pid)
    proc.wait()
