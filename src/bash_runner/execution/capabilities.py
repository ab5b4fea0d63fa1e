from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

from ..errors import PlatformUnsupportedError

_pty: Any
try:
    import pty as _pty_module  # POSIX only
    _pty = _pty_module
except ImportError:  # pragma: no cover - platform specific
    _pty = None


@dataclass(frozen=True, slots=True)
class PlatformCapabilities:
    """Capability flags advertised by the current platform.

    Example:
        ```python
        caps = PlatformCapabilities(supports_pty=True, supports_process_groups=True)
        ```
    """

    supports_pty: bool
    supports_process_groups: bool


def detect_capabilities() -> PlatformCapabilities:
    """Return capability flags for the running interpreter's platform.

    Example:
        ```python
        caps = detect_capabilities()
        ```
    """
    posix = os.name == "posix"
    return PlatformCapabilities(
        supports_pty=posix and _pty is not None,
        supports_process_groups=posix and hasattr(os, "killpg"),
    )


def pty_supported() -> bool:
    """Report whether pseudo-terminal execution is available here.

    Example:
        ```python
        if pty_supported():
            print("pty ok")
        ```
    """
    return detect_capabilities().supports_pty


def open_pty() -> tuple[int, int]:
    """Allocate a pseudo-terminal pair and return ``(master_fd, slave_fd)``.

    Example:
        ```python
        master_fd, slave_fd = open_pty()
        ```
    """
    if not pty_supported():
        raise PlatformUnsupportedError("PTY execution is not supported on this platform")
    return _pty.openpty()
