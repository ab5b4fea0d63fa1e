import os

import pytest

from bash_runner import PlatformUnsupportedError
from bash_runner.execution import capabilities
from bash_runner.execution.capabilities import detect_capabilities, open_pty, pty_supported


def test_posix_platform_advertises_pty_and_process_groups() -> None:
    if os.name != "posix":
        pytest.skip("POSIX-only capability expectations")
    caps = detect_capabilities()

    assert caps.supports_pty
    assert caps.supports_process_groups
    assert pty_supported() is True


def test_open_pty_returns_distinct_descriptors() -> None:
    if not pty_supported():
        pytest.skip("PTY not supported on this platform")
    master_fd, slave_fd = open_pty()
    try:
        assert master_fd != slave_fd
        assert os.isatty(slave_fd)
    finally:
        os.close(master_fd)
        os.close(slave_fd)


def test_missing_pty_module_reports_unsupported(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(capabilities, "_pty", None)

    assert pty_supported() is False
    with pytest.raises(PlatformUnsupportedError, match="not supported"):
        open_pty()
