from __future__ import annotations

import logging
from typing import Any, Mapping

from .errors import RequestValidationError
from .execution.background import launch_background
from .execution.foreground import execute_foreground
from .execution.pty_engine import execute_pty
from .execution.types import BackgroundHandle, ExecutionRequest
from .timeouts import TimeoutPolicy, resolve_timeout

logger = logging.getLogger(__name__)


def _coerce_request(request: ExecutionRequest | Mapping[str, Any] | str) -> ExecutionRequest:
    """Normalize a request object, decoded JSON object or JSON text.

    Example:
        ```python
        req = _coerce_request({"command": "echo hi"})
        ```
    """
    if isinstance(request, ExecutionRequest):
        return request
    if isinstance(request, str):
        return ExecutionRequest.from_json(request)
    if isinstance(request, Mapping):
        return ExecutionRequest.from_payload(request)
    raise RequestValidationError(
        f"Unsupported request type: {type(request).__name__}"
    )


class BashRunner:
    """Route command requests to the foreground, PTY or background executor.

    Example:
        ```python
        runner = BashRunner(policy=TimeoutPolicy(fast=5))
        out = runner.run(ExecutionRequest(command="echo hi"))
        ```
    """

    def __init__(self, policy: TimeoutPolicy | None = None) -> None:
        """Bind the timeout policy used for every request on this runner.

        Example:
            ```python
            runner = BashRunner()
            ```
        """
        self._policy = policy

    @property
    def policy(self) -> TimeoutPolicy | None:
        """Return the timeout policy this runner was built with.

        Example:
            ```python
            policy = runner.policy
            ```
        """
        return self._policy

    def timeout_for(self, request: ExecutionRequest) -> float:
        """Return the deadline in seconds that governs one request.

        Example:
            ```python
            seconds = runner.timeout_for(ExecutionRequest(command="make", slow_ok=True))
            ```
        """
        return resolve_timeout(
            background=request.background,
            slow_ok=request.slow_ok,
            policy=self._policy,
        )

    def run(
        self, request: ExecutionRequest | Mapping[str, Any] | str
    ) -> str | BackgroundHandle:
        """Validate a request, resolve its timeout tier and execute it.

        Returns captured output for foreground and PTY runs, or a handle for
        background launches.

        Example:
            ```python
            out = runner.run({"command": "echo 'Hello, world!'"})
            ```
        """
        resolved = _coerce_request(request)
        timeout_seconds = self.timeout_for(resolved)
        logger.debug(
            "dispatching command=%r background=%s pty=%s timeout=%ss",
            resolved.command,
            resolved.background,
            resolved.pty,
            timeout_seconds,
        )
        if resolved.background:
            return launch_background(
                resolved.command,
                pty=resolved.pty,
                timeout_seconds=timeout_seconds,
            )
        if resolved.pty:
            return execute_pty(resolved.command, timeout_seconds)
        return execute_foreground(resolved.command, timeout_seconds)


def run_command(
    request: ExecutionRequest | Mapping[str, Any] | str,
    policy: TimeoutPolicy | None = None,
) -> str | BackgroundHandle:
    """Execute one command request with an optional timeout policy.

    Example:
        ```python
        from bash_runner import run_command
        out = run_command({"command": "echo hi", "slow_ok": True})
        ```
    """
    return BashRunner(policy=policy).run(request)
