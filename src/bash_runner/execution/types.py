from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

from ..errors import RequestValidationError

_FLAG_FIELDS = ("slow_ok", "background", "pty")


@dataclass(frozen=True, slots=True)
class ExecutionRequest:
    """Normalized request describing one shell command and its mode.

    Example:
        ```python
        req = ExecutionRequest(command="echo hi", slow_ok=True)
        ```
    """

    command: str
    slow_ok: bool = False
    background: bool = False
    pty: bool = False

    def __post_init__(self) -> None:
        """Validate the command text and mode flags.

        Example:
            ```python
            ExecutionRequest(command="ls")
            ```
        """
        if not isinstance(self.command, str):
            raise RequestValidationError("'command' must be a string")
        if not self.command.strip():
            raise RequestValidationError("'command' must not be empty")
        for name in _FLAG_FIELDS:
            if not isinstance(getattr(self, name), bool):
                raise RequestValidationError(f"'{name}' must be a boolean")

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ExecutionRequest":
        """Build a request from a decoded JSON object, ignoring unknown keys.

        A ``null`` flag reads as unset, i.e. ``False``.

        Example:
            ```python
            req = ExecutionRequest.from_payload({"command": "echo hi", "pty": True})
            ```
        """
        if not isinstance(payload, Mapping):
            raise RequestValidationError("Request must be a JSON object")
        if "command" not in payload:
            raise RequestValidationError("'command' is required")
        known = {field.name for field in fields(cls)}
        values = {key: value for key, value in payload.items() if key in known}
        for name in _FLAG_FIELDS:
            if name in values and values[name] is None:
                values[name] = False
        return cls(**values)

    @classmethod
    def from_json(cls, text: str) -> "ExecutionRequest":
        """Decode a JSON document and build a request from it.

        Example:
            ```python
            req = ExecutionRequest.from_json('{"command": "echo hi"}')
            ```
        """
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise RequestValidationError(f"Request is not valid JSON: {exc.msg}") from exc
        return cls.from_payload(payload)


@dataclass(frozen=True, slots=True)
class BackgroundHandle:
    """Locator for a detached process and its output files.

    The pid is only meaningful while the process exists; probing it later
    may hit an unrelated process that reused the id.

    Example:
        ```python
        handle = BackgroundHandle(pid=4242, stdout_file=Path("/tmp/x/stdout.log"), stderr_file=Path("/tmp/x/stderr.log"))
        ```
    """

    pid: int
    stdout_file: Path
    stderr_file: Path

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready response payload.

        Example:
            ```python
            payload = handle.to_dict()
            ```
        """
        return {
            "pid": self.pid,
            "stdout_file": str(self.stdout_file),
            "stderr_file": str(self.stderr_file),
        }

    def to_json(self) -> str:
        """Serialize the response payload as JSON text.

        Example:
            ```python
            text = handle.to_json()
            ```
        """
        return json.dumps(self.to_dict())
