from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

DEFAULT_FAST_SECONDS = 30.0
DEFAULT_SLOW_SECONDS = 15 * 60.0
DEFAULT_BACKGROUND_SECONDS = 24 * 60 * 60.0

_FILE_KEYS = {
    "fast": "fast_seconds",
    "slow": "slow_seconds",
    "background": "background_seconds",
}


def _read_timeouts_toml(path: Path) -> dict[str, Any]:
    """Read a timeouts TOML file and return the timeouts table.

    Example:
        ```python
        raw = _read_timeouts_toml(Path("/tmp/timeouts.toml"))
        ```
    """
    if not path.exists():
        raise ValueError(f"Timeouts config not found: {path}")
    raw = tomllib.loads(path.read_text(encoding="utf-8"))
    table = raw.get("timeouts", raw)
    if not isinstance(table, dict):
        raise ValueError("Timeouts config must be a TOML table")
    return table


def _optional_seconds(value: Any, field_name: str) -> float | None:
    """Validate an optional positive duration in seconds.

    Example:
        ```python
        seconds = _optional_seconds(5, "fast")
        ```
    """
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"'{field_name}' must be a number of seconds")
    if value <= 0:
        raise ValueError(f"'{field_name}' must be positive")
    return float(value)


@dataclass(frozen=True, slots=True)
class TimeoutPolicy:
    """Per-tier timeout overrides; unset tiers use the built-in defaults.

    Example:
        ```python
        policy = TimeoutPolicy(fast=5, slow=120)
        ```
    """

    fast: float | None = None
    slow: float | None = None
    background: float | None = None

    def __post_init__(self) -> None:
        """Reject non-positive or non-numeric overrides and store floats.

        Example:
            ```python
            TimeoutPolicy(fast=0.5)
            ```
        """
        for name in _FILE_KEYS:
            object.__setattr__(self, name, _optional_seconds(getattr(self, name), name))

    @classmethod
    def from_file(cls, config_path: str | Path) -> "TimeoutPolicy":
        """Create a timeout policy from a TOML file.

        Example:
            ```python
            policy = TimeoutPolicy.from_file("/tmp/timeouts.toml")
            ```
        """
        raw = _read_timeouts_toml(Path(config_path))
        return cls(**{name: raw.get(key) for name, key in _FILE_KEYS.items()})

    def resolve(self, *, background: bool, slow_ok: bool) -> float:
        """Return the effective timeout for the given request flags.

        Example:
            ```python
            seconds = TimeoutPolicy(slow=60).resolve(background=False, slow_ok=True)
            ```
        """
        return resolve_timeout(background=background, slow_ok=slow_ok, policy=self)


def resolve_timeout(
    *,
    background: bool,
    slow_ok: bool,
    policy: TimeoutPolicy | None = None,
) -> float:
    """Map request flags to a timeout in seconds.

    Background wins over slow_ok; an explicit policy field replaces only
    its own default.

    Example:
        ```python
        resolve_timeout(background=False, slow_ok=False)  # 30.0
        ```
    """
    if background:
        override = policy.background if policy else None
        return override if override is not None else DEFAULT_BACKGROUND_SECONDS
    if slow_ok:
        override = policy.slow if policy else None
        return override if override is not None else DEFAULT_SLOW_SECONDS
    override = policy.fast if policy else None
    return override if override is not None else DEFAULT_FAST_SECONDS
