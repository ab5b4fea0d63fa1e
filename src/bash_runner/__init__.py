from .errors import (
    BashRunnerError,
    CommandExecutionError,
    CommandTimeoutError,
    LaunchError,
    PlatformUnsupportedError,
    RequestValidationError,
)
from .execution.types import BackgroundHandle, ExecutionRequest
from .runner import BashRunner, run_command
from .timeouts import TimeoutPolicy, resolve_timeout

__all__ = [
    "BackgroundHandle",
    "BashRunner",
    "BashRunnerError",
    "CommandExecutionError",
    "CommandTimeoutError",
    "ExecutionRequest",
    "LaunchError",
    "PlatformUnsupportedError",
    "RequestValidationError",
    "TimeoutPolicy",
    "resolve_timeout",
    "run_command",
]
