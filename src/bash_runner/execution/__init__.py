from .background import launch_background
from .capabilities import PlatformCapabilities, detect_capabilities, pty_supported
from .foreground import execute_foreground
from .pty_engine import execute_pty
from .types import BackgroundHandle, ExecutionRequest

__all__ = [
    "BackgroundHandle",
    "ExecutionRequest",
    "PlatformCapabilities",
    "detect_capabilities",
    "execute_foreground",
    "execute_pty",
    "launch_background",
    "pty_supported",
]
