"""Exceptions raised by kubesetup."""
from typing import List, Optional


class KubesetupError(Exception):
    """Base class for all kubesetup errors."""


class ConfigError(KubesetupError):
    """Raised when run settings cannot be loaded."""


class UnsupportedOSError(KubesetupError):
    """Raised when the host is not the supported operating system."""


class StepError(KubesetupError):
    """Raised when a provisioning step fails."""

    def __init__(self, message: str, returncode: Optional[int] = None):
        super().__init__(message)
        self.returncode = returncode


class CommandError(StepError):
    """Raised when an external command exits non-zero."""

    def __init__(self, args: List[str], returncode: int, output: str = ""):
        self.args_ = args
        self.output = output
        super().__init__(
            f"Command failed with status {returncode}: {' '.join(args)}",
            returncode=returncode,
        )
