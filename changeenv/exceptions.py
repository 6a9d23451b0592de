"""Error types raised by changeenv."""

from __future__ import annotations


class ChangeEnvError(Exception):
    """Base class for every failure reported by changeenv."""


class InvalidArgumentError(ChangeEnvError, ValueError):
    """Raised when the path or target environment is empty."""


class NoEnvironmentSegmentError(ChangeEnvError, LookupError):
    """Raised when no path segment names a known environment."""

    def __init__(self, path: str) -> None:
        super().__init__(f"path {path!r} is not inside a known environment")
        self.path = path


class ConfigureError(ChangeEnvError, RuntimeError):
    """Raised when the shell helper cannot be installed."""


__all__ = [
    "ChangeEnvError",
    "ConfigureError",
    "InvalidArgumentError",
    "NoEnvironmentSegmentError",
]
