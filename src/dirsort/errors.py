"""
Exception types raised by the organizer.

Fatal errors (`ConfigLoadError`, `DirectoryReadError`) abort a run. A
`MoveError` only concerns a single file and is collected by the
orchestrator so the remaining files are still processed.
"""

from pathlib import Path
from typing import Optional


class OrganizerError(Exception):
    """Base exception for all organizer errors.

    Attributes:
        message: Human-readable error message.
        cause: Original exception that caused this error, if any.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class ConfigLoadError(OrganizerError):
    """The category rules file is missing, unreadable or malformed."""

    def __init__(self, config_path: Path, reason: str, cause: Optional[BaseException] = None):
        super().__init__(f"Failed to load configuration from '{config_path}' ({reason})", cause)
        self.config_path = config_path


class DirectoryReadError(OrganizerError):
    """The target directory cannot be listed."""

    def __init__(self, directory: Path, cause: Optional[BaseException] = None):
        super().__init__(f"Failed to read directory '{directory}'", cause)
        self.directory = directory


class MoveError(OrganizerError, OSError):
    """Creating a category directory or renaming a file into it failed."""

    def __init__(self, source_path: Path, destination: Path, cause: Optional[BaseException] = None):
        super().__init__(f"Failed to move '{source_path}' to '{destination}'", cause)
        self.source_path = source_path
        self.destination = destination
