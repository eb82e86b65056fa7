"""Exception hierarchy for deploysync."""

from pathlib import Path
from typing import Optional, Union


class DeploySyncError(Exception):
    """Base exception for all deploysync errors.

    Attributes:
        phase: Pipeline phase that failed (e.g. "backup", "sync")
        path: Filesystem path involved in the failure, if any
    """

    phase: str = "run"

    def __init__(
        self,
        message: str,
        path: Optional[Union[str, Path]] = None,
        phase: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.path = str(path) if path is not None else None
        if phase is not None:
            self.phase = phase

    def __str__(self) -> str:
        if self.path and self.path not in self.message:
            return f"{self.message} ({self.path})"
        return self.message


class ConfigError(DeploySyncError):
    """Invalid configuration or root directories."""

    phase = "config"


class FilesystemError(DeploySyncError):
    """A root directory could not be traversed during enumeration."""

    phase = "enumerate"


class BackupError(DeploySyncError):
    """A file could not be copied into the backup directory."""

    phase = "backup"


class SyncError(DeploySyncError):
    """A file could not be copied into the destination tree.

    Carries the decisions made before the failure so the caller can still
    report what was copied.
    """

    phase = "sync"

    def __init__(
        self,
        message: str,
        path: Optional[Union[str, Path]] = None,
        decisions: Optional[list] = None,
    ):
        super().__init__(message, path=path)
        self.decisions = decisions or []


class PruneError(DeploySyncError):
    """A destination file or directory could not be removed."""

    phase = "prune"
