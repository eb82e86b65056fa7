"""deploysync - push filtered files from one tree to another, with backups."""

from .config import RunConfig, normalize_extension
from .exceptions import (
    BackupError,
    ConfigError,
    DeploySyncError,
    FilesystemError,
    PruneError,
    SyncError,
)
from .sync import DeployRunner, RunSummary, enumerate_files

__version__ = "0.1.0"

__all__ = [
    "RunConfig",
    "normalize_extension",
    "DeployRunner",
    "RunSummary",
    "enumerate_files",
    "DeploySyncError",
    "ConfigError",
    "FilesystemError",
    "BackupError",
    "SyncError",
    "PruneError",
]
