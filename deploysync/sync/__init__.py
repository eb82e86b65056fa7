"""Sync engine for deploysync - backup, copy and prune phases."""

from .backup import (
    BackupEntry,
    BackupResult,
    BackupSnapshotter,
    list_backups,
    resolve_backup_dir,
)
from .comparator import FileComparator, SyncAction, SyncDecision, is_stale
from .engine import SyncEngine
from .manifest import BackupManifest
from .operations import SyncOperations
from .pruner import PruneEngine, PruneResult, find_orphans
from .runner import DeployRunner
from .scanner import DirectoryScanner, LocalFile, enumerate_files
from .summary import RunSummary

__all__ = [
    "DeployRunner",
    "SyncEngine",
    "SyncOperations",
    "SyncAction",
    "SyncDecision",
    "FileComparator",
    "is_stale",
    "DirectoryScanner",
    "LocalFile",
    "enumerate_files",
    "BackupSnapshotter",
    "BackupResult",
    "BackupEntry",
    "BackupManifest",
    "list_backups",
    "resolve_backup_dir",
    "PruneEngine",
    "PruneResult",
    "find_orphans",
    "RunSummary",
]
