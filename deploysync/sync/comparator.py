"""File comparison logic for deploy runs."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .scanner import LocalFile


class SyncAction(str, Enum):
    """Actions that can be taken for a source file."""

    COPY = "copy"
    """Copy source file over the destination"""

    SKIP = "skip"
    """Skip file (destination is up to date)"""


@dataclass(frozen=True)
class SyncDecision:
    """Represents a decision about how to sync a file."""

    action: SyncAction
    """Action to take"""

    reason: str
    """Human-readable reason for this decision"""

    relative_path: str
    """Relative path of the file"""

    source_file: Optional[LocalFile] = None
    """Source file metadata"""

    dest_file: Optional[LocalFile] = None
    """Destination file metadata (if present and readable)"""

    @property
    def is_copy(self) -> bool:
        return self.action == SyncAction.COPY


def is_stale(
    src_size: int, src_mtime: float, dst_size: int, dst_mtime: float
) -> bool:
    """Staleness policy: a destination is stale if sizes differ or the source
    is strictly newer.

    Equal sizes with equal mtimes are not stale. A size difference wins even
    when the source is older.

    Examples:
        >>> is_stale(10, 100.0, 10, 100.0)
        False
        >>> is_stale(12, 50.0, 10, 100.0)
        True
    """
    return src_size != dst_size or src_mtime > dst_mtime


class FileComparator:
    """Compares source and destination files to decide whether to copy."""

    def __init__(self, force: bool = False):
        """Initialize file comparator.

        Args:
            force: Copy every file regardless of metadata
        """
        self.force = force

    def compare(
        self,
        path: str,
        source_file: LocalFile,
        dest_file: Optional[LocalFile],
    ) -> SyncDecision:
        """Decide whether a single file must be copied.

        Args:
            path: Relative path of the file
            source_file: Source file metadata
            dest_file: Destination file metadata, or None if the destination
                is absent or could not be stat'ed

        Returns:
            SyncDecision for this file
        """
        # Case 1: forced run
        if self.force:
            return SyncDecision(
                action=SyncAction.COPY,
                reason="Forced copy",
                relative_path=path,
                source_file=source_file,
                dest_file=dest_file,
            )

        # Case 2: destination absent or unreadable
        if dest_file is None:
            return SyncDecision(
                action=SyncAction.COPY,
                reason="Destination missing or unreadable",
                relative_path=path,
                source_file=source_file,
            )

        # Case 3: both present, apply staleness policy
        return self._compare_existing_files(path, source_file, dest_file)

    def _compare_existing_files(
        self, path: str, source_file: LocalFile, dest_file: LocalFile
    ) -> SyncDecision:
        """Compare files that exist in both trees."""
        if not is_stale(
            source_file.size, source_file.mtime, dest_file.size, dest_file.mtime
        ):
            reason = "Destination is up to date"
            action = SyncAction.SKIP
        elif source_file.size != dest_file.size:
            reason = f"Different sizes ({source_file.size} vs {dest_file.size})"
            action = SyncAction.COPY
        else:
            reason = "Source file is newer"
            action = SyncAction.COPY

        return SyncDecision(
            action=action,
            reason=reason,
            relative_path=path,
            source_file=source_file,
            dest_file=dest_file,
        )
