"""Filesystem operations used by the backup, sync and prune phases."""

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


class SyncOperations:
    """Copy and delete primitives with a common interface.

    All methods perform real filesystem mutations; dry-run handling is the
    caller's responsibility. Errors propagate as OSError.
    """

    def copy_file(self, source: Path, destination: Path) -> Path:
        """Copy a file, creating parent directories and preserving metadata.

        Args:
            source: File to copy
            destination: Target path (overwritten if it exists)

        Returns:
            Destination path
        """
        # Ensure parent directory exists
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, destination)
        logger.debug("Copied %s -> %s", source, destination)
        return destination

    def delete_file(self, path: Path) -> bool:
        """Delete a file.

        Args:
            path: File to delete

        Returns:
            True if a file was removed, False if it was already gone
        """
        try:
            path.unlink()
        except FileNotFoundError:
            logger.debug("Already removed: %s", path)
            return False
        logger.debug("Deleted %s", path)
        return True

    def remove_empty_parents(self, start: Path, root: Path) -> list[Path]:
        """Remove empty directories from start upwards, stopping at root.

        Walks up while the current directory lies strictly inside root, exists
        and is empty. Root itself is never removed.

        Args:
            start: First directory to consider (usually a deleted file's parent)
            root: Directory bounding the walk

        Returns:
            Directories that were removed, deepest first
        """
        removed: list[Path] = []
        current = start
        while (
            current != root
            and root in current.parents
            and current.is_dir()
            and not any(current.iterdir())
        ):
            current.rmdir()
            logger.debug("Removed empty directory %s", current)
            removed.append(current)
            current = current.parent
        return removed
