"""Directory scanning utilities for deploy runs."""

import logging
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from ..config import normalize_extension
from ..exceptions import FilesystemError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocalFile:
    """Represents a local file with metadata."""

    path: Path
    """Absolute path to the file"""

    relative_path: str
    """Relative path (using forward slashes for cross-platform compatibility)"""

    size: int
    """File size in bytes"""

    mtime: float
    """Last modification time (Unix timestamp)"""

    @classmethod
    def from_path(cls, file_path: Path, base_path: Path) -> "LocalFile":
        """Create LocalFile from a path.

        Args:
            file_path: Absolute path to the file
            base_path: Base path for calculating relative paths

        Returns:
            LocalFile instance

        Raises:
            OSError: If the file cannot be stat'ed
        """
        file_stat = file_path.stat()
        # Use as_posix() to ensure forward slashes on all platforms
        relative_path = file_path.relative_to(base_path).as_posix()
        return cls(
            path=file_path,
            relative_path=relative_path,
            size=file_stat.st_size,
            mtime=file_stat.st_mtime,
        )


class DirectoryScanner:
    """Scans a directory tree for files with a given extension.

    Matching is case-insensitive on the file name. Directories are
    traversed but never returned, and symlinked directories are not
    descended into.

    Examples:
        >>> scanner = DirectoryScanner(".html")
        >>> paths = scanner.list_relative(Path("/srv/site"))
        >>> # ["index.html", "docs/about.html", ...]
    """

    def __init__(self, extension: str):
        """Initialize directory scanner.

        Args:
            extension: Extension filter; normalized to lowercase with a dot
        """
        self.extension = normalize_extension(extension)

    def matches(self, path: Path) -> bool:
        """Check whether a file name ends with the configured extension."""
        return path.name.lower().endswith(self.extension)

    def _iter_directory(self, directory: Path) -> list[Path]:
        try:
            return sorted(directory.iterdir())
        except OSError as e:
            raise FilesystemError(
                f"Cannot read directory {directory}: {e.strerror or e}",
                path=directory,
            ) from e

    def scan(self, directory: Path) -> list[LocalFile]:
        """Recursively scan a directory for matching files.

        Args:
            directory: Root directory to scan

        Returns:
            List of LocalFile objects, sorted by relative path

        Raises:
            FilesystemError: If the root or any subdirectory cannot be read
        """
        files: list[LocalFile] = []
        pending = [directory]

        while pending:
            current = pending.pop()
            for item in self._iter_directory(current):
                try:
                    mode = item.stat().st_mode
                except FileNotFoundError:
                    # Dangling symlink or entry removed since listing
                    logger.debug("Skipping vanished entry: %s", item)
                    continue
                except OSError as e:
                    raise FilesystemError(
                        f"Cannot stat {item}: {e.strerror or e}", path=item
                    ) from e

                if stat.S_ISDIR(mode):
                    if item.is_symlink():
                        logger.debug("Not following symlinked directory: %s", item)
                        continue
                    pending.append(item)
                elif stat.S_ISREG(mode) and self.matches(item):
                    try:
                        files.append(LocalFile.from_path(item, directory))
                    except OSError as e:
                        raise FilesystemError(
                            f"Cannot stat {item}: {e.strerror or e}", path=item
                        ) from e

        files.sort(key=lambda f: f.relative_path)
        logger.debug(
            "Found %d %s file(s) under %s", len(files), self.extension, directory
        )
        return files

    def list_relative(self, directory: Path) -> list[str]:
        """Scan a directory and return only the relative paths."""
        return [f.relative_path for f in self.scan(directory)]


def enumerate_files(root: Union[str, Path], extension: str) -> list[str]:
    """Enumerate files under root whose lowercase name ends with extension.

    Args:
        root: Directory to walk
        extension: Extension filter (e.g. ".html")

    Returns:
        Relative, forward-slash paths with no duplicates

    Raises:
        FilesystemError: If root cannot be traversed
    """
    return DirectoryScanner(extension).list_relative(Path(root))
