"""Utility functions for deploysync."""

import re
from datetime import datetime
from pathlib import Path
from typing import Optional

# =============================================================================
# Constants for backup layout
# =============================================================================

# Name of the manifest written into every backup directory
MANIFEST_NAME: str = "MANIFEST.txt"

# Subdirectories holding the pre-run snapshot of each tree
SRC_BACKUP_DIR: str = "src_before"
DST_BACKUP_DIR: str = "dst_before"

# Sortable date-time stamp used to name backup directories
BACKUP_STAMP_FORMAT: str = "%Y-%m-%d_%H%M%S"

# A backup directory name: the stamp, optionally followed by "_<n>"
BACKUP_NAME_PATTERN = re.compile(r"^(\d{4}-\d{2}-\d{2}_\d{6})(?:_\d+)?$")


# =============================================================================
# Timestamp utilities
# =============================================================================


def format_backup_stamp(moment: Optional[datetime] = None) -> str:
    """Format a backup directory name from a point in time.

    Args:
        moment: Time to format (defaults to now)

    Returns:
        Stamp like "2025-01-15_103000"
    """
    if moment is None:
        moment = datetime.now()
    return moment.strftime(BACKUP_STAMP_FORMAT)


def parse_backup_stamp(stamp: str) -> Optional[datetime]:
    """Parse a backup directory name back into a datetime.

    A uniqueness suffix ("_1", "_2", ...) after the stamp is ignored.

    Args:
        stamp: Backup directory name

    Returns:
        datetime or None if the name is not a backup stamp
    """
    match = BACKUP_NAME_PATTERN.match(stamp)
    if not match:
        return None
    try:
        return datetime.strptime(match.group(1), BACKUP_STAMP_FORMAT)
    except ValueError:
        return None


# =============================================================================
# Path utilities
# =============================================================================


def is_within(path: Path, root: Path) -> bool:
    """Check whether path equals root or lies below it, by path components.

    Unlike a plain string prefix test, "/data/site2" is not within "/data/site".

    Args:
        path: Path to check
        root: Candidate ancestor

    Returns:
        True if path is root or a descendant of root
    """
    try:
        path.relative_to(root)
    except ValueError:
        return False
    return True


# =============================================================================
# Size formatting utilities
# =============================================================================


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB", "256 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / 1024 / 1024:.1f} MB"
    else:
        return f"{size_bytes / 1024 / 1024 / 1024:.1f} GB"
