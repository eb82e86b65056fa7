"""Pre-sync backup of the source and destination trees."""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..config import RunConfig
from ..exceptions import BackupError
from ..output import OutputFormatter
from ..utils import (
    DST_BACKUP_DIR,
    MANIFEST_NAME,
    SRC_BACKUP_DIR,
    format_backup_stamp,
    parse_backup_stamp,
)
from .manifest import BackupManifest
from .operations import SyncOperations

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BackupResult:
    """Outcome of the backup phase."""

    backup_dir: Path
    """Timestamped backup directory (not created in dry-run)"""

    manifest_path: Optional[Path]
    """Written manifest, or None in dry-run"""

    source_count: int
    """Number of source files backed up"""

    dest_count: int
    """Number of destination files backed up"""

    dry_run: bool = False


def resolve_backup_dir(backup_root: Path, moment: Optional[datetime] = None) -> Path:
    """Pick a backup directory name unique to this run.

    Args:
        backup_root: Directory holding all backups
        moment: Run start time (defaults to now)

    Returns:
        backup_root/<stamp>, with a numeric suffix if the stamp is taken
    """
    stamp = format_backup_stamp(moment)
    candidate = backup_root / stamp
    suffix = 1
    while candidate.exists():
        candidate = backup_root / f"{stamp}_{suffix}"
        suffix += 1
    return candidate


class BackupSnapshotter:
    """Copies both trees into a timestamped backup and writes a manifest."""

    def __init__(
        self,
        output: Optional[OutputFormatter] = None,
        operations: Optional[SyncOperations] = None,
    ):
        """Initialize backup snapshotter.

        Args:
            output: Output formatter for displaying progress/status
            operations: Filesystem operations (for testing)
        """
        self.output = output or OutputFormatter()
        self.operations = operations or SyncOperations()

    def snapshot(
        self,
        config: RunConfig,
        src_files: list[str],
        dst_files: list[str],
        moment: Optional[datetime] = None,
    ) -> BackupResult:
        """Back up both trees before any mutation.

        Args:
            config: Run configuration
            src_files: Relative paths under config.source_root
            dst_files: Relative paths under config.dest_root
            moment: Run start time used for the directory name and manifest

        Returns:
            BackupResult describing the backup

        Raises:
            BackupError: If any file cannot be copied or the manifest cannot
                be written
        """
        moment = moment or datetime.now()
        backup_root = config.backup_root.resolve()
        backup_dir = resolve_backup_dir(backup_root, moment)

        self.output.info(f"Backup root {backup_root}")
        self.output.info(f" creating backup at {backup_dir}")

        if not config.dry_run:
            for sub in (SRC_BACKUP_DIR, DST_BACKUP_DIR):
                try:
                    (backup_dir / sub).mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    raise BackupError(
                        f"Cannot create backup directory: {e}", path=backup_dir / sub
                    ) from e

        self._copy_tree(
            config, config.source_root, backup_dir / SRC_BACKUP_DIR, src_files, "src"
        )
        self._copy_tree(
            config, config.dest_root, backup_dir / DST_BACKUP_DIR, dst_files, "dst"
        )

        manifest_path: Optional[Path] = None
        if not config.dry_run:
            manifest = BackupManifest.for_run(
                config, backup_dir, len(src_files), len(dst_files), timestamp=moment
            )
            try:
                manifest_path = manifest.write(backup_dir, MANIFEST_NAME)
            except OSError as e:
                raise BackupError(
                    f"Cannot write manifest: {e}", path=backup_dir / MANIFEST_NAME
                ) from e

        return BackupResult(
            backup_dir=backup_dir,
            manifest_path=manifest_path,
            source_count=len(src_files),
            dest_count=len(dst_files),
            dry_run=config.dry_run,
        )

    def _copy_tree(
        self,
        config: RunConfig,
        root: Path,
        target: Path,
        files: list[str],
        label: str,
    ) -> None:
        """Copy every listed file from root into target."""
        for rel in files:
            if config.verbose:
                self.output.info(f"  ↳ backup {label}: {rel}")
            if config.dry_run:
                continue
            try:
                self.operations.copy_file(root / rel, target / rel)
            except OSError as e:
                raise BackupError(
                    f"Backup of {label} file {rel} failed: {e}", path=root / rel
                ) from e
        logger.debug("Backed up %d %s file(s) into %s", len(files), label, target)


@dataclass(frozen=True)
class BackupEntry:
    """A backup directory found under a backup root."""

    path: Path
    manifest: Optional[BackupManifest]
    """Parsed manifest, or None if missing or unreadable"""

    size: Optional[int] = 0
    """Total size in bytes of the files in the backup, None if unreadable"""


def _load_manifest(manifest_path: Path) -> Optional[BackupManifest]:
    try:
        if not manifest_path.is_file():
            return None
        return BackupManifest.load(manifest_path)
    except (OSError, ValueError) as e:
        logger.debug("Unreadable manifest %s: %s", manifest_path, e)
        return None


def _backup_size(backup_dir: Path) -> Optional[int]:
    """Total size of the files in a backup, or None if it cannot be read."""
    try:
        return sum(f.stat().st_size for f in backup_dir.rglob("*") if f.is_file())
    except OSError as e:
        logger.warning("Cannot compute size of %s: %s", backup_dir, e)
        return None


def list_backups(backup_root: Path) -> list[BackupEntry]:
    """List backup directories under backup_root, newest first.

    Directories whose name is not a backup stamp are ignored.

    Args:
        backup_root: Directory holding all backups

    Returns:
        BackupEntry per backup directory

    Raises:
        BackupError: If the backup root cannot be read
    """
    try:
        if not backup_root.is_dir():
            return []
        items = [
            item
            for item in backup_root.iterdir()
            if parse_backup_stamp(item.name) is not None and item.is_dir()
        ]
    except OSError as e:
        raise BackupError(
            f"Cannot read backup root {backup_root}: {e.strerror or e}",
            path=backup_root,
        ) from e

    entries = [
        BackupEntry(
            path=item,
            manifest=_load_manifest(item / MANIFEST_NAME),
            size=_backup_size(item),
        )
        for item in items
    ]
    entries.sort(key=lambda entry: entry.path.name, reverse=True)
    return entries
