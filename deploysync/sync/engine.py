"""Core sync engine: decides and performs per-file copies."""

import logging
import time
from pathlib import Path
from typing import Optional

from ..config import RunConfig
from ..exceptions import SyncError
from ..output import OutputFormatter
from .comparator import FileComparator, SyncDecision
from .operations import SyncOperations
from .scanner import LocalFile

logger = logging.getLogger(__name__)


class SyncEngine:
    """Pushes stale or missing source files into the destination tree."""

    def __init__(
        self,
        output: Optional[OutputFormatter] = None,
        operations: Optional[SyncOperations] = None,
    ):
        """Initialize sync engine.

        Args:
            output: Output formatter for displaying progress/status
            operations: Filesystem operations (for testing)
        """
        self.output = output or OutputFormatter()
        self.operations = operations or SyncOperations()

    def _stat_destination(
        self, dest_path: Path, dest_root: Path
    ) -> Optional[LocalFile]:
        """Stat a destination file; None means absent or unreadable."""
        try:
            return LocalFile.from_path(dest_path, dest_root)
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.debug("Destination stat failed for %s: %s", dest_path, e)
            return None

    def decide(self, config: RunConfig, relative_path: str) -> SyncDecision:
        """Decide whether one source file must be copied.

        Args:
            config: Run configuration
            relative_path: Path relative to both roots

        Returns:
            SyncDecision for this file

        Raises:
            SyncError: If the source file cannot be stat'ed
        """
        src_path = config.source_root / relative_path
        dst_path = config.dest_root / relative_path

        try:
            source_file = LocalFile.from_path(src_path, config.source_root)
        except OSError as e:
            raise SyncError(
                f"Cannot read source file {relative_path}: {e}", path=src_path
            ) from e

        dest_file = None
        if not config.force:
            dest_file = self._stat_destination(dst_path, config.dest_root)

        comparator = FileComparator(force=config.force)
        return comparator.compare(relative_path, source_file, dest_file)

    def sync(self, config: RunConfig, src_files: list[str]) -> list[SyncDecision]:
        """Copy every stale or missing source file into the destination.

        Args:
            config: Run configuration
            src_files: Relative paths under config.source_root

        Returns:
            One decision per source file

        Raises:
            SyncError: On the first file that cannot be read or written; the
                decisions made so far are attached and already copied files
                stay copied
        """
        decisions: list[SyncDecision] = []
        start_time = time.time()

        for rel in src_files:
            try:
                decision = self.decide(config, rel)
            except SyncError as e:
                e.decisions = list(decisions)
                raise

            if decision.is_copy:
                self.output.info(f"→ copy: {rel}")
                logger.debug("Copy %s: %s", rel, decision.reason)
                if not config.dry_run:
                    self._copy(config, rel, decisions)
            elif config.verbose:
                self.output.info(f"· skip: {rel}")

            decisions.append(decision)

        logger.debug(
            "Sync decided %d file(s) in %.2fs", len(decisions), time.time() - start_time
        )
        return decisions

    def _copy(
        self, config: RunConfig, relative_path: str, decisions: list[SyncDecision]
    ) -> None:
        src_path = config.source_root / relative_path
        dst_path = config.dest_root / relative_path
        try:
            self.operations.copy_file(src_path, dst_path)
        except OSError as e:
            raise SyncError(
                f"Copy of {relative_path} failed: {e}",
                path=dst_path,
                decisions=list(decisions),
            ) from e
