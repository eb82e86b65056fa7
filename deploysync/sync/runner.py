"""Deploy pipeline: validate, enumerate, back up, sync, prune, summarize.

Each phase runs only after the previous one completed. Configuration,
enumeration and backup failures raise and stop the run before the
destination is touched. A sync failure stops the copy loop and blocks
pruning, but is returned in the summary so partial counts can be reported.
"""

import logging
from datetime import datetime
from typing import Optional

from ..config import RunConfig
from ..exceptions import SyncError
from ..output import OutputFormatter
from ..validation import validate_roots
from .backup import BackupSnapshotter
from .engine import SyncEngine
from .operations import SyncOperations
from .pruner import PruneEngine
from .scanner import DirectoryScanner
from .summary import RunSummary

logger = logging.getLogger(__name__)


class DeployRunner:
    """Runs the deploy phases in order for one RunConfig."""

    def __init__(
        self,
        config: RunConfig,
        output: Optional[OutputFormatter] = None,
        operations: Optional[SyncOperations] = None,
    ):
        """Initialize deploy runner.

        Args:
            config: Run configuration
            output: Output formatter shared by all phases
            operations: Filesystem operations shared by all phases (for testing)
        """
        self.config = config
        self.output = output or OutputFormatter()
        self.operations = operations or SyncOperations()
        self.scanner = DirectoryScanner(config.file_extension)
        self.snapshotter = BackupSnapshotter(self.output, self.operations)
        self.engine = SyncEngine(self.output, self.operations)
        self.pruner = PruneEngine(self.output, self.operations)

    def run(self, moment: Optional[datetime] = None) -> RunSummary:
        """Execute the full pipeline.

        Args:
            moment: Run start time (defaults to now)

        Returns:
            RunSummary; summary.sync_error is set if the sync phase failed

        Raises:
            ConfigError: If the roots are invalid
            FilesystemError: If a root cannot be enumerated
            BackupError: If the backup phase fails
        """
        config = self.config
        validate_roots(config)

        src_files = self.scanner.list_relative(config.source_root)
        dst_files = self.scanner.list_relative(config.dest_root)
        logger.debug(
            "Enumerated %d source and %d destination file(s)",
            len(src_files),
            len(dst_files),
        )

        if config.dry_run:
            self.output.info("Dry run: No changes will be made")

        backup = self.snapshotter.snapshot(config, src_files, dst_files, moment)

        try:
            decisions = self.engine.sync(config, src_files)
        except SyncError as e:
            logger.debug("Sync phase failed: %s", e)
            summary = RunSummary.from_results(
                e.decisions,
                backup_dir=backup.backup_dir,
                dry_run=config.dry_run,
                prune_enabled=config.prune,
            )
            summary.sync_error = str(e)
            summary.prune_skipped = config.prune
            return summary

        prune_result = self.pruner.prune(config, src_files, dst_files)

        return RunSummary.from_results(
            decisions,
            pruned=prune_result.pruned,
            backup_dir=backup.backup_dir,
            dry_run=config.dry_run,
            prune_enabled=config.prune,
            prune_failures=len(prune_result.failures),
        )
