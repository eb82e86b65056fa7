"""Removal of destination files that have no source counterpart."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..config import RunConfig
from ..exceptions import PruneError
from ..output import OutputFormatter
from .operations import SyncOperations

logger = logging.getLogger(__name__)


@dataclass
class PruneResult:
    """Outcome of the prune phase."""

    pruned: list[str] = field(default_factory=list)
    """Relative paths pruned (or that would be pruned in dry-run)"""

    removed_dirs: list[Path] = field(default_factory=list)
    """Directories removed because pruning left them empty"""

    failures: list[PruneError] = field(default_factory=list)
    """Individual failures; pruning continues past them"""


def find_orphans(src_files: list[str], dst_files: list[str]) -> list[str]:
    """Relative paths present in the destination but absent from the source."""
    return sorted(set(dst_files) - set(src_files))


class PruneEngine:
    """Deletes orphaned destination files and collapses emptied directories."""

    def __init__(
        self,
        output: Optional[OutputFormatter] = None,
        operations: Optional[SyncOperations] = None,
    ):
        self.output = output or OutputFormatter()
        self.operations = operations or SyncOperations()

    def prune(
        self, config: RunConfig, src_files: list[str], dst_files: list[str]
    ) -> PruneResult:
        """Prune the destination tree.

        Does nothing unless config.prune is set. Failures for individual
        files are logged and recorded, never raised.

        Args:
            config: Run configuration
            src_files: Relative paths under config.source_root
            dst_files: Relative paths under config.dest_root

        Returns:
            PruneResult with pruned paths, removed directories and failures
        """
        result = PruneResult()
        if not config.prune:
            return result

        dest_root = config.dest_root
        for rel in find_orphans(src_files, dst_files):
            target = dest_root / rel
            self.output.info(f"× prune: {rel}")

            if config.dry_run:
                result.pruned.append(rel)
                continue

            try:
                self.operations.delete_file(target)
            except OSError as e:
                self._record_failure(result, f"Cannot delete {rel}: {e}", target)
                continue
            result.pruned.append(rel)

            try:
                result.removed_dirs.extend(
                    self.operations.remove_empty_parents(target.parent, dest_root)
                )
            except OSError as e:
                self._record_failure(
                    result, f"Cannot remove empty directory for {rel}: {e}", target
                )

        logger.debug(
            "Pruned %d file(s), removed %d director(ies), %d failure(s)",
            len(result.pruned),
            len(result.removed_dirs),
            len(result.failures),
        )
        return result

    def _record_failure(self, result: PruneResult, message: str, path: Path) -> None:
        error = PruneError(message, path=path)
        logger.warning("%s", error)
        self.output.warning(f"Prune failed: {error}")
        result.failures.append(error)
