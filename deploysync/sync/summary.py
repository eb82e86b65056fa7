"""Run summary aggregation and display."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from ..output import OutputFormatter
from .comparator import SyncAction, SyncDecision


@dataclass
class RunSummary:
    """Counts reported at the end of a run. Never persisted."""

    copied: int = 0
    skipped: int = 0
    pruned: int = 0
    backup_dir: Optional[Path] = None
    dry_run: bool = False
    prune_enabled: bool = False
    prune_failures: int = 0
    prune_skipped: bool = False
    sync_error: Optional[str] = None
    copied_files: list[str] = field(default_factory=list)
    pruned_files: list[str] = field(default_factory=list)

    @classmethod
    def from_results(
        cls,
        decisions: list[SyncDecision],
        pruned: Optional[list[str]] = None,
        backup_dir: Optional[Path] = None,
        dry_run: bool = False,
        prune_enabled: bool = False,
        prune_failures: int = 0,
    ) -> "RunSummary":
        """Aggregate phase results into a summary."""
        copied_files = [
            d.relative_path for d in decisions if d.action == SyncAction.COPY
        ]
        pruned_files = list(pruned or [])
        return cls(
            copied=len(copied_files),
            skipped=sum(1 for d in decisions if d.action == SyncAction.SKIP),
            pruned=len(pruned_files),
            backup_dir=backup_dir,
            dry_run=dry_run,
            prune_enabled=prune_enabled,
            prune_failures=prune_failures,
            copied_files=copied_files,
            pruned_files=pruned_files,
        )

    @property
    def ok(self) -> bool:
        """True unless the sync phase failed."""
        return self.sync_error is None

    def to_dict(self) -> dict[str, Any]:
        """Convert summary to a dictionary for JSON output."""
        return {
            "copied": self.copied,
            "skipped": self.skipped,
            "pruned": self.pruned if self.prune_enabled else None,
            "prune_failures": self.prune_failures,
            "prune_skipped": self.prune_skipped,
            "backup_dir": str(self.backup_dir) if self.backup_dir else None,
            "dry_run": self.dry_run,
            "sync_error": self.sync_error,
            "copied_files": self.copied_files,
            "pruned_files": self.pruned_files,
        }

    def display(self, output: OutputFormatter) -> None:
        """Print the human-readable summary."""
        items = [
            ("Copied", f"{self.copied} files"),
            ("Skipped", f"{self.skipped} files"),
        ]
        if self.prune_enabled:
            if self.prune_skipped:
                items.append(("Pruned", "skipped (sync failed)"))
            else:
                items.append(("Pruned", f"{self.pruned} files"))
                if self.prune_failures:
                    items.append(("Prune failures", str(self.prune_failures)))
        items.append(("Backup", str(self.backup_dir)))
        output.print_summary("Summary", items)

        if self.dry_run:
            output.info("(dry-run only; no changes made)")
        elif self.ok:
            output.success("Done.")
