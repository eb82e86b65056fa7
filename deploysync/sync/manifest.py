"""Backup manifest written alongside every snapshot.

The manifest is a small key/value text file so it can be read without any
tooling when recovering a run by hand::

    Deploy manifest: 2025-01-15T10:30:00
    Source:      /srv/prod
    Destination: /srv/test
    Backup:      /srv/backup/2025-01-15_103000
    Extension:   .html
    Files(src):  12
    Files(dst):  10
    Options:     prune=false force=false
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..config import RunConfig

logger = logging.getLogger(__name__)

TITLE_PREFIX = "Deploy manifest: "

_FIELDS = [
    ("source", "Source:"),
    ("destination", "Destination:"),
    ("backup_dir", "Backup:"),
    ("extension", "Extension:"),
    ("source_count", "Files(src):"),
    ("dest_count", "Files(dst):"),
    ("options", "Options:"),
]
_LABEL_WIDTH = max(len(label) for _, label in _FIELDS) + 1


@dataclass(frozen=True)
class BackupManifest:
    """Textual record of a run's configuration and file counts."""

    timestamp: datetime
    source: Path
    destination: Path
    backup_dir: Path
    extension: str
    source_count: int
    dest_count: int
    prune: bool = False
    force: bool = False

    @classmethod
    def for_run(
        cls,
        config: RunConfig,
        backup_dir: Path,
        source_count: int,
        dest_count: int,
        timestamp: Optional[datetime] = None,
    ) -> "BackupManifest":
        """Build the manifest for a run from its configuration."""
        return cls(
            timestamp=timestamp or datetime.now(),
            source=config.source_root.resolve(),
            destination=config.dest_root.resolve(),
            backup_dir=backup_dir,
            extension=config.file_extension,
            source_count=source_count,
            dest_count=dest_count,
            prune=config.prune,
            force=config.force,
        )

    @property
    def options(self) -> str:
        return f"prune={str(self.prune).lower()} force={str(self.force).lower()}"

    def render(self) -> str:
        """Render the manifest as text."""
        lines = [f"{TITLE_PREFIX}{self.timestamp.isoformat(timespec='seconds')}"]
        for attr, label in _FIELDS:
            lines.append(f"{label:<{_LABEL_WIDTH}}{getattr(self, attr)}")
        return "\n".join(lines) + "\n"

    def write(self, directory: Path, name: str) -> Path:
        """Write the manifest into directory.

        Raises:
            OSError: If the file cannot be written
        """
        path = directory / name
        path.write_text(self.render(), encoding="utf-8")
        logger.debug("Wrote manifest %s", path)
        return path

    @classmethod
    def parse(cls, text: str) -> "BackupManifest":
        """Parse a rendered manifest.

        Raises:
            ValueError: If the text is not a manifest
        """
        lines = text.splitlines()
        if not lines or not lines[0].startswith(TITLE_PREFIX):
            raise ValueError("Missing manifest title line")
        timestamp = datetime.fromisoformat(lines[0][len(TITLE_PREFIX) :].strip())

        by_label = {label: attr for attr, label in _FIELDS}
        values: dict[str, str] = {}
        for line in lines[1:]:
            label, _, value = line.partition(" ")
            if label in by_label:
                values[by_label[label]] = value.strip()

        missing = [attr for attr, _ in _FIELDS if attr not in values]
        if missing:
            raise ValueError(f"Manifest is missing fields: {', '.join(missing)}")

        flags = dict(
            item.split("=", 1) for item in values["options"].split() if "=" in item
        )
        return cls(
            timestamp=timestamp,
            source=Path(values["source"]),
            destination=Path(values["destination"]),
            backup_dir=Path(values["backup_dir"]),
            extension=values["extension"],
            source_count=int(values["source_count"]),
            dest_count=int(values["dest_count"]),
            prune=flags.get("prune") == "true",
            force=flags.get("force") == "true",
        )

    @classmethod
    def load(cls, path: Path) -> "BackupManifest":
        """Read and parse a manifest file."""
        return cls.parse(path.read_text(encoding="utf-8"))
