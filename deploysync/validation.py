"""Validation of root directories before a deploy run.

Guards against a tree being backed up or synced into itself: both roots must
exist, their resolved paths must differ, and neither may contain the other.
"""

import logging
from pathlib import Path

from .config import RunConfig
from .exceptions import ConfigError
from .utils import is_within

logger = logging.getLogger(__name__)


def _require_directory(path: Path, label: str) -> Path:
    """Resolve a root directory, raising ConfigError if it is unusable."""
    if not path.exists():
        raise ConfigError(f"{label} {path} does not exist", path=path)
    if not path.is_dir():
        raise ConfigError(f"{label} {path} is not a directory", path=path)
    return path.resolve()


def validate_roots(config: RunConfig) -> tuple[Path, Path]:
    """Validate the source, destination and backup roots of a run.

    Args:
        config: Run configuration

    Returns:
        Tuple of (resolved source root, resolved destination root)

    Raises:
        ConfigError: If a root is missing, the roots collide or overlap,
            or the backup root lies inside one of the synced trees
    """
    real_source = _require_directory(config.source_root, "Source")
    real_dest = _require_directory(config.dest_root, "Destination")

    if real_source == real_dest:
        raise ConfigError(
            f"data collision detected: source and destination are both {real_source}",
            path=real_source,
        )
    if is_within(real_dest, real_source) or is_within(real_source, real_dest):
        raise ConfigError(
            f"data overlap detected: {real_source} and {real_dest} are nested",
            path=real_dest,
        )

    real_backup = config.backup_root.resolve()
    for label, root in (("source", real_source), ("destination", real_dest)):
        if is_within(real_backup, root):
            raise ConfigError(
                f"Backup root {real_backup} must not be inside the {label} tree",
                path=real_backup,
            )

    logger.debug("Validated roots: %s -> %s", real_source, real_dest)
    return real_source, real_dest
