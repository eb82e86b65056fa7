"""Run configuration and persisted defaults for deploysync."""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "./prod"
DEFAULT_DEST = "./test"
DEFAULT_BACKUP = "./backup"
DEFAULT_FILE_TYPE = ".html"

CONFIG_ENV_VAR = "DEPLOYSYNC_CONFIG"

# Keys accepted in the config file
CONFIG_KEYS = ("source", "dest", "backup", "file_type")


def normalize_extension(extension: str) -> str:
    """Normalize a file extension to lowercase with a leading dot.

    Args:
        extension: Extension as typed by the user ("html", ".HTML", ...)

    Returns:
        Normalized extension (e.g. ".html")

    Raises:
        ConfigError: If the extension is empty

    Examples:
        >>> normalize_extension("HTML")
        '.html'
        >>> normalize_extension(".Rb")
        '.rb'
    """
    ext = extension.strip().lower()
    if ext in ("", "."):
        raise ConfigError("File extension must not be empty")
    return ext if ext.startswith(".") else f".{ext}"


@dataclass(frozen=True)
class RunConfig:
    """Immutable configuration for a single deploy run.

    Built once from defaults overridden by command-line input and passed
    explicitly to every phase.
    """

    source_root: Path
    """Directory files are deployed from"""

    dest_root: Path
    """Directory files are deployed to"""

    backup_root: Path
    """Directory holding one timestamped backup per run"""

    file_extension: str = DEFAULT_FILE_TYPE
    """Lowercase, dot-prefixed extension filter"""

    dry_run: bool = False
    """Report actions without touching the filesystem"""

    verbose: bool = False
    """Print per-file backup and skip lines"""

    prune: bool = False
    """Delete destination files that have no source counterpart"""

    force: bool = False
    """Copy every source file regardless of staleness"""

    def __post_init__(self) -> None:
        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "source_root", Path(self.source_root).expanduser())
        object.__setattr__(self, "dest_root", Path(self.dest_root).expanduser())
        object.__setattr__(self, "backup_root", Path(self.backup_root).expanduser())
        object.__setattr__(
            self, "file_extension", normalize_extension(self.file_extension)
        )


@dataclass
class Config:
    """Persisted default roots and extension.

    Stored as JSON in ~/.config/deploysync/config.json, or in the file named by
    the DEPLOYSYNC_CONFIG environment variable.
    """

    config_path: Optional[Path] = None
    _values: dict[str, str] = field(default_factory=dict, init=False, repr=False)
    _loaded: bool = field(default=False, init=False, repr=False)

    def get_config_path(self) -> Path:
        """Return the path of the config file (which may not exist yet)."""
        if self.config_path is not None:
            return self.config_path
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            return Path(env_path).expanduser()
        return Path.home() / ".config" / "deploysync" / "config.json"

    def _load(self) -> dict[str, str]:
        if self._loaded:
            return self._values

        path = self.get_config_path()
        values: dict[str, str] = {}
        if path.exists():
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                raise ConfigError(f"Cannot read config file: {e}", path=path) from e
            if not isinstance(data, dict):
                raise ConfigError("Config file must contain a JSON object", path=path)
            for key, value in data.items():
                if key not in CONFIG_KEYS:
                    logger.warning("Ignoring unknown config key: %s", key)
                    continue
                values[key] = str(value)
            logger.debug("Loaded config from %s", path)

        self._values = values
        self._loaded = True
        return values

    def is_configured(self) -> bool:
        """Check whether any defaults have been saved."""
        return bool(self._load())

    def get(self, key: str) -> Optional[str]:
        """Get a saved default by key, or None."""
        return self._load().get(key)

    def get_default(self, key: str) -> str:
        """Get a saved default, falling back to the built-in value."""
        builtin = {
            "source": DEFAULT_SOURCE,
            "dest": DEFAULT_DEST,
            "backup": DEFAULT_BACKUP,
            "file_type": DEFAULT_FILE_TYPE,
        }
        return self.get(key) or builtin[key]

    def save_defaults(self, **values: Optional[Union[str, Path]]) -> Path:
        """Merge the given defaults into the config file.

        Args:
            **values: Any of source, dest, backup, file_type; None values
                are left unchanged

        Returns:
            Path of the written config file
        """
        current = dict(self._load())
        for key, value in values.items():
            if key not in CONFIG_KEYS:
                raise ConfigError(f"Unknown config key: {key}")
            if value is None:
                continue
            if key == "file_type":
                current[key] = normalize_extension(str(value))
            else:
                current[key] = str(Path(value).expanduser().resolve())

        path = self.get_config_path()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(current, indent=2) + "\n", encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot write config file: {e}", path=path) from e

        self._values = current
        self._loaded = True
        return path

    def as_dict(self) -> dict[str, Any]:
        """Return the saved defaults."""
        return dict(self._load())


config = Config()
