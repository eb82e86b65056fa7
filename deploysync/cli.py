"""CLI interface for deploysync."""

import logging
from pathlib import Path
from typing import Any, Optional

import click

from . import __version__
from .config import RunConfig, config
from .exceptions import ConfigError, DeploySyncError
from .output import OutputFormatter
from .sync import DeployRunner, list_backups
from .utils import format_size

logger = logging.getLogger(__name__)

_DIR = click.Path(file_okay=False, path_type=Path)


@click.group()
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", is_flag=True, help="Output in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Provide more information during run and enable debug logging",
)
@click.version_option(version=__version__)
@click.pass_context
def main(ctx: Any, quiet: bool, json: bool, verbose: bool) -> None:
    """deploysync - Deploy files from a source tree to a destination tree.

    Every run backs up both trees before changing anything.
    """
    ctx.ensure_object(dict)
    ctx.obj["out"] = OutputFormatter(json_output=json, quiet=quiet)
    ctx.obj["verbose"] = verbose

    # Configure logging based on verbose flag
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("deploysync").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)


@main.command()
@click.option(
    "--source",
    "--prod",
    "source",
    type=_DIR,
    envvar="DEPLOYSYNC_SOURCE",
    help="Path to source (production) directory",
)
@click.option(
    "--dest",
    "--test",
    "dest",
    type=_DIR,
    envvar="DEPLOYSYNC_DEST",
    help="Path to destination (test) directory",
)
@click.option(
    "--backup",
    type=_DIR,
    envvar="DEPLOYSYNC_BACKUP",
    help="Path to backup directory",
)
@click.option(
    "--file-type",
    "file_type",
    envvar="DEPLOYSYNC_FILE_TYPE",
    help="File extension to deploy (default: .html)",
)
@click.option(
    "--dry-run", is_flag=True, help="Print actions but nothing will be changed"
)
@click.option(
    "--prune",
    is_flag=True,
    help="Delete files in destination that do not exist in source",
)
@click.option(
    "--force", is_flag=True, help="Copy every file regardless of size and mtime"
)
@click.pass_context
def run(
    ctx: Any,
    source: Optional[Path],
    dest: Optional[Path],
    backup: Optional[Path],
    file_type: Optional[str],
    dry_run: bool,
    prune: bool,
    force: bool,
) -> None:
    """Back up both trees, then copy new and changed files.

    Options not given on the command line fall back to the environment,
    then to the defaults saved with `deploysync init`.

    Examples:
        deploysync run --source ./prod --dest ./test --backup ./backup
        deploysync run --file-type rb --prune --dry-run
        deploysync -v run --force
    """
    out: OutputFormatter = ctx.obj["out"]

    try:
        if not (source and dest and backup) and not config.is_configured():
            out.info(
                "No saved defaults; using built-in roots for missing options "
                "(save your own with 'deploysync init')"
            )
        run_config = RunConfig(
            source_root=source or Path(config.get_default("source")),
            dest_root=dest or Path(config.get_default("dest")),
            backup_root=backup or Path(config.get_default("backup")),
            file_extension=file_type or config.get_default("file_type"),
            dry_run=dry_run,
            verbose=ctx.obj["verbose"],
            prune=prune,
            force=force,
        )
    except ConfigError as e:
        out.error(f"[{e.phase}] {e}")
        ctx.exit(1)
        return  # Unreachable, but helps type checker

    if not out.quiet:
        out.info(f"Source:      {run_config.source_root}")
        out.info(f"Destination: {run_config.dest_root}")
        out.info(f"Extension:   {run_config.file_extension}")
        out.print("")

    try:
        summary = DeployRunner(run_config, out).run()
    except DeploySyncError as e:
        out.error(f"[{e.phase}] {e}")
        ctx.exit(1)
        return
    except KeyboardInterrupt:
        out.warning("\nRun cancelled by user")
        ctx.exit(130)  # Standard exit code for SIGINT
        return

    if out.json_output:
        out.output_json(summary.to_dict())
    else:
        summary.display(out)

    if not summary.ok:
        out.error(f"[sync] {summary.sync_error}")
        if summary.prune_skipped:
            out.warning("Prune skipped because the sync phase did not complete")
        ctx.exit(1)


@main.command()
@click.option("--source", "--prod", "source", type=_DIR, help="Default source")
@click.option("--dest", "--test", "dest", type=_DIR, help="Default destination")
@click.option("--backup", type=_DIR, help="Default backup directory")
@click.option("--file-type", "file_type", help="Default file extension")
@click.pass_context
def init(
    ctx: Any,
    source: Optional[Path],
    dest: Optional[Path],
    backup: Optional[Path],
    file_type: Optional[str],
) -> None:
    """Save default roots and extension for future runs."""
    out: OutputFormatter = ctx.obj["out"]

    try:
        config_path = config.save_defaults(
            source=source, dest=dest, backup=backup, file_type=file_type
        )
    except ConfigError as e:
        out.error(f"[{e.phase}] {e}")
        ctx.exit(1)
        return

    if out.json_output:
        out.output_json({"config_file": str(config_path), **config.as_dict()})
        return

    out.print_summary(
        "Initialization Complete",
        [
            ("Config file", str(config_path)),
            ("Source", config.get_default("source")),
            ("Destination", config.get_default("dest")),
            ("Backup", config.get_default("backup")),
            ("Extension", config.get_default("file_type")),
        ],
    )


@main.command()
@click.option(
    "--backup",
    type=_DIR,
    envvar="DEPLOYSYNC_BACKUP",
    help="Path to backup directory",
)
@click.pass_context
def backups(ctx: Any, backup: Optional[Path]) -> None:
    """List previous backups and their manifests, newest first."""
    out: OutputFormatter = ctx.obj["out"]

    try:
        backup_root = backup or Path(config.get_default("backup"))
    except ConfigError as e:
        out.error(f"[{e.phase}] {e}")
        ctx.exit(1)
        return

    try:
        entries = list_backups(backup_root)
    except DeploySyncError as e:
        out.error(f"[{e.phase}] {e}")
        ctx.exit(1)
        return

    if not entries:
        if out.json_output:
            out.output_json([])
        else:
            out.info(f"No backups found in {backup_root}")
        return

    rows = []
    for entry in entries:
        manifest = entry.manifest
        rows.append(
            {
                "name": entry.path.name,
                "source": str(manifest.source) if manifest else "",
                "destination": str(manifest.destination) if manifest else "",
                "files_src": manifest.source_count if manifest else "",
                "files_dst": manifest.dest_count if manifest else "",
                "options": manifest.options if manifest else "no manifest",
                "size": format_size(entry.size) if entry.size is not None else "?",
            }
        )

    out.output_table(
        rows,
        [
            "name",
            "source",
            "destination",
            "files_src",
            "files_dst",
            "options",
            "size",
        ],
        {
            "name": "Backup",
            "source": "Source",
            "destination": "Destination",
            "files_src": "Files(src)",
            "files_dst": "Files(dst)",
            "options": "Options",
            "size": "Size",
        },
        title=f"Backups in {backup_root}",
    )


if __name__ == "__main__":
    main()
