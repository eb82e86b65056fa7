"""Tests for the backup snapshotter and manifest."""

import errno
import os
from datetime import datetime
from pathlib import Path

import pytest

from deploysync.config import RunConfig
from deploysync.exceptions import BackupError
from deploysync.sync import SyncOperations
from deploysync.sync.backup import BackupSnapshotter, list_backups, resolve_backup_dir
from deploysync.sync.manifest import BackupManifest

MOMENT = datetime(2025, 1, 15, 10, 30, 0)
OLD = 1_600_000_000.0


class TestResolveBackupDir:
    """Tests for backup directory naming."""

    def test_uses_sortable_stamp(self, tmp_path):
        """Directory is named YYYY-MM-DD_HHMMSS under the backup root."""
        assert resolve_backup_dir(tmp_path, MOMENT) == tmp_path / "2025-01-15_103000"

    def test_existing_stamp_gets_suffix(self, tmp_path):
        """A second run in the same second gets a unique directory."""
        (tmp_path / "2025-01-15_103000").mkdir()
        (tmp_path / "2025-01-15_103000_1").mkdir()

        assert resolve_backup_dir(tmp_path, MOMENT) == tmp_path / "2025-01-15_103000_2"


class TestBackupSnapshotter:
    """Tests for BackupSnapshotter.snapshot."""

    @pytest.fixture
    def snapshotter(self, quiet_output):
        return BackupSnapshotter(quiet_output)

    def test_copies_both_trees_and_writes_manifest(
        self, snapshotter, roots, make_file
    ):
        """Both trees are copied under src_before/dst_before with a manifest."""
        source, dest, backup = roots
        make_file(source / "a.html", "src-a", mtime=OLD)
        make_file(source / "docs" / "b.html", "src-b")
        make_file(dest / "a.html", "dst-a")
        config = RunConfig(source, dest, backup, ".html", prune=True)

        result = snapshotter.snapshot(
            config, ["a.html", "docs/b.html"], ["a.html"], MOMENT
        )

        backup_dir = backup / "2025-01-15_103000"
        assert result.backup_dir == backup_dir
        assert (backup_dir / "src_before" / "a.html").read_text() == "src-a"
        assert (backup_dir / "src_before" / "docs" / "b.html").read_text() == "src-b"
        assert (backup_dir / "dst_before" / "a.html").read_text() == "dst-a"
        assert os.stat(backup_dir / "src_before" / "a.html").st_mtime == OLD

        assert result.manifest_path == backup_dir / "MANIFEST.txt"
        manifest = BackupManifest.load(result.manifest_path)
        assert manifest.source == source.resolve()
        assert manifest.destination == dest.resolve()
        assert manifest.backup_dir == backup_dir
        assert manifest.source_count == 2
        assert manifest.dest_count == 1
        assert manifest.prune is True
        assert manifest.force is False

    def test_relative_roots_are_recorded_absolute(
        self, snapshotter, roots, make_file, monkeypatch
    ):
        """Relative roots are resolved so the manifest is usable from anywhere."""
        source, _, backup = roots
        make_file(source / "a.html")
        monkeypatch.chdir(source.parent)
        config = RunConfig("prod", "test", "backup", ".html")

        result = snapshotter.snapshot(config, ["a.html"], [], MOMENT)

        assert result.backup_dir == backup.resolve() / "2025-01-15_103000"
        manifest = BackupManifest.load(result.manifest_path)
        assert manifest.backup_dir.is_absolute()
        assert manifest.source.is_absolute()
        assert manifest.destination.is_absolute()
        assert manifest.backup_dir == result.backup_dir

    def test_empty_trees_still_create_layout(self, snapshotter, roots):
        """Empty file sets still produce both subdirectories and a manifest."""
        source, dest, backup = roots
        config = RunConfig(source, dest, backup)

        result = snapshotter.snapshot(config, [], [], MOMENT)

        assert (result.backup_dir / "src_before").is_dir()
        assert (result.backup_dir / "dst_before").is_dir()
        assert result.manifest_path.exists()

    def test_dry_run_writes_nothing(self, snapshotter, roots, make_file):
        """Dry-run reports the would-be path but creates nothing."""
        source, dest, backup = roots
        make_file(source / "a.html")
        config = RunConfig(source, dest, backup, dry_run=True)

        result = snapshotter.snapshot(config, ["a.html"], [], MOMENT)

        assert result.backup_dir == backup / "2025-01-15_103000"
        assert result.manifest_path is None
        assert result.dry_run is True
        assert not backup.exists()

    def test_copy_failure_raises_backup_error(self, quiet_output, roots, make_file):
        """Any file copy failure is fatal and no manifest is written."""
        source, dest, backup = roots
        make_file(source / "a.html")
        make_file(dest / "b.html")

        operations = SyncOperations()
        real_copy = operations.copy_file

        def failing_copy(src, dst):
            if src.name == "b.html":
                raise PermissionError(13, "Permission denied")
            return real_copy(src, dst)

        operations.copy_file = failing_copy
        snapshotter = BackupSnapshotter(quiet_output, operations)
        config = RunConfig(source, dest, backup)

        with pytest.raises(BackupError) as exc_info:
            snapshotter.snapshot(config, ["a.html"], ["b.html"], MOMENT)

        assert exc_info.value.phase == "backup"
        assert "b.html" in str(exc_info.value)
        assert not (backup / "2025-01-15_103000" / "MANIFEST.txt").exists()

    def test_missing_source_file_raises_backup_error(self, snapshotter, roots):
        """A listed file that cannot be read aborts the backup."""
        source, dest, backup = roots
        config = RunConfig(source, dest, backup)

        with pytest.raises(BackupError):
            snapshotter.snapshot(config, ["missing.html"], [], MOMENT)


class TestBackupManifest:
    """Tests for manifest rendering and parsing."""

    def _manifest(self, tmp_path, **overrides):
        values = dict(
            timestamp=MOMENT,
            source=tmp_path / "prod",
            destination=tmp_path / "test",
            backup_dir=tmp_path / "backup" / "2025-01-15_103000",
            extension=".html",
            source_count=3,
            dest_count=2,
            prune=False,
            force=True,
        )
        values.update(overrides)
        return BackupManifest(**values)

    def test_render_contains_required_lines(self, tmp_path):
        """Rendered manifest has the title, paths, counts and flags."""
        text = self._manifest(tmp_path).render()
        lines = text.splitlines()

        assert lines[0] == "Deploy manifest: 2025-01-15T10:30:00"
        assert f"Source:      {tmp_path / 'prod'}" in lines
        assert f"Destination: {tmp_path / 'test'}" in lines
        assert "Files(src):  3" in lines
        assert "Files(dst):  2" in lines
        assert "Options:     prune=false force=true" in lines

    def test_parse_reads_rendered_manifest(self, tmp_path):
        """parse reads back what render writes."""
        manifest = self._manifest(tmp_path, source=tmp_path / "with space")

        assert BackupManifest.parse(manifest.render()) == manifest

    def test_parse_rejects_other_text(self):
        """Text without a manifest title is rejected."""
        with pytest.raises(ValueError, match="title"):
            BackupManifest.parse("hello\n")


class TestListBackups:
    """Tests for list_backups."""

    def test_lists_newest_first_with_manifests(self, quiet_output, roots):
        """Backups are sorted newest first and manifests are parsed."""
        source, dest, backup = roots
        config = RunConfig(source, dest, backup)
        snapshotter = BackupSnapshotter(quiet_output)
        snapshotter.snapshot(config, [], [], datetime(2025, 1, 1, 8, 0, 0))
        snapshotter.snapshot(config, [], [], datetime(2025, 2, 1, 8, 0, 0))
        (backup / "not-a-backup").mkdir()
        (backup / "2025-03-01_080000").mkdir()

        entries = list_backups(backup)

        assert [e.path.name for e in entries] == [
            "2025-03-01_080000",
            "2025-02-01_080000",
            "2025-01-01_080000",
        ]
        assert entries[0].manifest is None
        assert entries[1].manifest.source == source.resolve()

    def test_missing_backup_root(self, tmp_path):
        """A backup root that does not exist has no backups."""
        assert list_backups(tmp_path / "nothing") == []

    def test_ignores_names_with_trailing_junk(self, tmp_path):
        """Only stamps and stamps with a numeric suffix are listed."""
        for name in [
            "2025-01-05_090307",
            "2025-01-05_090307_1",
            "2025-01-05_090307foo",
        ]:
            (tmp_path / name).mkdir()

        names = [e.path.name for e in list_backups(tmp_path)]

        assert names == ["2025-01-05_090307_1", "2025-01-05_090307"]

    def test_unreadable_backup_root_raises(self, tmp_path, monkeypatch):
        """Permission denied on the backup root is a BackupError."""
        real_iterdir = Path.iterdir

        def fake_iterdir(self):
            if self == tmp_path:
                raise PermissionError(errno.EACCES, "Permission denied", str(self))
            return real_iterdir(self)

        monkeypatch.setattr(Path, "iterdir", fake_iterdir)

        with pytest.raises(BackupError) as exc_info:
            list_backups(tmp_path)

        assert exc_info.value.path == str(tmp_path)
        assert exc_info.value.phase == "backup"

    def test_unreadable_backup_has_unknown_size(self, tmp_path, monkeypatch):
        """A backup whose contents cannot be read is listed without a size."""
        (tmp_path / "2025-01-05_090307").mkdir()

        def fake_rglob(self, pattern):
            raise PermissionError(errno.EACCES, "Permission denied", str(self))

        monkeypatch.setattr(Path, "rglob", fake_rglob)

        entries = list_backups(tmp_path)

        assert len(entries) == 1
        assert entries[0].size is None
        assert entries[0].manifest is None
