"""Tests for the FileComparator class."""

from pathlib import Path

import pytest

from deploysync.sync.comparator import FileComparator, SyncAction, is_stale
from deploysync.sync.scanner import LocalFile


def _local_file(
    size: int = 100, mtime: float = 1234567890.0, relative_path: str = "a.html"
) -> LocalFile:
    """Create a LocalFile for testing."""
    return LocalFile(
        path=Path(f"/local/{relative_path}"),
        relative_path=relative_path,
        size=size,
        mtime=mtime,
    )


class TestIsStale:
    """Tests for the staleness policy."""

    @pytest.mark.parametrize(
        "src_size,src_mtime,dst_size,dst_mtime,expected",
        [
            (10, 100.0, 10, 100.0, False),  # identical
            (10, 200.0, 10, 100.0, True),  # source newer
            (10, 100.0, 10, 200.0, False),  # destination newer
            (12, 100.0, 10, 100.0, True),  # size differs, same mtime
            (12, 50.0, 10, 100.0, True),  # size differs, source older
        ],
    )
    def test_policy(self, src_size, src_mtime, dst_size, dst_mtime, expected):
        """Test copy-if-size-differs-or-source-newer policy."""
        assert is_stale(src_size, src_mtime, dst_size, dst_mtime) is expected


class TestFileComparator:
    """Tests for per-file copy decisions."""

    def test_identical_files_skip(self):
        """Equal size and equal mtime should never be copied."""
        comparator = FileComparator()
        decision = comparator.compare("a.html", _local_file(), _local_file())

        assert decision.action == SyncAction.SKIP
        assert decision.reason == "Destination is up to date"
        assert not decision.is_copy

    def test_source_newer_copies(self):
        """A strictly newer source mtime should be copied."""
        comparator = FileComparator()
        decision = comparator.compare(
            "a.html", _local_file(mtime=200.0), _local_file(mtime=100.0)
        )

        assert decision.action == SyncAction.COPY
        assert decision.reason == "Source file is newer"

    def test_destination_newer_same_size_skips(self):
        """A newer destination with the same size is left alone."""
        comparator = FileComparator()
        decision = comparator.compare(
            "a.html", _local_file(mtime=100.0), _local_file(mtime=200.0)
        )

        assert decision.action == SyncAction.SKIP

    def test_size_differs_with_older_source_copies(self):
        """Size difference wins even if the source mtime is older."""
        comparator = FileComparator()
        decision = comparator.compare(
            "a.html",
            _local_file(size=12, mtime=100.0),
            _local_file(size=10, mtime=200.0),
        )

        assert decision.action == SyncAction.COPY
        assert "Different sizes (12 vs 10)" in decision.reason

    def test_missing_destination_copies(self):
        """Absent or unreadable destination is treated as stale."""
        comparator = FileComparator()
        decision = comparator.compare("a.html", _local_file(), None)

        assert decision.action == SyncAction.COPY
        assert decision.reason == "Destination missing or unreadable"
        assert decision.dest_file is None

    def test_force_always_copies(self):
        """force=True yields COPY regardless of metadata."""
        comparator = FileComparator(force=True)
        decision = comparator.compare("a.html", _local_file(), _local_file())

        assert decision.action == SyncAction.COPY
        assert decision.reason == "Forced copy"

    def test_decision_is_deterministic(self):
        """The same metadata always yields the same decision."""
        comparator = FileComparator()
        source = _local_file(size=10, mtime=300.0)
        dest = _local_file(size=10, mtime=100.0)

        decisions = {comparator.compare("a.html", source, dest) for _ in range(5)}

        assert len(decisions) == 1

    def test_relative_path_is_recorded(self):
        """Decision keeps the relative path it was made for."""
        comparator = FileComparator()
        decision = comparator.compare("docs/x.html", _local_file(), None)

        assert decision.relative_path == "docs/x.html"
