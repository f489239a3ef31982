"""Unit tests for best-effort file deletion."""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest

from tempsweep.core.cancellation import CancellationToken
from tempsweep.core.remover import delete_file, delete_files, delete_files_detailed
from tempsweep.core.scanner import scan
from tempsweep.types.models import CandidateRoot, DeletionOutcome, FoundFile
from tests.fixtures.filesystem import CountdownSignal, make_file


def found(path: Path, size: int = 0) -> FoundFile:
    """Build a FoundFile snapshot for ``path`` with an arbitrary recorded size."""
    return FoundFile(path=str(path), size=size, last_modified=datetime.now(), category="User Temp")


@pytest.mark.unit
class TestDeleteFile:
    """Test the per-file deletion step."""

    def test_deletes_and_reports_size(self, scan_root: Path) -> None:
        path = make_file(scan_root / "a.tmp", 300)

        result = delete_file(found(path, 300))

        assert result.outcome is DeletionOutcome.DELETED
        assert result.bytes_freed == 300
        assert not path.exists()

    def test_missing_file(self, scan_root: Path) -> None:
        result = delete_file(found(scan_root / "gone.tmp", 10))

        assert result.outcome is DeletionOutcome.MISSING
        assert result.bytes_freed == 0

    def test_uses_size_observed_at_delete_time(self, scan_root: Path) -> None:
        """A file that grew since the scan is counted at its current size."""
        path = make_file(scan_root / "grew.log", 100)
        snapshot = found(path, 100)
        _ = make_file(path, 700)

        assert delete_file(snapshot).bytes_freed == 700

    def test_directory_in_place_of_file_is_not_removed(self, scan_root: Path) -> None:
        """Directories are never deleted."""
        directory = scan_root / "was_a_file.tmp"
        directory.mkdir()

        result = delete_file(found(directory))

        assert result.outcome is DeletionOutcome.FAILED
        assert directory.is_dir()

    def test_removal_error_is_captured(self, scan_root: Path) -> None:
        path = make_file(scan_root / "locked.tmp", 10)

        with patch("tempsweep.core.remover.os.remove", side_effect=PermissionError("in use")):
            result = delete_file(found(path))

        assert result.outcome is DeletionOutcome.FAILED
        assert result.error == "in use"
        assert result.bytes_freed == 0
        assert path.exists()

    def test_vanishing_during_removal_counts_as_missing(self, scan_root: Path) -> None:
        path = make_file(scan_root / "race.tmp", 10)

        with patch("tempsweep.core.remover.os.remove", side_effect=FileNotFoundError()):
            result = delete_file(found(path))

        assert result.outcome is DeletionOutcome.MISSING


@pytest.mark.unit
class TestDeleteFiles:
    """Test batch deletion."""

    def test_reference_scenario(
        self, scenario: dict[str, Path], user_temp_root: CandidateRoot, progress_values: list[float]
    ) -> None:
        """Deleting a.tmp and b.txt frees 2050 bytes with progress 0.5 then 1.0."""
        files = scan([user_temp_root])

        freed = delete_files(files, on_progress=progress_values.append)

        assert freed == 2050
        assert progress_values == [0.5, 1.0]
        assert not scenario["a"].exists()
        assert not scenario["b"].exists()
        assert scenario["c"].exists()

    def test_empty_selection(self, progress_values: list[float]) -> None:
        """Nothing to delete frees zero bytes and reports completion once."""
        assert delete_files([], on_progress=progress_values.append) == 0
        assert progress_values == [1.0]

    def test_missing_file_does_not_abort_batch(self, scan_root: Path, progress_values: list[float]) -> None:
        first = make_file(scan_root / "1.tmp", 10)
        last = make_file(scan_root / "3.tmp", 30)
        selection = [found(first), found(scan_root / "2.tmp", 20), found(last)]

        freed = delete_files(selection, on_progress=progress_values.append)

        assert freed == 40
        assert not last.exists()
        assert progress_values == pytest.approx([1 / 3, 2 / 3, 1.0])

    def test_second_run_frees_nothing(self, scenario: dict[str, Path], user_temp_root: CandidateRoot) -> None:
        """Deleting an already-deleted set is a no-op, not an error."""
        files = scan([user_temp_root])

        assert delete_files(files) == 2050
        assert delete_files(files) == 0

    def test_selection_order_is_preserved(self, scan_root: Path) -> None:
        paths = [make_file(scan_root / f"{name}.tmp", size) for name, size in [("s", 1), ("l", 100), ("m", 10)]]

        results = delete_files_detailed([found(p) for p in paths])

        assert [r.path for r in results] == [str(p) for p in paths]

    def test_failed_file_not_counted(self, scan_root: Path) -> None:
        ok = make_file(scan_root / "ok.tmp", 5)
        locked = make_file(scan_root / "locked.tmp", 50)
        real_remove = os.remove

        def guarded_remove(path: str) -> None:
            if path == str(locked):
                raise PermissionError("in use")
            real_remove(path)

        with patch("tempsweep.core.remover.os.remove", side_effect=guarded_remove):
            freed = delete_files([found(locked), found(ok)])

        assert freed == 5
        assert locked.exists()


@pytest.mark.unit
class TestDeleteCancellation:
    """Test cooperative cancellation during deletion."""

    def test_cancel_before_first_file(self, scan_root: Path, progress_values: list[float]) -> None:
        path = make_file(scan_root / "keep.tmp", 10)
        token = CancellationToken()
        token.cancel()

        assert delete_files([found(path)], token, progress_values.append) == 0
        assert path.exists()
        assert progress_values == []

    def test_cancel_mid_batch_returns_partial_total(self, scan_root: Path) -> None:
        paths = [make_file(scan_root / f"{i}.tmp", 10) for i in range(4)]

        results = delete_files_detailed([found(p) for p in paths], CountdownSignal(2))

        assert len(results) == 2
        assert [p.exists() for p in paths] == [False, False, True, True]

    def test_cancelled_total_counts_processed_files(self, scan_root: Path) -> None:
        paths = [make_file(scan_root / f"{i}.tmp", 10) for i in range(4)]

        assert delete_files([found(p) for p in paths], CountdownSignal(3)) == 30
