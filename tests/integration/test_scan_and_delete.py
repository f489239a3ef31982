"""Integration tests for the locate → scan → delete flow."""

from __future__ import annotations

from pathlib import Path

import pytest

from tempsweep.core.cancellation import CancellationToken
from tempsweep.core.locator import resolve_candidates
from tempsweep.core.remover import delete_files
from tempsweep.core.runner import delete_async, scan_async
from tempsweep.core.scanner import FileScanner
from tempsweep.types.models import CandidateRoot, OperationStatus
from tests.fixtures.filesystem import make_file


def _only(*roots: tuple[Path, str]) -> list[CandidateRoot]:
    """Resolve candidates with built-in resolvers disabled."""
    return resolve_candidates([CandidateRoot(str(p), c) for p, c in roots], resolvers=())


@pytest.mark.integration
class TestFullCycle:
    """Locate, scan and delete across several roots."""

    def test_multiple_roots(self, tmp_path: Path) -> None:
        temp = tmp_path / "Temp"
        downloads = tmp_path / "Downloads"
        _ = make_file(temp / "installer" / "setup.exe", 3000)
        _ = make_file(downloads / "old.zip", 500, age_days=60)
        _ = make_file(downloads / "new.zip", 400)
        _ = make_file(downloads / "partial.crdownload", 200)

        candidates = _only((temp, "User Temp"), (downloads, "Downloads"), (temp, "Duplicate"))
        results = FileScanner().scan(candidates)

        assert [(Path(f.path).name, f.category) for f in results] == [
            ("setup.exe", "User Temp"),
            ("old.zip", "Downloads"),
            ("partial.crdownload", "Downloads"),
        ]

        assert delete_files(results) == 3700
        assert (downloads / "new.zip").exists()
        assert not (temp / "installer" / "setup.exe").exists()
        assert (temp / "installer").is_dir()

    def test_file_removed_between_scan_and_delete(self, scenario: dict[str, Path], user_temp_root: CandidateRoot) -> None:
        """A file deleted by someone else is skipped and the rest are counted."""
        results = FileScanner().scan([user_temp_root])
        scenario["a"].unlink()

        assert delete_files(results) == 50

    def test_file_shrunk_between_scan_and_delete(self, scenario: dict[str, Path], user_temp_root: CandidateRoot) -> None:
        """Freed bytes reflect the size at delete time."""
        results = FileScanner().scan([user_temp_root])
        _ = scenario["a"].write_bytes(b"x" * 100)

        assert delete_files(results) == 150

    @pytest.mark.asyncio
    async def test_background_cycle(self, scenario: dict[str, Path], user_temp_root: CandidateRoot) -> None:
        token = CancellationToken()
        scan_progress: list[float] = []
        delete_progress: list[float] = []

        scan_report = await scan_async([user_temp_root], token, scan_progress.append)
        delete_report = await delete_async(scan_report.files, token, delete_progress.append)

        assert scan_report.status is OperationStatus.COMPLETED
        assert delete_report.status is OperationStatus.COMPLETED
        assert delete_report.bytes_freed == 2050
        assert scan_progress[-1] == 1.0
        assert delete_progress == [0.5, 1.0]
