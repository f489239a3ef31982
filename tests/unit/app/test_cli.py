"""Tests for the command-line entry point."""

from __future__ import annotations

import io
import logging
from datetime import datetime
from pathlib import Path

import pytest

from tempsweep.__main__ import (
    DEFAULT_EXTRA_CATEGORY,
    EXIT_CONFIG_ERROR,
    EXIT_SUCCESS,
    main,
    parse_arguments,
    parse_root_argument,
    progress_printer,
    render_files,
)
from tempsweep.types.models import CandidateRoot, FoundFile, MatchReason


def _found(name: str, size: int) -> FoundFile:
    return FoundFile(
        path=f"/data/{name}",
        size=size,
        last_modified=datetime(2024, 1, 1),
        category="User Temp",
        reason=MatchReason.EXTENSION,
    )


@pytest.mark.unit
class TestArgumentParsing:
    """Test argument helpers."""

    def test_defaults(self) -> None:
        args = parse_arguments([])

        assert args.config is None
        assert args.root == []
        assert args.category == []
        assert args.delete is False

    def test_repeatable_options(self) -> None:
        args = parse_arguments(["--root", "/a", "--root", "/b=B", "--category", "B", "--limit", "5", "--delete"])

        assert args.root == ["/a", "/b=B"]
        assert args.category == ["B"]
        assert args.limit == 5
        assert args.delete is True

    def test_root_with_category(self) -> None:
        assert parse_root_argument("/srv/build=Build") == CandidateRoot("/srv/build", "Build")

    def test_root_without_category(self) -> None:
        assert parse_root_argument("/srv/build") == CandidateRoot("/srv/build", DEFAULT_EXTRA_CATEGORY)

    def test_root_with_blank_category(self) -> None:
        assert parse_root_argument("/srv/build= ") == CandidateRoot("/srv/build", DEFAULT_EXTRA_CATEGORY)


@pytest.mark.unit
class TestRendering:
    """Test output helpers."""

    def test_render_files_with_limit(self) -> None:
        lines = list(render_files([_found("a.tmp", 2048), _found("b.log", 1024), _found("c.bak", 10)], limit=2))

        assert "2.0 KB" in lines[0]
        assert lines[0].endswith("/data/a.tmp")
        assert lines[2] == "... 1 more"
        assert lines[3] == "3 files, 3.0 KB total"

    def test_render_no_files(self) -> None:
        assert list(render_files([])) == ["0 files, 0 B total"]

    def test_progress_printer(self) -> None:
        stream = io.StringIO()
        report = progress_printer("Scanning", stream)

        report(0.5)
        report(1.0)

        assert stream.getvalue() == "\rScanning  50.0%\rScanning 100.0%\n"


@pytest.mark.integration
class TestMain:
    """Test main() end to end against a temporary root."""

    def test_lists_found_files(
        self,
        scenario: dict[str, Path],
        scan_root: Path,
        restore_root_logger: logging.Logger,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--root", f"{scan_root}=Custom", "--category", "Custom"])

        out = capsys.readouterr().out
        assert exc_info.value.code == EXIT_SUCCESS
        assert str(scenario["a"]) in out
        assert str(scenario["b"]) in out
        assert str(scenario["c"]) not in out
        assert "2 files" in out
        assert scenario["a"].exists()

    def test_delete_removes_found_files(
        self,
        scenario: dict[str, Path],
        scan_root: Path,
        restore_root_logger: logging.Logger,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--root", f"{scan_root}=Custom", "--category", "Custom", "--delete"])

        assert exc_info.value.code == EXIT_SUCCESS
        assert "Freed 2.0 KB." in capsys.readouterr().out
        assert not scenario["a"].exists()
        assert not scenario["b"].exists()
        assert scenario["c"].exists()

    def test_config_error_exit_code(
        self,
        tmp_path: Path,
        restore_root_logger: logging.Logger,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(tmp_path / "missing.yaml")])

        assert exc_info.value.code == EXIT_CONFIG_ERROR
        assert "Configuration error" in capsys.readouterr().err

    def test_config_supplies_roots(
        self,
        scenario: dict[str, Path],
        scan_root: Path,
        tmp_path: Path,
        restore_root_logger: logging.Logger,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        config_file = tmp_path / "tempsweep.yaml"
        _ = config_file.write_text(
            f"scan:\n  categories: [Project]\n  extra_roots:\n    - path: '{scan_root}'\n      category: Project\n"
        )

        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(config_file)])

        assert exc_info.value.code == EXIT_SUCCESS
        assert "2 files" in capsys.readouterr().out
