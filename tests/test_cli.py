"""CLI behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from covreport.cli import _build_parser, _resolve_options, main
from covreport.postproc.badges import BadgeThresholds
from tests._fixtures.project_builder import ProjectBuilder


def test_cli_defaults() -> None:
    args = _build_parser().parse_args([])

    assert args.profile is None
    assert args.exclude == []
    assert args.quiet is False
    assert args.verbose is False


def test_cli_collects_repeated_excludes() -> None:
    args = _build_parser().parse_args(["--exclude", "a", "--exclude", "b", "-q"])

    assert args.exclude == ["a", "b"]
    assert args.quiet is True


def test_cli_flags_override_config(tmp_path: Path) -> None:
    (tmp_path / ".covreport.yml").write_text(
        "profile: from-config.out\nexclude: [gen/]\n", encoding="utf-8"
    )
    args = _build_parser().parse_args(
        [
            "--src",
            str(tmp_path),
            "--profile",
            "cli.out",
            "--exclude",
            "mock_",
            "--badge-threshold",
            "20,60",
        ]
    )

    options = _resolve_options(args)

    assert options.profile == "cli.out"
    assert options.src == str(tmp_path)
    assert options.exclude == ["gen/", "mock_"]
    assert options.thresholds == "20,60"
    assert options.badge_thresholds() == BadgeThresholds(red=20.0, yellow=60.0)


def test_main_writes_report_and_summary(
    project: ProjectBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    project.write({"main.go": "package main\nfunc main() {\n\tprintln()\n}\n"})
    project.write_profile("coverage.out", "main.go:2.13,4.2 1 1")
    output = project.path() / "report.json"

    main(
        [
            "--src",
            str(project.path()),
            "--profile",
            str(project.path() / "coverage.out"),
            "-o",
            str(output),
        ]
    )

    assert json.loads(output.read_text(encoding="utf-8"))["summary"]["coveredLines"] == 3
    err = capsys.readouterr().err
    assert f"Coverage report written to {output}" in err
    assert "Coverage: 100.0% (3/3 lines)" in err


def test_main_reports_diff_summary(
    project: ProjectBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    project.write({"main.go": "package main\nfunc main() {\n\tprintln()\n}\n"})
    base = project.write_profile("base.out", "main.go:2.13,4.2 1 0")
    current = project.write_profile("coverage.out", "main.go:2.13,4.2 1 1")

    main(
        [
            "--src",
            str(project.path()),
            "--profile",
            str(current),
            "--base",
            str(base),
            "-o",
            str(project.path() / "report.json"),
        ]
    )

    err = capsys.readouterr().err
    assert "Coverage: 100.0% (Δ+100.0% from base)" in err
    assert "Changes: +3 newly covered, -0 regressions" in err


def test_main_exits_when_everything_is_excluded(
    project: ProjectBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    project.write({"main.go": "package main\n"})
    project.write_profile("coverage.out", "main.go:1.1,1.12 1 1")

    with pytest.raises(SystemExit) as excinfo:
        main(
            [
                "--src",
                str(project.path()),
                "--profile",
                str(project.path() / "coverage.out"),
                "--exclude",
                "main",
            ]
        )

    assert excinfo.value.code == 1
    assert "all files excluded by patterns" in capsys.readouterr().err


def test_main_exits_on_invalid_pattern(
    project: ProjectBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--src", str(project.path()), "--exclude", "[bad"])

    assert excinfo.value.code == 1
    assert "invalid regex pattern '[bad'" in capsys.readouterr().err


def test_main_exits_on_missing_manifest(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    profile = tmp_path / "coverage.out"
    profile.write_text("mode: set\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["--src", str(tmp_path), "--profile", str(profile)])

    assert excinfo.value.code == 1
    assert "Error detecting module path" in capsys.readouterr().err


def test_main_exits_on_bad_thresholds(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(
            [
                "--src",
                str(tmp_path),
                "--badge",
                str(tmp_path / "badge.svg"),
                "--badge-threshold",
                "80,20",
            ]
        )

    assert excinfo.value.code == 1
    assert "Error parsing badge thresholds" in capsys.readouterr().err


def test_main_ignores_configured_thresholds_without_badge(
    project: ProjectBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    project.write({"main.go": "package main\n"})
    project.write_profile("coverage.out", "main.go:1.1,1.12 1 1")
    (project.path() / ".covreport.yml").write_text(
        "profile: coverage.out\noutput: report.json\nbadge:\n  thresholds: {red: 90, yellow: 10}\n",
        encoding="utf-8",
    )

    main(["--src", str(project.path())])

    assert (project.path() / "report.json").exists()
    assert "Coverage: 100.0% (1/1 lines)" in capsys.readouterr().err


def test_main_names_the_bad_base_profile(
    project: ProjectBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    project.write({"main.go": "package main\n"})
    current = project.write_profile("coverage.out", "main.go:1.1,1.12 1 1")
    base = project.path() / "base.out"
    base.write_text("mode: set\nbroken line\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["--src", str(project.path()), "--profile", str(current), "--base", str(base)])

    assert excinfo.value.code == 1
    assert "Error parsing base coverage" in capsys.readouterr().err


def test_main_writes_debug_log_file_even_when_quiet(
    project: ProjectBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    project.write({"main.go": "package main\n"})
    project.write_profile("coverage.out", "main.go:1.1,1.12 1 1")
    log_file = project.path() / "logs" / "covreport.log"

    main(
        [
            "--src",
            str(project.path()),
            "--profile",
            str(project.path() / "coverage.out"),
            "-o",
            str(project.path() / "report.json"),
            "-q",
            "--log-file",
            str(log_file),
        ]
    )

    text = log_file.read_text(encoding="utf-8")
    assert "INFO covreport.orchestrator: Parsing coverage profile" in text
    assert "DEBUG covreport.parser: Module path example.com/demo" in text
    assert capsys.readouterr().err == ""
