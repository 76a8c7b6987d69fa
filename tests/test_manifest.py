"""Tests for module path detection."""

from __future__ import annotations

from pathlib import Path

import pytest

from covreport.manifest import ModulePathNotFoundError, resolve_module_path


def test_resolve_module_path_reads_directive(tmp_path: Path) -> None:
    (tmp_path / "go.mod").write_text(
        "// comment\nmodule github.com/acme/widgets\n\ngo 1.21\n", encoding="utf-8"
    )

    assert resolve_module_path(tmp_path) == "github.com/acme/widgets"


def test_resolve_module_path_trims_whitespace(tmp_path: Path) -> None:
    (tmp_path / "go.mod").write_text("   module   example.com/x   \n", encoding="utf-8")

    assert resolve_module_path(str(tmp_path)) == "example.com/x"


def test_resolve_module_path_returns_first_directive(tmp_path: Path) -> None:
    (tmp_path / "go.mod").write_text("module first\nmodule second\n", encoding="utf-8")

    assert resolve_module_path(tmp_path) == "first"


def test_resolve_module_path_handles_quotes_and_comments(tmp_path: Path) -> None:
    (tmp_path / "go.mod").write_text('module "example.com/quoted" // legacy\n', encoding="utf-8")

    assert resolve_module_path(tmp_path) == "example.com/quoted"


def test_resolve_module_path_without_directive(tmp_path: Path) -> None:
    (tmp_path / "go.mod").write_text("go 1.21\n", encoding="utf-8")

    with pytest.raises(ModulePathNotFoundError, match="module directive not found"):
        resolve_module_path(tmp_path)


def test_resolve_module_path_missing_manifest(tmp_path: Path) -> None:
    with pytest.raises(ModulePathNotFoundError) as excinfo:
        resolve_module_path(tmp_path)

    assert excinfo.value.manifest == tmp_path / "go.mod"
    assert isinstance(excinfo.value, FileNotFoundError)
