from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.project_builder import ProjectBuilder


@pytest.fixture
def project(tmp_path: Path) -> ProjectBuilder:
    """Provide a Go project skeleton rooted at the pytest tmp_path."""
    builder = ProjectBuilder(tmp_path)
    builder.write_manifest()
    return builder
