"""Module path detection from the project manifest (go.mod)."""

from __future__ import annotations

from pathlib import Path

MANIFEST_NAME = "go.mod"
_DIRECTIVE = "module "


class ModulePathNotFoundError(FileNotFoundError):
    """Raised when the manifest is missing or declares no module path."""

    def __init__(self, manifest: Path, reason: str) -> None:
        super().__init__(f"{manifest}: {reason}")
        self.manifest = manifest


def resolve_module_path(src_root: str | Path) -> str:
    """Return the module identifier declared in ``<src_root>/go.mod``."""
    manifest = Path(src_root) / MANIFEST_NAME
    try:
        with manifest.open("r", encoding="utf-8") as handle:
            for raw in handle:
                line = raw.strip()
                if not line.startswith(_DIRECTIVE):
                    continue
                module_path = _clean_identifier(line[len(_DIRECTIVE) :])
                if module_path:
                    return module_path
    except OSError as exc:
        raise ModulePathNotFoundError(manifest, f"cannot read manifest ({exc.strerror or exc})") from exc
    raise ModulePathNotFoundError(manifest, "module directive not found")


def _clean_identifier(value: str) -> str:
    if "//" in value:
        value = value.split("//", 1)[0]
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "`"}:
        value = value[1:-1].strip()
    return value


__all__ = ["MANIFEST_NAME", "ModulePathNotFoundError", "resolve_module_path"]
