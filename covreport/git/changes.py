"""Changed-file lookup used to narrow a report to one commit or range."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, FrozenSet, Iterable, List

from ..logging import get_logger


class GitError(RuntimeError):
    """Raised when git cannot report the files changed by a ref."""


class ChangedFilesResolver:
    """Resolves the set of added/copied/modified/renamed paths for a ref.

    A bare ref (``HEAD~1``) is expanded to ``<ref>^..<ref>``; anything that
    already contains ``..`` is passed through as a range.
    """

    _DIFF_FILTER = "--diff-filter=ACMR"

    def __init__(self, runner: Callable[..., str] | None = None) -> None:
        self._runner = runner or self._default_runner
        self.logger = get_logger("git")

    def resolve(self, repo_path: str | Path, ref: str) -> FrozenSet[str]:
        repo = Path(repo_path)
        is_range = ".." in ref
        range_spec = ref if is_range else f"{ref}^..{ref}"
        args = ["git", "-C", str(repo), "diff", "--name-only", self._DIFF_FILTER, range_spec]
        try:
            output = self._run(args, cwd=repo)
        except (OSError, subprocess.CalledProcessError) as exc:
            if is_range:
                raise GitError(f"git diff failed for {ref!r}: {exc}") from exc
            # Root commits have no parent to diff against.
            self.logger.debug("git diff failed for %s, falling back to git show", ref)
            fallback = [
                "git",
                "-C",
                str(repo),
                "show",
                "--pretty=",
                "--name-only",
                self._DIFF_FILTER,
                ref,
            ]
            try:
                output = self._run(fallback, cwd=repo)
            except (OSError, subprocess.CalledProcessError) as fallback_exc:
                raise GitError(f"git show failed for {ref!r}: {fallback_exc}") from fallback_exc

        files = _split_paths(output)
        self.logger.debug("Ref %s touches %d files", ref, len(files))
        return frozenset(files)

    def _run(self, args: Iterable[str], *, cwd: Path) -> str:
        return self._runner(args, cwd=cwd)

    @staticmethod
    def _default_runner(args: Iterable[str], *, cwd: Path) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=True,
        )
        return completed.stdout


def _split_paths(output: str) -> List[str]:
    return [line.strip() for line in output.splitlines() if line.strip()]


__all__ = ["ChangedFilesResolver", "GitError"]
