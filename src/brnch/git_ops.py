# src/brnch/git_ops.py

"""
Git inspection for scope detection.

GitInspector answers two read-only questions about the repository containing `cwd`:

- project_name(): the base name of the work tree root (`git rev-parse --show-toplevel`)
- branch_name(): the short name of the checked-out branch (`git symbolic-ref --quiet
  --short HEAD`); works on an unborn branch (fresh `git init`) and fails on a detached HEAD

Every failure (git missing, not a work tree, detached HEAD) surfaces as ScopeUnavailable.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from .errors import ScopeUnavailable

logger = logging.getLogger(__name__)


class GitInspector:
    def __init__(self, *, cwd: Path | None = None) -> None:
        self.cwd = (cwd or Path.cwd()).resolve()

    def project_name(self) -> str:
        out = self._git(["rev-parse", "--show-toplevel"]).strip()
        if not out:
            raise ScopeUnavailable(f"Not inside a git work tree: {self.cwd}")
        return Path(out).name

    def branch_name(self) -> str:
        p = self._run(["symbolic-ref", "--quiet", "--short", "HEAD"])
        if p.returncode == 0 and p.stdout.strip():
            return p.stdout.strip()

        # symbolic-ref exits 1 without output on a detached HEAD; anything else means no repo.
        if p.returncode == 1 and not p.stderr.strip():
            raise ScopeUnavailable("Detached HEAD; make sure you are on a branch.")
        raise ScopeUnavailable(f"Failed to read HEAD in {self.cwd}: {p.stderr.strip() or 'git error'}")

    def _git(self, args: list[str]) -> str:
        p = self._run(args)
        if p.returncode != 0:
            raise ScopeUnavailable(
                f"Failed to open repo at {self.cwd}: {p.stderr.strip() or 'git error'}"
            )
        return p.stdout

    def _run(self, args: list[str]) -> subprocess.CompletedProcess[str]:
        try:
            p = subprocess.run(
                ["git", *args],
                cwd=self.cwd,
                text=True,
                check=False,
                capture_output=True,
            )
        except OSError as exc:
            raise ScopeUnavailable(f"Cannot run git: {exc}") from exc
        logger.debug("git %s -> rc=%s", " ".join(args), p.returncode)
        return p
