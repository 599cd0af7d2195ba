"""Git subprocess wrapper — repo root, commit identities, current branch."""

from __future__ import annotations

import re
import subprocess
from pathlib import Path
from typing import Optional

# "Name <email> 1700000000 +0100"
_IDENT_EMAIL_RE = re.compile(r"<([^>]*)>")


class GitError(Exception):
    """Raised when git is unavailable or returns an unexpected error."""


def _run_git(args: list[str], cwd: Path, timeout: int = 30) -> str:
    """Run a git command and return stdout. Raises GitError on failure."""
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError:
        raise GitError("git is not installed or not on PATH")
    except subprocess.TimeoutExpired:
        raise GitError(f"git command timed out after {timeout}s: git {' '.join(args)}")

    if result.returncode != 0:
        stderr = result.stderr.strip() or f"exit status {result.returncode}"
        raise GitError(f"git {' '.join(args)} failed: {stderr}")
    return result.stdout


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Return the root of the current git repository."""
    cwd = cwd or Path.cwd()
    out = _run_git(["rev-parse", "--show-toplevel"], cwd=cwd)
    return Path(out.strip())


def parse_ident_email(ident: str) -> Optional[str]:
    """Extract the email from a ``git var`` identity line."""
    m = _IDENT_EMAIL_RE.search(ident)
    return m.group(1) if m else None


def get_ident_email(repo_root: Path, role: str) -> Optional[str]:
    """Return the email git would record for *role* ('author' or 'committer')."""
    if role not in ("author", "committer"):
        raise ValueError(f"role must be 'author' or 'committer', got {role!r}")
    var = "GIT_AUTHOR_IDENT" if role == "author" else "GIT_COMMITTER_IDENT"
    return parse_ident_email(_run_git(["var", var], cwd=repo_root))


def get_current_branch(repo_root: Path) -> Optional[str]:
    """Return the checked-out branch name, or None on a detached HEAD."""
    try:
        out = _run_git(["symbolic-ref", "--quiet", "--short", "HEAD"], cwd=repo_root)
    except GitError:
        return None
    return out.strip() or None


def get_hooks_dir(repo_root: Path) -> Path:
    """Return the directory git runs hooks from.

    Follows ``core.hooksPath`` and resolves the common git dir for linked
    worktrees, where ``.git`` is a file.
    """
    out = _run_git(["rev-parse", "--git-path", "hooks"], cwd=repo_root).strip()
    return (repo_root / out).resolve()
