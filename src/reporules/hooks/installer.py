"""commit-msg hook installer — reporules install / uninstall.

The hook goes wherever git actually runs hooks from: ``core.hooksPath`` when
set, otherwise the common git dir, so linked worktrees share one hook.
"""

from __future__ import annotations

from pathlib import Path
from typing import Tuple

from reporules.git.adapter import GitError, get_hooks_dir

HOOK_NAME = "commit-msg"
HOOK_COMMAND = 'reporules check-commit --message-file "$1"'
_HOOK_MARKER = "# reporules-hook"
_HOOK_SCRIPT = f"""\
#!/bin/sh
{_HOOK_MARKER}
# To uninstall: reporules uninstall

if ! command -v reporules >/dev/null 2>&1; then
    echo "reporules: not found on PATH; commit rejected (run 'reporules uninstall' to remove this hook)" >&2
    exit 1
fi
exec {HOOK_COMMAND}
"""


def hook_path(repo_root: Path) -> Path:
    """Where the commit-msg hook lives for *repo_root*. Raises GitError."""
    return get_hooks_dir(repo_root) / HOOK_NAME


def is_reporules_hook(path: Path) -> bool:
    if not path.is_file():
        return False
    return _HOOK_MARKER in path.read_text(encoding="utf-8", errors="replace")


def install_hook(repo_root: Path, *, force: bool = False) -> Tuple[bool, str]:
    """Install reporules as a commit-msg hook.

    Returns (success, message).
    """
    try:
        path = hook_path(repo_root)
    except GitError as exc:
        return False, f"Cannot locate hooks directory: {exc}"

    if path.is_dir():
        return False, f"{path} is a directory, not a hook script."
    if is_reporules_hook(path):
        return True, f"reporules hook is already installed at {path}"
    if path.exists() and not force:
        return (
            False,
            f"A {HOOK_NAME} hook already exists at {path}. "
            f"Use --force to overwrite, or add '{HOOK_COMMAND}' to it.",
        )

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(_HOOK_SCRIPT, encoding="utf-8")
    try:
        path.chmod(0o755)
    except OSError:
        pass  # Windows doesn't need chmod

    return True, f"Installed reporules {HOOK_NAME} hook at {path}"


def uninstall_hook(repo_root: Path) -> Tuple[bool, str]:
    """Remove the reporules commit-msg hook.

    Returns (success, message).
    """
    try:
        path = hook_path(repo_root)
    except GitError as exc:
        return False, f"Cannot locate hooks directory: {exc}"

    if not path.exists():
        return True, f"No {HOOK_NAME} hook found at {path}, nothing to remove."
    if not is_reporules_hook(path):
        return False, f"{HOOK_NAME} hook at {path} was not installed by reporules."

    path.unlink()
    return True, f"Removed reporules {HOOK_NAME} hook from {path}"
