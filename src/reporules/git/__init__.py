"""Git interface layer — repository root, identities, branch."""

from reporules.git.adapter import (
    GitError,
    get_current_branch,
    get_hooks_dir,
    get_ident_email,
    get_repo_root,
    parse_ident_email,
)

__all__ = [
    "GitError",
    "get_current_branch",
    "get_hooks_dir",
    "get_ident_email",
    "get_repo_root",
    "parse_ident_email",
]
