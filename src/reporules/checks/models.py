"""Check result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class Violation:
    """A single rule violation reported to the user."""

    field: str  # 'commit_message', 'author_email', 'branch_name', ...
    message: str


@dataclass
class CheckResult:
    """Outcome of checking one commit or branch operation."""

    operation: str  # 'commit' | 'branch'
    errors: List[Violation] = field(default_factory=list)
    warnings: List[Violation] = field(default_factory=list)

    @property
    def blocked(self) -> bool:
        """True if the operation must not proceed."""
        return len(self.errors) > 0

    @property
    def passed(self) -> bool:
        return not self.errors and not self.warnings
