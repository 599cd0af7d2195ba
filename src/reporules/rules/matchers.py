"""String matchers — one class per operator, compiled at build time.

Every matcher is total: ``matches`` never raises, whatever the candidate
contains. Anything that can fail (regex compilation) fails in the
constructor so it surfaces while the rule set is being built.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ConfigurationError(Exception):
    """Raised when rule configuration cannot be turned into rules."""


class InvalidPatternError(ConfigurationError):
    """A rule pattern failed to compile."""

    def __init__(
        self,
        pattern: str,
        reason: str,
        *,
        category: Optional[str] = None,
        ruleset: Optional[str] = None,
    ) -> None:
        self.pattern = pattern
        self.reason = reason
        self.category = category
        self.ruleset = ruleset
        where = ""
        if category:
            where += f" in {category} rule"
        if ruleset:
            where += f" (ruleset {ruleset!r})"
        super().__init__(f"Invalid pattern {pattern!r}{where}: {reason}")


class MatchOperator(str, Enum):
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    CONTAINS = "contains"
    REGEX = "regex"


_OPERATOR_TEXT = {
    MatchOperator.STARTS_WITH: "start with",
    MatchOperator.ENDS_WITH: "end with",
    MatchOperator.CONTAINS: "contain",
    MatchOperator.REGEX: "match the regular expression",
}

# Onigmo escapes with no direct Python equivalent. The lookbehind skips
# escaped backslashes (``\\z`` is a literal backslash followed by z).
_ONIGMO_ESCAPES = [
    (re.compile(r"(?<!\\)((?:\\\\)*)\\z"), r"\1\\Z"),
]


def translate_pattern(pattern: str) -> str:
    """Rewrite server-side (Ruby/Onigmo) regex syntax into Python syntax."""
    for escape_re, replacement in _ONIGMO_ESCAPES:
        pattern = escape_re.sub(replacement, pattern)
    return pattern


class Matcher(ABC):
    """Predicate over a single string."""

    @abstractmethod
    def matches(self, candidate: str) -> bool: ...


@dataclass(frozen=True)
class PrefixMatcher(Matcher):
    prefix: str

    def matches(self, candidate: str) -> bool:
        return candidate.startswith(self.prefix)


@dataclass(frozen=True)
class SuffixMatcher(Matcher):
    suffix: str

    def matches(self, candidate: str) -> bool:
        return candidate.endswith(self.suffix)


@dataclass(frozen=True)
class SubstringMatcher(Matcher):
    substring: str

    def matches(self, candidate: str) -> bool:
        return self.substring in candidate


@dataclass(frozen=True)
class RegexMatcher(Matcher):
    """Search for *pattern* anywhere in the candidate.

    The pattern is compiled once in ``__post_init__``; a pattern that does
    not compile raises :class:`InvalidPatternError`.
    """

    pattern: str
    _compiled: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        try:
            compiled = re.compile(translate_pattern(self.pattern))
        except re.error as exc:
            raise InvalidPatternError(self.pattern, str(exc)) from exc
        object.__setattr__(self, "_compiled", compiled)

    def matches(self, candidate: str) -> bool:
        return self._compiled.search(candidate) is not None


@dataclass(frozen=True)
class NegatedMatcher(Matcher):
    inner: Matcher

    def matches(self, candidate: str) -> bool:
        return not self.inner.matches(candidate)


def build_matcher(operator: MatchOperator, pattern: str, negate: bool = False) -> Matcher:
    """Create the matcher for *operator*, negated when *negate* is set."""
    matcher: Matcher
    if operator is MatchOperator.STARTS_WITH:
        matcher = PrefixMatcher(pattern)
    elif operator is MatchOperator.ENDS_WITH:
        matcher = SuffixMatcher(pattern)
    elif operator is MatchOperator.CONTAINS:
        matcher = SubstringMatcher(pattern)
    elif operator is MatchOperator.REGEX:
        matcher = RegexMatcher(pattern)
    else:
        raise ConfigurationError(f"Unsupported match operator: {operator!r}")

    if negate:
        return NegatedMatcher(matcher)
    return matcher


def describe(operator: MatchOperator, pattern: str, negate: bool = False) -> str:
    """Human-readable failure condition, e.g. ``must not start with "wip/"``."""
    text = _OPERATOR_TEXT[operator]
    return f'must {"not " if negate else ""}{text} "{pattern}"'
