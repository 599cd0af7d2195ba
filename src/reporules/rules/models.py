"""Rule data model — enforcement levels, metadata rule sets, evaluation snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from reporules.rules.matchers import MatchOperator, Matcher


class EnforcementLevel(str, Enum):
    """How a rule applies to the current actor."""

    OFF = "off"
    REQUIRED = "required"  # violation blocks the action
    BYPASSABLE = "bypassable"  # violation is a warning, actor may proceed


@dataclass(frozen=True)
class MetadataRule:
    """A matcher bound to its enforcement level and failure description.

    ``enforcement`` is never ``OFF``: rules that do not apply are left out
    of the rule set instead of being stored.
    """

    matcher: Matcher
    enforcement: EnforcementLevel
    description: str  # e.g. 'must not start with "wip/"'

    def __post_init__(self) -> None:
        if self.enforcement is EnforcementLevel.OFF:
            raise ValueError(f"MetadataRule cannot be OFF: {self.description}")


@dataclass(frozen=True)
class RuleFailureReport:
    """Descriptions of the rules a candidate string failed, by enforcement."""

    failed: Tuple[str, ...] = ()
    bypassed: Tuple[str, ...] = ()

    @property
    def passed(self) -> bool:
        return not self.failed and not self.bypassed


@dataclass(frozen=True)
class MetadataRuleSet:
    """Frozen, ordered rules for one metadata category.

    All configured rules apply at once; ``evaluate`` checks every one of
    them and reports each failure.
    """

    rules: Tuple[MetadataRule, ...] = ()

    @property
    def has_rules(self) -> bool:
        return len(self.rules) > 0

    @property
    def descriptions(self) -> List[Tuple[str, EnforcementLevel]]:
        return [(r.description, r.enforcement) for r in self.rules]

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self) -> Iterator[MetadataRule]:
        return iter(self.rules)

    def evaluate(self, candidate: str) -> RuleFailureReport:
        """Return the rules *candidate* fails, split into failed and bypassed.

        Order within each list follows rule order. A report with both lists
        empty means every rule passed.
        """
        failed: List[str] = []
        bypassed: List[str] = []

        for rule in self.rules:
            if rule.matcher.matches(candidate):
                continue
            if rule.enforcement is EnforcementLevel.REQUIRED:
                failed.append(rule.description)
            elif rule.enforcement is EnforcementLevel.BYPASSABLE:
                bypassed.append(rule.description)
            elif rule.enforcement is EnforcementLevel.OFF:
                continue  # unreachable, MetadataRule rejects OFF

        return RuleFailureReport(failed=tuple(failed), bypassed=tuple(bypassed))


class MetadataRuleSetBuilder:
    """Accumulates rules for one category, then freezes them."""

    def __init__(self) -> None:
        self._rules: List[MetadataRule] = []

    def push(self, rule: Optional[MetadataRule]) -> None:
        """Append *rule*; ``None`` (no rule configured) is ignored."""
        if rule is None:
            return
        self._rules.append(rule)

    @property
    def has_rules(self) -> bool:
        return len(self._rules) > 0

    def freeze(self) -> MetadataRuleSet:
        return MetadataRuleSet(rules=tuple(self._rules))


@dataclass(frozen=True)
class RuleEvaluation:
    """Parsed repository rules as they apply to the current actor.

    Built once per configuration load and never modified; rebuild it when
    the configuration or the actor's bypass eligibility changes.
    """

    # Rules that only warn before committing (restricted updates, required
    # deployments/signatures/status checks), lumped into one flag.
    basic_commit_warning: EnforcementLevel = EnforcementLevel.OFF
    # The branch name is restricted and the branch cannot be created.
    creation_restricted: EnforcementLevel = EnforcementLevel.OFF
    pull_request_required: EnforcementLevel = EnforcementLevel.OFF
    commit_message_patterns: MetadataRuleSet = field(default_factory=MetadataRuleSet)
    commit_author_email_patterns: MetadataRuleSet = field(default_factory=MetadataRuleSet)
    committer_email_patterns: MetadataRuleSet = field(default_factory=MetadataRuleSet)
    branch_name_patterns: MetadataRuleSet = field(default_factory=MetadataRuleSet)

    @property
    def has_rules(self) -> bool:
        scalars = (
            self.basic_commit_warning,
            self.creation_restricted,
            self.pull_request_required,
        )
        rule_sets = (
            self.commit_message_patterns,
            self.commit_author_email_patterns,
            self.committer_email_patterns,
            self.branch_name_patterns,
        )
        return any(s is not EnforcementLevel.OFF for s in scalars) or any(
            rs.has_rules for rs in rule_sets
        )


class RuleCategory(str, Enum):
    """Server-side rule types, as named by the rules configuration."""

    CREATION = "creation"
    UPDATE = "update"
    DELETION = "deletion"
    REQUIRED_LINEAR_HISTORY = "required_linear_history"
    REQUIRED_DEPLOYMENTS = "required_deployments"
    REQUIRED_SIGNATURES = "required_signatures"
    PULL_REQUEST = "pull_request"
    REQUIRED_STATUS_CHECKS = "required_status_checks"
    NON_FAST_FORWARD = "non_fast_forward"
    COMMIT_MESSAGE_PATTERN = "commit_message_pattern"
    COMMIT_AUTHOR_EMAIL_PATTERN = "commit_author_email_pattern"
    COMMITTER_EMAIL_PATTERN = "committer_email_pattern"
    BRANCH_NAME_PATTERN = "branch_name_pattern"
    TAG_NAME_PATTERN = "tag_name_pattern"


@dataclass(frozen=True)
class RawRuleConfig:
    """One configured rule as supplied by the configuration source.

    ``operator`` and ``pattern`` are only set for the metadata pattern
    categories. ``bypassable`` marks rules whose ruleset lets the current
    actor bypass it.
    """

    category: RuleCategory
    operator: Optional[MatchOperator] = None
    pattern: Optional[str] = None
    negate: bool = False
    bypassable: bool = False
    ruleset: Optional[str] = None  # label used in error messages
