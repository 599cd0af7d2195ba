"""Rule set builder — turns raw rule records into a RuleEvaluation."""

from __future__ import annotations

from typing import Dict, Iterable, List

from reporules.rules.matchers import (
    ConfigurationError,
    InvalidPatternError,
    build_matcher,
    describe,
)
from reporules.rules.models import (
    EnforcementLevel,
    MetadataRule,
    MetadataRuleSetBuilder,
    RawRuleConfig,
    RuleCategory,
    RuleEvaluation,
)

# Categories folded into one scalar flag each.
BASIC_WARNING_CATEGORIES = frozenset({
    RuleCategory.UPDATE,
    RuleCategory.REQUIRED_DEPLOYMENTS,
    RuleCategory.REQUIRED_SIGNATURES,
    RuleCategory.REQUIRED_STATUS_CHECKS,
})

METADATA_CATEGORIES = (
    RuleCategory.COMMIT_MESSAGE_PATTERN,
    RuleCategory.COMMIT_AUTHOR_EMAIL_PATTERN,
    RuleCategory.COMMITTER_EMAIL_PATTERN,
    RuleCategory.BRANCH_NAME_PATTERN,
)

_LEVEL_RANK: Dict[EnforcementLevel, int] = {
    EnforcementLevel.OFF: 0,
    EnforcementLevel.BYPASSABLE: 1,
    EnforcementLevel.REQUIRED: 2,
}


def strongest(a: EnforcementLevel, b: EnforcementLevel) -> EnforcementLevel:
    """REQUIRED beats BYPASSABLE beats OFF."""
    return a if _LEVEL_RANK[a] >= _LEVEL_RANK[b] else b


class RuleSetBuilder:
    """Builds the rule evaluation for one actor.

    ``actor_is_bypass_eligible`` comes from the caller (it depends on the
    actor's repository permission). It is only consulted here: the built
    rules carry their resolved enforcement level.
    """

    def __init__(self, actor_is_bypass_eligible: bool = False) -> None:
        self.actor_is_bypass_eligible = actor_is_bypass_eligible

    def resolve(self, raw: RawRuleConfig) -> EnforcementLevel:
        """Enforcement level of a configured rule for this actor."""
        if raw.bypassable and self.actor_is_bypass_eligible:
            return EnforcementLevel.BYPASSABLE
        return EnforcementLevel.REQUIRED

    def build(self, raw_rules: Iterable[RawRuleConfig]) -> RuleEvaluation:
        """Build a complete RuleEvaluation, or raise ConfigurationError.

        A single bad rule fails the whole build; a partial rule set is
        never returned.
        """
        by_category: Dict[RuleCategory, List[RawRuleConfig]] = {}
        for raw in raw_rules:
            by_category.setdefault(raw.category, []).append(raw)

        basic_warning = EnforcementLevel.OFF
        for category in BASIC_WARNING_CATEGORIES:
            for raw in by_category.get(category, []):
                basic_warning = strongest(basic_warning, self.resolve(raw))

        metadata = {category: MetadataRuleSetBuilder() for category in METADATA_CATEGORIES}
        for category, rule_set in metadata.items():
            for raw in by_category.get(category, []):
                rule_set.push(self._metadata_rule(raw))

        return RuleEvaluation(
            basic_commit_warning=basic_warning,
            creation_restricted=self._scalar(by_category.get(RuleCategory.CREATION, [])),
            pull_request_required=self._scalar(
                by_category.get(RuleCategory.PULL_REQUEST, [])
            ),
            commit_message_patterns=metadata[RuleCategory.COMMIT_MESSAGE_PATTERN].freeze(),
            commit_author_email_patterns=metadata[
                RuleCategory.COMMIT_AUTHOR_EMAIL_PATTERN
            ].freeze(),
            committer_email_patterns=metadata[RuleCategory.COMMITTER_EMAIL_PATTERN].freeze(),
            branch_name_patterns=metadata[RuleCategory.BRANCH_NAME_PATTERN].freeze(),
        )

    def _scalar(self, raws: List[RawRuleConfig]) -> EnforcementLevel:
        level = EnforcementLevel.OFF
        for raw in raws:
            level = strongest(level, self.resolve(raw))
        return level

    def _metadata_rule(self, raw: RawRuleConfig) -> MetadataRule:
        if raw.operator is None or raw.pattern is None:
            raise ConfigurationError(
                f"{raw.category.value} rule"
                + (f" in ruleset {raw.ruleset!r}" if raw.ruleset else "")
                + " requires both 'operator' and 'pattern'"
            )
        try:
            matcher = build_matcher(raw.operator, raw.pattern, raw.negate)
        except InvalidPatternError as exc:
            raise InvalidPatternError(
                exc.pattern,
                exc.reason,
                category=raw.category.value,
                ruleset=raw.ruleset,
            ) from exc

        return MetadataRule(
            matcher=matcher,
            enforcement=self.resolve(raw),
            description=describe(raw.operator, raw.pattern, raw.negate),
        )


def build_rule_evaluation(
    raw_rules: Iterable[RawRuleConfig],
    actor_is_bypass_eligible: bool = False,
) -> RuleEvaluation:
    """Create a RuleEvaluation from raw rule records for one actor."""
    return RuleSetBuilder(actor_is_bypass_eligible).build(raw_rules)
