"""Rule engine — matchers, rule sets, builder."""

from reporules.rules.builder import RuleSetBuilder, build_rule_evaluation
from reporules.rules.matchers import (
    ConfigurationError,
    InvalidPatternError,
    Matcher,
    MatchOperator,
    build_matcher,
    describe,
)
from reporules.rules.models import (
    EnforcementLevel,
    MetadataRule,
    MetadataRuleSet,
    MetadataRuleSetBuilder,
    RawRuleConfig,
    RuleCategory,
    RuleEvaluation,
    RuleFailureReport,
)

__all__ = [
    "ConfigurationError",
    "EnforcementLevel",
    "InvalidPatternError",
    "MatchOperator",
    "Matcher",
    "MetadataRule",
    "MetadataRuleSet",
    "MetadataRuleSetBuilder",
    "RawRuleConfig",
    "RuleCategory",
    "RuleEvaluation",
    "RuleFailureReport",
    "RuleSetBuilder",
    "build_matcher",
    "build_rule_evaluation",
    "describe",
]
