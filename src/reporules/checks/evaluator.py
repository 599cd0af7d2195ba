"""Check commits and branch names against a RuleEvaluation.

This is where failures turn into a verdict. The rule engine only reports
which rules failed and at what level; the policy applied here is:

  - any REQUIRED failure is an error and blocks the operation, even when
    other rules of the same category are bypassable;
  - BYPASSABLE failures are warnings, the operation may proceed;
  - the basic commit warning rules never block a local commit.
"""

from __future__ import annotations

from typing import Optional

from reporules.checks.models import CheckResult, Violation
from reporules.rules.models import EnforcementLevel, MetadataRuleSet, RuleEvaluation

_BASIC_WARNING_MESSAGES = {
    EnforcementLevel.REQUIRED: (
        "branch has rules (restricted updates, required deployments, "
        "signatures or status checks) that may reject this commit"
    ),
    EnforcementLevel.BYPASSABLE: (
        "branch has rules (restricted updates, required deployments, "
        "signatures or status checks) that you can bypass"
    ),
}


def _apply_rule_set(
    result: CheckResult, field: str, rule_set: MetadataRuleSet, candidate: Optional[str]
) -> None:
    if candidate is None or not rule_set.has_rules:
        return
    report = rule_set.evaluate(candidate)
    result.errors.extend(Violation(field, desc) for desc in report.failed)
    result.warnings.extend(Violation(field, desc) for desc in report.bypassed)


def _apply_scalar(
    result: CheckResult, field: str, level: EnforcementLevel, message: str
) -> None:
    if level is EnforcementLevel.REQUIRED:
        result.errors.append(Violation(field, message))
    elif level is EnforcementLevel.BYPASSABLE:
        result.warnings.append(Violation(field, f"{message} (bypass allowed)"))
    elif level is EnforcementLevel.OFF:
        return


def check_commit(
    evaluation: RuleEvaluation,
    message: str,
    author_email: Optional[str] = None,
    committer_email: Optional[str] = None,
) -> CheckResult:
    """Check a proposed commit. Emails left as None are not checked."""
    result = CheckResult(operation="commit")

    level = evaluation.basic_commit_warning
    if level is EnforcementLevel.REQUIRED or level is EnforcementLevel.BYPASSABLE:
        result.warnings.append(Violation("branch", _BASIC_WARNING_MESSAGES[level]))
    elif level is EnforcementLevel.OFF:
        pass

    _apply_scalar(
        result,
        "branch",
        evaluation.pull_request_required,
        "changes to this branch must be made through a pull request",
    )
    _apply_rule_set(result, "commit_message", evaluation.commit_message_patterns, message)
    _apply_rule_set(
        result, "author_email", evaluation.commit_author_email_patterns, author_email
    )
    _apply_rule_set(
        result, "committer_email", evaluation.committer_email_patterns, committer_email
    )
    return result


def check_branch(evaluation: RuleEvaluation, name: str) -> CheckResult:
    """Check a branch name before creating or renaming a branch."""
    result = CheckResult(operation="branch")
    _apply_scalar(
        result,
        "branch_name",
        evaluation.creation_restricted,
        "branch creation is restricted",
    )
    _apply_rule_set(result, "branch_name", evaluation.branch_name_patterns, name)
    return result
