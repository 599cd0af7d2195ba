"""Commit and branch checks against a RuleEvaluation."""

from reporules.checks.evaluator import check_branch, check_commit
from reporules.checks.models import CheckResult, Violation

__all__ = ["CheckResult", "Violation", "check_branch", "check_commit"]
