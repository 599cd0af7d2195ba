"""Shared test fixtures — raw rule records, configs, temp git repos."""

from __future__ import annotations

import subprocess
import textwrap
from pathlib import Path
from typing import List

import pytest

from reporules.rules.matchers import MatchOperator
from reporules.rules.models import RawRuleConfig, RuleCategory


@pytest.fixture
def wip_branch_rule() -> RawRuleConfig:
    """Branch names must not start with wip/, not bypassable."""
    return RawRuleConfig(
        category=RuleCategory.BRANCH_NAME_PATTERN,
        operator=MatchOperator.STARTS_WITH,
        pattern="wip/",
        negate=True,
        ruleset="branch-naming",
    )


@pytest.fixture
def jira_message_rule() -> RawRuleConfig:
    """Commit messages must contain JIRA-, bypassable."""
    return RawRuleConfig(
        category=RuleCategory.COMMIT_MESSAGE_PATTERN,
        operator=MatchOperator.CONTAINS,
        pattern="JIRA-",
        bypassable=True,
        ruleset="ticket-refs",
    )


@pytest.fixture
def sample_raw_rules(wip_branch_rule, jira_message_rule) -> List[RawRuleConfig]:
    return [
        wip_branch_rule,
        jira_message_rule,
        RawRuleConfig(
            category=RuleCategory.COMMIT_AUTHOR_EMAIL_PATTERN,
            operator=MatchOperator.ENDS_WITH,
            pattern="@example.com",
        ),
        RawRuleConfig(category=RuleCategory.CREATION, bypassable=True),
        RawRuleConfig(category=RuleCategory.REQUIRED_STATUS_CHECKS),
    ]


@pytest.fixture
def sample_config_toml() -> str:
    """A .reporules.toml with a mix of rule kinds."""
    return textwrap.dedent("""\
        version = "1.0"

        [actor]
        bypass_eligible = true

        [[rules]]
        type = "branch_name_pattern"
        operator = "starts_with"
        pattern = "wip/"
        negate = true
        ruleset = "branch-naming"

        [[rules]]
        type = "commit_message_pattern"
        operator = "contains"
        pattern = "JIRA-"
        bypass = "always"

        [[rules]]
        type = "pull_request"
        enforcement = "evaluate"
    """)


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository for integration tests."""
    subprocess.run(["git", "init", "-b", "main", str(tmp_path)], capture_output=True, check=True)
    subprocess.run(
        ["git", "config", "user.email", "dev@example.com"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    subprocess.run(
        ["git", "config", "user.name", "Test"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    # Initial commit
    readme = tmp_path / "README.md"
    readme.write_text("# Test\n")
    subprocess.run(["git", "add", "."], cwd=tmp_path, capture_output=True, check=True)
    subprocess.run(
        ["git", "commit", "-m", "init"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    return tmp_path
