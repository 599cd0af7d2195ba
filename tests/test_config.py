"""Tests for config loading, rule parsing, and env var overrides."""

from pathlib import Path

import pytest
import yaml

from reporules.config.defaults import DEFAULT_TOML
from reporules.config.loader import ConfigError, load_config, parse_raw_rule, parse_raw_rules
from reporules.rules.matchers import MatchOperator
from reporules.rules.models import RawRuleConfig, RuleCategory


class TestParseRawRules:
    def test_pattern_rule(self):
        raw = parse_raw_rule({
            "type": "branch_name_pattern",
            "operator": "starts_with",
            "pattern": "wip/",
            "negate": True,
            "ruleset": "naming",
        })
        assert raw == RawRuleConfig(
            category=RuleCategory.BRANCH_NAME_PATTERN,
            operator=MatchOperator.STARTS_WITH,
            pattern="wip/",
            negate=True,
            bypassable=False,
            ruleset="naming",
        )

    def test_scalar_rule(self):
        raw = parse_raw_rule({"type": "creation"})
        assert raw is not None
        assert raw.category is RuleCategory.CREATION
        assert raw.operator is None
        assert raw.pattern is None

    @pytest.mark.parametrize(
        "value, expected",
        [(True, True), (False, False), ("always", True), ("never", False), ("pull_requests_only", False)],
    )
    def test_bypass_values(self, value, expected):
        raw = parse_raw_rule({"type": "pull_request", "bypass": value})
        assert raw is not None
        assert raw.bypassable is expected

    def test_invalid_bypass_raises(self):
        with pytest.raises(ConfigError):
            parse_raw_rule({"type": "pull_request", "bypass": "sometimes"})

    def test_inactive_rules_dropped(self):
        rules = parse_raw_rules([
            {"type": "creation", "enforcement": "evaluate"},
            {"type": "update", "enforcement": "disabled"},
            {"type": "pull_request", "enforcement": "active"},
        ])
        assert [r.category for r in rules] == [RuleCategory.PULL_REQUEST]

    def test_unknown_type_raises(self):
        with pytest.raises(ConfigError, match="unknown rule type"):
            parse_raw_rule({"type": "no_such_rule"})

    def test_missing_type_raises(self):
        with pytest.raises(ConfigError):
            parse_raw_rule({"pattern": "x"})

    def test_unknown_operator_raises(self):
        with pytest.raises(ConfigError, match="unknown operator"):
            parse_raw_rule({"type": "commit_message_pattern", "operator": "fuzzy", "pattern": "x"})

    def test_invalid_enforcement_raises(self):
        with pytest.raises(ConfigError):
            parse_raw_rule({"type": "creation", "enforcement": "sometimes"})

    def test_non_mapping_raises(self):
        with pytest.raises(ConfigError):
            parse_raw_rules(["creation"])  # type: ignore[list-item]


class TestConfigLoading:
    def test_default_config(self, tmp_path: Path):
        cfg = load_config(tmp_path)
        assert cfg.actor.bypass_eligible is False
        assert cfg.output.format == "terminal"
        assert cfg.rules == []

    def test_custom_toml(self, tmp_path: Path, sample_config_toml: str):
        (tmp_path / ".reporules.toml").write_text(sample_config_toml)
        cfg = load_config(tmp_path)
        assert cfg.actor.bypass_eligible is True
        # The pull_request rule is in evaluate mode and dropped.
        assert [r.category for r in cfg.rules] == [
            RuleCategory.BRANCH_NAME_PATTERN,
            RuleCategory.COMMIT_MESSAGE_PATTERN,
        ]
        assert cfg.rules[1].bypassable is True

    def test_default_template_loads(self, tmp_path: Path):
        (tmp_path / ".reporules.toml").write_text(DEFAULT_TOML)
        cfg = load_config(tmp_path)
        assert cfg.rules == []
        assert cfg.output.format == "terminal"

    def test_config_override_path(self, tmp_path: Path):
        custom = tmp_path / "custom.toml"
        custom.write_text('[output]\nformat = "json"\n')
        cfg = load_config(tmp_path, config_override=str(custom))
        assert cfg.output.format == "json"

    def test_missing_override_raises(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            load_config(tmp_path, config_override="/nonexistent/config.toml")

    def test_invalid_toml_raises(self, tmp_path: Path):
        (tmp_path / ".reporules.toml").write_text("this is not valid [toml")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_rules_must_be_array(self, tmp_path: Path):
        (tmp_path / ".reporules.toml").write_text('[rules]\ntype = "creation"\n')
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_yaml_rule_files(self, tmp_path: Path, sample_config_toml: str):
        (tmp_path / ".reporules.toml").write_text(sample_config_toml)
        rules_dir = tmp_path / ".reporules"
        rules_dir.mkdir()
        (rules_dir / "a_email.yaml").write_text(yaml.dump([{
            "type": "commit_author_email_pattern",
            "operator": "ends_with",
            "pattern": "@example.com",
        }]))
        (rules_dir / "b_single.yml").write_text(yaml.dump({"type": "creation"}))
        (rules_dir / "notes.txt").write_text("ignored")

        cfg = load_config(tmp_path)
        assert [r.category for r in cfg.rules] == [
            RuleCategory.BRANCH_NAME_PATTERN,
            RuleCategory.COMMIT_MESSAGE_PATTERN,
            RuleCategory.COMMIT_AUTHOR_EMAIL_PATTERN,
            RuleCategory.CREATION,
        ]

    @pytest.mark.parametrize("body", [
        '[actor]\nbypass_eligible = "false"\n',
        "[actor]\nbypass_eligible = 1\n",
        '[output]\nshow_summary = "no"\n',
        '[output]\nformat = "sarif"\n',
    ])
    def test_non_bool_settings_raise(self, tmp_path: Path, body: str):
        (tmp_path / ".reporules.toml").write_text(body)
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_string_bypass_eligible_does_not_grant_bypass(self, tmp_path: Path):
        (tmp_path / ".reporules.toml").write_text(
            '[actor]\nbypass_eligible = "false"\n\n'
            '[[rules]]\ntype = "pull_request"\nbypass = "always"\n'
        )
        with pytest.raises(ConfigError, match="bypass_eligible"):
            load_config(tmp_path)

    def test_string_negate_raises(self, tmp_path: Path):
        (tmp_path / ".reporules.toml").write_text(
            '[[rules]]\ntype = "branch_name_pattern"\noperator = "starts_with"\n'
            'pattern = "wip/"\nnegate = "false"\n'
        )
        with pytest.raises(ConfigError, match="negate"):
            load_config(tmp_path)

    @pytest.mark.parametrize("body", ['actor = "me"\n', "output = [1, 2]\n"])
    def test_section_must_be_table(self, tmp_path: Path, body: str):
        (tmp_path / ".reporules.toml").write_text(body)
        with pytest.raises(ConfigError, match="must be a table"):
            load_config(tmp_path)

    def test_invalid_yaml_raises(self, tmp_path: Path):
        rules_dir = tmp_path / ".reporules"
        rules_dir.mkdir()
        (rules_dir / "bad.yaml").write_text("- type: [unclosed\n")
        with pytest.raises(ConfigError):
            load_config(tmp_path)


class TestEnvVarOverrides:
    def test_bypass_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("REPORULES_BYPASS_ELIGIBLE", "yes")
        cfg = load_config(tmp_path)
        assert cfg.actor.bypass_eligible is True

    def test_bypass_override_off(self, tmp_path: Path, monkeypatch, sample_config_toml: str):
        (tmp_path / ".reporules.toml").write_text(sample_config_toml)
        monkeypatch.setenv("REPORULES_BYPASS_ELIGIBLE", "0")
        cfg = load_config(tmp_path)
        assert cfg.actor.bypass_eligible is False

    def test_format_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("REPORULES_FORMAT", "json")
        cfg = load_config(tmp_path)
        assert cfg.output.format == "json"

    def test_invalid_env_ignored(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("REPORULES_FORMAT", "sarif")
        monkeypatch.setenv("REPORULES_BYPASS_ELIGIBLE", "maybe")
        cfg = load_config(tmp_path)
        assert cfg.output.format == "terminal"
        assert cfg.actor.bypass_eligible is False
