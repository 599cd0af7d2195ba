"""Load configuration from .reporules.toml, .reporules/*.yaml, and env vars."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import yaml

from reporules.config.schema import (
    OUTPUT_FORMATS,
    ActorConfig,
    OutputConfig,
    ReporulesConfig,
)
from reporules.rules.matchers import MatchOperator
from reporules.rules.models import RawRuleConfig, RuleCategory

CONFIG_FILENAME = ".reporules.toml"
RULES_DIRNAME = ".reporules"

_TRUE_VALUES = ("1", "true", "yes")
_FALSE_VALUES = ("0", "false", "no")

# Ruleset enforcement modes; only active rulesets are enforced.
_ENFORCEMENT_MODES = ("active", "evaluate", "disabled")


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(repo_root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = repo_root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _require_bool(value: Any, where: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{where}: expected true or false, got {value!r}")
    return value


def _parse_bypass(value: Any, where: str) -> bool:
    """Accept a bool or the ruleset's ``current_user_can_bypass`` string."""
    if isinstance(value, bool):
        return value
    if value == "always":
        return True
    # Bypass through pull requests only does not let a direct commit through.
    if value in ("never", "pull_requests_only"):
        return False
    raise ConfigError(f"{where}: invalid bypass value {value!r}")


def parse_raw_rule(entry: Dict[str, Any], where: str = "rule") -> Optional[RawRuleConfig]:
    """Convert one rule mapping into a RawRuleConfig.

    Returns None for rules from rulesets that are not actively enforced.
    """
    if not isinstance(entry, dict):
        raise ConfigError(f"{where}: expected a table/mapping, got {type(entry).__name__}")
    if "type" not in entry:
        raise ConfigError(f"{where}: missing 'type'")

    try:
        category = RuleCategory(entry["type"])
    except ValueError as exc:
        raise ConfigError(f"{where}: unknown rule type {entry['type']!r}") from exc

    enforcement = entry.get("enforcement", "active")
    if enforcement not in _ENFORCEMENT_MODES:
        raise ConfigError(f"{where}: invalid enforcement {enforcement!r}")
    if enforcement != "active":
        return None

    operator: Optional[MatchOperator] = None
    if entry.get("operator") is not None:
        try:
            operator = MatchOperator(entry["operator"])
        except ValueError as exc:
            raise ConfigError(f"{where}: unknown operator {entry['operator']!r}") from exc

    pattern = entry.get("pattern")
    if pattern is not None and not isinstance(pattern, str):
        raise ConfigError(f"{where}: 'pattern' must be a string")

    return RawRuleConfig(
        category=category,
        operator=operator,
        pattern=pattern,
        negate=_require_bool(entry.get("negate", False), f"{where}.negate"),
        bypassable=_parse_bypass(entry.get("bypass", False), where),
        ruleset=entry.get("ruleset"),
    )


def parse_raw_rules(entries: List[Dict[str, Any]], source: str = "rules") -> List[RawRuleConfig]:
    """Convert rule mappings, in order, dropping inactive ones."""
    rules: List[RawRuleConfig] = []
    for index, entry in enumerate(entries):
        raw = parse_raw_rule(entry, where=f"{source}[{index}]")
        if raw is not None:
            rules.append(raw)
    return rules


def load_rule_files(directory: Path) -> List[RawRuleConfig]:
    """Load YAML rule files from *directory*, sorted by file name."""
    rules: List[RawRuleConfig] = []
    if not directory.is_dir():
        return rules
    for path in sorted(directory.iterdir()):
        if path.suffix not in (".yaml", ".yml"):
            continue
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Failed to parse {path}: {exc}") from exc
        if data is None:
            continue
        if not isinstance(data, list):
            data = [data]
        rules.extend(parse_raw_rules(data, source=path.name))
    return rules


def _merge_env_overrides(cfg: ReporulesConfig) -> None:
    """Apply REPORULES_* environment variable overrides."""
    if val := os.environ.get("REPORULES_BYPASS_ELIGIBLE"):
        if val.lower() in _TRUE_VALUES:
            cfg.actor.bypass_eligible = True
        elif val.lower() in _FALSE_VALUES:
            cfg.actor.bypass_eligible = False
    if val := os.environ.get("REPORULES_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    import dataclasses

    table = data.get(section, {})
    if not isinstance(table, dict):
        raise ConfigError(f"[{section}] must be a table, got {type(table).__name__}")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in table.items() if k in valid_fields}
    return cls(**filtered)


def _validate_sections(actor: ActorConfig, output: OutputConfig) -> None:
    _require_bool(actor.bypass_eligible, "actor.bypass_eligible")
    _require_bool(output.show_summary, "output.show_summary")
    if output.format not in OUTPUT_FORMATS:
        expected = ", ".join(OUTPUT_FORMATS)
        raise ConfigError(f"output.format: expected one of {expected}, got {output.format!r}")


def load_config(
    repo_root: Path,
    config_override: Optional[str] = None,
) -> ReporulesConfig:
    """Load, validate, and return a ReporulesConfig."""
    config_path = find_config_file(repo_root, config_override)

    if config_path is None:
        cfg = ReporulesConfig()
    else:
        raw = _parse_toml(config_path)
        entries = raw.get("rules", [])
        if not isinstance(entries, list):
            raise ConfigError(f"{config_path}: 'rules' must be an array of tables")
        cfg = ReporulesConfig(
            version=raw.get("version", "1.0"),
            actor=_build_section(raw, ActorConfig, "actor"),
            output=_build_section(raw, OutputConfig, "output"),
            rules=parse_raw_rules(entries, source=config_path.name),
        )
        _validate_sections(cfg.actor, cfg.output)

    cfg.rules.extend(load_rule_files(repo_root / RULES_DIRNAME))
    _merge_env_overrides(cfg)
    return cfg
