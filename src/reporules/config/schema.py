"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal

from reporules.rules.models import RawRuleConfig

OutputFormat = Literal["terminal", "json"]
OUTPUT_FORMATS = ("terminal", "json")


@dataclass
class ActorConfig:
    # Whether the current actor may bypass rulesets that allow bypassing.
    bypass_eligible: bool = False


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_summary: bool = True


@dataclass
class ReporulesConfig:
    version: str = "1.0"
    actor: ActorConfig = field(default_factory=ActorConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    rules: List[RawRuleConfig] = field(default_factory=list)
