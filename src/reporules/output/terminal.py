"""Rich terminal reporter — violations table, verdict, configured rules."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table
from rich.text import Text

from reporules.checks.models import CheckResult
from reporules.rules.models import EnforcementLevel, MetadataRuleSet, RuleEvaluation

_LEVEL_STYLE = {
    "error": "bold white on red",
    "warning": "bold black on yellow",
}

_FIELD_LABEL = {
    "commit_message": "Commit message",
    "author_email": "Author email",
    "committer_email": "Committer email",
    "branch_name": "Branch name",
    "branch": "Branch",
}

_ENFORCEMENT_STYLE = {
    EnforcementLevel.REQUIRED: "red",
    EnforcementLevel.BYPASSABLE: "yellow",
    EnforcementLevel.OFF: "dim",
}


def _level_pill(level: str) -> Text:
    return Text(f" {level.upper()} ", style=_LEVEL_STYLE.get(level, ""))


def render(result: CheckResult, *, show_summary: bool = True) -> None:
    """Print check results to the terminal using Rich."""
    console = Console(stderr=True)

    if result.passed:
        console.print(
            f"[bold green]✅ {result.operation.capitalize()} passes all repository rules.[/bold green]"
        )
        return

    table = Table(
        title="Repository Rules",
        show_lines=True,
        title_style="bold",
        border_style="dim",
    )
    table.add_column("Level", justify="center", width=11)
    table.add_column("Field", style="cyan", min_width=15)
    table.add_column("Rule", min_width=30)

    for level, violations in (("error", result.errors), ("warning", result.warnings)):
        for v in violations:
            table.add_row(_level_pill(level), _FIELD_LABEL.get(v.field, v.field), v.message)

    console.print(table)

    if show_summary:
        console.print(f"[dim]Errors:[/dim]   {len(result.errors)}")
        console.print(f"[dim]Warnings:[/dim] {len(result.warnings)}")

    console.print()
    if result.blocked:
        console.print(f"[bold red]❌ BLOCKED — {result.operation} violates repository rules.[/bold red]")
    else:
        console.print(
            f"[bold yellow]⚠️  Rules can be bypassed — {result.operation} allowed.[/bold yellow]"
        )


def _rule_set_rows(table: Table, label: str, rule_set: MetadataRuleSet) -> None:
    for description, level in rule_set.descriptions:
        table.add_row(label, description, Text(level.value, style=_ENFORCEMENT_STYLE[level]))


def render_rules(evaluation: RuleEvaluation) -> None:
    """Print the configured rules as they apply to the current actor."""
    console = Console(stderr=True)

    if not evaluation.has_rules:
        console.print("[dim]No repository rules configured.[/dim]")
        return

    table = Table(title="Configured Rules", title_style="bold", border_style="dim")
    table.add_column("Applies to", style="cyan")
    table.add_column("Rule")
    table.add_column("Enforcement", justify="center")

    scalars = [
        ("Commit", "basic commit warning", evaluation.basic_commit_warning),
        ("Commit", "pull request required", evaluation.pull_request_required),
        ("Branch", "creation restricted", evaluation.creation_restricted),
    ]
    for label, name, level in scalars:
        if level is not EnforcementLevel.OFF:
            table.add_row(label, name, Text(level.value, style=_ENFORCEMENT_STYLE[level]))

    _rule_set_rows(table, "Commit message", evaluation.commit_message_patterns)
    _rule_set_rows(table, "Author email", evaluation.commit_author_email_patterns)
    _rule_set_rows(table, "Committer email", evaluation.committer_email_patterns)
    _rule_set_rows(table, "Branch name", evaluation.branch_name_patterns)

    console.print(table)
