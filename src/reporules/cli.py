"""reporules CLI — Typer application with check-commit, check-branch, rules, init, and hook commands."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

import typer
from rich.console import Console

from reporules import __version__

app = typer.Typer(
    name="reporules",
    help="Check commits and branch names against repository rules.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)

_SCISSORS = "# ------------------------ >8 ------------------------"


def _find_repo_root() -> Optional[Path]:
    """Return the git repo root, or None outside a repository."""
    from reporules.git.adapter import GitError, get_repo_root

    try:
        return get_repo_root()
    except GitError:
        return None


def _resolve_repo_root() -> Path:
    """Find the git repo root, exit 2 on failure."""
    from reporules.git.adapter import GitError, get_repo_root

    try:
        return get_repo_root()
    except GitError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _load(repo_root: Path, config: Optional[str], bypass: Optional[bool], format: Optional[str]):
    """Load config and build the rule evaluation, exit 2 on any config problem."""
    from reporules.config.loader import ConfigError, load_config
    from reporules.config.schema import OUTPUT_FORMATS
    from reporules.rules.builder import build_rule_evaluation
    from reporules.rules.matchers import ConfigurationError

    try:
        cfg = load_config(repo_root, config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if format:
        if format not in OUTPUT_FORMATS:
            console.print(f"[bold red]Invalid format:[/bold red] {format}")
            raise typer.Exit(code=2)
        cfg.output.format = format  # type: ignore[assignment]
    if bypass is not None:
        cfg.actor.bypass_eligible = bypass

    # A rule set that fails to build blocks everything rather than
    # silently checking against the rules that did build.
    try:
        evaluation = build_rule_evaluation(cfg.rules, cfg.actor.bypass_eligible)
    except ConfigurationError as exc:
        console.print(f"[bold red]Rule configuration error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    return cfg, evaluation


def _read_message_file(path: Path) -> str:
    """Read a commit message file the way git cleans it up (comments stripped)."""
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        console.print(f"[bold red]Error:[/bold red] cannot read {path}: {exc}")
        raise typer.Exit(code=2) from exc
    lines = []
    for line in text.splitlines():
        if line == _SCISSORS:
            break
        if line.startswith("#"):
            continue
        lines.append(line.rstrip())
    return "\n".join(lines).strip()


def _identities(repo_root: Optional[Path]) -> Tuple[Optional[str], Optional[str]]:
    """Author and committer email from git, (None, None) outside a repo."""
    if repo_root is None:
        return None, None
    from reporules.git.adapter import GitError, get_ident_email

    try:
        return get_ident_email(repo_root, "author"), get_ident_email(repo_root, "committer")
    except GitError:
        return None, None


def _report(result, cfg) -> None:
    from reporules.output import json_report, terminal

    if cfg.output.format == "json":
        print(json_report.render(result))
    else:
        terminal.render(result, show_summary=cfg.output.show_summary)

    if result.blocked:
        raise typer.Exit(code=1)
    raise typer.Exit(code=0)


# ── check-commit ──────────────────────────────────────────────────────────────


@app.command("check-commit")
def check_commit_cmd(
    message: Optional[str] = typer.Option(None, "--message", "-m", help="Commit message to check"),
    message_file: Optional[Path] = typer.Option(None, "--message-file", "-F", help="Read the commit message from a file (commit-msg hook)"),
    author_email: Optional[str] = typer.Option(None, "--author-email", help="Author email (default: from git)"),
    committer_email: Optional[str] = typer.Option(None, "--committer-email", help="Committer email (default: from git)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .reporules.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    bypass: Optional[bool] = typer.Option(None, "--bypass/--no-bypass", help="Override whether you may bypass rules"),
) -> None:
    """Check a commit message and identities against repository rules."""
    from reporules.checks.evaluator import check_commit

    if message is None and message_file is None:
        console.print("[bold red]Error:[/bold red] provide --message or --message-file")
        raise typer.Exit(code=2)
    if message is not None and message_file is not None:
        console.print("[bold red]Error:[/bold red] --message and --message-file are exclusive")
        raise typer.Exit(code=2)

    repo_root = _find_repo_root()
    cfg, evaluation = _load(repo_root or Path.cwd(), config, bypass, format)

    if message_file is not None:
        message = _read_message_file(message_file)

    git_author, git_committer = _identities(repo_root)
    result = check_commit(
        evaluation,
        message or "",
        author_email=git_author if author_email is None else author_email,
        committer_email=git_committer if committer_email is None else committer_email,
    )
    _report(result, cfg)


# ── check-branch ──────────────────────────────────────────────────────────────


@app.command("check-branch")
def check_branch_cmd(
    name: Optional[str] = typer.Argument(None, help="Branch name (default: current branch)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .reporules.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    bypass: Optional[bool] = typer.Option(None, "--bypass/--no-bypass", help="Override whether you may bypass rules"),
) -> None:
    """Check a branch name before creating or renaming a branch."""
    from reporules.checks.evaluator import check_branch
    from reporules.git.adapter import get_current_branch

    if name is None:
        repo_root: Optional[Path] = _resolve_repo_root()
        name = get_current_branch(repo_root)
        if name is None:
            console.print("[bold red]Error:[/bold red] HEAD is detached; pass a branch name")
            raise typer.Exit(code=2)
    else:
        repo_root = _find_repo_root()

    cfg, evaluation = _load(repo_root or Path.cwd(), config, bypass, format)

    _report(check_branch(evaluation, name), cfg)


# ── rules ─────────────────────────────────────────────────────────────────────


@app.command()
def rules(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .reporules.toml"),
    bypass: Optional[bool] = typer.Option(None, "--bypass/--no-bypass", help="Override whether you may bypass rules"),
) -> None:
    """Show configured rules as they apply to you."""
    from reporules.output import terminal

    repo_root = _find_repo_root() or Path.cwd()
    _, evaluation = _load(repo_root, config, bypass, None)
    terminal.render_rules(evaluation)


# ── install ───────────────────────────────────────────────────────────────────


@app.command()
def install(
    force: bool = typer.Option(False, "--force", help="Overwrite existing commit-msg hook"),
) -> None:
    """Install reporules as a git commit-msg hook."""
    from reporules.hooks.installer import install_hook

    repo_root = _resolve_repo_root()
    success, msg = install_hook(repo_root, force=force)
    if success:
        console.print(f"[green]✓[/green] {msg}")
    else:
        console.print(f"[red]✗[/red] {msg}")
        raise typer.Exit(code=1)


# ── uninstall ─────────────────────────────────────────────────────────────────


@app.command()
def uninstall() -> None:
    """Remove the reporules commit-msg hook."""
    from reporules.hooks.installer import uninstall_hook

    repo_root = _resolve_repo_root()
    success, msg = uninstall_hook(repo_root)
    if success:
        console.print(f"[green]✓[/green] {msg}")
    else:
        console.print(f"[red]✗[/red] {msg}")
        raise typer.Exit(code=1)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .reporules.toml in the repo root."""
    from reporules.config.defaults import DEFAULT_TOML
    from reporules.config.loader import CONFIG_FILENAME

    repo_root = _resolve_repo_root()
    config_path = repo_root / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"reporules {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """reporules — check commits and branch names against repository rules."""
