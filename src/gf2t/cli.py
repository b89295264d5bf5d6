"""gf2t CLI — assess a Git Flow repository's readiness for trunk-based development.

Usage:
    gf2t analyze <path-or-url>
    gf2t export [-p PATH] [-o FILE]
    gf2t github <owner> <repo> [-o FILE]
    gf2t learn [-t TOPIC]
"""

from __future__ import annotations

import logging
from typing import Callable

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table as RichTable

from . import __version__
from .core.errors import Gf2tError
from .core.models import AnalysisReport, BranchType
from .core.settings import DEFAULT_SETTINGS, AnalysisSettings
from .education import CATEGORIES, get_links_by_category
from .export import DEFAULT_EXPORT_FILE, write_export
from .pipeline import analyze_github, analyze_local

console = Console()

# Branch table ordering: long-lived branches first
_TYPE_ORDER: dict[BranchType, int] = {
    BranchType.MAIN: 0,
    BranchType.DEVELOP: 1,
    BranchType.RELEASE: 2,
    BranchType.HOTFIX: 3,
    BranchType.FEATURE: 4,
    BranchType.ENVIRONMENT: 5,
    BranchType.OTHER: 6,
}

_PRIMER = """\
Trunk-Based Development (TBD) is a branching strategy where developers
collaborate on a single branch called "trunk" (usually [cyan]main[/]). Instead of
long-lived feature branches, developers use:

  [green]•[/] [bold]Short-lived branches[/] merged within 1-2 days
  [green]•[/] [bold]Feature flags[/] to hide incomplete work in production
  [green]•[/] [bold]Continuous integration[/] so every commit is tested automatically

[bold]Why migrate from Git Flow?[/]
Git Flow was designed for scheduled releases. Modern teams practicing
continuous delivery find it adds unnecessary overhead:

  [red]✖[/] Long-lived branches accumulate merge conflicts
  [red]✖[/] Release branches delay delivery
  [red]✖[/] Complex branching slows onboarding

  [green]✔[/] TBD enables faster feedback loops
  [green]✔[/] Smaller changes reduce risk
  [green]✔[/] A simpler model means fewer mistakes
"""


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _settings(stale_days: int | None, feature_threshold: int | None) -> AnalysisSettings:
    changes: dict[str, int] = {}
    if stale_days is not None:
        changes["stale_threshold_days"] = stale_days
    if feature_threshold is not None:
        changes["active_feature_threshold"] = feature_threshold
    return DEFAULT_SETTINGS.replace(**changes) if changes else DEFAULT_SETTINGS


def _run_analysis(description: str, run: Callable[[], AnalysisReport]) -> AnalysisReport:
    """Run *run* behind a spinner; exit 1 on any gf2t error."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(f"[cyan]{description}", total=None)
        try:
            return run()
        except Gf2tError as exc:
            progress.stop()
            console.print(f"[bold red]✖ {escape(str(exc))}[/]")
            raise SystemExit(1)


def _score_style(score: int) -> str:
    if score >= 80:
        return "green"
    if score >= 50:
        return "yellow"
    return "red"


def print_report(report: AnalysisReport) -> None:
    """Render *report* as a summary panel, a branch table and the blocker list."""
    style = _score_style(report.readiness_score)
    detected = "[green]Yes[/]" if report.git_flow_detected else "[red]No[/]"
    status_icon = "✅" if report.is_ready else "❌"

    console.print(Panel(
        f"[bold]Repository:[/]        {escape(report.repo_path)}\n"
        f"[bold]Analyzed at:[/]       {report.analyzed_at}\n"
        f"[bold]Git Flow detected:[/] {detected}\n"
        f"[bold]Total branches:[/]    {report.total_branches}\n"
        f"[bold]Active:[/] [green]{report.active_branches}[/]"
        f" [bold]| Stale:[/] [yellow]{report.stale_branches}[/]\n\n"
        f"[bold]Migration Readiness:[/] [{style}]{report.readiness_score}/100[/] {status_icon}",
        title="[bold]📊 Git Flow Analysis Report[/]",
        border_style=style,
    ))

    table = RichTable(show_lines=False)
    table.add_column("Branch", style="bold")
    table.add_column("Type", style="cyan")
    table.add_column("Age (days)", justify="right")
    table.add_column("Ahead", justify="right")
    table.add_column("Behind", justify="right")
    table.add_column("Status")

    for branch in sorted(report.all_branches, key=lambda b: _TYPE_ORDER[b.type]):
        if branch.is_stale:
            status = "[yellow]stale[/]"
        elif branch.is_merged:
            status = "[dim]merged[/]"
        else:
            status = "[green]active[/]"
        table.add_row(
            escape(branch.name),
            branch.type.value,
            str(branch.age_in_days),
            str(branch.ahead_of_main),
            str(branch.behind_main),
            status,
        )

    console.print(table)
    console.print()

    if not report.blockers:
        console.print("[green]✅ No blockers found — this repository is ready for migration![/]")
        return

    console.print("[bold red]🚫 Migration Blockers:[/]\n")
    for blocker in report.blockers:
        console.print(f"  [red]✖ {escape(blocker.title)}[/]")
        console.print(f"    [dim]{escape(blocker.description)}[/]")
        console.print(f"    [yellow]💡 Fix: {escape(blocker.remediation)}[/]\n")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@click.group()
@click.version_option(version=__version__, prog_name="gf2t")
def main():
    """gf2t — Git Flow to Trunk-Based Development migration readiness."""
    pass


@main.command()
@click.argument("target")
@click.option(
    "--fetch/--no-fetch",
    default=True,
    help="Run 'git fetch --all --prune' before analyzing (default: fetch).",
)
@click.option(
    "--stale-days",
    type=click.IntRange(min=0),
    default=None,
    help=f"Days without commits before a branch is stale (default: {DEFAULT_SETTINGS.stale_threshold_days}).",
)
@click.option(
    "--feature-threshold",
    type=click.IntRange(min=0),
    default=None,
    help=(
        "Active feature branches allowed before migration is blocked "
        f"(default: {DEFAULT_SETTINGS.active_feature_threshold})."
    ),
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Verbose logging.")
def analyze(
    target: str,
    fetch: bool,
    stale_days: int | None,
    feature_threshold: int | None,
    verbose: bool,
):
    """Analyze a repository for Git Flow patterns and migration readiness.

    TARGET is a local path or a remote git URL (cloned to a temporary
    directory for the duration of the analysis).
    """
    _setup_logging(verbose)
    settings = _settings(stale_days, feature_threshold)
    report = _run_analysis(
        f"Analyzing {target}...",
        lambda: analyze_local(target, fetch=fetch, settings=settings),
    )
    print_report(report)


@main.command()
@click.option(
    "-p", "--path",
    "repo_path",
    type=click.Path(),
    default=".",
    help="Repository path (default: current directory).",
)
@click.option(
    "-o", "--output",
    "output_file",
    type=click.Path(dir_okay=False),
    default=DEFAULT_EXPORT_FILE,
    help=f"Output file path (default: {DEFAULT_EXPORT_FILE}).",
)
@click.option("--fetch/--no-fetch", default=True, help="Fetch remotes before analyzing.")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Verbose logging.")
def export(repo_path: str, output_file: str, fetch: bool, verbose: bool):
    """Export repository branch data to a JSON file for the web dashboard."""
    _setup_logging(verbose)
    report = _run_analysis(
        "Collecting repository data...",
        lambda: analyze_local(repo_path, fetch=fetch),
    )
    out_path = write_export(report, output_file)
    console.print(f"[green]✓[/] Exported to {out_path}")
    console.print("[dim]Upload this file to the gf2t web UI for visualization.[/]")


@main.command()
@click.argument("owner")
@click.argument("repo")
@click.option(
    "-o", "--output",
    "output_file",
    type=click.Path(dir_okay=False),
    default=DEFAULT_EXPORT_FILE,
    help=f"Output file path (default: {DEFAULT_EXPORT_FILE}).",
)
@click.option(
    "--token",
    envvar="GITHUB_TOKEN",
    default=None,
    help="GitHub personal access token (or set GITHUB_TOKEN env var).",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Verbose logging.")
def github(owner: str, repo: str, output_file: str, token: str | None, verbose: bool):
    """Analyze OWNER/REPO through the GitHub API (no clone) and export JSON."""
    _setup_logging(verbose)
    report = _run_analysis(
        f"Analyzing {owner}/{repo} via GitHub API...",
        lambda: analyze_github(owner, repo, token=token),
    )
    out_path = write_export(report, output_file)
    style = _score_style(report.readiness_score)
    console.print(f"[bold]Readiness:[/] [{style}]{report.readiness_score}/100[/]")
    console.print(f"[bold]Blockers:[/]  {len(report.blockers)}")
    console.print(f"[bold]Output:[/]    {out_path}")


@main.command()
@click.option(
    "-t", "--topic",
    type=click.Choice([c.value for c in CATEGORIES], case_sensitive=False),
    default=None,
    help="Only show links for one topic.",
)
def learn(topic: str | None):
    """Learn about trunk-based development and migration best practices."""
    console.print("\n[bold underline]📚 Git Flow → Trunk-Based Development: Learn[/]\n")
    console.print("[bold]What is Trunk-Based Development?[/]")
    console.print("[dim]" + "─" * 50 + "[/]")
    console.print(_PRIMER)

    console.print("[bold]📖 Read More[/]")
    console.print("[dim]" + "─" * 50 + "[/]")
    for category, label in CATEGORIES.items():
        if topic and category.value != topic.lower():
            continue
        console.print(f"\n[bold]{label}[/]")
        for link in get_links_by_category(category):
            console.print(f"  [cyan]→[/] [bold]{link.title}[/]")
            console.print(f"    [dim]{link.description}[/]")
            console.print(f"    [underline blue]{link.url}[/]")
    console.print()


if __name__ == "__main__":
    main()
