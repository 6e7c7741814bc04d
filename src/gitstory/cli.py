"""CLI entry point for gitstory."""

import asyncio
import json
import logging
from pathlib import Path

# Load .env file if it exists
from dotenv import load_dotenv
load_dotenv()

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from gitstory.analyzers.github import GitHubFetcher, GitHubFetchError, RateLimitError, UserNotFoundError
from gitstory.analyzers.pipeline import ReportPipeline, assemble_report, load_inputs
from gitstory.analyzers.scorer import Scorer
from gitstory.formatting import archetype_title, day_label, hour_label, weekday_label
from gitstory.models.config import ConfigError, ScoringConfig, load_config
from gitstory.models.schemas import YearReport

app = typer.Typer(help="Year-in-review reports for GitHub accounts.")

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _load_config_or_exit(config_path: Path | None, year: int | None = None) -> ScoringConfig:
    try:
        return load_config(config_path, target_year=year)
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


@app.command()
def report(
    username: str = typer.Argument(..., help="GitHub username"),
    year: int | None = typer.Option(None, "--year", "-y", help="Target year (default from config)"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output JSON file"),
    save_inputs: bool = typer.Option(False, "--save-inputs", help="Save raw inputs under --data-dir"),
    data_dir: Path = typer.Option(Path("data"), "--data-dir", "-d", help="Data directory"),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", envvar="GITSTORY_CONFIG", help="Scoring config JSON"
    ),
    token: str | None = typer.Option(
        None, "--token", "-t", envvar="GITSTORY_USER_TOKEN", help="Your own GitHub token"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Fetch an account's activity and build its year-in-review report."""
    _configure_logging(verbose)
    config = _load_config_or_exit(config_path, year)
    asyncio.run(_report(username, config, output, save_inputs, data_dir, token))


async def _report(
    username: str,
    config: ScoringConfig,
    output: Path | None,
    save_inputs: bool,
    data_dir: Path,
    token: str | None,
) -> None:
    """Async implementation of report."""
    pipeline = ReportPipeline(
        config=config,
        github=GitHubFetcher(user_token=token),
        data_dir=data_dir,
    )

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        progress.add_task(f"Fetching {config.target_year} activity for {username}...", total=None)
        try:
            result = await pipeline.build_report(username, save_inputs=save_inputs)
        except UserNotFoundError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)
        except RateLimitError as e:
            console.print(f"[red]{e}. Set GITHUB_TOKEN or pass --token.[/red]")
            raise typer.Exit(1)
        except GitHubFetchError as e:
            console.print(f"[red]Error fetching data: {e}[/red]")
            raise typer.Exit(1)

    render_report(result)
    _write_output(result, output)


@app.command()
def replay(
    inputs_path: Path = typer.Argument(..., help="Inputs JSON saved with --save-inputs"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output JSON file"),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", envvar="GITSTORY_CONFIG", help="Scoring config JSON"
    ),
) -> None:
    """Build a report from saved inputs without touching the network."""
    config = _load_config_or_exit(config_path)

    try:
        inputs = load_inputs(inputs_path)
    except (OSError, ValueError) as e:
        console.print(f"[red]Could not read inputs from {inputs_path}: {e}[/red]")
        raise typer.Exit(1)

    result = assemble_report(inputs, config)
    render_report(result)
    _write_output(result, output)


@app.command()
def repos(
    username: str = typer.Argument(..., help="GitHub username"),
    limit: int = typer.Option(10, "--limit", "-n", help="Number of repositories to show"),
    year: int | None = typer.Option(None, "--year", "-y", help="Target year (default from config)"),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", envvar="GITSTORY_CONFIG", help="Scoring config JSON"
    ),
) -> None:
    """Rank an account's repositories by quality score."""
    config = _load_config_or_exit(config_path, year)
    asyncio.run(_repos(username, limit, config))


async def _repos(username: str, limit: int, config: ScoringConfig) -> None:
    """Async implementation of repos."""
    fetcher = GitHubFetcher()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        progress.add_task("Fetching repositories...", total=None)
        records = await fetcher.fetch_repositories(username)

    if not records:
        console.print(f"[yellow]No repositories found for {username}[/yellow]")
        raise typer.Exit(1)

    ranked = Scorer(config).rank_repos(records)[:limit]

    table = Table(title=f"Top {len(ranked)} Repositories for {username} ({config.target_year})")
    table.add_column("Rank", style="dim", width=6)
    table.add_column("Repository", style="cyan")
    table.add_column("Score", justify="right", style="green")
    table.add_column("Stars", justify="right")
    table.add_column("Forks", justify="right")
    table.add_column("Language")
    table.add_column("Flags", style="dim")

    for i, (repo, score) in enumerate(ranked, 1):
        flags = ", ".join(
            flag for flag, on in (("fork", repo.is_fork), ("archived", repo.is_archived)) if on
        )
        table.add_row(
            str(i),
            repo.name,
            f"{score:.1f}",
            f"{repo.stars:,}",
            f"{repo.forks:,}",
            repo.language or "-",
            flags or "-",
        )

    console.print(table)


def render_report(result: YearReport) -> None:
    """Print a report to the console."""
    console.print()
    console.print(
        Panel(
            f"[bold]{archetype_title(result.archetype)}[/bold]",
            title=f"{result.username} · {result.year} in review",
            expand=False,
        )
    )
    console.print()

    stats_table = Table(title="The Year", show_header=False, box=None)
    stats_table.add_column("Metric", style="bold")
    stats_table.add_column("Value", justify="right")

    breakdown = result.contribution_breakdown
    stats_table.add_row("Contributions", f"{result.total_commits:,}")
    stats_table.add_row("Pull Requests", f"{breakdown.prs:,}")
    stats_table.add_row("Issues", f"{breakdown.issues:,}")
    stats_table.add_row("Reviews", f"{breakdown.reviews:,}")
    stats_table.add_row("Longest Streak", f"{result.longest_streak} days")
    stats_table.add_row("Busiest Day", weekday_label(result.busiest_weekday))
    stats_table.add_row(
        "Peak Hour",
        f"{hour_label(result.productivity.peak_hour)} ({result.productivity.time_of_day.value})",
    )

    if result.velocity:
        best_day = max(result.velocity, key=lambda point: point.count)
        if best_day.count > 0:
            stats_table.add_row("Best Day", f"{day_label(best_day.date)} ({best_day.count})")

    console.print(stats_table)
    console.print()

    lang_table = Table(title="Top Languages")
    lang_table.add_column("Language", style="cyan")
    lang_table.add_column("Weight", justify="right")
    lang_table.add_column("Repos", justify="right")
    lang_table.add_column("Share", justify="right", style="dim")
    for lang in result.top_languages:
        lang_table.add_row(lang.name, f"{lang.weight:g}", str(lang.repo_count), f"{lang.percentage}%")
    console.print(lang_table)
    console.print()

    top = result.top_repo
    repo_lines = [f"[bold cyan]{top.name}[/bold cyan]", f"[dim]{top.description}[/dim]"]
    repo_lines.append(f"★ {top.stars:,}  ·  {top.language}")
    if top.url:
        repo_lines.append(top.url)
    console.print(Panel("\n".join(repo_lines), title="Top Repository", expand=False))

    community = result.community
    console.print(
        f"\n[bold]Community:[/bold] {community.followers:,} followers · "
        f"{community.following:,} following · {community.total_stars:,} stars"
    )


def _write_output(result: YearReport, output: Path | None) -> None:
    if output:
        output.write_text(json.dumps(result.model_dump(mode="json"), indent=2))
        console.print(f"\n[green]Saved to {output}[/green]")


@app.command()
def version() -> None:
    """Show version information."""
    from gitstory import __version__

    console.print(f"gitstory v{__version__}")


if __name__ == "__main__":
    app()
