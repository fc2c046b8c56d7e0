"""CLI entrypoint using typer."""

from __future__ import annotations

import asyncio

import structlog
import typer
from rich.console import Console
from rich.table import Table

from job_scout_agents.observability import configure_logging, configure_tracing
from job_scout_agents.orchestrator.pipeline import Pipeline
from job_scout_core.config.settings import Settings
from job_scout_core.models.run import RunConfig, RunResult
from job_scout_core.models.search import (
    DatePosted,
    ExperienceLevel,
    JobType,
    SearchParams,
    SortBy,
)

__version__ = "0.1.0"

app = typer.Typer(
    name="job-scout",
    help="Job board crawler that captures external application URLs",
)
console = Console()
logger = structlog.get_logger()


@app.command()
def run(
    keywords: str = typer.Option(..., "--keywords", "-k", help="Search keywords"),
    location: str = typer.Option("", "--location", "-l", help="Location filter"),
    date_posted: DatePosted = typer.Option(
        DatePosted.PAST_24_HOURS, "--date-posted", help="Posting-age filter"
    ),
    experience: list[ExperienceLevel] | None = typer.Option(
        None, "--experience", help="Experience level (repeatable)"
    ),
    job_type: list[JobType] | None = typer.Option(
        None, "--job-type", help="Employment type (repeatable)"
    ),
    remote: bool = typer.Option(False, "--remote", help="Only remote positions"),
    sort_by: SortBy = typer.Option(SortBy.RELEVANCE, "--sort-by", help="Result ordering"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Skip email, generate files only"),
    max_listings: int | None = typer.Option(
        None, "--max-listings", help="Cap listings sent through the apply flow"
    ),
    score: bool = typer.Option(False, "--score", help="Score listings on their detail page"),
    csv: bool = typer.Option(False, "--csv", help="Also write a CSV export"),
    headed: bool = typer.Option(False, "--headed", help="Show the browser window"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Search the job board and capture external application URLs."""
    config = RunConfig(
        search=SearchParams(
            keywords=keywords,
            location=location,
            date_posted=date_posted,
            experience_level=frozenset(experience or []),
            job_type=frozenset(job_type or []),
            remote=remote,
            sort_by=sort_by,
        ),
        dry_run=dry_run,
        output_formats=["xlsx", "csv"] if csv else ["xlsx"],
        max_listings=max_listings,
        score_listings=score,
    )

    settings = Settings()  # type: ignore[call-arg]
    if verbose:
        settings.log_level = "DEBUG"
    if headed:
        settings.headless = False

    configure_logging(settings)
    configure_tracing(settings)

    console.print(f"[bold green]Starting run:[/bold green] {config.run_id}")
    if dry_run:
        console.print("[dim]Dry run: email report disabled[/dim]")

    result = asyncio.run(Pipeline(settings).run(config))
    _print_summary(result, config)

    if result.status != "success":
        raise typer.Exit(code=1)


@app.command()
def version() -> None:
    """Show version."""
    console.print(f"job-scout v{__version__}")


def _print_summary(result: RunResult, config: RunConfig) -> None:
    """Render the run summary to the console."""
    console.print(f"\n[bold]Run complete:[/bold] {result.status}")

    table = Table(show_header=False, box=None)
    table.add_row("Total results", str(result.total_results))
    table.add_row("Pages scanned", str(result.pages_scanned))
    table.add_row("Listings found", str(result.listings_found))
    table.add_row("External URLs", f"[green]{result.external_urls_captured}[/green]")
    table.add_row("Easy Apply", str(result.easy_apply_count))
    table.add_row("Not found", str(result.not_found_count))
    table.add_row("Apply errors", str(result.error_count))
    table.add_row("Duration", f"{result.duration_seconds:.1f}s")
    console.print(table)

    if result.output_files:
        console.print("\n[bold]Output files:[/bold]")
        for f in result.output_files:
            console.print(f"  {f}")

    if result.email_sent:
        console.print("\n[green]Email sent successfully[/green]")
    elif not config.dry_run:
        console.print("\n[yellow]Email not sent[/yellow]")

    if result.errors:
        console.print(f"\n[yellow]Warnings/Errors: {len(result.errors)}[/yellow]")
        for error in result.errors:
            where = f" page {error.page}" if error.page is not None else ""
            console.print(f"  [dim]{error.step_name}{where}:[/dim] {error.error_message}")


if __name__ == "__main__":
    app()
