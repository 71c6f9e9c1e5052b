"""Swimcoach CLI application.

Usage:
    swimcoach import entries <csv>
    swimcoach import results <html> [--meet-date 2024-03-01] [--dry-run]
"""

import asyncio
from datetime import date, datetime
from pathlib import Path

import typer
from dotenv import load_dotenv

# Load .env file for Supabase credentials
load_dotenv()
from rich.console import Console
from rich.table import Table
from supabase import AsyncClient

from swimcoach import configure_logging
from swimcoach.config import get_settings
from swimcoach.dao.base import close_supabase_client, create_supabase_client
from swimcoach.dao.entries_load_dao import EntriesLoadDAO
from swimcoach.dao.swim_time_dao import SwimTimeDAO
from swimcoach.dao.swimmer_dao import SwimmerDAO
from swimcoach.exceptions import FileDecodeError
from swimcoach.models.swim_time import format_milliseconds
from swimcoach.services.audit_recorder import AuditRecorder
from swimcoach.services.entries_importer import EntriesImporter
from swimcoach.services.import_schemas import ImportSummary
from swimcoach.services.results_importer import ResultsImporter

console = Console()
app = typer.Typer(
    name="swimcoach",
    help="Swim meet entries and results import CLI",
    no_args_is_help=True,
)


@app.callback()
def main_callback():
    """Swim meet entries and results import CLI."""
    configure_logging()


# =============================================================================
# IMPORT COMMANDS
# =============================================================================

import_app = typer.Typer(help="Import meet entries and results", no_args_is_help=True)
app.add_typer(import_app, name="import")


async def _connect() -> AsyncClient:
    settings = get_settings()
    return await create_supabase_client(
        settings.supabase_url,
        settings.supabase_key.get_secret_value(),
    )


def _build_daos(client: AsyncClient) -> tuple[SwimmerDAO, SwimTimeDAO, EntriesLoadDAO]:
    settings = get_settings()
    return (
        SwimmerDAO(
            client,
            retry_attempts=settings.storage_retry_attempts,
            retry_backoff=settings.storage_retry_backoff,
        ),
        SwimTimeDAO(
            client,
            retry_attempts=settings.storage_retry_attempts,
            retry_backoff=settings.storage_retry_backoff,
        ),
        EntriesLoadDAO(client),
    )


async def _import_entries(csv_path: Path) -> ImportSummary:
    settings = get_settings()
    client = await _connect()
    try:
        swimmer_dao, swim_time_dao, entries_load_dao = _build_daos(client)
        importer = EntriesImporter(
            swimmer_dao,
            swim_time_dao,
            AuditRecorder(entries_load_dao),
            delimiter=settings.entries_delimiter,
            encoding=settings.entries_encoding,
        )
        return await importer.import_path(csv_path)
    finally:
        await close_supabase_client(client)


async def _import_results(
    html_path: Path, meet_date: date | None, dry_run: bool
) -> ImportSummary:
    client = await _connect()
    try:
        swimmer_dao, swim_time_dao, _ = _build_daos(client)
        importer = ResultsImporter(swimmer_dao, swim_time_dao)
        return await importer.import_path(html_path, meet_date=meet_date, dry_run=dry_run)
    finally:
        await close_supabase_client(client)


def _display_import_summary(summary: ImportSummary) -> None:
    """Display import counts, skipped units and storage errors."""
    console.print()
    table = Table(title=f"Import: {summary.file_name or summary.source.value}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Rows processed", str(summary.rows_processed))
    table.add_row("Rows skipped", str(summary.rows_skipped))
    table.add_row("Swimmers", str(summary.swimmer_count))
    table.add_row("Times inserted", str(summary.times_inserted))
    table.add_row("Times already stored", str(summary.times_duplicate))
    table.add_row("Duration", f"{summary.duration_ms} ms")
    console.print(table)

    if summary.skipped:
        console.print(f"\n[yellow]Skipped ({len(summary.skipped)}):[/yellow]")
        for issue in summary.skipped[:10]:
            console.print(f"  Row {issue.row_number}: {issue.field} - {issue.message}")
        if len(summary.skipped) > 10:
            console.print(f"  [dim]... and {len(summary.skipped) - 10} more[/dim]")

    if summary.errors:
        console.print(f"\n[red]Errors ({len(summary.errors)}):[/red]")
        for err in summary.errors[:5]:
            console.print(f"  Row {err.row_number}: {err.field} - {err.message}")
        if len(summary.errors) > 5:
            console.print(f"  [dim]... and {len(summary.errors) - 5} more[/dim]")


def _display_performances(summary: ImportSummary) -> None:
    """Preview performances accepted from a results document."""
    console.print("\n[cyan]Accepted performances:[/cyan]")
    preview_table = Table()
    preview_table.add_column("Row", style="dim")
    preview_table.add_column("Swimmer")
    preview_table.add_column("Event")
    preview_table.add_column("Course")
    preview_table.add_column("Time", justify="right")

    for result in summary.performances[:15]:
        preview_table.add_row(
            str(result.row_number),
            result.swimmer_name,
            f"{result.distance} {result.stroke.value}",
            result.course.value if result.course else "-",
            format_milliseconds(result.time_ms),
        )
    console.print(preview_table)

    if len(summary.performances) > 15:
        console.print(f"[dim]... and {len(summary.performances) - 15} more rows[/dim]")


@import_app.command("entries")
def import_entries(
    csv_path: Path = typer.Argument(..., help="Path to the meet entries CSV file"),
):
    """Import swimmers and best times from a meet entries file.

    Example:
        swimcoach import entries meet_entries.csv
    """
    if not csv_path.exists():
        console.print(f"[red]File not found: {csv_path}[/red]")
        raise typer.Exit(1)

    console.print(f"[cyan]Importing:[/cyan] {csv_path}")
    try:
        with console.status("Importing entries..."):
            summary = asyncio.run(_import_entries(csv_path))
    except (RuntimeError, FileDecodeError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None

    _display_import_summary(summary)

    if summary.audit_recorded:
        console.print(
            f"\n[green]Recorded load of {summary.rows_processed} entries "
            f"for {summary.swimmer_count} swimmers[/green]"
        )
    if not summary.success:
        raise typer.Exit(1)


@import_app.command("results")
def import_results(
    html_path: Path = typer.Argument(..., help="Path to the results HTML document"),
    meet_date: datetime = typer.Option(
        None, "--meet-date", "-d", formats=["%Y-%m-%d"], help="Date stored on each time"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Parse only, don't import"),
):
    """Import swim times from a meet results document.

    Example:
        swimcoach import results results.html --meet-date 2024-03-01
        swimcoach import results results.html --dry-run
    """
    if not html_path.exists():
        console.print(f"[red]File not found: {html_path}[/red]")
        raise typer.Exit(1)

    console.print(f"[cyan]Importing:[/cyan] {html_path}")
    try:
        with console.status("Importing results..."):
            summary = asyncio.run(
                _import_results(
                    html_path,
                    meet_date.date() if meet_date else None,
                    dry_run,
                )
            )
    except RuntimeError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None

    if summary.performances:
        _display_performances(summary)
    _display_import_summary(summary)

    if dry_run:
        console.print("\n[yellow]Dry run - no changes made[/yellow]")
    if not summary.success:
        raise typer.Exit(1)


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
