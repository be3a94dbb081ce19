"""CLI entrypoints."""

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bulkrename.config import HISTORY_FILE_ENV, MAX_ATTEMPTS_ENV, Settings
from bulkrename.errors import PatternCompilationError, PersistenceError
from bulkrename.logging_setup import configure_logging
from bulkrename.models.rename import FilePreview, RenameResult
from bulkrename.processors.rename_processor import RenameProcessor
from bulkrename.repository import JSONHistoryRepository
from bulkrename.session import HistoryService, RenameSession


console = Console()


def _build_session(settings: Settings) -> RenameSession:
    processor = RenameProcessor(max_collision_attempts=settings.max_collision_attempts)
    repository = JSONHistoryRepository(settings.history_path, max_size=settings.max_history_size)
    return RenameSession(processor=processor, history=HistoryService(repository))


def _print_preview(previews: list[FilePreview]) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Original", style="cyan")
    table.add_column("New Name", style="green")
    table.add_column("Status", justify="right")

    for preview in previews:
        status = "[yellow]rename[/yellow]" if preview.has_changed else "[dim]unchanged[/dim]"
        table.add_row(escape(preview.original_name), escape(preview.new_name), status)

    console.print(table)


def _print_result(result: RenameResult) -> None:
    console.print(
        f"[bold green]Renamed {result.success_count} file(s).[/bold green] "
        f"Unchanged: [cyan]{result.skipped_count}[/cyan], failed: [red]{result.failure_count}[/red]."
    )
    for error in result.errors:
        console.print(f"  [red]{escape(error)}[/red]")


def _run_rename(
    session: RenameSession,
    input_files: tuple[str, ...],
    pattern: str,
    replacement: str,
    regex: bool,
    ignore_case: bool,
    yes: bool,
    dry_run: bool,
) -> None:
    """Preview, confirm and execute a rename over ``input_files``."""
    session.load_files(input_files)

    try:
        previews = session.generate_preview(pattern, replacement, is_regex=regex, case_insensitive=ignore_case)
    except PatternCompilationError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise SystemExit(1) from e

    console.print("[bold]Proposed renames:[/bold]")
    _print_preview(previews)
    console.print()

    changed = sum(1 for preview in previews if preview.has_changed)
    if not changed:
        console.print("[yellow]No file names would change.[/yellow]")
        return

    if dry_run:
        console.print(f"[yellow]Dry run: {changed} file(s) would be renamed. Nothing was changed.[/yellow]")
        return

    # Ask for confirmation unless --yes is provided
    if not yes and not click.confirm(f"Rename {changed} file(s)?", default=False):
        console.print("[yellow]Aborted. No files were renamed.[/yellow]")
        return

    console.print("[cyan]Applying renames...[/cyan]")
    result = session.execute_rename(show_progress=len(previews) > 50)
    _print_result(result)

    if result.has_failures:
        raise SystemExit(1)


@click.group(context_settings=dict(show_default=True))
@click.option(
    "--history-file",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar=HISTORY_FILE_ENV,
    default=None,
    help="Where past transformations are stored (defaults to the per-user config directory).",
)
@click.option(
    "--max-attempts",
    type=click.IntRange(min=1),
    envvar=MAX_ATTEMPTS_ENV,
    default=None,
    help="Numbered name variants to try when a target name already exists [default: 1000].",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show debug logging.")
@click.pass_context
def cli(ctx: click.Context, history_file: Path | None, max_attempts: int | None, verbose: bool) -> None:
    """bulkrename - Find and replace in file names, with preview and history."""
    configure_logging(verbose=verbose)

    settings = Settings.from_env()
    if history_file is not None:
        settings = settings.model_copy(update={"history_path": history_file})
    if max_attempts is not None:
        settings = settings.model_copy(update={"max_collision_attempts": max_attempts})

    ctx.obj = _build_session(settings)


@cli.command("rename")
@click.argument("input_files", type=click.Path(exists=True, dir_okay=False), nargs=-1, required=True)
@click.option("-p", "--pattern", type=str, required=True, help="Text (or regular expression) to search for.")
@click.option("-r", "--replacement", type=str, default="", help="Replacement text. Use $1, $2, ... with --regex.")
@click.option("--regex", is_flag=True, default=False, help="Treat the pattern as a regular expression.")
@click.option("-i", "--ignore-case", is_flag=True, default=False, help="Match regardless of case.")
@click.option(
    "-y",
    "--yes",
    is_flag=True,
    default=False,
    help="Apply renames without asking for confirmation.",
)
@click.option("--dry-run", is_flag=True, default=False, help="Only show the preview.")
@click.pass_obj
def rename(
    session: RenameSession,
    input_files: tuple[str, ...],
    pattern: str,
    replacement: str,
    regex: bool,
    ignore_case: bool,
    yes: bool,
    dry_run: bool,
) -> None:
    """Rename files by replacing PATTERN with REPLACEMENT in their names.

    Files whose new name is already taken get a numbered name instead
    (report.txt becomes report1.txt, report2.txt, ...).

    Examples:

        bulkrename rename -p draft -r final *.txt

        bulkrename rename --regex -p "IMG_(\\d+)" -r "holiday_$1" *.jpg
    """
    _run_rename(session, input_files, pattern, replacement, regex, ignore_case, yes, dry_run)


@cli.group("history")
def history() -> None:
    """Show, reuse or clear past transformations."""
    pass


@history.command("list")
@click.pass_obj
def history_list(session: RenameSession) -> None:
    """List past transformations, most recent first."""
    try:
        entries = session.get_history()
    except PersistenceError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise SystemExit(1) from e

    if not entries:
        console.print("[yellow]No history yet.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Pattern", style="cyan")
    table.add_column("Replacement", style="green")
    table.add_column("Regex", justify="center")
    table.add_column("Ignore case", justify="center")

    for ix, entry in enumerate(entries, start=1):
        table.add_row(
            str(ix),
            escape(entry.pattern),
            escape(entry.replacement),
            "yes" if entry.is_regex else "",
            "yes" if entry.case_insensitive else "",
        )

    console.print(table)


@history.command("clear")
@click.option("-y", "--yes", is_flag=True, default=False, help="Clear without asking for confirmation.")
@click.pass_obj
def history_clear(session: RenameSession, yes: bool) -> None:
    """Forget all past transformations."""
    if not yes and not click.confirm("Clear the rename history?", default=False):
        console.print("[yellow]Aborted. History was kept.[/yellow]")
        return

    try:
        session.clear_history()
    except PersistenceError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise SystemExit(1) from e

    console.print("[bold green]History cleared.[/bold green]")


@history.command("apply")
@click.argument("index", type=click.IntRange(min=1))
@click.argument("input_files", type=click.Path(exists=True, dir_okay=False), nargs=-1, required=True)
@click.option("-y", "--yes", is_flag=True, default=False, help="Apply renames without asking for confirmation.")
@click.option("--dry-run", is_flag=True, default=False, help="Only show the preview.")
@click.pass_obj
def history_apply(session: RenameSession, index: int, input_files: tuple[str, ...], yes: bool, dry_run: bool) -> None:
    """Re-run past transformation number INDEX (see `history list`) on files."""
    try:
        entries = session.get_history()
    except PersistenceError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise SystemExit(1) from e

    if index > len(entries):
        console.print(f"[bold red]Error:[/bold red] No history entry #{index} ({len(entries)} stored).")
        raise SystemExit(1)

    entry = entries[index - 1]
    console.print(f"Applying [italic]{escape(str(entry))}[/italic]")
    _run_rename(
        session,
        input_files,
        entry.pattern,
        entry.replacement,
        entry.is_regex,
        entry.case_insensitive,
        yes,
        dry_run,
    )
