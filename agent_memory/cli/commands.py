"""CLI commands for agent-memory-tools."""

import json
from contextlib import contextmanager
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, Iterator, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from agent_memory import __version__
from agent_memory.config import MemorySettings, load_config, save_default_config
from agent_memory.logging_config import setup_logging
from agent_memory.memory import MemoryEntry, MemoryStore, MemoryStoreError
from agent_memory.memory.export import ExportDocument
from agent_memory.memory.tags import TAG_RE

app = typer.Typer(
    name="mem",
    help="mem: daily markdown memory files for people and agents",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
    json_output: bool = typer.Option(False, "--json", help="Print results as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Agent Memory Tools."""
    config = load_config(config_path)
    setup_logging("DEBUG" if verbose else config.log_level)
    ctx.obj = {"config": config, "config_path": config_path, "json": json_output}


# --- Helpers ---


def _config(ctx: typer.Context) -> MemorySettings:
    return ctx.obj["config"]


def _store(ctx: typer.Context) -> MemoryStore:
    return MemoryStore.from_settings(_config(ctx))


def _wants_json(ctx: typer.Context) -> bool:
    return bool(ctx.obj.get("json"))


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, ExportDocument):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, MemoryEntry):
        return value.to_dict()
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, list):
        return [_to_jsonable(item) for item in value]
    return value


def _print_json(value: Any) -> None:
    typer.echo(json.dumps(_to_jsonable(value), indent=2, ensure_ascii=False, default=str))


@contextmanager
def _user_errors() -> Iterator[None]:
    """Turn store and filesystem errors into a red message and exit status 1."""
    try:
        yield
    except (MemoryStoreError, OSError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def _highlight(text: str, query: Optional[str] = None) -> Text:
    rendered = Text(text)
    if query:
        rendered.highlight_words([query], style="bold yellow", case_sensitive=False)
    rendered.highlight_regex(TAG_RE.pattern, style="magenta")
    return rendered


def _format_tags(tags: list[str]) -> str:
    return " ".join(f"[magenta]#{escape(tag)}[/magenta]" for tag in tags)


def _split_tags(values: Optional[list[str]]) -> list[str]:
    return [tag for value in values or [] for tag in value.split(",") if tag.strip()]


# --- Core commands ---


@app.command()
def init(ctx: typer.Context) -> None:
    """Initialize the memory directory and today's file."""
    result = _store(ctx).init()
    if _wants_json(ctx):
        _print_json(result)
        return

    if result.created:
        console.print(f"[green]Created memory directory:[/green] {escape(str(result.memory_dir))}")
    else:
        console.print(f"[green]Memory directory exists:[/green] {escape(str(result.memory_dir))}")
    console.print(f"[green]Today's file:[/green] {escape(str(result.today_file))}")


@app.command()
def today(ctx: typer.Context) -> None:
    """Show today's memory file, creating it if needed."""
    result = _store(ctx).today()
    if _wants_json(ctx):
        _print_json(result)
        return

    console.print(f"[bold]{result.date}[/bold] [dim]{escape(str(result.path))}[/dim]\n")
    console.print(Text(result.content or ""))


@app.command()
def add(
    ctx: typer.Context,
    text: list[str] = typer.Argument(..., help="Entry text; #hashtags become tags"),
) -> None:
    """Add a timestamped entry to today's file."""
    result = _store(ctx).add(" ".join(text))
    if _wants_json(ctx):
        _print_json(result)
        return

    console.print(f"[green]Added to[/green] [cyan]{result.date}[/cyan]:")
    console.print(Text(f"  {result.entry}"))
    if result.tags:
        console.print(f"  [dim]Tags:[/dim] {_format_tags(result.tags)}")


@app.command(context_settings={"ignore_unknown_options": True})
def show(
    ctx: typer.Context,
    date: str = typer.Argument(..., help="YYYY-MM-DD, MM-DD, DD, today, yesterday or -N"),
) -> None:
    """Show the memory file for a date."""
    with _user_errors():
        result = _store(ctx).show(date)

    if _wants_json(ctx):
        _print_json(result)
        return

    if not result.exists:
        console.print(f"[bold]{result.date}[/bold] [dim]No entries[/dim]")
        return
    console.print(f"[bold]{result.date}[/bold] [dim]{escape(str(result.path))}[/dim]\n")
    console.print(Text(result.content or ""))


@app.command(context_settings={"ignore_unknown_options": True})
def append(
    ctx: typer.Context,
    date: str = typer.Argument(..., help="Date expression of the target file"),
    text: list[str] = typer.Argument(..., help="Entry text"),
) -> None:
    """Append a timestamped entry to the file of any date."""
    with _user_errors():
        result = _store(ctx).append(date, " ".join(text))

    if _wants_json(ctx):
        _print_json(result)
        return

    console.print(f"[green]Appended to[/green] [cyan]{result.date}[/cyan]:")
    console.print(Text(f"  {result.entry}"))
    if result.tags:
        console.print(f"  [dim]Tags:[/dim] {_format_tags(result.tags)}")


# --- Search & discovery ---


@app.command()
def search(
    ctx: typer.Context,
    query: Optional[list[str]] = typer.Argument(None, help="Text to search for"),
    start: Optional[str] = typer.Option(None, "--from", "-f", help="Start date"),
    end: Optional[str] = typer.Option(None, "--to", "-t", help="End date"),
    tag: Optional[list[str]] = typer.Option(None, "--tag", "--tags", help="Filter by #tag"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Max results"),
) -> None:
    """Search across memory files."""
    text = " ".join(query or []) or None
    tags = _split_tags(tag)
    if not text and not tags:
        console.print("[red]Error:[/red] No search query or --tag provided")
        console.print("Usage: mem search <query> [--from date] [--to date] [--tag tag] [--limit n]")
        raise typer.Exit(1)

    with _user_errors():
        results = _store(ctx).search(text, tags=tags, start=start, end=end, limit=limit)

    if _wants_json(ctx):
        _print_json(results)
        return

    suffix = f' for "{escape(text)}"' if text else ""
    if not results:
        console.print(f"No results found{suffix}")
        return

    console.print(f"[green]Found[/green] [bold]{len(results)}[/bold] [green]result(s)[/green]{suffix}:\n")
    current_date = None
    for hit in results:
        if hit.date != current_date:
            if current_date:
                console.print()
            console.print(f"[bold]{hit.date}[/bold]")
            current_date = hit.date
        line = Text(f"   L{hit.line} ", style="dim")
        line.append_text(_highlight(hit.text, text))
        console.print(line)


@app.command()
def recent(
    ctx: typer.Context,
    count: Optional[int] = typer.Argument(None, help="Number of entries"),
) -> None:
    """Show the most recent entries."""
    results = _store(ctx).recent(count or _config(ctx).recent_count)
    if _wants_json(ctx):
        _print_json(results)
        return

    if not results:
        console.print("No recent entries found")
        return

    console.print(f"[bold]Recent Entries[/bold] ({len(results)})\n")
    current_date = None
    for entry in results:
        if entry.date != current_date:
            if current_date:
                console.print()
            console.print(f"[bold]{entry.date}[/bold]")
            current_date = entry.date
        line = Text(f"   {entry.time} ", style="cyan")
        line.append_text(_highlight(entry.text))
        console.print(line)


@app.command()
def tags(ctx: typer.Context) -> None:
    """List all tags with counts."""
    results = _store(ctx).tags()
    if _wants_json(ctx):
        _print_json(results)
        return

    if not results:
        console.print("No tags found")
        return

    table = Table(title=f"Tags ({len(results)})")
    table.add_column("Tag", style="magenta")
    table.add_column("Count", justify="right")
    for item in results:
        table.add_row(f"#{item.tag}", str(item.count))
    console.print(table)


# --- Analytics ---


@app.command()
def summary(
    ctx: typer.Context,
    days: Optional[int] = typer.Argument(None, help="Number of days"),
) -> None:
    """Summarize the most recent days."""
    results = _store(ctx).summary(days or _config(ctx).summary_days)
    if _wants_json(ctx):
        _print_json(results)
        return

    if not results:
        console.print("No memory files found")
        return

    console.print(f"[bold]Summary[/bold] (last {len(results)} day(s))\n")
    for day in results:
        console.print(f"[bold]{day.date}[/bold]  [dim]{day.entries} entries, {day.words} words[/dim]")
        if day.sections:
            console.print(f"   [dim]Sections:[/dim] {escape(', '.join(day.sections))}")
        if day.tags:
            console.print(f"   [dim]Tags:[/dim] {_format_tags(day.tags)}")


@app.command()
def stats(ctx: typer.Context) -> None:
    """Show memory statistics and streaks."""
    result = _store(ctx).stats()
    if _wants_json(ctx):
        _print_json(result)
        return

    if result.total_files == 0:
        console.print("No memory files yet. Run 'mem add <text>' to start.")
        return

    table = Table(title="Memory Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Files", str(result.total_files))
    table.add_row("Entries", str(result.total_entries))
    table.add_row("Words", str(result.total_words))
    if result.date_range:
        table.add_row("Date Range", f"{result.date_range.start} → {result.date_range.end}")
    table.add_row("Avg Entries/Day", str(result.average_entries_per_day))
    table.add_row("Avg Words/Entry", str(result.average_words_per_entry))
    if result.most_active_day:
        day = result.most_active_day
        table.add_row("Most Active Day", f"{day.date} ({day.entries} entries)")
    table.add_row("Current Streak", f"{result.streak_current} day(s)")
    table.add_row("Longest Streak", f"{result.streak_longest} day(s)")
    if result.tags:
        table.add_row("Top Tags", ", ".join(f"#{t.tag} ({t.count})" for t in result.tags))

    console.print(table)


@app.command("list")
def list_files(
    ctx: typer.Context,
    start: Optional[str] = typer.Option(None, "--from", "-f", help="Start date"),
    end: Optional[str] = typer.Option(None, "--to", "-t", help="End date"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Max files"),
) -> None:
    """List memory files, newest first."""
    with _user_errors():
        files = _store(ctx).list_files(start=start, end=end, limit=limit)

    if _wants_json(ctx):
        _print_json(files)
        return

    if not files:
        console.print("No memory files found")
        return
    console.print(f"[bold]Memory Files[/bold] ({len(files)})\n")
    for name in files:
        console.print(f"  {name}")


# --- Export & backup ---


@app.command()
def export(
    ctx: typer.Context,
    start: Optional[str] = typer.Option(None, "--from", "-f", help="Start date"),
    end: Optional[str] = typer.Option(None, "--to", "-t", help="End date"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file path"),
    full: bool = typer.Option(False, "--full", help="Include raw file content"),
) -> None:
    """Export memories to JSON."""
    with _user_errors():
        result = _store(ctx).export(start=start, end=end, full=full, output=output)

    if isinstance(result, ExportDocument):
        typer.echo(result.to_json())
        return

    if _wants_json(ctx):
        _print_json(result)
        return
    console.print(
        f"[green]Exported[/green] {result.files} file(s) to [cyan]{escape(str(result.path))}[/cyan] "
        f"[dim]({result.size} bytes)[/dim]"
    )


@app.command()
def backup(
    ctx: typer.Context,
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file path"),
) -> None:
    """Create a compressed backup (tar.gz) of the memory directory."""
    with _user_errors():
        result = _store(ctx).backup(output)

    if _wants_json(ctx):
        _print_json(result)
        return
    console.print(f"[green]Backup created:[/green] [cyan]{escape(str(result.path))}[/cyan]")
    console.print(f"  [dim]Size:[/dim] {result.size_human}")


@app.command()
def archive(
    ctx: typer.Context,
    older_than: Optional[int] = typer.Option(None, "--older-than", min=0, help="Days threshold"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Archive file path"),
) -> None:
    """Archive memories older than a threshold to JSON and remove them."""
    days = older_than if older_than is not None else _config(ctx).archive_older_than
    with _user_errors():
        result = _store(ctx).archive(days, output)

    if _wants_json(ctx):
        _print_json(result)
        return

    if result.archived == 0:
        console.print(f"No memories older than {days} days (before {result.cutoff_date})")
        return
    console.print(
        f"[green]Archived[/green] {result.archived} file(s) to [cyan]{escape(str(result.path))}[/cyan]"
    )
    console.print(f"  [dim]Cutoff:[/dim] {result.cutoff_date}")


# --- Configuration ---


@app.command()
def config(
    ctx: typer.Context,
    save: bool = typer.Option(False, "--save", help="Write a default config file"),
) -> None:
    """Show the current configuration."""
    if save:
        path = save_default_config(ctx.obj.get("config_path"))
        console.print(f"[green]Config created at:[/green] {escape(str(path))}")
        return

    settings = _config(ctx)
    table = Table(title="Agent Memory Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Version", __version__)
    table.add_row("Memory Dir", escape(str(settings.memory_path)))
    table.add_row("Log Level", settings.log_level)
    table.add_row("Archive Older Than", f"{settings.archive_older_than} days")
    table.add_row("Recent Count", str(settings.recent_count))
    table.add_row("Summary Days", str(settings.summary_days))
    table.add_row("Compressor", settings.compressor)

    console.print(table)


if __name__ == "__main__":
    app()
