"""CLI entry point for the novelwriter project store.

Usage:
  novelwriter new "My Novel"        create a project
  novelwriter list                  list saved projects
  novelwriter show -n my-novel      show a project's structure
  novelwriter history -n my-novel   list saved versions
  novelwriter --help                see all commands
"""

import asyncio
import inspect
import logging
import sys
from pathlib import Path

import click
from rich.markup import escape

from cli.theme import (
    get_console,
    app_header,
    command_panel,
    success_panel,
    content_counts,
    format_timestamp,
    history_table,
    novel_summary_panel,
    structure_tree,
)
from config.exceptions import NovelWriterError
from config.logging_config import setup_logging
from config.settings import Settings
from models.document import find_chapter, update_chapter
from persistence.storage import SqliteStore, storage_key
from workflow.callbacks import ConsoleCallback
from workflow.session import NovelSession
from workflow.timers import AsyncioTimerSource

logger = logging.getLogger(__name__)

console = get_console()


def _init_logging(verbose: bool):
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    settings = Settings()
    setup_logging(level=level, log_dir=settings.log_dir, console=console)


def _run_session(work):
    """Run ``work(session)`` inside an event loop, then close the session.

    Closing flushes any pending autosave. ``work`` may be a plain function
    or a coroutine function.
    """
    settings = Settings()

    async def _runner():
        session = NovelSession(
            SqliteStore(settings.storage_db_path),
            AsyncioTimerSource(),
            settings=settings,
            callback=ConsoleCallback(console),
        )
        try:
            result = work(session)
            if inspect.isawaitable(result):
                result = await result
            return result
        finally:
            session.close()

    try:
        return asyncio.run(_runner())
    except NovelWriterError as e:
        console.print(f"[error]{escape(str(e))}[/]")
        sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """novelwriter: versioned storage for novel projects.

    \b
    Projects are stored locally with a bounded version history:
      novelwriter new "The Long Road"
      novelwriter snapshot -n the-long-road
      novelwriter history -n the-long-road
    """
    _init_logging(verbose)


# ---------------------------------------------------------------------------
# new / list / show
# ---------------------------------------------------------------------------

@cli.command()
@click.argument("title")
def new(title):
    """Create a new project with one empty chapter.

    Example:
      novelwriter new "The Long Road"
    """
    novel = _run_session(lambda session: session.create(title))
    console.print(app_header())
    console.print()
    console.print(success_panel("Project created", (
        f"  [stat.label]Title:[/] [stat.value]{escape(novel.title)}[/]\n"
        f"  [stat.label]ID:[/] [stat.value]{novel.id}[/]"
    )))
    console.print(f"\nNext: [info]novelwriter show -n {novel.id}[/]")


@cli.command(name="list")
def list_projects():
    """List saved projects."""
    ids = _run_session(lambda session: session.list_projects())
    if not ids:
        console.print("[warning]No projects yet. Use [info]novelwriter new[/] to create one.[/]")
        return
    for novel_id in ids:
        console.print(f"  [chapter.num]{novel_id}[/]")


@cli.command()
@click.option("--novel-id", "-n", required=True, help="Project id")
def show(novel_id):
    """Show a project's outline, characters and chapters."""
    novel = _run_session(lambda session: session.load(novel_id))
    console.print(app_header())
    console.print()
    console.print(novel_summary_panel(novel))
    console.print()
    console.print(structure_tree(novel))


# ---------------------------------------------------------------------------
# Versions
# ---------------------------------------------------------------------------

@cli.command()
@click.option("--novel-id", "-n", required=True, help="Project id")
def history(novel_id):
    """List saved versions, newest first."""
    def _history(session):
        session.load(novel_id)
        return session.history()

    versions = _run_session(_history)
    if not versions:
        console.print(f"[warning]No versions saved for '{novel_id}' yet.[/]")
        console.print(f"[muted]Use: novelwriter snapshot -n {novel_id}[/]")
        return
    console.print(history_table(versions))


@cli.command()
@click.option("--novel-id", "-n", required=True, help="Project id")
def snapshot(novel_id):
    """Record a version of the project's current state."""
    def _snapshot(session):
        session.load(novel_id)
        if not session.save():
            raise NovelWriterError(f"Could not save '{novel_id}'")
        return session.history()[0]

    version = _run_session(_snapshot)
    console.print(f"[success]Version {version.timestamp} saved ({format_timestamp(version.timestamp)})[/]")


@cli.command()
@click.option("--novel-id", "-n", required=True, help="Project id")
@click.option("--timestamp", "-t", required=True, type=int, help="Version timestamp (see 'history')")
@click.option("--force", "-f", is_flag=True, help="Skip the confirmation prompt")
def restore(novel_id, timestamp, force):
    """Replace a project's content with a saved version.

    The version history itself is kept, so a restore can be undone by
    restoring a newer version.
    """
    def _restore(session):
        session.load(novel_id)
        version = session.versions.find(session.novel.version_history, timestamp)
        if version is None:
            raise NovelWriterError(f"No version with timestamp {timestamp}", {"id": novel_id})
        console.print(command_panel("Restore version", {
            "Project": session.novel.title,
            "Version": format_timestamp(timestamp),
            "Contents": content_counts(version.novel),
        }))
        if not force and not click.confirm("Replace the current content?", default=False):
            return None
        return session.restore(version)

    restored = _run_session(_restore)
    if restored is None:
        console.print("[warning]Cancelled[/]")
        return
    console.print(f"[success]'{escape(restored.title)}' restored to version {timestamp}[/]")


# ---------------------------------------------------------------------------
# Import / export
# ---------------------------------------------------------------------------

@cli.command()
@click.option("--novel-id", "-n", required=True, help="Project id")
@click.option("--output", "-o", "output_dir", default=None, type=click.Path(file_okay=False),
              help="Target directory (default: EXPORT_DIR setting)")
def export(novel_id, output_dir):
    """Write a project to a JSON file."""
    def _export(session):
        session.load(novel_id)
        return session.export_to_file(output_dir)

    path = _run_session(_export)
    console.print(f"[success]Exported to {path}[/]")


@cli.command(name="import")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--force", "-f", is_flag=True, help="Skip the confirmation prompt")
def import_project(file, force):
    """Import a project from a JSON file.

    A project with the same id is replaced. Invalid files are rejected
    without touching stored data.
    """
    data = file.read_bytes()

    def _confirm(session, novel):
        console.print(command_panel("Import project", {
            "Title": novel.title,
            "ID": novel.id,
            "Contents": content_counts(novel),
            "Versions": str(len(novel.version_history)),
        }))
        if force:
            return True
        exists = session.storage.get(storage_key(novel.id)) is not None
        prompt = "Replace the saved project with this file?" if exists else "Import this project?"
        return click.confirm(prompt, default=False)

    result = _run_session(
        lambda session: session.import_from_file(data, lambda novel: _confirm(session, novel))
    )
    if result.error is not None:
        console.print(f"[error]Import rejected: {escape(str(result.error))}[/]")
        sys.exit(1)
    if not result.imported:
        console.print("[warning]Cancelled[/]")
        return
    console.print(f"[success]Imported '{escape(result.novel.title)}' as {result.novel.id}[/]")


# ---------------------------------------------------------------------------
# Editing and generation
# ---------------------------------------------------------------------------

@cli.command()
@click.option("--novel-id", "-n", required=True, help="Project id")
@click.option("--chapter", "-c", required=True, help="Chapter id (see 'show')")
def edit(novel_id, chapter):
    """Edit a chapter's text in the system editor."""
    def _edit(session):
        novel = session.load(novel_id)
        target = find_chapter(novel, chapter)
        if target is None:
            raise NovelWriterError(f"No chapter '{chapter}' in '{novel_id}'")
        console.print(f"[info]Opening '{target.title}' in the editor...[/]")
        edited = click.edit(target.content, extension=".txt")
        if edited is None:
            return None
        return session.mutate(update_chapter, chapter, content=edited.rstrip("\n"))

    updated = _run_session(_edit)
    if updated is None:
        console.print("[warning]Edit cancelled (no changes or editor closed)[/]")
        return
    console.print("[success]Chapter saved[/]")


@cli.command()
@click.option("--novel-id", "-n", required=True, help="Project id")
@click.option("--chapter", "-c", required=True, help="Chapter id (see 'show')")
def summarize(novel_id, chapter):
    """Generate a one-paragraph summary of a chapter."""
    from agents.writing_assistant import WritingAssistant, summary_into

    async def _summarize(session):
        novel = session.load(novel_id)
        target = find_chapter(novel, chapter)
        if target is None:
            raise NovelWriterError(f"No chapter '{chapter}' in '{novel_id}'")
        assistant = WritingAssistant(settings=session.settings)
        with console.status("Summarizing..."):
            updated = await session.generate(
                lambda doc: assistant.summarize_chapter(target.title, target.content),
                summary_into(chapter),
            )
        return find_chapter(updated, chapter).summary if updated else None

    summary = _run_session(_summarize)
    if summary is None:
        console.print("[warning]Project closed before the summary arrived[/]")
        return
    console.print(success_panel("Summary", summary))


def main():
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
