"""Unified Rich theme and reusable UI helper functions for the CLI."""

from datetime import datetime

from rich import box
from rich.markup import escape
from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.theme import Theme
from rich.tree import Tree

NOVEL_THEME = Theme({
    "app.title": "bold",
    "success": "green",
    "warning": "yellow",
    "error": "red",
    "info": "blue",
    "muted": "dim",
    "accent": "cyan",
    "stat.label": "dim",
    "stat.value": "bold",
    "chapter.num": "blue",
    "character.name": "bold cyan",
})


def get_console() -> Console:
    """Return a Console instance with the novel theme applied."""
    return Console(theme=NOVEL_THEME)


def app_header(title: str = "novelwriter") -> Rule:
    """Return a Rule element for the application header banner."""
    return Rule(title=f"[bold]{title}[/]", style="dim")


def command_panel(title: str, fields: dict[str, str]) -> Panel:
    """Return a Panel displaying command parameters.

    Args:
        title: Panel title (e.g. "Import project").
        fields: Ordered dict of label -> value pairs.
    """
    lines = []
    for label, value in fields.items():
        lines.append(f"  [stat.label]{label}:[/] [stat.value]{value}[/]")
    body = "\n".join(lines)
    return Panel(body, title=f"[bold]{title}[/]", box=box.ROUNDED, border_style="dim", padding=(0, 2))


def success_panel(title: str, body: str) -> Panel:
    """Return a green-bordered Panel for success results."""
    return Panel(body, title=f"[success]{title}[/]", box=box.ROUNDED, border_style="green", padding=(0, 2))


def format_timestamp(timestamp_ms: int) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%Y-%m-%d %H:%M:%S")


def content_counts(doc) -> str:
    """'3 chapters, 2 characters, 5 plot points' for a Novel or snapshot."""
    return (
        f"{len(doc.chapters)} chapters, {len(doc.characters)} characters, "
        f"{len(doc.outline)} plot points"
    )


def novel_summary_panel(novel) -> Panel:
    """Return a Panel with the project's counts and history size."""
    body = (
        f"  [stat.label]Contents:[/] [stat.value]{content_counts(novel)}[/]\n"
        f"  [stat.label]Versions:[/] [stat.value]{len(novel.version_history)}[/]"
    )
    return Panel(
        body,
        title=f"[bold]{escape(novel.title)}[/] [muted](ID: {novel.id})[/]",
        box=box.ROUNDED,
        border_style="dim",
        padding=(0, 2),
    )


def structure_tree(novel) -> Tree:
    """Return a Tree of outline, characters and chapters."""
    tree = Tree(f"[bold]{escape(novel.title)}[/]")
    outline = tree.add("[accent]Outline[/]")
    for index, point in enumerate(novel.outline, start=1):
        outline.add(f"[chapter.num]{index}.[/] {escape(point.title)}")
    cast = tree.add("[accent]Characters[/]")
    for character in novel.characters:
        role = f" [muted]- {escape(character.role_in_story[:40])}[/]" if character.role_in_story else ""
        cast.add(f"[character.name]{escape(character.name)}[/]{role}")
    chapters = tree.add("[accent]Chapters[/]")
    for chapter in novel.chapters:
        words = len(chapter.content.split())
        chapters.add(f"{escape(chapter.title)} [muted]({words} words, id {chapter.id})[/]")
    return tree


def history_table(versions: list) -> Table:
    """Return a Table of versions, newest first."""
    table = Table(box=box.SIMPLE_HEAD)
    table.add_column("Timestamp", style="chapter.num")
    table.add_column("Saved on")
    table.add_column("Title")
    table.add_column("Contents", style="muted")
    for version in versions:
        table.add_row(
            str(version.timestamp),
            format_timestamp(version.timestamp),
            escape(version.novel.title),
            content_counts(version.novel),
        )
    return table
