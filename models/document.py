"""Document mutation primitives and structural cloning.

Every function here takes a Novel and returns a Novel. Inputs are never
changed in place. When a call has nothing to change (unknown id, boundary
move, identical values) the very same object is returned, so callers can
use an identity check to tell an edit from a no-op. Invalid input, such as
a duplicate id or a non-string field value, raises before anything is
built, so the document stays loadable after it is saved.
"""

import uuid
from dataclasses import fields, replace
from typing import Iterable, Optional

from models.chapter import Chapter, PlotPoint
from models.character import Character
from models.enums import MoveDirection
from models.novel import Novel, NovelSnapshot

DEFAULT_PLOT_POINT_TITLE = "New Plot Point"
DEFAULT_CHARACTER_NAME = "New Character"
NULLABLE_FIELDS = frozenset({"summary"})


def new_id() -> str:
    """Return a fresh entity id. Ids are never reused after deletion."""
    return uuid.uuid4().hex


# ---- Factories ----

def new_plot_point(title: str = DEFAULT_PLOT_POINT_TITLE, description: str = "") -> PlotPoint:
    return PlotPoint(id=new_id(), title=title, description=description)


def new_character(name: str = DEFAULT_CHARACTER_NAME, **attrs: str) -> Character:
    return Character(id=new_id(), name=name, **attrs)


def new_chapter(title: str, content: str = "") -> Chapter:
    return Chapter(id=new_id(), title=title, content=content)


def new_novel(novel_id: str, title: str) -> Novel:
    """Return an empty project with a single blank first chapter."""
    return Novel(id=novel_id, title=title, chapters=(new_chapter("Chapter 1"),))


# ---- Internal helpers ----

def _check_values(entity_cls: type, values: dict) -> None:
    for name, value in values.items():
        if value is None and name in NULLABLE_FIELDS:
            continue
        if not isinstance(value, str):
            raise TypeError(f"{entity_cls.__name__}.{name} must be a string, got {type(value).__name__}")


def _check_changes(entity_cls: type, changes: dict) -> None:
    if "id" in changes:
        raise ValueError(f"{entity_cls.__name__}.id cannot be changed")
    allowed = {f.name for f in fields(entity_cls)}
    unknown = set(changes) - allowed
    if unknown:
        raise TypeError(f"{entity_cls.__name__} has no field(s): {', '.join(sorted(unknown))}")
    _check_values(entity_cls, changes)


def _check_new(items: tuple, added: tuple) -> None:
    """Reject entities whose ids collide with the collection or each other."""
    seen = {item.id for item in items}
    for item in added:
        cls = type(item)
        if not isinstance(item.id, str) or not item.id:
            raise ValueError(f"{cls.__name__} needs a non-empty string id")
        if item.id in seen:
            raise ValueError(f"Duplicate {cls.__name__} id '{item.id}'")
        _check_values(cls, {f.name: getattr(item, f.name) for f in fields(cls) if f.name != "id"})
        seen.add(item.id)


def _update_item(items: tuple, item_id: str, changes: dict) -> tuple:
    for i, item in enumerate(items):
        if item.id == item_id:
            updated = replace(item, **changes)
            if updated == item:
                return items
            return items[:i] + (updated,) + items[i + 1:]
    return items


def _remove_item(items: tuple, item_id: str) -> tuple:
    kept = tuple(item for item in items if item.id != item_id)
    return items if len(kept) == len(items) else kept


def _with(novel: Novel, field_name: str, old: tuple, new: tuple) -> Novel:
    if new is old:
        return novel
    return replace(novel, **{field_name: new})


# ---- Title ----

def set_title(novel: Novel, title: str) -> Novel:
    if not isinstance(title, str):
        raise TypeError(f"Novel.title must be a string, got {type(title).__name__}")
    if title == novel.title:
        return novel
    return replace(novel, title=title)


# ---- Outline ----

def add_plot_point(novel: Novel, plot_point: Optional[PlotPoint] = None) -> Novel:
    added = (plot_point or new_plot_point(),)
    _check_new(novel.outline, added)
    return replace(novel, outline=novel.outline + added)


def append_plot_points(novel: Novel, plot_points: Iterable[PlotPoint]) -> Novel:
    added = tuple(plot_points)
    if not added:
        return novel
    _check_new(novel.outline, added)
    return replace(novel, outline=novel.outline + added)


def update_plot_point(novel: Novel, plot_point_id: str, **changes: str) -> Novel:
    _check_changes(PlotPoint, changes)
    return _with(novel, "outline", novel.outline, _update_item(novel.outline, plot_point_id, changes))


def delete_plot_point(novel: Novel, plot_point_id: str) -> Novel:
    return _with(novel, "outline", novel.outline, _remove_item(novel.outline, plot_point_id))


def move_plot_point(novel: Novel, index: int, direction: MoveDirection | str) -> Novel:
    """Swap the plot point at ``index`` with its neighbour above or below."""
    direction = MoveDirection(direction)
    target = index - 1 if direction is MoveDirection.UP else index + 1
    count = len(novel.outline)
    if not (0 <= index < count and 0 <= target < count):
        return novel
    outline = list(novel.outline)
    outline[index], outline[target] = outline[target], outline[index]
    return replace(novel, outline=tuple(outline))


# ---- Characters ----

def add_character(novel: Novel, character: Optional[Character] = None) -> Novel:
    added = (character or new_character(),)
    _check_new(novel.characters, added)
    return replace(novel, characters=novel.characters + added)


def update_character(novel: Novel, character_id: str, **changes: str) -> Novel:
    _check_changes(Character, changes)
    return _with(
        novel, "characters", novel.characters,
        _update_item(novel.characters, character_id, changes),
    )


def delete_character(novel: Novel, character_id: str) -> Novel:
    return _with(novel, "characters", novel.characters, _remove_item(novel.characters, character_id))


# ---- Chapters ----

def add_chapter(novel: Novel, chapter: Optional[Chapter] = None) -> Novel:
    chapter = chapter or new_chapter(f"Chapter {len(novel.chapters) + 1}")
    _check_new(novel.chapters, (chapter,))
    return replace(novel, chapters=novel.chapters + (chapter,))


def update_chapter(novel: Novel, chapter_id: str, **changes: Optional[str]) -> Novel:
    _check_changes(Chapter, changes)
    return _with(novel, "chapters", novel.chapters, _update_item(novel.chapters, chapter_id, changes))


def delete_chapter(novel: Novel, chapter_id: str) -> Novel:
    return _with(novel, "chapters", novel.chapters, _remove_item(novel.chapters, chapter_id))


def find_chapter(novel: Novel, chapter_id: str) -> Optional[Chapter]:
    return next((c for c in novel.chapters if c.id == chapter_id), None)


# ---- Structural clone ----

def clone_plot_point(plot_point: PlotPoint) -> PlotPoint:
    return PlotPoint(id=plot_point.id, title=plot_point.title, description=plot_point.description)


def clone_character(character: Character) -> Character:
    return Character(
        id=character.id,
        name=character.name,
        age=character.age,
        appearance=character.appearance,
        backstory=character.backstory,
        personality=character.personality,
        role_in_story=character.role_in_story,
    )


def clone_chapter(chapter: Chapter) -> Chapter:
    return Chapter(id=chapter.id, title=chapter.title, content=chapter.content, summary=chapter.summary)


def clone_snapshot(snapshot: NovelSnapshot | Novel) -> NovelSnapshot:
    """Copy a snapshot (or the content of a Novel) entity by entity.

    The result never carries version history.
    """
    return NovelSnapshot(
        id=snapshot.id,
        title=snapshot.title,
        outline=tuple(clone_plot_point(p) for p in snapshot.outline),
        characters=tuple(clone_character(c) for c in snapshot.characters),
        chapters=tuple(clone_chapter(c) for c in snapshot.chapters),
    )


def snapshot_of(novel: Novel) -> NovelSnapshot:
    """Return an independent copy of ``novel`` with its history stripped."""
    return clone_snapshot(novel)
