"""JSON encoding and validated decoding of novel documents.

The wire format uses the editor's original camelCase keys so exported files
stay interchangeable with earlier saves:

    {"id": ..., "title": ..., "outline": [...], "characters": [...],
     "chapters": [...], "versionHistory": [{"timestamp": ..., "novel": {...}}]}
"""

import json
from typing import Any, Optional

from config.exceptions import ValidationError
from models.chapter import Chapter, PlotPoint
from models.character import Character
from models.novel import Novel, NovelSnapshot, NovelVersion
from persistence.version_store import keep_newest
from tools.text_utils import sanitize_filename

# (attribute, wire key) pairs, excluding id
_PLOT_POINT_FIELDS = (("title", "title"), ("description", "description"))
_CHARACTER_FIELDS = (
    ("name", "name"),
    ("age", "age"),
    ("appearance", "appearance"),
    ("backstory", "backstory"),
    ("personality", "personality"),
    ("role_in_story", "roleInStory"),
)
_CHAPTER_FIELDS = (("title", "title"), ("content", "content"))

# Top-level keys every imported document must carry as lists
REQUIRED_LISTS = ("chapters", "characters", "outline", "versionHistory")


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

def _entity_to_dict(entity, field_map) -> dict:
    data = {"id": entity.id}
    for attr, key in field_map:
        data[key] = getattr(entity, attr)
    return data


def _chapter_to_dict(chapter: Chapter) -> dict:
    data = _entity_to_dict(chapter, _CHAPTER_FIELDS)
    if chapter.summary is not None:
        data["summary"] = chapter.summary
    return data


def _content_to_dict(doc: Novel | NovelSnapshot) -> dict:
    return {
        "id": doc.id,
        "title": doc.title,
        "outline": [_entity_to_dict(p, _PLOT_POINT_FIELDS) for p in doc.outline],
        "characters": [_entity_to_dict(c, _CHARACTER_FIELDS) for c in doc.characters],
        "chapters": [_chapter_to_dict(c) for c in doc.chapters],
    }


def novel_to_dict(novel: Novel) -> dict:
    data = _content_to_dict(novel)
    data["versionHistory"] = [
        {"timestamp": v.timestamp, "novel": _content_to_dict(v.novel)}
        for v in novel.version_history
    ]
    return data


def encode(novel: Novel, indent: Optional[int] = None) -> str:
    """Serialize a novel to JSON text. All fields are written."""
    return json.dumps(novel_to_dict(novel), ensure_ascii=False, indent=indent)


def export_filename(title: str, extension: str = ".json") -> str:
    """Return the download file name for a project title."""
    return f"{sanitize_filename(title)}{extension}"


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def _require_str(data: dict, key: str, path: str) -> str:
    value = data.get(key)
    if value is None:
        raise ValidationError(f"Missing required field '{path}'", field=path)
    if not isinstance(value, str):
        raise ValidationError(f"Field '{path}' must be a string", field=path)
    return value


def _require_list(data: dict, key: str, path: str) -> list:
    value = data.get(key)
    if value is None:
        raise ValidationError(f"Missing required field '{path}'", field=path)
    if not isinstance(value, list):
        raise ValidationError(f"Field '{path}' must be an array", field=path)
    return value


def _optional_str(data: dict, key: str, path: str, default: Optional[str] = "") -> Optional[str]:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValidationError(f"Field '{path}' must be a string", field=path)
    return value


def _parse_entities(items: list, path: str, cls: type, field_map, extra=()) -> tuple:
    parsed = []
    seen: set[str] = set()
    for index, item in enumerate(items):
        item_path = f"{path}[{index}]"
        if not isinstance(item, dict):
            raise ValidationError(f"'{item_path}' must be an object", field=item_path)
        entity_id = item.get("id")
        if not isinstance(entity_id, str) or not entity_id:
            raise ValidationError(f"'{item_path}.id' must be a non-empty string", field=f"{item_path}.id")
        if entity_id in seen:
            raise ValidationError(f"Duplicate id '{entity_id}' in '{path}'", field=f"{item_path}.id")
        seen.add(entity_id)
        values = {
            attr: _optional_str(item, key, f"{item_path}.{key}")
            for attr, key in field_map
        }
        for attr, key in extra:
            values[attr] = _optional_str(item, key, f"{item_path}.{key}", default=None)
        parsed.append(cls(id=entity_id, **values))
    return tuple(parsed)


def _parse_content(data: dict, path: str, novel_id: str) -> dict:
    """Parse the fields shared by a Novel and a NovelSnapshot."""
    prefix = f"{path}." if path else ""
    title = _require_str(data, "title", f"{prefix}title")
    chapters = _require_list(data, "chapters", f"{prefix}chapters")
    characters = _require_list(data, "characters", f"{prefix}characters")
    outline = _require_list(data, "outline", f"{prefix}outline")
    return {
        "id": novel_id,
        "title": title,
        "outline": _parse_entities(outline, f"{prefix}outline", PlotPoint, _PLOT_POINT_FIELDS),
        "characters": _parse_entities(characters, f"{prefix}characters", Character, _CHARACTER_FIELDS),
        "chapters": _parse_entities(
            chapters, f"{prefix}chapters", Chapter, _CHAPTER_FIELDS, extra=(("summary", "summary"),),
        ),
    }


def _parse_version(item: Any, path: str, novel_id: str) -> NovelVersion:
    if not isinstance(item, dict):
        raise ValidationError(f"'{path}' must be an object", field=path)
    timestamp = item.get("timestamp")
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        raise ValidationError(f"'{path}.timestamp' must be a number", field=f"{path}.timestamp")
    snapshot = item.get("novel")
    if not isinstance(snapshot, dict):
        raise ValidationError(f"'{path}.novel' must be an object", field=f"{path}.novel")
    snapshot_id = snapshot.get("id")
    if not isinstance(snapshot_id, str) or not snapshot_id:
        snapshot_id = novel_id
    # Any nested versionHistory in a snapshot is discarded: history is flat.
    content = _parse_content(snapshot, f"{path}.novel", snapshot_id)
    return NovelVersion(timestamp=int(timestamp), novel=NovelSnapshot(**content))


def decode(
    text: str,
    fallback_id: Optional[str] = None,
    history_capacity: Optional[int] = None,
) -> Novel:
    """Parse and validate a JSON document.

    Args:
        text: Encoded document.
        fallback_id: Id to use when the document has none.
        history_capacity: When given, keep only this many newest versions.

    Returns:
        The decoded Novel.

    Raises:
        ValidationError: The text is not JSON, or a required field is
            missing or has the wrong type. ``field`` names the culprit.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Document is not valid JSON: {e.msg}", field="$") from e

    if not isinstance(data, dict):
        raise ValidationError("Document must be a JSON object", field="$")

    _require_str(data, "title", "title")
    for key in REQUIRED_LISTS:
        _require_list(data, key, key)

    novel_id = data.get("id")
    if novel_id is None and fallback_id:
        novel_id = fallback_id
    if not isinstance(novel_id, str) or not novel_id:
        raise ValidationError("Field 'id' must be a non-empty string", field="id")

    content = _parse_content(data, "", novel_id)
    history = tuple(
        _parse_version(item, f"versionHistory[{index}]", novel_id)
        for index, item in enumerate(data["versionHistory"])
    )
    if history_capacity is not None:
        history = keep_newest(history, history_capacity)

    return Novel(version_history=history, **content)
