"""Tests for JSON encoding and validated decoding."""

import json

import pytest

from config.exceptions import ValidationError


def _minimal(**overrides) -> dict:
    data = {
        "id": "doc",
        "title": "X",
        "chapters": [],
        "characters": [],
        "outline": [],
        "versionHistory": [],
    }
    data.update(overrides)
    return data


class TestEncode:
    def test_wire_keys(self, sample_novel):
        from persistence.codec import encode
        data = json.loads(encode(sample_novel))
        assert set(data) == {"id", "title", "outline", "characters", "chapters", "versionHistory"}
        assert data["characters"][0]["roleInStory"] == "Protagonist"
        assert data["versionHistory"][0]["timestamp"] == 1_699_999_000_000

    def test_summary_omitted_when_absent(self, sample_novel):
        from persistence.codec import encode
        data = json.loads(encode(sample_novel))
        assert data["chapters"][0]["summary"] == "Mara gets a letter."
        assert "summary" not in data["chapters"][1]

    def test_snapshots_have_no_history(self, sample_novel):
        from persistence.codec import encode
        data = json.loads(encode(sample_novel))
        assert "versionHistory" not in data["versionHistory"][0]["novel"]

    def test_non_ascii_kept(self):
        from models.novel import Novel
        from persistence.codec import encode
        assert "Café" in encode(Novel(id="c", title="Café"))

    def test_indent(self, sample_novel):
        from persistence.codec import encode
        assert "\n  " in encode(sample_novel, indent=2)


class TestDecode:
    def test_round_trip(self, sample_novel):
        from persistence.codec import decode, encode
        assert decode(encode(sample_novel)) == sample_novel

    def test_minimal_document(self):
        from persistence.codec import decode
        novel = decode(json.dumps(_minimal()))
        assert novel.id == "doc"
        assert novel.title == "X"
        assert novel.chapters == ()

    def test_missing_chapters_named(self):
        from persistence.codec import decode
        data = _minimal()
        del data["chapters"]
        with pytest.raises(ValidationError) as exc:
            decode(json.dumps(data))
        assert exc.value.field == "chapters"
        assert "chapters" in str(exc.value)

    def test_missing_outline_named(self, sample_novel):
        from persistence.codec import decode, novel_to_dict
        data = novel_to_dict(sample_novel)
        del data["outline"]
        with pytest.raises(ValidationError) as exc:
            decode(json.dumps(data))
        assert exc.value.field == "outline"

    def test_missing_title(self):
        from persistence.codec import decode
        data = _minimal()
        del data["title"]
        with pytest.raises(ValidationError, match="title"):
            decode(json.dumps(data))

    def test_list_field_wrong_type(self):
        from persistence.codec import decode
        with pytest.raises(ValidationError, match="must be an array") as exc:
            decode(json.dumps(_minimal(characters={"a": 1})))
        assert exc.value.field == "characters"

    def test_not_json(self):
        from persistence.codec import decode
        with pytest.raises(ValidationError, match="not valid JSON") as exc:
            decode("{oops")
        assert exc.value.field == "$"

    def test_not_an_object(self):
        from persistence.codec import decode
        with pytest.raises(ValidationError, match="JSON object"):
            decode("[1, 2]")

    def test_missing_id_uses_fallback(self):
        from persistence.codec import decode
        data = _minimal()
        del data["id"]
        assert decode(json.dumps(data), fallback_id="current").id == "current"

    def test_missing_id_without_fallback(self):
        from persistence.codec import decode
        data = _minimal()
        del data["id"]
        with pytest.raises(ValidationError) as exc:
            decode(json.dumps(data))
        assert exc.value.field == "id"

    def test_entity_field_path(self):
        from persistence.codec import decode
        data = _minimal(chapters=[{"id": "a", "title": "A"}, {"title": "no id"}])
        with pytest.raises(ValidationError) as exc:
            decode(json.dumps(data))
        assert exc.value.field == "chapters[1].id"

    def test_duplicate_entity_id(self):
        from persistence.codec import decode
        data = _minimal(outline=[{"id": "p", "title": "A"}, {"id": "p", "title": "B"}])
        with pytest.raises(ValidationError, match="Duplicate"):
            decode(json.dumps(data))

    def test_optional_entity_fields_default_empty(self):
        from persistence.codec import decode
        novel = decode(json.dumps(_minimal(characters=[{"id": "c", "name": "Ada"}])))
        assert novel.characters[0].backstory == ""
        assert novel.characters[0].role_in_story == ""

    def test_entity_field_wrong_type(self):
        from persistence.codec import decode
        data = _minimal(chapters=[{"id": "a", "content": 42}])
        with pytest.raises(ValidationError) as exc:
            decode(json.dumps(data))
        assert exc.value.field == "chapters[0].content"

    def test_version_timestamp_must_be_number(self):
        from persistence.codec import decode
        version = {"timestamp": "yesterday", "novel": _minimal()}
        with pytest.raises(ValidationError) as exc:
            decode(json.dumps(_minimal(versionHistory=[version])))
        assert exc.value.field == "versionHistory[0].timestamp"

    def test_version_snapshot_validated(self):
        from persistence.codec import decode
        snapshot = _minimal()
        del snapshot["chapters"]
        version = {"timestamp": 5, "novel": snapshot}
        with pytest.raises(ValidationError) as exc:
            decode(json.dumps(_minimal(versionHistory=[version])))
        assert exc.value.field == "versionHistory[0].novel.chapters"

    def test_nested_history_discarded(self):
        from persistence.codec import decode
        inner = _minimal(versionHistory=[{"timestamp": 1, "novel": _minimal()}])
        novel = decode(json.dumps(_minimal(versionHistory=[{"timestamp": 2, "novel": inner}])))
        assert len(novel.version_history) == 1
        assert not hasattr(novel.version_history[0].novel, "version_history")

    def test_float_timestamp_converted(self):
        from persistence.codec import decode
        version = {"timestamp": 1700000000000.0, "novel": _minimal()}
        novel = decode(json.dumps(_minimal(versionHistory=[version])))
        assert novel.version_history[0].timestamp == 1_700_000_000_000

    def test_history_truncated_to_newest(self):
        from persistence.codec import decode
        history = [{"timestamp": ts, "novel": _minimal(title=f"v{ts}")} for ts in (50, 40, 30, 20, 10)]
        novel = decode(json.dumps(_minimal(versionHistory=history)), history_capacity=3)
        assert [v.timestamp for v in novel.version_history] == [50, 40, 30]

    def test_truncation_keeps_stored_order(self):
        from persistence.codec import decode
        history = [{"timestamp": ts, "novel": _minimal()} for ts in (10, 30, 20, 40)]
        novel = decode(json.dumps(_minimal(versionHistory=history)), history_capacity=2)
        assert [v.timestamp for v in novel.version_history] == [30, 40]


class TestExportFilename:
    def test_sanitized(self):
        from persistence.codec import export_filename
        assert export_filename("The Long Road!") == "the_long_road.json"

    def test_empty_title(self):
        from persistence.codec import export_filename
        assert export_filename("???", ".txt") == "untitled.txt"
