"""Tests for the custom exception hierarchy."""

import pytest
from config.exceptions import (
    NovelWriterError,
    ValidationError,
    InvalidConfigError,
    StorageError,
    DocumentNotFoundError,
    GenerationError,
    GenerationParseError,
    SessionError,
    NoActiveDocumentError,
)


class TestExceptionHierarchy:
    def test_all_inherit_from_base(self):
        leaf_classes = [
            ValidationError, InvalidConfigError,
            StorageError, DocumentNotFoundError,
            GenerationError, GenerationParseError,
            SessionError, NoActiveDocumentError,
        ]
        for cls in leaf_classes:
            assert issubclass(cls, NovelWriterError), f"{cls.__name__} must inherit NovelWriterError"

    def test_subclasses(self):
        assert issubclass(InvalidConfigError, ValidationError)
        assert issubclass(DocumentNotFoundError, StorageError)
        assert issubclass(GenerationParseError, GenerationError)
        assert issubclass(NoActiveDocumentError, SessionError)

    def test_catch_by_base(self):
        with pytest.raises(NovelWriterError):
            raise DocumentNotFoundError("x")


class TestExceptionMessages:
    def test_plain_message(self):
        assert str(StorageError("disk full")) == "disk full"

    def test_details_appended(self):
        err = StorageError("write failed", {"key": "novel-a"})
        assert str(err) == "write failed (key=novel-a)"
        assert err.details == {"key": "novel-a"}

    def test_validation_field(self):
        err = ValidationError("Missing required field 'chapters'", field="chapters")
        assert err.field == "chapters"
        assert "field=chapters" in str(err)

    def test_validation_without_field(self):
        err = ValidationError("bad")
        assert err.field is None
        assert str(err) == "bad"

    def test_document_not_found(self):
        err = DocumentNotFoundError("ghost")
        assert err.novel_id == "ghost"
        assert "ghost" in err.message

    def test_parse_error_keeps_raw_response(self):
        raw = "x" * 500
        err = GenerationParseError("no JSON", raw_response=raw)
        assert err.raw_response == raw
        assert len(err.details["raw_response"]) == 200

    def test_no_active_document(self):
        err = NoActiveDocumentError("save")
        assert err.operation == "save"
        assert "save" in str(err)
