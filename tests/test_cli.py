"""Tests for the click command-line interface."""

import json
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

pytestmark = pytest.mark.usefixtures("restore_logging")


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    """Point every CLI path setting at tmp_path."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("STORAGE_DB_PATH", str(tmp_path / "novels.db"))
    monkeypatch.setenv("EXPORT_DIR", str(tmp_path / "exports"))
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    return tmp_path


@pytest.fixture
def runner():
    return CliRunner()


def _invoke(runner, *args, **kwargs):
    from cli.main import cli
    return runner.invoke(cli, list(args), **kwargs)


def _stored(tmp_path, novel_id):
    from persistence.codec import decode
    from persistence.storage import SqliteStore, storage_key
    return decode(SqliteStore(tmp_path / "novels.db").get(storage_key(novel_id)))


class TestNewAndList:
    def test_new_creates_project(self, cli_env, runner):
        result = _invoke(runner, "new", "Alpha Draft")
        assert result.exit_code == 0, result.output
        assert "alpha-draft" in result.output
        novel = _stored(cli_env, "alpha-draft")
        assert novel.title == "Alpha Draft"
        assert len(novel.chapters) == 1

    def test_new_empty_title_fails(self, cli_env, runner):
        result = _invoke(runner, "new", "  ")
        assert result.exit_code == 1

    def test_list(self, cli_env, runner):
        _invoke(runner, "new", "Beta")
        _invoke(runner, "new", "Alpha")
        result = _invoke(runner, "list")
        assert result.exit_code == 0
        assert result.output.index("alpha") < result.output.index("beta")

    def test_list_empty(self, cli_env, runner):
        result = _invoke(runner, "list")
        assert result.exit_code == 0
        assert "No projects" in result.output


class TestShow:
    def test_show(self, cli_env, runner):
        _invoke(runner, "new", "Alpha Draft")
        result = _invoke(runner, "show", "-n", "alpha-draft")
        assert result.exit_code == 0, result.output
        assert "Chapter 1" in result.output

    def test_show_missing(self, cli_env, runner):
        result = _invoke(runner, "show", "-n", "ghost")
        assert result.exit_code == 1
        assert "ghost" in result.output


class TestVersions:
    def test_history_empty(self, cli_env, runner):
        _invoke(runner, "new", "Alpha Draft")
        result = _invoke(runner, "history", "-n", "alpha-draft")
        assert result.exit_code == 0
        assert "No versions" in result.output

    def test_snapshot_then_history(self, cli_env, runner):
        _invoke(runner, "new", "Alpha Draft")
        result = _invoke(runner, "snapshot", "-n", "alpha-draft")
        assert result.exit_code == 0, result.output
        novel = _stored(cli_env, "alpha-draft")
        assert len(novel.version_history) == 1
        history = _invoke(runner, "history", "-n", "alpha-draft")
        assert str(novel.version_history[0].timestamp) in history.output

    def test_restore_forced(self, cli_env, runner):
        from persistence.codec import encode
        from persistence.storage import SqliteStore, storage_key
        from models.document import set_title
        _invoke(runner, "new", "Alpha Draft")
        _invoke(runner, "snapshot", "-n", "alpha-draft")
        novel = _stored(cli_env, "alpha-draft")
        SqliteStore(cli_env / "novels.db").set(
            storage_key("alpha-draft"), encode(set_title(novel, "Renamed")),
        )
        ts = novel.version_history[0].timestamp
        result = _invoke(runner, "restore", "-n", "alpha-draft", "-t", str(ts), "--force")
        assert result.exit_code == 0, result.output
        restored = _stored(cli_env, "alpha-draft")
        assert restored.title == "Alpha Draft"
        assert len(restored.version_history) == 1

    def test_restore_declined(self, cli_env, runner):
        _invoke(runner, "new", "Alpha Draft")
        _invoke(runner, "snapshot", "-n", "alpha-draft")
        ts = _stored(cli_env, "alpha-draft").version_history[0].timestamp
        result = _invoke(runner, "restore", "-n", "alpha-draft", "-t", str(ts), input="n\n")
        assert result.exit_code == 0
        assert "Cancelled" in result.output

    def test_restore_unknown_version(self, cli_env, runner):
        _invoke(runner, "new", "Alpha Draft")
        result = _invoke(runner, "restore", "-n", "alpha-draft", "-t", "42", "--force")
        assert result.exit_code == 1
        assert "No version" in result.output


class TestImportExport:
    def test_export(self, cli_env, runner):
        _invoke(runner, "new", "Alpha Draft")
        out = cli_env / "out"
        result = _invoke(runner, "export", "-n", "alpha-draft", "-o", str(out))
        assert result.exit_code == 0, result.output
        data = json.loads((out / "alpha_draft.json").read_text(encoding="utf-8"))
        assert data["title"] == "Alpha Draft"

    def test_import_forced(self, cli_env, runner, sample_novel):
        from persistence.codec import encode
        path = cli_env / "incoming.json"
        path.write_text(encode(sample_novel), encoding="utf-8")
        result = _invoke(runner, "import", str(path), "--force")
        assert result.exit_code == 0, result.output
        assert _stored(cli_env, "long-road") == sample_novel

    def test_import_declined(self, cli_env, runner, sample_novel):
        from persistence.codec import encode
        from persistence.storage import SqliteStore
        path = cli_env / "incoming.json"
        path.write_text(encode(sample_novel), encoding="utf-8")
        result = _invoke(runner, "import", str(path), input="n\n")
        assert result.exit_code == 0
        assert "Cancelled" in result.output
        assert SqliteStore(cli_env / "novels.db").keys("novel-") == []

    def test_import_invalid(self, cli_env, runner):
        path = cli_env / "broken.json"
        path.write_text('{"title": "X", "characters": [], "versionHistory": []}', encoding="utf-8")
        result = _invoke(runner, "import", str(path), "--force")
        assert result.exit_code == 1
        assert "rejected" in result.output


class TestEditAndSummarize:
    def test_edit_chapter(self, cli_env, runner):
        _invoke(runner, "new", "Alpha Draft")
        chapter_id = _stored(cli_env, "alpha-draft").chapters[0].id
        with patch("cli.main.click.edit", return_value="Hello world\n"):
            result = _invoke(runner, "edit", "-n", "alpha-draft", "-c", chapter_id)
        assert result.exit_code == 0, result.output
        assert _stored(cli_env, "alpha-draft").chapters[0].content == "Hello world"

    def test_edit_cancelled(self, cli_env, runner):
        _invoke(runner, "new", "Alpha Draft")
        chapter_id = _stored(cli_env, "alpha-draft").chapters[0].id
        with patch("cli.main.click.edit", return_value=None):
            result = _invoke(runner, "edit", "-n", "alpha-draft", "-c", chapter_id)
        assert "cancelled" in result.output

    def test_edit_unknown_chapter(self, cli_env, runner):
        _invoke(runner, "new", "Alpha Draft")
        result = _invoke(runner, "edit", "-n", "alpha-draft", "-c", "nope")
        assert result.exit_code == 1

    def test_summarize(self, cli_env, runner):
        _invoke(runner, "new", "Alpha Draft")
        chapter_id = _stored(cli_env, "alpha-draft").chapters[0].id
        with patch(
            "agents.writing_assistant.WritingAssistant.summarize_chapter",
            new=AsyncMock(return_value="A quiet opening."),
        ):
            result = _invoke(runner, "summarize", "-n", "alpha-draft", "-c", chapter_id)
        assert result.exit_code == 0, result.output
        assert "A quiet opening." in result.output
        assert _stored(cli_env, "alpha-draft").chapters[0].summary == "A quiet opening."
