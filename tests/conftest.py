"""Shared pytest fixtures for the novelwriter test suite."""

import pytest
from unittest.mock import MagicMock, AsyncMock

# 2023-11-14T22:13:20Z, in seconds
CLOCK_START = 1_700_000_000.0


# ---------------------------------------------------------------------------
# Settings fixture
# ---------------------------------------------------------------------------

@pytest.fixture
def settings(tmp_path):
    """Return a Settings instance with all paths pointing to tmp_path."""
    from config.settings import Settings
    return Settings(
        _env_file=None,
        storage_db_path=tmp_path / "novels.db",
        export_dir=tmp_path / "exports",
        log_dir=tmp_path / "logs",
        version_history_capacity=5,
        autosave_debounce_seconds=2.0,
        snapshot_interval_seconds=300.0,
        save_status_display_seconds=2.0,
    )


# ---------------------------------------------------------------------------
# Storage, timers and session
# ---------------------------------------------------------------------------

@pytest.fixture
def timers():
    """Return a virtual clock starting at a fixed wall-clock time."""
    from workflow.timers import ManualTimerSource
    return ManualTimerSource(start=CLOCK_START)


@pytest.fixture
def store():
    from persistence.storage import MemoryStore
    return MemoryStore()


class RecordingCallback:
    """Session callback that keeps every event for assertions."""

    def __init__(self):
        self.persisted = []
        self.snapshots = []
        self.statuses = []
        self.warnings = []

    def on_persisted(self, novel_id, reason):
        self.persisted.append((novel_id, reason))

    def on_snapshot(self, novel_id, version):
        self.snapshots.append((novel_id, version))

    def on_save_status(self, status):
        self.statuses.append(status)

    def on_warning(self, message, error=None):
        self.warnings.append((message, error))


@pytest.fixture
def callback():
    return RecordingCallback()


@pytest.fixture
def session(store, timers, settings, callback):
    """Return a NovelSession on in-memory storage and virtual time."""
    from workflow.session import NovelSession
    s = NovelSession(store, timers, settings=settings, callback=callback)
    yield s
    s.close(flush=False)


# ---------------------------------------------------------------------------
# Sample data fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_novel():
    """Return a populated Novel with one version in its history."""
    from models.chapter import Chapter, PlotPoint
    from models.character import Character
    from models.novel import Novel, NovelSnapshot, NovelVersion

    outline = (
        PlotPoint(id="p1", title="The Call", description="A letter arrives."),
        PlotPoint(id="p2", title="The Road", description="She sets out north."),
    )
    characters = (
        Character(
            id="c1",
            name="Mara Quill",
            age="34",
            appearance="Ink-stained fingers",
            backstory="Former cartographer",
            personality="Stubborn, curious",
            role_in_story="Protagonist",
        ),
    )
    chapters = (
        Chapter(id="ch1", title="Chapter 1", content="The letter was damp.", summary="Mara gets a letter."),
        Chapter(id="ch2", title="Chapter 2", content=""),
    )
    older = NovelSnapshot(
        id="long-road",
        title="The Long Road (draft)",
        outline=outline[:1],
        characters=(),
        chapters=(Chapter(id="ch1", title="Chapter 1", content="The letter."),),
    )
    return Novel(
        id="long-road",
        title="The Long Road",
        outline=outline,
        characters=characters,
        chapters=chapters,
        version_history=(NovelVersion(timestamp=1_699_999_000_000, novel=older),),
    )


# ---------------------------------------------------------------------------
# LLM Client mocks
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_llm():
    """Return a MagicMock replacing AgentSDKClient."""
    llm = MagicMock()
    llm.chat = AsyncMock(return_value="The rain did not stop for three days.")
    return llm


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

@pytest.fixture
def restore_logging():
    """Put back the root and channel loggers after setup_logging ran."""
    import logging
    from config.logging_config import CHANNEL_LOGS
    names = [None, *CHANNEL_LOGS]
    saved = {name: (list(logging.getLogger(name).handlers), logging.getLogger(name).level) for name in names}
    yield
    for name, (handlers, level) in saved.items():
        log = logging.getLogger(name)
        for handler in log.handlers:
            if handler not in handlers:
                handler.close()
        log.handlers[:] = handlers
        log.setLevel(level)
