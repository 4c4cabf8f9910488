"""Persistence package — codec, version history, and key-value storage."""

from persistence.codec import encode, decode, export_filename, novel_to_dict
from persistence.storage import KeyValueStore, MemoryStore, SqliteStore, storage_key
from persistence.version_store import VersionStore, keep_newest

__all__ = [
    "encode",
    "decode",
    "export_filename",
    "novel_to_dict",
    "KeyValueStore",
    "MemoryStore",
    "SqliteStore",
    "storage_key",
    "VersionStore",
    "keep_newest",
]
