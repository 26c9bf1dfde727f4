"""
app/db/store.py

Purpose: JSON document datastore

- Holds the single authoritative in-memory document
- Loads it from disk at startup (fail-fast on missing/malformed file)
- Rewrites the whole file on every mutation
- Document-wide lock around every mutate + flush sequence
"""

from contextlib import contextmanager
from pathlib import Path
from threading import RLock
from typing import Any, Dict, Iterator, List, Optional
import json
import os

from app.core.exceptions import StoreLoadError
from app.core.logging import get_logger

logger = get_logger(__name__)

COLLECTIONS = ("user", "orders", "banners")


class JsonStore:
    """
    In-memory JSON document mirrored to a file.

    Readers use `document` directly. Writers mutate inside `transaction()`,
    which serializes them and flushes when the block completes.
    """

    def __init__(self, path):
        self.path = Path(path)
        self.document: Dict[str, Any] = {}
        self._lock = RLock()
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def load(self) -> Dict[str, Any]:
        """
        Reads and parses the backing file, replacing the in-memory document.

        Raises:
            StoreLoadError: file missing, unreadable, not JSON, or not an object
        """
        with self._lock:
            try:
                raw = self.path.read_text(encoding="utf-8")
            except OSError as e:
                raise StoreLoadError(f"Cannot read datastore {self.path}: {e}") from e

            try:
                document = json.loads(raw)
            except json.JSONDecodeError as e:
                raise StoreLoadError(f"Datastore {self.path} is not valid JSON: {e}") from e

            if not isinstance(document, dict):
                raise StoreLoadError(f"Datastore {self.path} root must be a JSON object")

            self.document = document
            self._loaded = True

            logger.info(
                f"Datastore loaded from {self.path}",
                extra={name: len(document.get(name) or []) for name in COLLECTIONS}
            )
            return self.document

    def flush(self):
        """
        Writes the whole document to disk.

        The file is replaced via a sibling temp file; write errors propagate.
        """
        with self._lock:
            payload = json.dumps(self.document, indent=2, ensure_ascii=False)
            tmp_path = self.path.with_name(self.path.name + ".tmp")
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
            logger.debug(f"Datastore flushed ({len(payload)} bytes)")

    @contextmanager
    def transaction(self) -> Iterator[Dict[str, Any]]:
        """
        Holds the document lock for a mutation and flushes on success.

        Usage:
            with store.transaction() as doc:
                doc["orders"].append(order)
        """
        with self._lock:
            yield self.document
            self.flush()

    def collection(self, name: str) -> List[Dict[str, Any]]:
        """
        Returns the named top-level list, creating it when absent.
        """
        items = self.document.get(name)
        if items is None:
            items = []
            self.document[name] = items
        return items

    def next_sequence(self, name: str, seed: int = 0) -> int:
        """
        Increments and returns the counter `name` kept under `counters`.

        `seed` initializes a counter the document does not have yet.
        Must be called inside `transaction()` so the bump is flushed.
        """
        with self._lock:
            counters = self.document.setdefault("counters", {})
            value = max(int(counters.get(name, seed)), seed) + 1
            counters[name] = value
            return value


# Global store instance
_store: Optional[JsonStore] = None


def init_store(path) -> JsonStore:
    """
    Creates the global store and loads it from `path`.
    Called during application startup; raises StoreLoadError on failure.
    """
    global _store

    store = JsonStore(path)
    store.load()
    _store = store
    return _store


def close_store():
    """
    Drops the global store. Called during application shutdown.
    """
    global _store

    if _store:
        logger.info("Closing datastore")
        _store = None


def get_store() -> JsonStore:
    """
    Returns the global store.

    Raises:
        RuntimeError: If the store is not initialized
    """
    if _store is None:
        raise RuntimeError(
            "Datastore not initialized. Call init_store() during startup."
        )
    return _store


def check_store_health() -> bool:
    """
    True when the store is loaded and its backing file still exists.
    """
    if _store is None or not _store.is_loaded:
        return False
    return _store.path.is_file()
