"""
FlowFocus Local Persistence

This module provides the key-value backends and the debounced persistence
adapter that every collection writes through. Each collection lives under one
fixed key as a single JSON document and is always rewritten as a whole.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .settings import DefaultSettings

# Set up module logger
logger = logging.getLogger(__name__)

TModel = TypeVar('TModel', bound=BaseModel)


class KeyValueBackend(Protocol):
    """Minimal string key-value store."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class InMemoryBackend:
    """
    Dictionary-backed store, used for tests and throwaway sessions.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(initial or {})
        self.write_count = 0

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value
        self.write_count += 1

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileBackend:
    """
    Stores each key as ``<key>.json`` inside a data directory.
    """

    def __init__(self, data_dir: Path) -> None:
        """
        Initialize the backend for a data directory.

        Args:
            data_dir: Directory holding one JSON file per storage key
        """
        self.data_dir = Path(data_dir)

    def _path_for(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding='utf-8')

    def set(self, key: str, value: str) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        path = self._path_for(key)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(value, encoding='utf-8')
        tmp_path.replace(path)

    def delete(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)


class LocalPersistence:
    """
    Debounced persistence adapter over a key-value backend.

    Reads are synchronous. Saves are coalesced per key: a save cancels any
    write still pending for that key and schedules a new one after the quiet
    period, so a burst of edits produces a single write of the latest state.
    Call ``flush`` (or ``close``) before shutting down to write pending
    state immediately.
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        debounce_seconds: float = DefaultSettings.DEBOUNCE_SECONDS,
        timer_factory: Callable[..., threading.Timer] = threading.Timer
    ) -> None:
        """
        Initialize the adapter.

        Args:
            backend: Key-value store to read from and write to
            debounce_seconds: Quiet period before a save is written; 0 writes immediately
            timer_factory: Factory with the ``threading.Timer`` signature
        """
        self.backend = backend
        self.debounce_seconds = debounce_seconds
        self._timer_factory = timer_factory
        self._lock = threading.RLock()
        self._pending: Dict[str, str] = {}
        self._timers: Dict[str, threading.Timer] = {}

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def load(self, key: str) -> Optional[Any]:
        """
        Load the raw JSON value stored under a key.

        A write still pending for the key takes precedence over the backend.

        Args:
            key: Storage key

        Returns:
            Parsed JSON value, or None when the key is absent or unreadable
        """
        with self._lock:
            raw = self._pending.get(key)

        try:
            if raw is None:
                raw = self.backend.get(key)
            if raw is None:
                return None
            return json.loads(raw)
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Failed to load '{key}' from storage, ignoring stored data: {e}")
            return None

    def load_collection(
        self,
        key: str,
        model_class: Type[TModel],
        default: Sequence[TModel] = ()
    ) -> List[TModel]:
        """
        Load a collection of records and validate each against a model.

        Absent or malformed data yields a copy of ``default``. Individual
        records that fail validation are skipped with a warning, as are earlier
        records sharing an id with a later one.

        Args:
            key: Storage key
            model_class: Pydantic model for one record
            default: Collection to use when nothing usable is stored

        Returns:
            List of validated records
        """
        data = self.load(key)

        if data is None:
            return [item.model_copy(deep=True) for item in default]

        if not isinstance(data, list):
            logger.error(
                f"Expected a JSON array under '{key}', got {type(data).__name__}; using defaults"
            )
            return [item.model_copy(deep=True) for item in default]

        items: List[TModel] = []
        for index, record in enumerate(data):
            try:
                items.append(model_class.model_validate(record))
            except ValidationError as e:
                logger.warning(f"Skipping invalid {model_class.__name__} record #{index} in '{key}': {e}")

        return self._drop_duplicate_ids(key, items)

    @staticmethod
    def _drop_duplicate_ids(key: str, items: List[TModel]) -> List[TModel]:
        """Keep the last record stored under each id."""
        seen = set()
        kept: List[TModel] = []
        for item in reversed(items):
            item_id = getattr(item, "id", None)
            if item_id is not None and item_id in seen:
                logger.warning(f"Dropping duplicate {type(item).__name__} id '{item_id}' in '{key}'")
                continue
            seen.add(item_id)
            kept.append(item)
        kept.reverse()
        return kept

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def save(self, key: str, payload: Any) -> None:
        """
        Schedule a write of ``payload`` under ``key``.

        The payload is serialized right away, so later mutation of the caller's
        objects does not leak into the write.

        Args:
            key: Storage key
            payload: JSON-serializable value (usually a list of records)
        """
        serialized = json.dumps(payload, ensure_ascii=False)

        with self._lock:
            self._pending[key] = serialized
            self._cancel_timer(key)

            if self.debounce_seconds <= 0:
                self._write(key)
                return

            timer = self._timer_factory(self.debounce_seconds, self._write, args=(key,))
            timer.daemon = True
            self._timers[key] = timer
            timer.start()

    def flush(self, key: Optional[str] = None) -> None:
        """
        Write pending state immediately.

        Args:
            key: Only flush this key; flush every pending key when None
        """
        with self._lock:
            keys = [key] if key is not None else list(self._pending)
            for pending_key in keys:
                self._cancel_timer(pending_key)
                self._write(pending_key)

    def remove(self, key: str) -> None:
        """
        Drop any pending write for ``key`` and delete it from the backend.

        Args:
            key: Storage key
        """
        with self._lock:
            self._cancel_timer(key)
            self._pending.pop(key, None)
            try:
                self.backend.delete(key)
            except OSError as e:
                logger.error(f"Failed to remove '{key}' from storage: {e}")

    def close(self) -> None:
        """Flush all pending writes."""
        self.flush()

    @property
    def pending_keys(self) -> List[str]:
        """Keys with a write that has not reached the backend yet."""
        with self._lock:
            return list(self._pending)

    def _cancel_timer(self, key: str) -> None:
        timer = self._timers.pop(key, None)
        if timer is not None:
            timer.cancel()

    def _write(self, key: str) -> None:
        with self._lock:
            serialized = self._pending.pop(key, None)
            self._timers.pop(key, None)
            if serialized is None:
                return

            try:
                self.backend.set(key, serialized)
                logger.debug(f"Wrote '{key}' to storage ({len(serialized)} bytes)")
            except OSError as e:
                logger.error(f"Failed to save '{key}' to storage: {e}")


def create_persistence(data_dir: Path, debounce_seconds: float = DefaultSettings.DEBOUNCE_SECONDS) -> LocalPersistence:
    """
    Factory function to create file-backed persistence for a data directory.

    Args:
        data_dir: Directory for the collection files
        debounce_seconds: Quiet period before writes

    Returns:
        Configured LocalPersistence instance
    """
    return LocalPersistence(JsonFileBackend(data_dir), debounce_seconds=debounce_seconds)
