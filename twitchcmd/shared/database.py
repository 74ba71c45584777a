"""JSON document storage for command settings.

Each document is one ``<name>.json`` file under the data directory, loaded
once and rewritten atomically on every change.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class Document:
    """One JSON document guarded by a re-entrant lock."""

    def __init__(self, path: Path, default: Callable[[], dict[str, Any]] | None = None) -> None:
        self.path = path
        self._default = default or dict
        self._lock = threading.RLock()
        self._data: dict[str, Any] = self._load()

    @property
    def name(self) -> str:
        return self.path.stem

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            logger.info(f"Creating document {self.path.name}")
            data = self._default()
            self._write(data)
            return data
        try:
            with self.path.open(encoding="utf-8") as fh:
                data = json.load(fh)
        except json.JSONDecodeError as e:
            raise ValueError(f"Document {self.path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Document {self.path} must hold a JSON object")
        # Top-level keys missing from older files
        for key, value in self._default().items():
            data.setdefault(key, value)
        return data

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def read(self) -> dict[str, Any]:
        """Deep copy of the current state."""
        with self._lock:
            return copy.deepcopy(self._data)

    @contextmanager
    def transaction(self) -> Iterator[dict[str, Any]]:
        """Yield the live data under the lock and persist it on clean exit.

        Changes are rolled back when the block raises.
        """
        with self._lock:
            snapshot = copy.deepcopy(self._data)
            try:
                yield self._data
            except BaseException:
                self._data = snapshot
                raise
            self._write(self._data)


class DocumentStore:
    """Opens and caches the JSON documents under ``data_dir``."""

    def __init__(self, data_dir: str | Path) -> None:
        self.data_dir = Path(data_dir)
        self._documents: dict[str, Document] = {}
        self._lock = threading.Lock()

    def connect(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Document store ready at {self.data_dir}")

    def document(self, name: str, default: Callable[[], dict[str, Any]] | None = None) -> Document:
        with self._lock:
            doc = self._documents.get(name)
            if doc is None:
                doc = Document(self.data_dir / f"{name}.json", default)
                self._documents[name] = doc
            return doc

    def check_health(self) -> bool:
        return self.data_dir.is_dir() and os.access(self.data_dir, os.W_OK)

    def disconnect(self) -> None:
        with self._lock:
            self._documents.clear()
        logger.info("Document store closed")
