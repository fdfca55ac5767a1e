"""File-backed key/value store, partitioned per user and per instrument."""

import json
import os
import re
import tempfile
from pathlib import Path
from typing import Any

from tradementor.config import Settings, get_settings
from tradementor.core.exceptions import StorageError

SAFE_SEGMENT = re.compile(r"[^A-Za-z0-9_.-]")


def _segment(value: str) -> str:
    cleaned = SAFE_SEGMENT.sub("_", value.strip())
    return cleaned or "_"


class JournalStore:
    """
    JSON documents under ``<data_dir>/<user>/<instrument>/<key>.json``.

    Values are plain JSON; callers own the shape of what they store.
    """

    def __init__(
        self,
        data_dir: Path | None = None,
        user: str | None = None,
        instrument: str | None = None,
        settings: Settings | None = None,
    ) -> None:
        journal = (settings or get_settings()).journal
        self.user = user or journal.user
        self.instrument = (instrument or journal.instrument).upper()
        base = data_dir if data_dir is not None else journal.resolved_data_dir
        self._root = Path(base) / _segment(self.user) / _segment(self.instrument)

    @property
    def root(self) -> Path:
        """Directory holding this partition's documents."""
        return self._root

    def _path(self, key: str) -> Path:
        return self._root / f"{_segment(key)}.json"

    def load(self, key: str, default: Any = None) -> Any:
        """Read a document, or ``default`` if it was never written."""
        path = self._path(key)
        if not path.exists():
            return default

        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(
                f"Failed to read journal document: {e}",
                operation="load",
                path=str(path),
            ) from e

    def save(self, key: str, value: Any) -> None:
        """Write a document atomically."""
        path = self._path(key)
        tmp_name = None
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._root, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f, indent=2)
            os.replace(tmp_name, path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(
                f"Failed to write journal document: {e}",
                operation="save",
                path=str(path),
            ) from e

    def delete(self, key: str) -> None:
        """Remove a document if present."""
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(
                f"Failed to delete journal document: {e}",
                operation="delete",
                path=str(path),
            ) from e

    def keys(self) -> list[str]:
        """Names of stored documents in this partition."""
        if not self._root.exists():
            return []
        return sorted(p.stem for p in self._root.glob("*.json"))
