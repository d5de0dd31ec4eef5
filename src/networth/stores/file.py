"""FileLocalStore — LocalStore backed by a single JSON file on disk.

The file holds a flat ``{key: string}`` object. Every ``set`` rewrites the
whole file through a temp file and ``os.replace`` so a crash mid-write
leaves the previous contents intact.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_STORE_PATH = Path.home() / ".networth" / "store.json"


class FileLocalStore:
    """Persistent key -> string mapping scoped to one file.

    A missing file reads as an empty store. A file that is not a JSON
    object raises ``ValueError`` on read rather than being overwritten.
    """

    def __init__(self, path: str | Path = DEFAULT_STORE_PATH) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        raw = self._path.read_text(encoding="utf-8")
        if not raw.strip():
            return {}
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"local store {self._path} is not a JSON object")
        bad_keys = [k for k, v in data.items() if not isinstance(v, str)]
        if bad_keys:
            raise ValueError(
                f"local store {self._path} has non-string values for {bad_keys}"
            )
        return data

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = value
            self._write_all(data)

    def _write_all(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            prefix=".store_", suffix=".json", dir=self._path.parent,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self._path)
        finally:
            if os.path.exists(tmp_path):
                try:
                    os.remove(tmp_path)
                except OSError:
                    logger.warning("Failed to remove temp file %s", tmp_path)
