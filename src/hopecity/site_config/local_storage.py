"""On-disk key/value blobs standing in for browser local storage.

All keys live in one JSON object file.  Writes replace the file atomically
(temporary file + ``os.replace``) so a concurrently running reader sees
either the previous or the new contents, never a torn write.  Reads take no
lock.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

import structlog

logger = structlog.get_logger()

CONFIG_STORAGE_KEY = "hopeCity_pageConfig"
PIN_STORAGE_KEY = "hopeCity_adminPin"


class LocalStorage:
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except UnicodeDecodeError as e:
            logger.warning("local_storage_corrupt", path=str(self.path), error=str(e))
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("local_storage_corrupt", path=str(self.path), error=str(e))
            return {}
        if not isinstance(data, dict):
            logger.warning("local_storage_corrupt", path=str(self.path), error="not an object")
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, items: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(items, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        """Store *value* under *key*.

        Raises:
            OSError: If the storage file cannot be written.
        """
        items = self._read_all()
        items[key] = value
        self._write_all(items)

    def remove_item(self, key: str) -> None:
        items = self._read_all()
        if items.pop(key, None) is not None:
            self._write_all(items)
