"""Small key-value store persisted as one JSON document on disk."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

from ..common.errors import PersistenceError


class JsonKeyValueStore:
    """``get_item``/``set_item``/``remove_item`` over a JSON file.

    Values are stored as strings, exactly as a browser's local storage would
    keep them; callers serialize their own payloads.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Cannot read {self.path.name}: {exc}") from exc
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"Corrupt store {self.path.name}: {exc}") from exc
        if not isinstance(data, dict):
            raise PersistenceError(f"Corrupt store {self.path.name}: expected an object")
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".store-", suffix=".json", dir=self.path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(data, handle, indent=2, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise PersistenceError(f"Cannot write {self.path.name}: {exc}") from exc

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def _read_for_update(self) -> Dict[str, str]:
        try:
            return self._read_all()
        except PersistenceError as exc:
            logger.warning(f"Resetting unreadable store: {exc}")
            return {}

    def set_item(self, key: str, value: str) -> None:
        data = self._read_for_update()
        data[key] = value
        self._write_all(data)
        logger.debug(f"Stored key {key!r} ({len(value)} chars)")

    def remove_item(self, key: str) -> None:
        data = self._read_for_update()
        if data.pop(key, None) is not None:
            self._write_all(data)

    def get_json(self, key: str, default: Any = None) -> Any:
        raw = self.get_item(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"Corrupt value for {key!r}: {exc}") from exc

    def set_json(self, key: str, value: Any) -> None:
        self.set_item(key, json.dumps(value, ensure_ascii=False))
