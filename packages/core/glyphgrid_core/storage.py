"""Best-effort key/value persistence for frame state.

Stores never raise: a failed write returns False and a failed read leaves the
target untouched, which callers treat as "no prior state".
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, MutableMapping, Protocol

from .logging_setup import get_logger

logger = get_logger("storage")


class StateStore(Protocol):
    def store(self, key: str, obj: Any) -> bool:
        ...

    def restore(self, key: str, target: MutableMapping[str, Any] | None = None) -> MutableMapping[str, Any]:
        ...

    def clear(self, key: str) -> None:
        ...


class MemoryStore:
    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def store(self, key: str, obj: Any) -> bool:
        try:
            self._items[key] = json.dumps(obj)
        except (TypeError, ValueError):
            return False
        return True

    def restore(self, key: str, target: MutableMapping[str, Any] | None = None) -> MutableMapping[str, Any]:
        target = {} if target is None else target
        raw = self._items.get(key)
        if raw:
            try:
                target.update(json.loads(raw))
            except ValueError:
                pass
        return target

    def clear(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStore:
    """All keys live in one JSON object on disk."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict[str, Any]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict[str, Any]) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp.write_text(json.dumps(data, sort_keys=True), encoding="utf-8")
            tmp.replace(self.path)
        except (OSError, TypeError, ValueError) as exc:
            logger.debug("state write failed: %s", exc, extra={"event": "state_store_failed"})
            return False
        return True

    def store(self, key: str, obj: Any) -> bool:
        data = self._read_all()
        data[key] = obj
        return self._write_all(data)

    def restore(self, key: str, target: MutableMapping[str, Any] | None = None) -> MutableMapping[str, Any]:
        target = {} if target is None else target
        value = self._read_all().get(key)
        if isinstance(value, dict):
            target.update(value)
        return target

    def clear(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)
