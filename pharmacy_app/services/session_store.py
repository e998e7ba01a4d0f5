"""Persistent key/value storage for the session record."""

from __future__ import annotations

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"
ISSUED_AT_KEY = "tokenTimestamp"

# Write and removal order for the session record.
AUTH_STORAGE_KEYS: tuple[str, ...] = (TOKEN_KEY, USER_KEY, ISSUED_AT_KEY)

_INVALID_LITERALS = frozenset({"undefined", "null"})


def is_valid_storage_value(value: object) -> bool:
    if not isinstance(value, str) or not value:
        return False
    return value not in _INVALID_LITERALS


class PersistentStore:
    """String key/value store kept in a single JSON file.

    Every operation is best-effort: reads never raise and return ``None`` for
    missing or unusable values, writes report failure as ``False``.
    """

    def __init__(self, file_path: Path) -> None:
        self.file_path = file_path
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.warning("Storage directory %s is not writable: %s", self.file_path.parent, exc)

    def _read_all(self) -> dict[str, object]:
        try:
            if not self.file_path.exists():
                return {}
            payload = json.loads(self.file_path.read_text(encoding="utf-8"))
        except (ValueError, RecursionError):
            logger.warning("Discarding corrupted storage file %s", self.file_path)
            self._discard_file()
            return {}
        except OSError as exc:
            logger.warning("Unable to read storage file %s: %s", self.file_path, exc)
            return {}
        if not isinstance(payload, dict):
            logger.warning("Discarding storage file %s with unexpected layout", self.file_path)
            self._discard_file()
            return {}
        return payload

    def _write_all(self, payload: dict[str, object]) -> bool:
        tmp_path = self.file_path.with_name(f"{self.file_path.name}.tmp")
        try:
            tmp_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
            tmp_path.replace(self.file_path)
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("Unable to write storage file %s: %s", self.file_path, exc)
            return False
        return True

    def _discard_file(self) -> None:
        try:
            self.file_path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Unable to remove storage file %s: %s", self.file_path, exc)

    def get(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return value if is_valid_storage_value(value) else None

    def get_raw(self, key: str) -> object | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> bool:
        if not isinstance(value, str):
            logger.warning("Refusing to store non-string value for %r", key)
            return False
        payload = self._read_all()
        payload[key] = value
        return self._write_all(payload)

    def remove(self, key: str) -> bool:
        payload = self._read_all()
        if key not in payload:
            return True
        del payload[key]
        return self._write_all(payload)

    def keys(self) -> list[str]:
        return list(self._read_all())


def clear_auth_storage(store: PersistentStore) -> bool:
    results = [store.remove(key) for key in AUTH_STORAGE_KEYS]
    return all(results)


def cleanup_invalid_storage(store: PersistentStore) -> list[str]:
    """Remove auth keys that hold unusable values; returns the removed keys."""
    removed: list[str] = []
    for key in AUTH_STORAGE_KEYS:
        raw = store.get_raw(key)
        if raw is not None and not is_valid_storage_value(raw):
            logger.info("Removing invalid storage entry %r", key)
            if store.remove(key):
                removed.append(key)
    return removed
