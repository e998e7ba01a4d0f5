"""Tests for the JSON-file key/value store."""

import json
from pathlib import Path

from pharmacy_app.services.session_store import (
    AUTH_STORAGE_KEYS,
    PersistentStore,
    cleanup_invalid_storage,
    clear_auth_storage,
    is_valid_storage_value,
)


class TestStorageValues:
    def test_placeholder_literals_are_invalid(self):
        assert is_valid_storage_value("undefined") is False
        assert is_valid_storage_value("null") is False
        assert is_valid_storage_value("") is False
        assert is_valid_storage_value(None) is False
        assert is_valid_storage_value(42) is False

    def test_regular_string_is_valid(self):
        assert is_valid_storage_value("abc") is True

    def test_key_order(self):
        assert AUTH_STORAGE_KEYS == ("token", "user", "tokenTimestamp")


class TestPersistentStore:
    def test_set_then_get(self, store):
        assert store.set("token", "abc") is True
        assert store.get("token") == "abc"

    def test_values_survive_a_new_instance(self, store):
        store.set("token", "abc")
        reopened = PersistentStore(store.file_path)
        assert reopened.get("token") == "abc"

    def test_get_normalizes_placeholders(self, store):
        store.set("token", "undefined")
        assert store.get("token") is None
        assert store.get_raw("token") == "undefined"

    def test_missing_key(self, store):
        assert store.get("nothing") is None

    def test_rejects_non_string_values(self, store):
        assert store.set("token", 123) is False  # type: ignore[arg-type]
        assert store.get_raw("token") is None

    def test_remove(self, store):
        store.set("token", "abc")
        assert store.remove("token") is True
        assert store.get("token") is None
        assert store.remove("token") is True

    def test_corrupted_file_is_discarded(self, store):
        store.file_path.write_text("{not json", encoding="utf-8")
        assert store.get("token") is None
        assert not store.file_path.exists()

    def test_deeply_nested_file_is_discarded(self, store):
        store.file_path.write_text("[" * 200_000, encoding="utf-8")
        assert store.get("token") is None
        assert not store.file_path.exists()

    def test_non_object_file_is_discarded(self, store):
        store.file_path.write_text(json.dumps(["token"]), encoding="utf-8")
        assert store.keys() == []
        assert not store.file_path.exists()

    def test_unrelated_keys_are_kept(self, store):
        store.set("theme", "dark")
        store.set("token", "abc")
        clear_auth_storage(store)
        assert store.get("theme") == "dark"

    def test_write_errors_are_reported_as_false(self, store, monkeypatch):
        store.set("token", "abc")

        def fail_replace(self, target):
            raise OSError("read-only file system")

        monkeypatch.setattr(Path, "replace", fail_replace)

        assert store.set("user", "{}") is False
        assert store.remove("token") is False
        assert store.get("token") == "abc"
        assert store.get("user") is None


class TestAuthStorageHelpers:
    def test_clear_removes_all_three_keys(self, store):
        for key in AUTH_STORAGE_KEYS:
            store.set(key, "value")
        assert clear_auth_storage(store) is True
        assert all(store.get_raw(key) is None for key in AUTH_STORAGE_KEYS)

    def test_cleanup_only_drops_invalid_entries(self, store):
        store.set("token", "null")
        store.set("user", '{"userId": 1}')
        store.set("tokenTimestamp", "")
        removed = cleanup_invalid_storage(store)
        assert removed == ["token", "tokenTimestamp"]
        assert store.get("user") == '{"userId": 1}'
