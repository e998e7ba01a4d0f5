"""Environment-driven configuration."""

import logging
from unittest.mock import patch

import pytest

from pharmacy_app import config
from pharmacy_app.config import (
    DEFAULT_API_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
    AppConfig,
    configure_logging,
    load_config,
)


@pytest.fixture
def app_data(tmp_path):
    with patch.object(config, "_resolve_app_data_dir", return_value=tmp_path):
        yield tmp_path


class TestLoadConfig:
    def test_defaults(self, monkeypatch, app_data):
        for name in ("PHARMACY_API_URL", "PHARMACY_REQUEST_TIMEOUT", "PHARMACY_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        loaded = load_config()

        assert loaded.api_base_url == DEFAULT_API_BASE_URL
        assert loaded.timeout_seconds == DEFAULT_TIMEOUT_SECONDS
        assert loaded.log_level == "INFO"
        assert loaded.storage_path == app_data / "storage.json"
        assert loaded.session_ttl_ms == 86_400_000
        assert loaded.expiry_check_interval_ms == 300_000

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("pharmacy.local:8080", "http://pharmacy.local:8080/api"),
            ("https://pharmacy.example.com/", "https://pharmacy.example.com/api"),
            ("http://host/custom/api/", "http://host/custom/api"),
            ("  ", DEFAULT_API_BASE_URL),
        ],
    )
    def test_api_url_normalization(self, monkeypatch, app_data, raw, expected):
        monkeypatch.setenv("PHARMACY_API_URL", raw)
        assert load_config().api_base_url == expected

    @pytest.mark.parametrize(("raw", "expected"), [("25", 25.0), ("-3", 10.0), ("soon", 10.0)])
    def test_timeout(self, monkeypatch, app_data, raw, expected):
        monkeypatch.setenv("PHARMACY_REQUEST_TIMEOUT", raw)
        assert load_config().timeout_seconds == expected

    def test_unknown_log_level_falls_back(self, monkeypatch, app_data):
        monkeypatch.setenv("PHARMACY_LOG_LEVEL", "chatty")
        assert load_config().log_level == "INFO"

    def test_log_level_is_upper_cased(self, monkeypatch, app_data):
        monkeypatch.setenv("PHARMACY_LOG_LEVEL", "debug")
        assert load_config().log_level == "DEBUG"


class TestLogging:
    def test_handler_installed_once(self):
        root = logging.getLogger()
        before = list(root.handlers)
        level = root.level
        try:
            configure_logging("WARNING")
            configure_logging("DEBUG")
            added = [handler for handler in root.handlers if handler not in before]
            assert len(added) <= 1
            assert root.level == logging.DEBUG
        finally:
            for handler in root.handlers[:]:
                if handler not in before:
                    root.removeHandler(handler)
            root.setLevel(level)


def test_storage_path_uses_file_name(tmp_path):
    cfg = AppConfig(api_base_url="http://x/api", timeout_seconds=1.0, app_data_dir=tmp_path, storage_file_name="s.json")
    assert cfg.storage_path == tmp_path / "s.json"
