"""Application configuration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

from PyQt6.QtCore import QStandardPaths

DEFAULT_API_BASE_URL = "http://localhost:8080/api"
DEFAULT_TIMEOUT_SECONDS = 10.0
SESSION_TTL_MS = 24 * 60 * 60 * 1000
EXPIRY_CHECK_INTERVAL_MS = 5 * 60 * 1000
STORAGE_FILE_NAME = "storage.json"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(slots=True, frozen=True)
class AppConfig:
    api_base_url: str
    timeout_seconds: float
    app_data_dir: Path
    log_level: str = "INFO"
    session_ttl_ms: int = SESSION_TTL_MS
    expiry_check_interval_ms: int = EXPIRY_CHECK_INTERVAL_MS
    storage_file_name: str = STORAGE_FILE_NAME

    @property
    def storage_path(self) -> Path:
        return self.app_data_dir / self.storage_file_name


def _normalize_api_base_url(raw: str) -> str:
    value = (raw or "").strip().rstrip("/")
    if not value:
        return DEFAULT_API_BASE_URL

    # "host:port" would otherwise parse as a scheme.
    if "://" not in value:
        value = f"http://{value}"
    parsed = urlparse(value)

    if parsed.path in ("", "/"):
        return f"{value.rstrip('/')}/api"
    return value.rstrip("/")


def _parse_timeout(raw: str | None) -> float:
    try:
        value = float(raw) if raw else DEFAULT_TIMEOUT_SECONDS
    except ValueError:
        return DEFAULT_TIMEOUT_SECONDS
    return value if value > 0 else DEFAULT_TIMEOUT_SECONDS


def _resolve_app_data_dir() -> Path:
    location = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.AppDataLocation)
    if location:
        path = Path(location)
    else:
        path = Path.cwd() / ".pharmacy-app-data"
    path.mkdir(parents=True, exist_ok=True)
    return path


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    if any(getattr(handler, "_pharmacy_app", False) for handler in root.handlers):
        root.setLevel(level)
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._pharmacy_app = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level)


def load_config() -> AppConfig:
    api_base_url = _normalize_api_base_url(os.getenv("PHARMACY_API_URL", DEFAULT_API_BASE_URL))
    timeout_seconds = _parse_timeout(os.getenv("PHARMACY_REQUEST_TIMEOUT"))
    log_level = (os.getenv("PHARMACY_LOG_LEVEL", "INFO") or "INFO").strip().upper()
    if log_level not in logging.getLevelNamesMapping():
        log_level = "INFO"
    return AppConfig(
        api_base_url=api_base_url,
        timeout_seconds=timeout_seconds,
        app_data_dir=_resolve_app_data_dir(),
        log_level=log_level,
    )
