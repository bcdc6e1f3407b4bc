from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from src.i18n import normalize_language

APP_DIR = Path(__file__).resolve().parents[1]
ENV_FILE = APP_DIR / ".env"
DEFAULT_DATA_DIR = APP_DIR / "data"
DEFAULT_FONT_PATH = APP_DIR / "resources" / "fonts" / "NotoSansGeorgian-Regular.ttf"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ConfigError(Exception):
    """Raised when configuration values are present but unusable."""


@dataclass
class AppConfig:
    data_dir: Path
    db_path: Path
    font_path: Path
    default_language: str
    clinic_name: str
    manager_name: str
    allow_signup: bool
    log_level: str


def load_local_env_file(path: Path = ENV_FILE) -> None:
    """
    Load key=value pairs from a local .env file into process env without overriding
    values that are already present.
    """
    if not path.exists():
        return

    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and (key not in os.environ or not os.environ.get(key, "").strip()):
            os.environ[key] = value


def truthy_env(name: str, default: bool = False) -> bool:
    fallback = "1" if default else "0"
    return os.getenv(name, fallback).strip().lower() in {"1", "true", "yes", "on"}


def _path_env(name: str, default: Path) -> Path:
    raw = os.getenv(name, "").strip()
    return Path(raw).expanduser() if raw else default


def read_app_config(env_file: Path = ENV_FILE) -> AppConfig:
    load_local_env_file(env_file)

    data_dir = _path_env("CLINIC_DATA_DIR", DEFAULT_DATA_DIR)
    db_path = _path_env("CLINIC_DB_PATH", data_dir / "clinic.db")
    if db_path.exists() and db_path.is_dir():
        raise ConfigError(f"CLINIC_DB_PATH points to a directory: {db_path}")

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(f"Unknown LOG_LEVEL: {log_level}")

    return AppConfig(
        data_dir=data_dir,
        db_path=db_path,
        font_path=_path_env("CLINIC_PDF_FONT", DEFAULT_FONT_PATH),
        default_language=normalize_language(os.getenv("CLINIC_DEFAULT_LANG", "ka")),
        clinic_name=os.getenv("CLINIC_NAME", "").strip(),
        manager_name=os.getenv("CLINIC_MANAGER", "").strip(),
        allow_signup=truthy_env("CLINIC_ALLOW_SIGNUP", default=True),
        log_level=log_level,
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
