"""Admin panel settings read from the environment or ``config.ini``.

Each value is looked up in an environment variable first and then in the
matching section of ``config.ini`` at the application root, e.g.::

    [api]
    base_url = https://portfolio.example.com/api
    timeout = 20

    [session]
    minutes = 45

    [table]
    page_size = 25

Missing or unreadable values fall back to the defaults below.
"""
from __future__ import annotations

import configparser
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from utils.path_utils import get_base_dir, get_data_dir

log = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:5000/api"
DEFAULT_TIMEOUT = 15.0
DEFAULT_SESSION_MINUTES = 30
DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class AdminSettings:
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    session_minutes: int = DEFAULT_SESSION_MINUTES
    page_size: int = DEFAULT_PAGE_SIZE
    data_dir: Path = Path("data")
    log_level: str = "INFO"


def _read_config(config_path: Path) -> Optional[configparser.ConfigParser]:
    parser = configparser.ConfigParser()
    try:
        parser.read(config_path, encoding="utf-8")
    except configparser.Error as exc:
        log.warning("Ignoring unreadable %s: %s", config_path, exc)
        return None
    return parser


def _lookup(
    parser: Optional[configparser.ConfigParser],
    env_name: str,
    section: str,
    option: str,
) -> Optional[str]:
    value = os.getenv(env_name)
    if value and value.strip():
        return value.strip()
    if parser is not None:
        value = parser.get(section, option, fallback=None)
        if value and value.strip():
            return value.strip()
    return None


def _as_number(raw: Optional[str], default, cast, name: str):
    if raw is None:
        return default
    try:
        value = cast(raw)
    except ValueError:
        log.warning("Invalid %s %r; using %s", name, raw, default)
        return default
    if value <= 0:
        log.warning("Non-positive %s %r; using %s", name, raw, default)
        return default
    return value


def load_settings(config_path: Optional[Path] = None) -> AdminSettings:
    """Resolve :class:`AdminSettings` from environment and ``config.ini``."""

    if config_path is None:
        config_path = get_base_dir() / "config.ini"
    parser = _read_config(config_path)

    api_url = _lookup(parser, "PORTFOLIO_ADMIN_API_URL", "api", "base_url")
    timeout = _lookup(parser, "PORTFOLIO_ADMIN_TIMEOUT", "api", "timeout")
    minutes = _lookup(parser, "PORTFOLIO_ADMIN_SESSION_MINUTES", "session", "minutes")
    page_size = _lookup(parser, "PORTFOLIO_ADMIN_PAGE_SIZE", "table", "page_size")
    log_level = _lookup(parser, "PORTFOLIO_ADMIN_LOG_LEVEL", "logging", "level")

    return AdminSettings(
        api_url=(api_url or DEFAULT_API_URL).rstrip("/"),
        timeout=_as_number(timeout, DEFAULT_TIMEOUT, float, "timeout"),
        session_minutes=_as_number(
            minutes, DEFAULT_SESSION_MINUTES, int, "session minutes"
        ),
        page_size=_as_number(page_size, DEFAULT_PAGE_SIZE, int, "page size"),
        data_dir=get_data_dir(),
        log_level=(log_level or "INFO").upper(),
    )


__all__ = ["AdminSettings", "load_settings"]
