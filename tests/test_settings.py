from pathlib import Path

import pytest

from utils import settings as settings_mod
from utils.settings import (
    DEFAULT_API_URL,
    DEFAULT_PAGE_SIZE,
    DEFAULT_SESSION_MINUTES,
    DEFAULT_TIMEOUT,
    load_settings,
)

ENV_VARS = (
    "PORTFOLIO_ADMIN_API_URL",
    "PORTFOLIO_ADMIN_TIMEOUT",
    "PORTFOLIO_ADMIN_SESSION_MINUTES",
    "PORTFOLIO_ADMIN_PAGE_SIZE",
    "PORTFOLIO_ADMIN_DATA_DIR",
    "PORTFOLIO_ADMIN_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_config(tmp_path):
    s = load_settings(tmp_path / "missing.ini")
    assert s.api_url == DEFAULT_API_URL
    assert s.timeout == DEFAULT_TIMEOUT
    assert s.session_minutes == DEFAULT_SESSION_MINUTES
    assert s.page_size == DEFAULT_PAGE_SIZE
    assert s.log_level == "INFO"


def test_config_file_values(tmp_path):
    ini = tmp_path / "config.ini"
    ini.write_text(
        "[api]\nbase_url = https://example.com/api/\ntimeout = 20\n"
        "[session]\nminutes = 45\n[table]\npage_size = 25\n[logging]\nlevel = debug\n"
    )
    s = load_settings(ini)
    assert s.api_url == "https://example.com/api"
    assert s.timeout == 20.0
    assert s.session_minutes == 45
    assert s.page_size == 25
    assert s.log_level == "DEBUG"


def test_environment_overrides_config(tmp_path, monkeypatch):
    ini = tmp_path / "config.ini"
    ini.write_text("[api]\nbase_url = https://file.example/api\n[table]\npage_size = 25\n")
    monkeypatch.setenv("PORTFOLIO_ADMIN_API_URL", "https://env.example/api")
    monkeypatch.setenv("PORTFOLIO_ADMIN_DATA_DIR", str(tmp_path / "state"))
    s = load_settings(ini)
    assert s.api_url == "https://env.example/api"
    assert s.page_size == 25
    assert s.data_dir == Path(tmp_path / "state")


def test_bad_numbers_fall_back(tmp_path, monkeypatch, caplog):
    monkeypatch.setenv("PORTFOLIO_ADMIN_PAGE_SIZE", "0")
    monkeypatch.setenv("PORTFOLIO_ADMIN_TIMEOUT", "soon")
    with caplog.at_level("WARNING", logger=settings_mod.__name__):
        s = load_settings(tmp_path / "missing.ini")
    assert s.page_size == DEFAULT_PAGE_SIZE
    assert s.timeout == DEFAULT_TIMEOUT
    assert len(caplog.records) == 2
