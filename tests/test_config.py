import os

import pytest

from agroalert.config import BACKEND_SQLITE, BACKEND_SUPABASE, Settings, get_settings
from agroalert.errors import ConfigurationError

ENV = ["AGROALERT_BACKEND", "SUPABASE_URL", "SUPABASE_ANON_KEY", "AGROALERT_DB_FILE",
       "AGROALERT_SEED_DEMO", "AGROALERT_ALERT_LIMIT", "AGROALERT_REQUEST_TIMEOUT", "AGROALERT_LOG_LEVEL"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV:
        monkeypatch.delenv(name, raising=False)
    yield
    # load_dotenv writes straight into os.environ
    for name in ENV:
        os.environ.pop(name, None)


def test_defaults():
    s = get_settings(env_file="does-not-exist.env")
    assert s.backend == BACKEND_SQLITE
    assert s.alert_limit == 10
    assert s.seed_demo is True
    assert s.log_level == "INFO"


def test_supabase_settings(monkeypatch):
    monkeypatch.setenv("AGROALERT_BACKEND", "Supabase")
    monkeypatch.setenv("SUPABASE_URL", "https://demo.supabase.co/")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")
    monkeypatch.setenv("AGROALERT_SEED_DEMO", "false")
    s = get_settings(env_file="does-not-exist.env")
    assert s.backend == BACKEND_SUPABASE
    assert s.supabase_url == "https://demo.supabase.co"
    assert s.seed_demo is False


def test_supabase_requires_url_and_key(monkeypatch):
    monkeypatch.setenv("AGROALERT_BACKEND", "supabase")
    with pytest.raises(ConfigurationError):
        get_settings(env_file="does-not-exist.env")


def test_env_file_is_read(tmp_path):
    env = tmp_path / "custom.env"
    env.write_text("AGROALERT_ALERT_LIMIT=5\nAGROALERT_LOG_LEVEL=debug\n")
    s = get_settings(env_file=str(env))
    assert s.alert_limit == 5
    assert s.log_level == "DEBUG"


def test_bad_values_are_rejected():
    with pytest.raises(ConfigurationError):
        Settings(backend="mongo").validate()
    with pytest.raises(ConfigurationError):
        Settings(alert_limit=0).validate()
