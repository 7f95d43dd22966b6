import logging
from unittest.mock import MagicMock

from agroalert.auth import LocalAuth, SupabaseAuth
from agroalert.bootstrap import build_auth, build_store
from agroalert.config import BACKEND_SUPABASE, Settings
from agroalert.logs import ROOT_LOGGER, configure_logging
from agroalert.store import FARMERS, SQLiteStore, SupabaseStore


def test_sqlite_backend_is_seeded(tmp_path):
    settings = Settings(db_file=str(tmp_path / "demo.db"))
    store = build_store(settings)
    assert isinstance(store, SQLiteStore)
    assert store.count(FARMERS) == 5
    assert isinstance(build_auth(settings, store), LocalAuth)


def test_sqlite_backend_without_demo_data(tmp_path):
    store = build_store(Settings(db_file=str(tmp_path / "empty.db"), seed_demo=False))
    assert store.count(FARMERS) == 0


def test_supabase_backend(monkeypatch):
    factory = MagicMock()
    monkeypatch.setattr("agroalert.store.create_client", factory)
    settings = Settings(backend=BACKEND_SUPABASE, supabase_url="https://demo.supabase.co",
                        supabase_anon_key="anon").validate()
    store = build_store(settings)
    assert isinstance(store, SupabaseStore)
    assert isinstance(build_auth(settings, store), SupabaseAuth)
    assert factory.call_count == 2
    assert factory.call_args[0][:2] == ("https://demo.supabase.co", "anon")


def test_configure_logging_is_idempotent():
    configure_logging("DEBUG")
    logger = configure_logging("WARNING")
    tagged = [h for h in logger.handlers if getattr(h, "_agroalert", False)]
    assert len(tagged) == 1
    assert logger is logging.getLogger(ROOT_LOGGER)
    assert logger.level == logging.WARNING
