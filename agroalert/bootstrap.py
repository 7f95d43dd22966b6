import logging
from typing import Optional

from .auth import AuthClient, LocalAuth, SupabaseAuth
from .config import BACKEND_SUPABASE, Settings
from .seed import seed_demo
from .store import DataStore, SQLiteStore, SupabaseStore
from .view_state import ViewStateSelector

log = logging.getLogger(__name__)


def build_store(settings: Settings) -> DataStore:
    if settings.backend == BACKEND_SUPABASE:
        log.info("Using Supabase backend at %s", settings.supabase_url)
        return SupabaseStore(settings.supabase_url, settings.supabase_anon_key,
                             timeout=settings.request_timeout)
    store = SQLiteStore(settings.db_file)
    if settings.seed_demo:
        seed_demo(store)
    log.info("Using SQLite backend at %s", settings.db_file)
    return store


def build_auth(settings: Settings, store: DataStore) -> AuthClient:
    if settings.backend == BACKEND_SUPABASE:
        return SupabaseAuth(settings.supabase_url, settings.supabase_anon_key,
                            timeout=settings.request_timeout)
    return LocalAuth(store)


def start_view_state(farmer_id: Optional[str], auth: AuthClient,
                     refresh_token: Optional[str] = None) -> ViewStateSelector:
    """Selector for a new browser session, subscribed to the auth change stream.

    ``refresh_token`` is what the browser kept from an earlier page session;
    when it is still valid the officer lands straight in the portal.
    """
    auth.restore(refresh_token)
    selector = ViewStateSelector.on_load(farmer_id, auth.get_session())
    auth.on_auth_state_change(selector.handle_auth_event)
    log.info("Page session started in view %s", selector.view.value)
    return selector
