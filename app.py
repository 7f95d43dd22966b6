from datetime import datetime, timezone

import streamlit as st

from agroalert import screens
from agroalert.bootstrap import build_auth, build_store, start_view_state
from agroalert.components import inject_css, stored_refresh_token, sync_session_cookie
from agroalert.config import get_settings
from agroalert.errors import ConfigurationError, StoreError
from agroalert.logs import configure_logging
from agroalert.view_state import View

st.set_page_config(page_title="Agroalert", page_icon="🌱", layout="wide")

try:
    settings = get_settings()
except (ConfigurationError, ValueError) as e:
    st.error(f"Configuration error: {e}")
    st.stop()

log = configure_logging(settings.log_level)


@st.cache_resource
def _store(_settings, cache_key: tuple):
    # one store (and HTTP pool / sqlite file) per process and configuration
    return build_store(_settings)


try:
    store = _store(settings, (settings.backend, settings.supabase_url, settings.db_file))
except StoreError as e:
    log.error("Could not open the data store: %s", e)
    st.error(f"Could not open the data store: {e}")
    st.stop()

# ------------------------------
# Per-browser session state
# ------------------------------
if "auth" not in st.session_state:
    st.session_state.auth = build_auth(settings, store)
auth = st.session_state.auth

if "view_state" not in st.session_state:
    # the farmer link is only honoured when the page session starts;
    # an officer who signed in earlier is resumed from the session cookie
    st.session_state.view_state = start_view_state(
        st.query_params.get("farmer"), auth, refresh_token=stored_refresh_token())
selector = st.session_state.view_state

# renews or expires the officer session; either way the selector hears about it
sync_session_cookie(auth.get_session())

inject_css()
now = datetime.now(timezone.utc)

if selector.view == View.FARMER:
    screens.farmer_dashboard(store, selector.farmer_id, now, settings.alert_limit)
elif selector.view == View.OFFICER_AUTHENTICATED:
    screens.officer_portal(store, auth, selector, now)
elif selector.view == View.OFFICER_UNAUTHENTICATED:
    screens.officer_login(auth, selector)
else:
    screens.landing(store, selector)
