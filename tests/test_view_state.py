from datetime import datetime, timedelta, timezone

from agroalert.view_state import (INITIAL_SESSION, SIGNED_IN, SIGNED_OUT, TOKEN_REFRESHED, Session,
                                  View, ViewStateSelector)


def _session():
    return Session(access_token="token", user_id="officer-1", email="officer@example.org")


def test_initial_state_is_anonymous():
    assert ViewStateSelector.on_load(None, None).view == View.ANONYMOUS
    assert ViewStateSelector.on_load("   ", None).view == View.ANONYMOUS


def test_farmer_link_wins_over_active_session():
    selector = ViewStateSelector.on_load("farmer-001", _session())
    assert selector.view == View.FARMER
    assert selector.farmer_id == "farmer-001"
    assert selector.session is None


def test_existing_session_opens_portal():
    session = _session()
    selector = ViewStateSelector.on_load(None, session)
    assert selector.view == View.OFFICER_AUTHENTICATED
    assert selector.session is session


def test_farmer_view_ignores_every_later_signal():
    selector = ViewStateSelector.on_load("farmer-001", None)
    selector.request_officer_login()
    selector.handle_auth_event(SIGNED_IN, _session())
    selector.logout()
    assert selector.view == View.FARMER


def test_login_flow():
    selector = ViewStateSelector.on_load(None, None)
    assert selector.request_officer_login() == View.OFFICER_UNAUTHENTICATED
    assert selector.handle_auth_event(SIGNED_IN, _session()) == View.OFFICER_AUTHENTICATED
    assert selector.session.email == "officer@example.org"


def test_logout_returns_to_login_screen_not_landing():
    selector = ViewStateSelector.on_load(None, _session())
    assert selector.logout() == View.OFFICER_UNAUTHENTICATED
    assert selector.session is None


def test_external_session_end_returns_to_login_screen():
    selector = ViewStateSelector.on_load(None, _session())
    assert selector.handle_auth_event(SIGNED_OUT, None) == View.OFFICER_UNAUTHENTICATED


def test_token_refresh_keeps_portal_open():
    selector = ViewStateSelector.on_load(None, _session())
    fresh = Session(access_token="fresh")
    assert selector.handle_auth_event(TOKEN_REFRESHED, fresh) == View.OFFICER_AUTHENTICATED
    assert selector.session is fresh


def test_session_restored_on_landing_opens_portal():
    selector = ViewStateSelector.on_load(None, None)
    assert selector.handle_auth_event(INITIAL_SESSION, _session()) == View.OFFICER_AUTHENTICATED


def test_cancel_login_goes_back_to_landing():
    selector = ViewStateSelector.on_load(None, None)
    selector.request_officer_login()
    assert selector.cancel_login() == View.ANONYMOUS


def test_login_request_ignored_when_already_authenticated():
    selector = ViewStateSelector.on_load(None, _session())
    assert selector.request_officer_login() == View.OFFICER_AUTHENTICATED


def test_session_expiry():
    expires = datetime(2024, 6, 30, 12, 0, tzinfo=timezone.utc)
    session = Session(access_token="a", expires_at=expires)
    assert session.is_expired(expires)
    assert not session.is_expired(expires - timedelta(seconds=1))
    assert not Session(access_token="a").is_expired(expires)
