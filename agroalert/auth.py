"""Officer authentication.

Credentials are checked by the backend (Supabase Auth, or the officers
table of the local SQLite store). Both clients keep the current session and
publish every change to subscribers, the way the hosted provider's
``onAuthStateChange`` does.
"""
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

import httpx
from supabase import AuthError as SupabaseAuthError
from supabase import Client
from werkzeug.security import check_password_hash

from .errors import AuthError, StoreError
from .models import ExtensionOfficer, parse_datetime
from .store import OFFICER_SESSIONS, OFFICERS, SQLiteStore, connect, table
from .view_state import INITIAL_SESSION, SIGNED_IN, SIGNED_OUT, TOKEN_REFRESHED, Session

log = logging.getLogger(__name__)

Listener = Callable[[str, Optional[Session]], None]

LOCAL_SESSION_TTL = timedelta(hours=12)
LOCAL_REFRESH_TTL = timedelta(days=30)


class Subscription:
    def __init__(self, client: "AuthClient", listener: Listener):
        self._client = client
        self._listener = listener

    def unsubscribe(self):
        self._client._remove_listener(self._listener)


class AuthClient:
    def __init__(self):
        self.session: Optional[Session] = None
        self._listeners: List[Listener] = []

    # ---- change stream ----
    def on_auth_state_change(self, listener: Listener) -> Subscription:
        self._listeners.append(listener)
        return Subscription(self, listener)

    def _remove_listener(self, listener: Listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: str, session: Optional[Session]):
        for listener in list(self._listeners):
            listener(event, session)

    # ---- session ----
    def get_session(self, now: Optional[datetime] = None) -> Optional[Session]:
        """Current session, refreshed if it has expired; None once it cannot be renewed."""
        if self.session is None or not self.session.is_expired(now):
            return self.session
        try:
            self.session = self._refresh(self.session.refresh_token)
        except AuthError as e:
            log.warning("Session refresh failed: %s", e)
            self.session = None
            self._emit(SIGNED_OUT, None)
            return None
        self._emit(TOKEN_REFRESHED, self.session)
        return self.session

    def restore(self, refresh_token: Optional[str]) -> Optional[Session]:
        """Resume the session a browser kept from an earlier page session."""
        if self.session is not None or not refresh_token:
            return self.session
        try:
            self.session = self._refresh(refresh_token)
        except AuthError as e:
            log.info("Stored session could not be resumed: %s", e)
            return None
        log.info("Officer session resumed: %s", self.session.email)
        self._emit(INITIAL_SESSION, self.session)
        return self.session

    def sign_in_with_password(self, email: str, password: str) -> Session:
        if not email or not password:
            raise AuthError("Email and password are required")
        self.session = self._password_grant(email.strip(), password)
        log.info("Officer signed in: %s", self.session.email)
        self._emit(SIGNED_IN, self.session)
        return self.session

    def sign_out(self):
        session, self.session = self.session, None
        if session is not None:
            try:
                self._revoke(session)
            except AuthError as e:
                # the local session is gone either way
                log.warning("Sign-out was not acknowledged by the backend: %s", e)
        self._emit(SIGNED_OUT, None)

    # ---- backend hooks ----
    def _password_grant(self, email: str, password: str) -> Session:
        raise NotImplementedError

    def _refresh(self, refresh_token: str) -> Session:
        raise NotImplementedError

    def _revoke(self, session: Session):
        raise NotImplementedError


# ------------------------------
# Supabase Auth
# ------------------------------

def session_from_sdk(sdk_session) -> Session:
    user = sdk_session.user
    meta = getattr(user, "user_metadata", None) or {}
    email = getattr(user, "email", None) or ""
    expires_at = None
    if sdk_session.expires_at:
        expires_at = datetime.fromtimestamp(int(sdk_session.expires_at), tz=timezone.utc)
    return Session(
        access_token=sdk_session.access_token,
        refresh_token=sdk_session.refresh_token or "",
        expires_at=expires_at,
        user_id=str(user.id),
        email=email,
        officer=ExtensionOfficer(id=str(user.id), name=meta.get("name") or email,
                                 email=email, region=meta.get("region") or ""),
    )


class SupabaseAuth(AuthClient):
    def __init__(self, url: str, anon_key: str, timeout: float = 15.0,
                 client: Optional[Client] = None):
        super().__init__()
        # one client per browser session: it holds that officer's tokens
        self.client = client or connect(url, anon_key, timeout)

    def _call(self, method, *args):
        try:
            response = method(*args)
        except SupabaseAuthError as e:
            raise AuthError(getattr(e, "message", None) or str(e)) from e
        except httpx.HTTPError as e:
            raise AuthError(f"Authentication service unreachable: {e}") from e
        return response

    def _password_grant(self, email: str, password: str) -> Session:
        response = self._call(self.client.auth.sign_in_with_password,
                              {"email": email, "password": password})
        if response is None or response.session is None:
            raise AuthError("Invalid login credentials")
        return session_from_sdk(response.session)

    def _refresh(self, refresh_token: str) -> Session:
        if not refresh_token:
            raise AuthError("Session expired")
        response = self._call(self.client.auth.refresh_session, refresh_token)
        if response is None or response.session is None:
            raise AuthError("Session expired")
        return session_from_sdk(response.session)

    def _revoke(self, session: Session):
        self._call(self.client.auth.sign_out)


# ------------------------------
# Local officers table
# ------------------------------

class LocalAuth(AuthClient):
    """Officers from the SQLite store; refresh tokens are kept in ``officer_sessions``."""

    def __init__(self, store: SQLiteStore, ttl: timedelta = LOCAL_SESSION_TTL,
                 refresh_ttl: timedelta = LOCAL_REFRESH_TTL):
        super().__init__()
        self.store = store
        self.ttl = ttl
        self.refresh_ttl = refresh_ttl

    def _issue(self, officer: Dict[str, Any]) -> Session:
        now = datetime.now(timezone.utc)
        session = Session(
            access_token=secrets.token_urlsafe(32),
            refresh_token=secrets.token_urlsafe(32),
            expires_at=now + self.ttl,
            user_id=str(officer["id"]),
            email=officer.get("email") or "",
            officer=ExtensionOfficer.from_row(officer),
        )
        try:
            self.store.insert_many(OFFICER_SESSIONS, [dict(
                refresh_token=session.refresh_token, officer_id=session.user_id,
                expires_at=(now + self.refresh_ttl).isoformat(timespec="seconds"),
            )])
        except StoreError as e:
            raise AuthError(f"Authentication service unavailable: {e}") from e
        return session

    def _password_grant(self, email: str, password: str) -> Session:
        try:
            officer = self.store.fetch_one(table(OFFICERS).eq("email", email.lower()))
        except StoreError as e:
            raise AuthError(f"Authentication service unavailable: {e}") from e
        stored_hash = officer.get("password_hash") if officer else None
        if not stored_hash or not check_password_hash(stored_hash, password):
            raise AuthError("Invalid login credentials")
        return self._issue(officer)

    def _refresh(self, refresh_token: str) -> Session:
        if not refresh_token:
            raise AuthError("Session expired")
        try:
            stored = self.store.fetch_one(table(OFFICER_SESSIONS).eq("refresh_token", refresh_token))
            if stored is None or parse_datetime(stored["expires_at"]) <= datetime.now(timezone.utc):
                raise AuthError("Session expired")
            officer = self.store.fetch_one(table(OFFICERS).eq("id", stored["officer_id"]))
            # refresh tokens are single use
            self.store.delete(OFFICER_SESSIONS, "refresh_token", refresh_token)
        except StoreError as e:
            raise AuthError(str(e)) from e
        if officer is None:
            raise AuthError("Officer no longer exists")
        return self._issue(officer)

    def _revoke(self, session: Session):
        try:
            self.store.delete(OFFICER_SESSIONS, "refresh_token", session.refresh_token)
        except StoreError as e:
            raise AuthError(str(e)) from e
