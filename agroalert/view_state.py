"""Which top-level screen a browser session is looking at.

The selector owns the officer ``Session`` explicitly. The auth client's
change stream is wired to :meth:`ViewStateSelector.handle_auth_event`;
nothing else mutates the session.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from .models import ExtensionOfficer

log = logging.getLogger(__name__)

# auth events, named as the hosted provider names them
SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"
TOKEN_REFRESHED = "TOKEN_REFRESHED"
INITIAL_SESSION = "INITIAL_SESSION"


@dataclass
class Session:
    access_token: str
    refresh_token: str = ""
    expires_at: Optional[datetime] = None
    user_id: str = ""
    email: str = ""
    officer: Optional[ExtensionOfficer] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        now = now or datetime.now(timezone.utc)
        return now >= self.expires_at


class View(str, Enum):
    ANONYMOUS = "anonymous"
    FARMER = "farmer"
    OFFICER_UNAUTHENTICATED = "officer_unauthenticated"
    OFFICER_AUTHENTICATED = "officer_authenticated"


class ViewStateSelector:
    def __init__(self):
        self.view = View.ANONYMOUS
        self.farmer_id: Optional[str] = None
        self.session: Optional[Session] = None

    @classmethod
    def on_load(cls, farmer_id: Optional[str], session: Optional[Session]) -> "ViewStateSelector":
        """Initial state from the query string and whatever session already exists."""
        selector = cls()
        farmer_id = (farmer_id or "").strip()
        if farmer_id:
            selector.view = View.FARMER
            selector.farmer_id = farmer_id
        elif session is not None:
            selector.session = session
            selector.view = View.OFFICER_AUTHENTICATED
        return selector

    @property
    def is_locked(self) -> bool:
        # a farmer link wins for the rest of the page session
        return self.view == View.FARMER

    def request_officer_login(self) -> View:
        if self.view == View.ANONYMOUS:
            self.view = View.OFFICER_UNAUTHENTICATED
        return self.view

    def cancel_login(self) -> View:
        if self.view == View.OFFICER_UNAUTHENTICATED:
            self.view = View.ANONYMOUS
        return self.view

    def handle_auth_event(self, event: str, session: Optional[Session]) -> View:
        if self.is_locked:
            return self.view
        if session is not None and event != SIGNED_OUT:
            self.session = session
            if self.view in (View.ANONYMOUS, View.OFFICER_UNAUTHENTICATED):
                log.info("Officer session started (%s)", event)
                self.view = View.OFFICER_AUTHENTICATED
        else:
            self.session = None
            if self.view == View.OFFICER_AUTHENTICATED:
                log.info("Officer session ended (%s)", event)
                self.view = View.OFFICER_UNAUTHENTICATED
        return self.view

    def logout(self) -> View:
        return self.handle_auth_event(SIGNED_OUT, None)
