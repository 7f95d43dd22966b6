import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigurationError

BACKEND_SUPABASE = "supabase"
BACKEND_SQLITE = "sqlite"

DB_FILE = "agroalert.db"
ALERT_LIMIT = 10
REQUEST_TIMEOUT = 15.0


@dataclass(frozen=True)
class Settings:
    backend: str = BACKEND_SQLITE
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    db_file: str = DB_FILE
    seed_demo: bool = True
    alert_limit: int = ALERT_LIMIT
    request_timeout: float = REQUEST_TIMEOUT
    log_level: str = "INFO"

    def validate(self) -> "Settings":
        if self.backend not in (BACKEND_SUPABASE, BACKEND_SQLITE):
            raise ConfigurationError(f"Unknown AGROALERT_BACKEND '{self.backend}'")
        if self.backend == BACKEND_SUPABASE and not (self.supabase_url and self.supabase_anon_key):
            raise ConfigurationError(
                "SUPABASE_URL and SUPABASE_ANON_KEY must be set when AGROALERT_BACKEND=supabase"
            )
        if self.alert_limit <= 0:
            raise ConfigurationError("AGROALERT_ALERT_LIMIT must be positive")
        return self


def _flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def get_settings(env_file: Optional[str] = None) -> Settings:
    """Read settings from the environment.

    Values come from ``env_file`` when one is given (and exists), otherwise
    from the nearest ``.env``. Variables already set in the environment win.
    """
    if env_file is None:
        load_dotenv()
    elif os.path.exists(env_file):
        load_dotenv(env_file)

    url = os.getenv("SUPABASE_URL") or None
    return Settings(
        backend=os.getenv("AGROALERT_BACKEND", BACKEND_SQLITE).strip().lower(),
        supabase_url=url.rstrip("/") if url else None,
        supabase_anon_key=os.getenv("SUPABASE_ANON_KEY") or None,
        db_file=os.getenv("AGROALERT_DB_FILE", DB_FILE),
        seed_demo=_flag(os.getenv("AGROALERT_SEED_DEMO", "True")),
        alert_limit=int(os.getenv("AGROALERT_ALERT_LIMIT", str(ALERT_LIMIT))),
        request_timeout=float(os.getenv("AGROALERT_REQUEST_TIMEOUT", str(REQUEST_TIMEOUT))),
        log_level=os.getenv("AGROALERT_LOG_LEVEL", "INFO").upper(),
    ).validate()
