class AgroalertError(Exception):
    """Base class for everything this package raises."""


class ConfigurationError(AgroalertError):
    pass


class StoreError(AgroalertError):
    """A query against the data store failed."""

    def __init__(self, table: str, message: str):
        super().__init__(f"{table}: {message}")
        self.table = table


class AuthError(AgroalertError):
    """Sign-in, refresh or session lookup was rejected."""
