"""Exception types raised by the journal core."""

from typing import Optional


class JournalError(Exception):
    """Base class for every error the journal core raises."""


class StoreNotInitialized(JournalError):
    """The store was used before its schema was ready, or after a failed reset."""


class ValidationError(JournalError):
    """A required field is missing or malformed. Nothing was persisted."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class QueryError(JournalError):
    """The database rejected a statement."""

    def __init__(self, message: str, sql: Optional[str] = None):
        super().__init__(message)
        self.sql = sql


class MigrationError(JournalError):
    """An additive column migration failed for a reason other than a duplicate column."""


class ConfigError(JournalError):
    """The configuration file could not be read or is invalid."""
