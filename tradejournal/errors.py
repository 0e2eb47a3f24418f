"""Exception types for the trade journal."""


class TradeJournalError(Exception):
    """Base class for all trade journal errors."""


class ConfigError(TradeJournalError):
    """Raised when the configuration file cannot be read."""


class StoreError(TradeJournalError):
    """Raised when the store facade fails to read or write."""


class MissingRecordIdError(StoreError):
    """Raised when a record is written without a reserved id."""


class DateParseError(TradeJournalError, ValueError):
    """Raised when a trade date is not in dd-MM-yyyy format."""


class RecordNotFoundError(TradeJournalError, KeyError):
    """Raised when no record matches the requested id."""

    def __str__(self) -> str:
        return Exception.__str__(self)


class ReadOnlyRecordError(TradeJournalError):
    """Raised when attempting to modify a public record."""
