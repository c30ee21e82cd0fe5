class DomainError(Exception):
    """Base exception for business rule violations."""


class LedgerError(DomainError):
    """Base for every error the ledger reports to its callers."""

    code = "LEDGER_ERROR"
    retryable = False


class ValidationError(LedgerError):
    """Raised when an event is rejected; retrying the same call fails the same way."""


class InvalidInput(ValidationError):
    """Empty or malformed user id, unknown status or unusable timestamp."""

    code = "INVALID_INPUT"


class InvalidTransition(ValidationError):
    """The event would break the IN/OUT alternation of the user's timeline."""

    code = "INVALID_TRANSITION"


class StaleEvent(ValidationError):
    """The event is further behind the user's timeline than the tolerance allows."""

    code = "STALE_EVENT"


class FutureTimestamp(ValidationError):
    """The event timestamp is beyond the allowed future clock skew."""

    code = "FUTURE_TIMESTAMP"


class StorageUnavailable(LedgerError):
    """The event store could not complete the operation. Safe to retry."""

    code = "STORAGE_UNAVAILABLE"
    retryable = True
