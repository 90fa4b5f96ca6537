"""
Normalization Errors

All errors raised by the normalization engine derive from NormalizationError so
callers processing batches can catch a single type per record. Each error is
caused by the caller's input and is not retryable here.
"""


class NormalizationError(Exception):
    """Raised when a source record cannot be normalized."""
    pass


class InvalidArgumentError(NormalizationError, ValueError):
    """Raised for missing or blank inputs (timestamps, records, schemas)."""
    pass


class TimestampParseError(NormalizationError, ValueError):
    """Raised when a timestamp matches neither the internal nor the display layout."""
    pass


class SchemaMismatchError(NormalizationError, LookupError):
    """Raised when a record does not fit the schema it is materialized against."""
    pass
