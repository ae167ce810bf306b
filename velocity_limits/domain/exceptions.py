"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidLoadRequestError(DomainException):
    """Load request data is malformed or invalid"""

    pass


class StoreError(DomainException):
    """Aggregate store failed to answer a query or persist a record"""

    pass


class StoreReadError(StoreError):
    """exists / count / sum query failed; the result must not be treated as empty"""

    pass


class StoreWriteError(StoreError):
    """Load record could not be persisted (constraint violation, lost connection, ...)"""

    pass
