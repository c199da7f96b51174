"""Error kinds raised by the persistence layer."""


class StoreError(Exception):
    """Base class for expected persistence failures."""


class ConflictError(StoreError):
    """
    A unique key was violated.

    Raised for a duplicate user email and for a component version number
    that could not be allocated after the configured retries.
    """
