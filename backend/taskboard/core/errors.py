class StoreError(Exception):
    """Base class for failures raised by the pool and the entity store."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConstraintViolationError(StoreError):
    """A write was rejected by a foreign key or unique constraint."""


class ConnectivityError(StoreError):
    """The store is unreachable or a connection was lost mid-operation."""


class PoolExhaustedError(ConnectivityError):
    """No pooled connection became free within the configured timeout."""
