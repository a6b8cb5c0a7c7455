"""
Counter domain exceptions.

These exceptions are transport-agnostic and should be caught by the server
layer to convert into appropriate HTTP responses.
"""


class CounterError(Exception):
    """Base exception for all counter errors."""

    pass


class StorageUnavailable(CounterError):
    """Raised when the backing store cannot be reached or rejects a write."""

    def __init__(self, backend: str, reason: str):
        self.backend = backend
        self.reason = reason
        super().__init__(f"{backend} storage unavailable: {reason}")


class ObserverDeliveryFailed(CounterError):
    """Raised by a channel when a push to one observer cannot be delivered."""

    pass
