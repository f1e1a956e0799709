"""Errors raised by storage adapters."""


class StoreError(Exception):
    """Raised when a task store cannot be read or updated."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
