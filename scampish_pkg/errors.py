"""
Exception types raised by Scampish while building and publishing a site.
"""


class ScampishError(Exception):
    """Base class for every error Scampish raises on purpose."""


class ConfigurationError(ScampishError):
    """Run parameters or content configuration are missing or unreadable."""


class StoreError(ScampishError):
    """A content store operation (list, get, copy, put) failed."""

    def __init__(self, operation, key, cause=None):
        self.operation = operation
        self.key = key
        self.cause = cause
        message = f"Store {operation} failed for {key}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)
