from __future__ import annotations


class ValidationError(Exception):
    """Bad command-line input. Raised before any network I/O happens."""


class UsageError(ValidationError):
    pass


class InvalidAddress(ValidationError):
    pass


class InvalidPortRange(ValidationError):
    pass
