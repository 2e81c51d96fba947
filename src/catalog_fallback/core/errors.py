from __future__ import annotations


class FormatError(ValueError):
    """Raised when a quarter or item code cannot be parsed."""


class RecoveryFailed(ValueError):
    """Raised when a repaired payload still fails to parse as JSON."""

    def __init__(self, original: str, repaired: str, reason: str = ""):
        super().__init__(reason or "repaired payload is not valid JSON")
        self.original = original
        self.repaired = repaired


class TransportError(RuntimeError):
    """Raised for any remote failure other than a well-formed "not found"."""

    def __init__(self, message: str, *, url: str | None = None, status: int | None = None):
        super().__init__(message)
        self.url = url
        self.status = status
