"""Errors raised by the credential store adapter.

They never cross the AdminAuth boundary: the service converts them into
result objects.
"""

from typing import Any, Optional


class StoreError(Exception):
    """A store call failed.

    Attributes:
        message: Diagnostic text reported by the store (or the transport)
        details: Optional extra context such as the PostgREST code and hint
    """

    def __init__(self, message: str = "Store operation failed", details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class StoreNotConfiguredError(StoreError):
    """No Supabase client is available (missing URL or key)."""

    def __init__(self, message: str = "Supabase configuration is missing"):
        super().__init__(message)
