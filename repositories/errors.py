"""Persistence errors raised by the Supabase adapters."""

from __future__ import annotations


class RepositoryError(RuntimeError):
    """
    The external store is unreachable or rejected the operation.

    Carries the underlying message unchanged. No retry happens here.
    """

    code = "repository_error"

    def __init__(self, action: str, detail: str):
        self.action = action
        self.detail = detail
        self.message = f"Failed to {action}: {detail}"
        super().__init__(self.message)


__all__ = ["RepositoryError"]
