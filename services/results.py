"""Structured outcomes returned by the services instead of raising."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from domain.lead import Lead


@dataclass(frozen=True, slots=True)
class OperationResult:
    """
    Result of a single-lead write (update, reassign, delete).

    success: True if the write was applied
    message: human-readable outcome, safe to show to the user
    error_code: stable failure code (None on success)
    lead: the lead after the write, when there is one
    """

    success: bool
    message: str
    error_code: Optional[str] = None
    lead: Optional[Lead] = None

    @classmethod
    def failed(cls, error: Exception) -> "OperationResult":
        return cls(
            success=False,
            message=getattr(error, "message", str(error)),
            error_code=getattr(error, "code", "error"),
        )


@dataclass(frozen=True, slots=True)
class SubmissionResult:
    """
    Result of a lead submission.

    assigned_agent_name is empty when the submission was rejected; in that
    case no lead was created.
    """

    success: bool
    message: str
    assigned_agent_name: str = ""
    lead: Optional[Lead] = None
    error_code: Optional[str] = None

    @classmethod
    def failed(cls, error: Exception) -> "SubmissionResult":
        return cls(
            success=False,
            message=getattr(error, "message", str(error)),
            error_code=getattr(error, "code", "error"),
        )


__all__ = ["OperationResult", "SubmissionResult"]
