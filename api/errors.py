"""Map service failure codes to HTTP errors."""

from __future__ import annotations

from typing import Optional

from fastapi import HTTPException

STATUS_FOR_CODE = {
    "duplicate_phone": 409,
    "specialist_offline": 409,
    "no_available_agent": 409,
    "unknown_assignee": 422,
    "invalid_submission": 422,
    "invalid_update": 422,
    "invalid_status_transition": 422,
    "lead_not_found": 404,
    "sales_person_not_found": 404,
    "repository_error": 502,
}


def http_error(code: Optional[str], message: str) -> HTTPException:
    return HTTPException(status_code=STATUS_FOR_CODE.get(code or "", 500), detail=message)


__all__ = ["STATUS_FOR_CODE", "http_error"]
