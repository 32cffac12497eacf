"""
Supabase client initialization.

This module contains *only* the database connection setup. The client is
created on first use so that modules importing the repositories (tests, the
CLI's --help) do not need credentials.

Environment variables required:
- SUPABASE_URL: Your Supabase project URL
- SUPABASE_KEY: Your Supabase API key (use a server-side key only on the backend)
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import httpx
from dotenv import load_dotenv
from postgrest.exceptions import APIError
from supabase import Client, create_client  # type: ignore[import-not-found]

from repositories.errors import RepositoryError

# Load environment variables from the .env file at the project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    """Return the process-wide Supabase client, creating it on first call."""

    # Read credentials from the environment to avoid hard-coding secrets in code.
    supabase_url = os.getenv("SUPABASE_URL")
    supabase_key = os.getenv("SUPABASE_KEY")

    if not supabase_url:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_URL. "
            "Set SUPABASE_URL to your Supabase project URL."
        )

    if not supabase_key:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_KEY. "
            "Set SUPABASE_KEY to your Supabase API key."
        )

    return create_client(supabase_url, supabase_key)


def execute(query: Any, action: str) -> list[dict[str, Any]]:
    """
    Execute a PostgREST query and return its rows.

    Older supabase-py versions report failures on `response.error`; newer ones
    raise APIError. Transport failures (refused connections, timeouts) arrive
    as httpx.HTTPError. All of them become RepositoryError.
    """

    try:
        response = query.execute()
    except APIError as e:
        raise RepositoryError(action, getattr(e, "message", None) or str(e)) from e
    except httpx.HTTPError as e:
        raise RepositoryError(action, str(e) or type(e).__name__) from e

    error = getattr(response, "error", None)
    if error:
        raise RepositoryError(action, str(error))

    return getattr(response, "data", None) or []


__all__ = ["get_supabase", "execute"]
