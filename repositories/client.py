"""
Supabase client initialization.

This module contains the database connection setup plus the one helper every
Supabase repository uses to run a query and surface errors consistently. The
client is built on first use, so importing the repositories (or running with
the in-memory backend) never requires Supabase credentials.

Environment variables required for the supabase backend:
- SUPABASE_URL: Your Supabase project URL
- SUPABASE_KEY: Your Supabase API key (use a server-side key only on the backend)
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, List, Mapping

import httpx
from postgrest.exceptions import APIError

# The dependency is `supabase` (supabase-py): `pip install supabase`.
from supabase import Client, create_client  # type: ignore[import-not-found]

from repositories.errors import PersistenceError
from settings import Settings, load_settings


def create_supabase_client(settings: Settings) -> Client:
    """Build a Supabase client from explicit settings."""

    if not settings.supabase_url:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_URL. "
            "Set SUPABASE_URL to your Supabase project URL."
        )

    if not settings.supabase_key:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_KEY. "
            "Set SUPABASE_KEY to your Supabase API key."
        )

    return create_client(settings.supabase_url, settings.supabase_key)


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    """Process-wide Supabase client, configured from the environment."""

    return create_supabase_client(load_settings())


def execute_query(query: Any, action: str) -> List[Mapping[str, Any]]:
    """
    Execute a PostgREST query builder and return its rows.

    Any client-side or server-side failure is raised as PersistenceError with
    `action` in the message, e.g. "Failed to fetch product: ...".
    """

    try:
        response = query.execute()
    except APIError as e:
        raise PersistenceError(f"Failed to {action}: {e}") from e
    except httpx.HTTPError as e:
        raise PersistenceError(f"Failed to {action}: {e}") from e

    error = getattr(response, "error", None)
    if error:
        raise PersistenceError(f"Failed to {action}: {error}")

    return getattr(response, "data", None) or []


__all__ = ["create_supabase_client", "get_supabase", "execute_query"]
