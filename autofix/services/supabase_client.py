"""
Supabase Client

Creates the query client for the shop database from environment settings.
"""

import os
import logging
from supabase import create_client, Client
from typing import Optional

logger = logging.getLogger(__name__)


def create_supabase_client() -> Client:
    """
    Build a Supabase client from SUPABASE_URL / SUPABASE_KEY

    Raises:
        ValueError if either variable is missing
    """
    supabase_url = os.getenv("SUPABASE_URL")
    supabase_key = os.getenv("SUPABASE_KEY")

    if not supabase_url or not supabase_key:
        raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set")

    logger.info(f"[Supabase] Connecting to {supabase_url}")
    return create_client(supabase_url, supabase_key)


# Singleton instance
_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """Get or create the shared Supabase client"""
    global _client
    if _client is None:
        _client = create_supabase_client()
    return _client
