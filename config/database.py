"""
Database connection management.

Provides Supabase client singleton for the connector tables
(job_items, mappings, connector_settings).
"""

from supabase import create_client, Client
from functools import lru_cache
import structlog

from config.settings import settings
from exceptions import DatabaseError

logger = structlog.get_logger(__name__)


@lru_cache()
def get_supabase_client() -> Client:
    """
    Get cached Supabase client instance.

    Uses lru_cache to ensure only one client is created.
    Call get_supabase_client.cache_clear() to reconnect.

    Returns:
        Client: Supabase client

    Raises:
        DatabaseError: If the client can't be created
    """
    try:
        logger.info(
            "connecting_to_supabase",
            url=settings.supabase_url[:30] + "..."  # Log partial URL only
        )

        client = create_client(
            settings.supabase_url,
            settings.supabase_key
        )

        logger.info("supabase_connected")
        return client

    except Exception as e:
        logger.error(
            "supabase_connection_failed",
            error=str(e),
            error_type=type(e).__name__
        )
        raise DatabaseError("connect", str(e)) from e


def check_connection() -> dict:
    """
    Count rows of the connector tables to check the database is reachable.

    Returns:
        dict: "healthy" with table counts, or "unhealthy" with the error
    """
    try:
        client = get_supabase_client()

        job_items = client.table("job_items").select("id", count="exact").limit(1).execute()
        mappings = client.table("mappings").select("id", count="exact").limit(1).execute()

        return {
            "status": "healthy",
            "job_items_count": job_items.count,
            "mappings_count": mappings.count
        }

    except Exception as e:
        logger.warning("database_check_failed", error=str(e))
        return {
            "status": "unhealthy",
            "error": str(e)
        }
