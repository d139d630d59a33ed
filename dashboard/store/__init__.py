import logging

from dashboard.core.config import Settings
from dashboard.store.base import Record, Store
from dashboard.store.query import ListFilters

logger = logging.getLogger(__name__)

__all__ = ["ListFilters", "Record", "Store", "create_store"]


def create_store(settings: Settings) -> Store:
    """Build the store selected by ``STORE_BACKEND``."""
    if settings.store_backend == "supabase":
        from supabase import create_client

        from dashboard.store.supabase import SupabaseStore

        logger.info("Using Supabase store at %s", settings.supabase_url)
        return SupabaseStore(create_client(settings.supabase_url, settings.supabase_key))

    from dashboard.store.sql import SqlStore

    logger.info("Using SQL store (%s)", settings.database_url.split("@")[-1])
    return SqlStore.from_url(settings.database_url)
