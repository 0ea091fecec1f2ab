"""
Lazily created Supabase client used by the Supabase-backed profile store.
"""

import logging

from supabase import create_client, Client

from periodtiming.core.config import settings
from periodtiming.core.exceptions import ScheduleStoreError

logger = logging.getLogger(__name__)

_supabase_client: Client | None = None


def get_supabase() -> Client:
    global _supabase_client
    if _supabase_client is None:
        key = settings.SUPABASE_SERVICE_KEY or settings.SUPABASE_KEY
        if not settings.SUPABASE_URL or not key:
            raise ScheduleStoreError("Supabase is not configured (SUPABASE_URL / SUPABASE_KEY)")
        logger.info("Connecting to Supabase at %s", settings.SUPABASE_URL)
        _supabase_client = create_client(settings.SUPABASE_URL, key)
    return _supabase_client
