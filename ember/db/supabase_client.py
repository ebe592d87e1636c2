from typing import Optional

from supabase import Client, create_client
from ember.config import settings
from ember.logging import setup_logger
from ember.services.focus.errors import UnconfiguredError

logger = setup_logger(__name__)

supabase_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """
    Returns a Supabase client instance.
    Initializes the client on first call.
    """
    global supabase_client
    if supabase_client is None:
        if not settings.supabase_configured:
            raise UnconfiguredError("SUPABASE_URL and SUPABASE_KEY are not set")
        logger.info("Initializing Supabase client...")
        supabase_client = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
        logger.info("Supabase client initialized successfully.")
    return supabase_client
