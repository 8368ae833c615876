"""
Supabase clients shared by the services.

The anon-key client serves requests made on behalf of a signed-in user, so
row level security applies. The service-role client bypasses RLS and is
used by the token-authenticated external API and the seed script.
"""

import logging
from typing import Optional

from supabase import create_client, Client
from cloud_tracker.config import settings

logger = logging.getLogger(__name__)


class SupabaseNotConfigured(RuntimeError):
    pass


def supabase_configured() -> bool:
    return bool(settings.supabase_url and settings.supabase_key)


class SupabaseClient:
    _client: Optional[Client] = None
    _service_client: Optional[Client] = None
    _fallback_logged = False

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            if not supabase_configured():
                raise SupabaseNotConfigured("SUPABASE_URL and SUPABASE_KEY must be set")
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        if cls._service_client is not None:
            return cls._service_client
        if not settings.supabase_service_role_key:
            if not cls._fallback_logged:
                logger.warning("SUPABASE_SERVICE_ROLE_KEY not set; service-role callers use the anon client")
                cls._fallback_logged = True
            return cls.get_client()
        cls._service_client = create_client(settings.supabase_url, settings.supabase_service_role_key)
        return cls._service_client

    @classmethod
    def reset_client(cls):
        cls._client = None
        cls._service_client = None
        cls._fallback_logged = False


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def get_service_supabase() -> Client:
    return SupabaseClient.get_service_client()
