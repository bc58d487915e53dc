from typing import Optional
from supabase import ClientOptions, create_client, Client
from app.config import settings


class SupabaseClient:
    _client: Client = None
    _service_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. Use only for privileged profile changes and scripts."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url, settings.supabase_service_role_key
            )
        return cls._service_client

    @classmethod
    def get_actor_client(cls, access_token: str) -> Client:
        """Fresh client whose PostgREST calls carry the actor's JWT, so row-level policies see auth.uid()."""
        client = create_client(settings.supabase_url, settings.supabase_key)
        client.postgrest.auth(access_token)
        return client

    @classmethod
    def get_auth_client(cls) -> Client:
        """
        Fresh anon client for sign-in, sign-up, refresh and sign-out. It keeps no
        session, and the session it receives never reaches the shared client.
        """
        return create_client(
            settings.supabase_url,
            settings.supabase_key,
            options=ClientOptions(persist_session=False, auto_refresh_token=False),
        )

    @classmethod
    def reset_client(cls):
        cls._client = None
        cls._service_client = None


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def get_auth_supabase() -> Client:
    return SupabaseClient.get_auth_client()


def get_service_supabase() -> Optional[Client]:
    return SupabaseClient.get_service_client()
