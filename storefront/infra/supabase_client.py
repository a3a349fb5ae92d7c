"""
Clients supabase-py.
- get_supabase(): client 'anon' partagé (lectures publiques, health)
- get_user_supabase(token): client neuf lié au JWT de l'utilisateur (RLS actif)
Chaque appel PostgREST est borné par DATA_ACCESS_TIMEOUT_SECONDS.
"""
from typing import Optional
from supabase import create_client, Client, ClientOptions
from storefront.config import SUPABASE_URL, SUPABASE_ANON, DATA_ACCESS_TIMEOUT_SECONDS

_anon_client: Optional[Client] = None

def _new_client() -> Client:
    options = ClientOptions(postgrest_client_timeout=DATA_ACCESS_TIMEOUT_SECONDS)
    return create_client(SUPABASE_URL, SUPABASE_ANON, options=options)

def get_supabase() -> Client:
    global _anon_client
    if _anon_client is None:
        _anon_client = _new_client()
    return _anon_client

def get_user_supabase(user_token: str) -> Client:
    # Jamais l'instance partagée: le JWT ne doit pas fuiter vers d'autres requêtes
    if not user_token:
        raise ValueError("user_token is required")
    client = _new_client()
    client.postgrest.auth(user_token)
    return client
